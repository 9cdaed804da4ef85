"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидаторов:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей
- Детекция нарушений типов и pattern
- Интеграция с Pydantic моделями
"""

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    AutobridgedOfferValidator,
    BookOfferValidator,
    SchemaLoader,
    validate_autobridged_offer,
    validate_book_offer,
)
from src.core.domain import Offer


ACCOUNT = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
ISSUER = "r9cZA1mLK5R5Am25ArfXFmqgNwjZgnfk59"


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_book_offer():
    """Валидный book_offer (leg one: XRP → USD)."""
    return {
        "Account": ACCOUNT,
        "BookDirectory": "7E984A5AD4C1F6CE8E30FB7B4A0D1A1F11E1B6AB4E6CE2A755038D7EA4C68000",
        "Flags": 0,
        "LedgerEntryType": "Offer",
        "Sequence": 12,
        "TakerGets": "100",
        "TakerPays": {"value": "50", "currency": "USD", "issuer": ISSUER},
        "quality": "0.5",
        "taker_gets_funded": "80",
        "taker_pays_funded": "40",
        "is_fully_funded": False,
        "owner_funds": "80",
    }


@pytest.fixture
def valid_autobridged_offer():
    """Валидный autobridged_offer."""
    return {
        "TakerGets": {
            "value": "40",
            "currency": "0000000000000000000000004555520000000000",
            "issuer": ISSUER,
        },
        "TakerPays": {
            "value": "50",
            "currency": "0000000000000000000000005553440000000000",
            "issuer": ISSUER,
        },
        "quality": "1.25",
        "taker_gets_funded": "40",
        "taker_pays_funded": "50",
        "autobridged": True,
        "BookDirectory": "550470DE4DF82000",
    }


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestSchemaLoader:
    """Загрузка и meta-validation схем."""

    @pytest.mark.parametrize("schema_name", ["book_offer", "autobridged_offer"])
    def test_schemas_load(self, schema_name):
        schema = SchemaLoader().load_schema(schema_name)
        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_cached(self):
        loader = SchemaLoader()
        assert loader.load_schema("book_offer") is loader.load_schema("book_offer")

    def test_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_schema_dir(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "absent")

    def test_invalid_schema_rejected(self, tmp_path):
        (tmp_path / "broken.json").write_text('{"type": 5}', encoding="utf-8")
        with pytest.raises(ValueError, match="broken.json"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# BOOK OFFER
# =============================================================================


class TestBookOfferContract:
    """Контракт book_offer."""

    def test_valid(self, valid_book_offer):
        validate_book_offer(valid_book_offer)
        assert BookOfferValidator().describe_errors(valid_book_offer) == []

    def test_minimal_valid(self):
        validate_book_offer(
            {
                "Account": ACCOUNT,
                "TakerGets": {"value": "1", "currency": "EUR", "issuer": ISSUER},
                "TakerPays": "2",
            }
        )

    @pytest.mark.parametrize("field", ["Account", "TakerGets", "TakerPays"])
    def test_required_fields(self, valid_book_offer, field):
        del valid_book_offer[field]
        with pytest.raises(ValidationError):
            validate_book_offer(valid_book_offer)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("Account", "xHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"),
            ("TakerGets", "1e"),
            ("TakerGets", 100),
            ("TakerPays", {"value": "50", "currency": "US", "issuer": ISSUER}),
            ("TakerPays", {"currency": "USD", "issuer": ISSUER}),
            ("taker_gets_funded", "-1"),
            ("is_fully_funded", "yes"),
            ("BookDirectory", "XYZ"),
            ("Sequence", -1),
        ],
    )
    def test_invalid_fields(self, valid_book_offer, field, value):
        valid_book_offer[field] = value
        with pytest.raises(ValidationError):
            validate_book_offer(valid_book_offer)

    def test_describe_errors_reports_all(self, valid_book_offer):
        valid_book_offer["TakerGets"] = "bad"
        valid_book_offer["is_fully_funded"] = "bad"

        errors = BookOfferValidator().describe_errors(valid_book_offer)

        assert len(errors) == 2
        assert errors[0].startswith("$.TakerGets: ")
        assert errors[1].startswith("$.is_fully_funded: ")

    def test_error_points_at_amount(self, valid_book_offer):
        valid_book_offer["TakerPays"] = {"value": "50", "currency": "US", "issuer": ISSUER}

        with pytest.raises(ValidationError) as exc_info:
            validate_book_offer(valid_book_offer)

        assert exc_info.value.json_path.startswith("$.TakerPays")

    def test_valid_contract_parses_into_model(self, valid_book_offer):
        offer = Offer.model_validate(valid_book_offer)
        assert offer.sequence == 12
        assert offer.is_fully_funded is False


# =============================================================================
# AUTOBRIDGED OFFER
# =============================================================================


class TestAutobridgedOfferContract:
    """Контракт autobridged_offer."""

    def test_valid(self, valid_autobridged_offer):
        validate_autobridged_offer(valid_autobridged_offer)

    def test_autobridged_must_be_true(self, valid_autobridged_offer):
        valid_autobridged_offer["autobridged"] = False
        with pytest.raises(ValidationError):
            validate_autobridged_offer(valid_autobridged_offer)

    def test_no_extra_fields(self, valid_autobridged_offer):
        valid_autobridged_offer["Account"] = ACCOUNT
        errors = AutobridgedOfferValidator().describe_errors(valid_autobridged_offer)
        assert len(errors) == 1
        assert "Account" in errors[0]

    def test_currency_must_be_hex(self, valid_autobridged_offer):
        valid_autobridged_offer["TakerGets"]["currency"] = "EUR"
        with pytest.raises(ValidationError):
            validate_autobridged_offer(valid_autobridged_offer)

    def test_book_directory_upper_hex(self, valid_autobridged_offer):
        valid_autobridged_offer["BookDirectory"] = "550470de4df82000"
        with pytest.raises(ValidationError):
            validate_autobridged_offer(valid_autobridged_offer)
