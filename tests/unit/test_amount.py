"""
Тесты для Amount, currency и account helpers

Проверяет:
1. Разбор сумм из ledger JSON (native строка / issued mapping)
2. Точную арифметику и сравнение без epsilon
3. Запрет смешивания активов
4. Каноническую текстовую форму
5. Hex-кодирование валют
6. Base58check валидацию аккаунтов
"""

from decimal import Decimal

import pytest

from src.core.domain import (
    Amount,
    InvalidAccount,
    InvalidAmount,
    currency_to_hex,
    decimal_to_text,
    is_native_currency,
    is_valid_account,
    to_decimal,
    validate_account,
    validate_currency,
)


ISSUER = "r9cZA1mLK5R5Am25ArfXFmqgNwjZgnfk59"


# =============================================================================
# AMOUNT
# =============================================================================


class TestAmountParsing:
    """Разбор Amount из форматов ledger JSON."""

    def test_native_from_string(self):
        amount = Amount.from_json("100.5")
        assert amount.value == Decimal("100.5")
        assert amount.is_native()
        assert amount.issuer is None

    def test_native_from_int(self):
        assert Amount.from_json(42) == Amount.native("42")

    def test_issued_from_mapping(self):
        amount = Amount.from_json({"value": "12.34", "currency": "USD", "issuer": ISSUER})
        assert amount.value == Decimal("12.34")
        assert amount.currency == "USD"
        assert amount.issuer == ISSUER
        assert not amount.is_native()

    def test_mapping_without_value_rejected(self):
        with pytest.raises(InvalidAmount):
            Amount.from_json({"currency": "USD", "issuer": ISSUER})

    def test_amount_instance_passthrough(self):
        amount = Amount.native("1")
        assert Amount.from_json(amount) is amount

    @pytest.mark.parametrize("raw", ["abc", "", "NaN", "Infinity", "-inf", None, [1]])
    def test_non_numeric_rejected(self, raw):
        with pytest.raises(InvalidAmount):
            Amount.from_json(raw)

    def test_float_rejected(self):
        """float искажает суммы — только текст или int."""
        with pytest.raises(InvalidAmount):
            to_decimal(0.1)

    def test_native_with_issuer_rejected(self):
        with pytest.raises(InvalidAmount):
            Amount(Decimal("1"), "XRP", ISSUER)


class TestAmountArithmetic:
    """Точная арифметика в AMOUNT_CONTEXT."""

    def test_add_subtract(self):
        a = Amount.native("100")
        b = Amount.native("40")
        assert (a - b) == Amount.native("60")
        assert (a + b) == Amount.native("140")

    def test_multiply_retags_currency(self):
        bridge = Amount.native("40")
        converted = bridge.multiply(Decimal("0.5"), "USD", ISSUER)
        assert converted == Amount(Decimal("20"), "USD", ISSUER)

    def test_multiply_keeps_asset_by_default(self):
        usd = Amount(Decimal("3"), "USD", ISSUER)
        assert usd.multiply("2") == Amount(Decimal("6"), "USD", ISSUER)

    def test_divide(self):
        bridge = Amount.native("40")
        converted = bridge.divide("2.5", "EUR", ISSUER)
        assert converted.value == Decimal("16")
        assert converted.currency == "EUR"

    def test_divide_by_zero_rejected(self):
        with pytest.raises(InvalidAmount, match="zero"):
            Amount.native("1").divide("0")

    def test_mixed_assets_rejected(self):
        usd = Amount(Decimal("1"), "USD", ISSUER)
        with pytest.raises(InvalidAmount, match="different assets"):
            usd + Amount.native("1")
        with pytest.raises(InvalidAmount):
            usd.compare(Amount(Decimal("1"), "EUR", ISSUER))

    def test_exact_comparison(self):
        """Сравнение точное: разница в 34-м знаке различима."""
        a = Amount.native("1")
        b = Amount.native("1.000000000000000000000000000000001")
        assert a < b
        assert b > a
        assert a.compare(Amount.native("1.000")) == 0
        assert a <= Amount.native("1.0")
        assert a >= Amount.native("1.0")

    def test_zero_and_negative(self):
        assert Amount.zero().is_zero()
        assert (Amount.native("1") - Amount.native("2")).is_negative()


class TestAmountText:
    """Каноническая текстовая форма."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1.2500", "1.25"),
            ("1E+2", "100"),
            ("0.000", "0"),
            ("-0", "0"),
            ("20.0", "20"),
            ("1E-7", "0.0000001"),
        ],
    )
    def test_decimal_to_text(self, raw, expected):
        assert decimal_to_text(Decimal(raw)) == expected

    def test_to_json_native(self):
        assert Amount.native("10.50").to_json() == "10.5"

    def test_to_json_issued(self):
        amount = Amount(Decimal("5"), "USD", ISSUER)
        assert amount.to_json() == {"value": "5", "currency": "USD", "issuer": ISSUER}

    def test_str(self):
        assert str(Amount.native("5")) == "5/XRP"
        assert str(Amount(Decimal("5"), "USD", ISSUER)) == f"5/USD/{ISSUER}"


# =============================================================================
# CURRENCY
# =============================================================================


class TestCurrency:
    """Коды валют и hex-кодирование."""

    def test_native_to_hex(self):
        assert currency_to_hex("XRP") == "0" * 40

    def test_standard_to_hex(self):
        assert currency_to_hex("USD") == "0000000000000000000000005553440000000000"

    def test_hex_code_passthrough(self):
        code = "015841551A748AD2C1F76FF6ECB0CCCD00000000"
        assert currency_to_hex(code.lower()) == code

    @pytest.mark.parametrize("code", ["US", "USDT", "", "U D", "Z" * 40])
    def test_invalid_codes(self, code):
        with pytest.raises(InvalidAmount):
            validate_currency(code)

    def test_is_native(self):
        assert is_native_currency("XRP")
        assert is_native_currency("0" * 40)
        assert not is_native_currency("USD")


# =============================================================================
# ACCOUNT
# =============================================================================


class TestAccount:
    """Base58check валидация адресов."""

    @pytest.mark.parametrize(
        "account",
        [
            "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh",
            "rpUirQxhaFqMp7YHPLMZCWxgZQbaZkp4bM",
            "rrrrrrrrrrrrrrrrrrrrrhoLvTp",
            "rrrrrrrrrrrrrrrrrrrrBZbvji",
        ],
    )
    def test_valid_accounts(self, account):
        assert is_valid_account(account)
        assert validate_account(account) == account

    @pytest.mark.parametrize(
        "account",
        [
            "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTX",  # неверный checksum
            "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyT0",  # '0' вне алфавита
            "short",
            "",
            None,
            12345,
        ],
    )
    def test_invalid_accounts(self, account):
        assert not is_valid_account(account)
        with pytest.raises(InvalidAccount):
            validate_account(account)
