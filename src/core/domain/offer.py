"""
Offer — модели офферов order book и синтетических autobridged офферов

Offer: immutable Pydantic модель стоящего оффера в формате ledger JSON
(Account, TakerGets, TakerPays, BookDirectory, ...), дополненная
funded-полями (taker_gets_funded, taker_pays_funded, is_fully_funded).

AutobridgedOffer: синтетический оффер, полученный склейкой двух ног
через bridge-валюту. Всегда полностью funded по построению.
"""

from decimal import Decimal
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    BaseModel,
    Field,
    PlainSerializer,
    PlainValidator,
    field_validator,
    model_validator,
)

from src.core.domain.account import validate_account
from src.core.domain.amount import Amount, decimal_to_text, to_decimal


# =============================================================================
# FIELD TYPES
# =============================================================================


def _dump_amount(amount: Amount) -> Any:
    return amount.to_json()


LedgerAmount = Annotated[
    Amount,
    PlainValidator(Amount.from_json),
    PlainSerializer(_dump_amount),
]

LedgerDecimal = Annotated[
    Decimal,
    PlainValidator(to_decimal),
    PlainSerializer(decimal_to_text),
]


# =============================================================================
# OFFER
# =============================================================================


class Offer(BaseModel):
    """
    Стоящий оффер order book.

    Funded-поля опциональны: если не заданы, оффер считается полностью
    funded (см. accessors в src.core.math.offer_funding).
    """

    # Идентификация
    account: str = Field(..., alias="Account", description="Владелец оффера")
    sequence: Optional[int] = Field(None, alias="Sequence", ge=0)
    book_directory: Optional[str] = Field(None, alias="BookDirectory")

    # Номинальные суммы
    taker_gets: LedgerAmount = Field(..., alias="TakerGets")
    taker_pays: LedgerAmount = Field(..., alias="TakerPays")

    # Курс (taker_pays / taker_gets); выводится из сумм, если не задан
    quality: Optional[LedgerDecimal] = None

    # Funded-состояние
    taker_gets_funded: Optional[LedgerDecimal] = None
    taker_pays_funded: Optional[LedgerDecimal] = None
    is_fully_funded: Optional[bool] = None
    owner_funds: Optional[LedgerDecimal] = None

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("account")
    @classmethod
    def validate_account_id(cls, v: str) -> str:
        return validate_account(v)

    @model_validator(mode="after")
    def validate_funded_amounts(self) -> "Offer":
        """Funded суммы неотрицательны и не превышают номинал."""
        if self.taker_gets.is_negative() or self.taker_pays.is_negative():
            raise ValueError("Offer amounts cannot be negative")

        funded = self.taker_gets_funded
        if funded is not None:
            if funded < 0:
                raise ValueError(f"taker_gets_funded cannot be negative: {funded}")
            if funded > self.taker_gets.value:
                raise ValueError(
                    f"taker_gets_funded {funded} exceeds taker_gets {self.taker_gets.to_text()}"
                )

        if self.taker_pays_funded is not None and self.taker_pays_funded < 0:
            raise ValueError(f"taker_pays_funded cannot be negative: {self.taker_pays_funded}")

        if self.quality is not None and self.quality < 0:
            raise ValueError(f"quality cannot be negative: {self.quality}")

        return self

    def to_json(self) -> dict[str, Any]:
        """Сериализация в формат ledger JSON."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# AUTOBRIDGED OFFER
# =============================================================================


class IssuedValue(BaseModel):
    """Сумма синтетического оффера: value + hex currency + issuer."""

    value: str
    currency: str = Field(..., min_length=40, max_length=40)
    issuer: Optional[str] = None

    model_config = {"frozen": True}


class AutobridgedOffer(BaseModel):
    """
    Синтетический оффер input → output через bridge-валюту.

    Не хранится в ledger. taker_*_funded всегда равны номиналу.
    """

    taker_gets: IssuedValue = Field(..., alias="TakerGets")
    taker_pays: IssuedValue = Field(..., alias="TakerPays")
    quality: str
    taker_gets_funded: str
    taker_pays_funded: str
    autobridged: Literal[True] = True
    book_directory: str = Field(..., alias="BookDirectory")

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="after")
    def validate_fully_funded(self) -> "AutobridgedOffer":
        if self.taker_gets_funded != self.taker_gets.value:
            raise ValueError("Autobridged taker_gets_funded must equal TakerGets.value")
        if self.taker_pays_funded != self.taker_pays.value:
            raise ValueError("Autobridged taker_pays_funded must equal TakerPays.value")
        return self

    @property
    def quality_value(self) -> Decimal:
        return to_decimal(self.quality)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
