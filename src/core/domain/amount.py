"""
Amount — точная десятичная сумма, привязанная к активу

Value object поверх decimal.Decimal:
- value: значение (произвольная точность, без float)
- currency: код валюты ('XRP' для native/bridge)
- issuer: эмитент (None для native)

Native суммы — это простые числа в единицах bridge-актива (без конверсии drops).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все операции выполняются в одном контексте AMOUNT_CONTEXT (детерминизм)
2. Сравнение точное, без epsilon
3. Сложение/вычитание/сравнение только для одного и того же актива
4. NaN/Inf никогда не попадают в Amount
"""

from dataclasses import dataclass
from decimal import (
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Any, Final, Mapping, Optional, Union

from src.core.domain.currency import NATIVE_CURRENCY, is_native_currency, validate_currency
from src.core.domain.errors import InvalidAmount


# =============================================================================
# DECIMAL CONTEXT
# =============================================================================

# 34 значащие цифры (decimal128), мантисса ledger'а 16 цифр
AMOUNT_PRECISION: Final[int] = 34

AMOUNT_CONTEXT: Final[Context] = Context(
    prec=AMOUNT_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

Numeric = Union[Decimal, int, str]


def to_decimal(value: Any) -> Decimal:
    """
    Приведение числового значения к конечному Decimal.

    float отвергается намеренно: двоичное представление искажает суммы.

    Raises:
        InvalidAmount: Если значение нечисловое, float, NaN или Inf
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmount(f"Amount value must be decimal text or integer, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation:
            raise InvalidAmount(f"Amount value is not numeric: {value!r}") from None
    else:
        raise InvalidAmount(f"Amount value is not numeric: {value!r}")

    if not result.is_finite():
        raise InvalidAmount(f"Amount value contains NaN/Inf: {value!r}")

    return result


# =============================================================================
# AMOUNT
# =============================================================================


@dataclass(frozen=True)
class Amount:
    """Сумма в конкретном активе."""

    value: Decimal
    currency: str = NATIVE_CURRENCY
    issuer: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_decimal(self.value))
        validate_currency(self.currency)
        if is_native_currency(self.currency) and self.issuer is not None:
            raise InvalidAmount("Native amount cannot have an issuer")

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def native(cls, value: Numeric) -> "Amount":
        return cls(to_decimal(value))

    @classmethod
    def zero(cls, currency: str = NATIVE_CURRENCY, issuer: Optional[str] = None) -> "Amount":
        return cls(Decimal(0), currency, issuer)

    @classmethod
    def from_json(cls, data: Any) -> "Amount":
        """
        Разбор суммы из формата ledger JSON.

        Args:
            data: Строка/число (native) или mapping {value, currency, issuer}

        Returns:
            Amount

        Raises:
            InvalidAmount: Если формат не распознан
        """
        if isinstance(data, Amount):
            return data

        if isinstance(data, Mapping):
            if "value" not in data or "currency" not in data:
                raise InvalidAmount(f"Issued amount requires value and currency: {data!r}")
            currency = data["currency"]
            issuer = data.get("issuer")
            if is_native_currency(currency):
                issuer = None
            return cls(to_decimal(data["value"]), currency, issuer)

        return cls.native(data)

    # -------------------------------------------------------------------------
    # Предикаты
    # -------------------------------------------------------------------------

    def is_native(self) -> bool:
        return is_native_currency(self.currency)

    def is_zero(self) -> bool:
        return self.value.is_zero()

    def is_negative(self) -> bool:
        return self.value < 0

    def same_asset(self, other: "Amount") -> bool:
        if self.is_native() and other.is_native():
            return True
        return self.currency == other.currency and self.issuer == other.issuer

    def _check_operand(self, other: object, operation: str) -> "Amount":
        if not isinstance(other, Amount):
            raise InvalidAmount(f"Cannot {operation} Amount and {type(other).__name__}")
        if not self.same_asset(other):
            raise InvalidAmount(
                f"Cannot {operation} amounts of different assets: "
                f"{self.currency}/{self.issuer} vs {other.currency}/{other.issuer}"
            )
        return other

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def _with_value(self, value: Decimal) -> "Amount":
        return Amount(value, self.currency, self.issuer)

    def __add__(self, other: "Amount") -> "Amount":
        other = self._check_operand(other, "add")
        return self._with_value(AMOUNT_CONTEXT.add(self.value, other.value))

    def __sub__(self, other: "Amount") -> "Amount":
        other = self._check_operand(other, "subtract")
        return self._with_value(AMOUNT_CONTEXT.subtract(self.value, other.value))

    def multiply(
        self,
        ratio: Numeric,
        currency: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> "Amount":
        """
        Умножение на безразмерный коэффициент (например, quality).

        Если указан currency — результат перетегируется в этот актив
        (конверсия через курс). Иначе актив сохраняется.
        """
        value = AMOUNT_CONTEXT.multiply(self.value, to_decimal(ratio))
        if currency is None:
            return self._with_value(value)
        return Amount(value, currency, None if is_native_currency(currency) else issuer)

    def divide(
        self,
        ratio: Numeric,
        currency: Optional[str] = None,
        issuer: Optional[str] = None,
    ) -> "Amount":
        """
        Деление на безразмерный коэффициент.

        Raises:
            InvalidAmount: При делении на ноль
        """
        divisor = to_decimal(ratio)
        if divisor.is_zero():
            raise InvalidAmount(f"Cannot divide {self.to_text()} by zero")

        value = AMOUNT_CONTEXT.divide(self.value, divisor)
        if currency is None:
            return self._with_value(value)
        return Amount(value, currency, None if is_native_currency(currency) else issuer)

    # -------------------------------------------------------------------------
    # Сравнение (точное)
    # -------------------------------------------------------------------------

    def compare(self, other: "Amount") -> int:
        other = self._check_operand(other, "compare")
        if self.value > other.value:
            return 1
        if self.value < other.value:
            return -1
        return 0

    def __lt__(self, other: "Amount") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "Amount") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "Amount") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "Amount") -> bool:
        return self.compare(other) >= 0

    # -------------------------------------------------------------------------
    # Сериализация
    # -------------------------------------------------------------------------

    def to_text(self) -> str:
        return decimal_to_text(self.value)

    def to_json(self) -> Union[str, dict[str, Any]]:
        if self.is_native():
            return self.to_text()

        data: dict[str, Any] = {"value": self.to_text(), "currency": self.currency}
        if self.issuer is not None:
            data["issuer"] = self.issuer
        return data

    def __str__(self) -> str:
        if self.is_native():
            return f"{self.to_text()}/{NATIVE_CURRENCY}"
        return f"{self.to_text()}/{self.currency}/{self.issuer or ''}"


def decimal_to_text(value: Decimal) -> str:
    """
    Каноническая текстовая форма: без экспоненты и без хвостовых нулей.

    Examples:
        >>> decimal_to_text(Decimal("1.2500"))
        '1.25'
        >>> decimal_to_text(Decimal("1E+2"))
        '100'
        >>> decimal_to_text(Decimal("-0"))
        '0'
    """
    if value.is_zero():
        return "0"
    return format(value.normalize(AMOUNT_CONTEXT), "f")
