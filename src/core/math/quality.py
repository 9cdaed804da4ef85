"""
Quality — курс оффера и его order-preserving кодирование

quality = taker_pays / taker_gets (меньше — лучше для taker'а).

Кодирование quality в 64 бита (16 hex-символов), совместимое с
хвостом BookDirectory ledger'а:
- старший байт: exponent + 100
- младшие 56 бит: мантисса из 16 значащих цифр

Для положительных quality порядок hex-строк совпадает с порядком значений.
"""

from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Final

from src.core.domain.amount import AMOUNT_CONTEXT, Amount, Numeric, to_decimal
from src.core.domain.errors import InvalidAmount


# =============================================================================
# CONSTANTS
# =============================================================================

QUALITY_MANTISSA_DIGITS: Final[int] = 16
QUALITY_EXPONENT_OFFSET: Final[int] = 100
QUALITY_HEX_LENGTH: Final[int] = 16

_MANTISSA_BITS: Final[int] = 56
_MANTISSA_MASK: Final[int] = (1 << _MANTISSA_BITS) - 1

_MANTISSA_CONTEXT: Final[Context] = Context(prec=QUALITY_MANTISSA_DIGITS, rounding=ROUND_HALF_UP)

ZERO_QUALITY_HEX: Final[str] = "0" * QUALITY_HEX_LENGTH


# =============================================================================
# QUALITY
# =============================================================================


def quality_from_amounts(taker_pays: Amount, taker_gets: Amount) -> Decimal:
    """
    Курс оффера: taker_pays / taker_gets.

    Raises:
        InvalidAmount: Если taker_gets равен нулю
    """
    if taker_gets.is_zero():
        raise InvalidAmount(f"Cannot compute quality with zero taker_gets ({taker_gets})")
    return AMOUNT_CONTEXT.divide(taker_pays.value, taker_gets.value)


def _split_mantissa(quality: Decimal) -> tuple[int, int]:
    """Нормализация к 16-значной мантиссе: quality = mantissa * 10**exponent."""
    rounded = _MANTISSA_CONTEXT.plus(quality)
    _, digits, exponent = rounded.as_tuple()

    mantissa = int("".join(str(d) for d in digits))
    pad = QUALITY_MANTISSA_DIGITS - len(digits)

    return mantissa * (10 ** pad), int(exponent) - pad


def quality_to_hex(quality: Numeric) -> str:
    """
    Order-preserving кодирование quality в 16 hex-символов.

    Examples:
        >>> quality_to_hex("1")
        '55038D7EA4C68000'
        >>> quality_to_hex("0")
        '0000000000000000'

    Raises:
        InvalidAmount: Если quality отрицательная или вне диапазона экспоненты
    """
    value = to_decimal(quality)

    if value.is_zero():
        return ZERO_QUALITY_HEX
    if value < 0:
        raise InvalidAmount(f"Quality cannot be negative: {value}")

    mantissa, exponent = _split_mantissa(value)
    offset = exponent + QUALITY_EXPONENT_OFFSET
    if not 0 <= offset <= 0xFF:
        raise InvalidAmount(f"Quality exponent out of range: {value}")

    return f"{(offset << _MANTISSA_BITS) | mantissa:0{QUALITY_HEX_LENGTH}X}"


def quality_from_hex(encoded: str) -> Decimal:
    """
    Обратное преобразование; принимает также полный BookDirectory (64 hex),
    используя его последние 16 символов.

    Raises:
        InvalidAmount: Если строка не является hex
    """
    tail = encoded[-QUALITY_HEX_LENGTH:]
    try:
        raw = int(tail, 16)
    except ValueError:
        raise InvalidAmount(f"Quality hex is invalid: {encoded!r}") from None

    mantissa = raw & _MANTISSA_MASK
    if mantissa == 0:
        return Decimal(0)

    exponent = (raw >> _MANTISSA_BITS) - QUALITY_EXPONENT_OFFSET
    return Decimal(mantissa).scaleb(exponent, AMOUNT_CONTEXT).normalize(AMOUNT_CONTEXT)
