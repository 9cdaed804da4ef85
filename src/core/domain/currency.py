"""
Currency — идентификаторы валют и их hex-кодирование

Два формата кода валюты:
- стандартный: 3 символа (например, 'USD')
- нестандартный: 40 hex-символов (160 бит)

Native (bridge) валюта 'XRP' не имеет issuer и в hex-форме кодируется нулями.
"""

import re
from typing import Final

from src.core.domain.errors import InvalidAmount


# =============================================================================
# CONSTANTS
# =============================================================================

NATIVE_CURRENCY: Final[str] = "XRP"

# 160 бит = 20 байт = 40 hex-символов
CURRENCY_HEX_LENGTH: Final[int] = 40
NATIVE_CURRENCY_HEX: Final[str] = "0" * CURRENCY_HEX_LENGTH

_STANDARD_CODE_RE: Final = re.compile(r"^[A-Za-z0-9?!@#$%^&*<>(){}\[\]|]{3}$")
_HEX_CODE_RE: Final = re.compile(r"^[0-9A-Fa-f]{40}$")


# =============================================================================
# VALIDATION
# =============================================================================


def is_native_currency(code: str) -> bool:
    """True, если код обозначает native (bridge) валюту."""
    return code == NATIVE_CURRENCY or code.upper() == NATIVE_CURRENCY_HEX


def validate_currency(code: str) -> str:
    """
    Проверка кода валюты.

    Args:
        code: 3-символьный код или 40 hex-символов

    Returns:
        Код без изменений (для использования в валидаторах моделей)

    Raises:
        InvalidAmount: Если код не соответствует ни одному формату
    """
    if not isinstance(code, str):
        raise InvalidAmount(f"Currency code must be a string, got {type(code).__name__}")

    if _STANDARD_CODE_RE.match(code) or _HEX_CODE_RE.match(code):
        return code

    raise InvalidAmount(f"Currency code is invalid: {code!r}")


# =============================================================================
# ENCODING
# =============================================================================


def currency_to_hex(code: str) -> str:
    """
    Кодирование валюты в 160-битную hex-форму.

    Стандартный код: 12 нулевых байт + 3 ASCII-байта + 5 нулевых байт.

    Examples:
        >>> currency_to_hex("XRP")
        '0000000000000000000000000000000000000000'
        >>> currency_to_hex("USD")
        '0000000000000000000000005553440000000000'
    """
    validate_currency(code)

    if is_native_currency(code):
        return NATIVE_CURRENCY_HEX

    if len(code) == CURRENCY_HEX_LENGTH:
        return code.upper()

    return ("00" * 12) + code.encode("ascii").hex().upper() + ("00" * 5)
