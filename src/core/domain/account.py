"""
Account — валидация идентификаторов аккаунтов

Формат адреса: base58check c алфавитом ledger'а.
- payload: 1 байт версии (0x00) + 20 байт account ID
- checksum: первые 4 байта sha256(sha256(payload))

Итого 25 байт после декодирования.
"""

import hashlib
from typing import Final

from src.core.domain.errors import InvalidAccount


# =============================================================================
# CONSTANTS
# =============================================================================

ACCOUNT_ALPHABET: Final[str] = "rpshnaf39wBUDNEGHJKLM4PQRST7VWXYZ2bcdeCg65jkm8oFqi1tuvAxyz"

ACCOUNT_VERSION_BYTE: Final[int] = 0
ACCOUNT_ID_LENGTH: Final[int] = 20
CHECKSUM_LENGTH: Final[int] = 4

_DECODED_LENGTH: Final[int] = 1 + ACCOUNT_ID_LENGTH + CHECKSUM_LENGTH
_ALPHABET_INDEX: Final[dict[str, int]] = {c: i for i, c in enumerate(ACCOUNT_ALPHABET)}


# =============================================================================
# BASE58
# =============================================================================


def _b58decode(value: str) -> bytes | None:
    """Декодирование base58; None если встречен символ вне алфавита."""
    number = 0
    for char in value:
        digit = _ALPHABET_INDEX.get(char)
        if digit is None:
            return None
        number = number * 58 + digit

    # Ведущие нули алфавита ('r') кодируют нулевые байты
    leading_zeros = len(value) - len(value.lstrip(ACCOUNT_ALPHABET[0]))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""

    return b"\x00" * leading_zeros + body


def _checksum(payload: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:CHECKSUM_LENGTH]


# =============================================================================
# VALIDATION
# =============================================================================


def is_valid_account(account: object) -> bool:
    """
    Проверка адреса аккаунта (формат + checksum).

    Examples:
        >>> is_valid_account("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh")
        True
        >>> is_valid_account("rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTX")
        False
    """
    if not isinstance(account, str) or not 25 <= len(account) <= 35:
        return False

    decoded = _b58decode(account)
    if decoded is None or len(decoded) != _DECODED_LENGTH:
        return False

    payload, checksum = decoded[:-CHECKSUM_LENGTH], decoded[-CHECKSUM_LENGTH:]
    if payload[0] != ACCOUNT_VERSION_BYTE:
        return False

    return _checksum(payload) == checksum


def validate_account(account: object) -> str:
    """
    Guard для публичных операций, принимающих аккаунт.

    Raises:
        InvalidAccount: Если адрес невалиден
    """
    if not is_valid_account(account):
        raise InvalidAccount(f"Account is invalid: {account!r}")
    return account  # type: ignore[return-value]
