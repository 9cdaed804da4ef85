"""
Domain models and value objects.

Contains fundamental domain entities like Amount, Offer, AutobridgedOffer
and account/currency identifier helpers.
"""

from src.core.domain.account import is_valid_account, validate_account
from src.core.domain.amount import AMOUNT_CONTEXT, Amount, decimal_to_text, to_decimal
from src.core.domain.currency import (
    NATIVE_CURRENCY,
    currency_to_hex,
    is_native_currency,
    validate_currency,
)
from src.core.domain.errors import (
    ContractViolation,
    InvalidAccount,
    InvalidAmount,
    InvalidOffer,
)
from src.core.domain.offer import AutobridgedOffer, IssuedValue, Offer

__all__ = [
    # Amount
    "AMOUNT_CONTEXT",
    "Amount",
    "decimal_to_text",
    "to_decimal",
    # Currency
    "NATIVE_CURRENCY",
    "currency_to_hex",
    "is_native_currency",
    "validate_currency",
    # Account
    "is_valid_account",
    "validate_account",
    # Errors
    "ContractViolation",
    "InvalidAccount",
    "InvalidAmount",
    "InvalidOffer",
    # Offers
    "Offer",
    "IssuedValue",
    "AutobridgedOffer",
]
