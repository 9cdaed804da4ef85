"""
Contract Validation Module

Модуль для валидации JSON контрактов офферов (входных и синтетических).
"""

from .validators import (
    AutobridgedOfferValidator,
    BookOfferValidator,
    ContractValidator,
    SchemaLoader,
    validate_autobridged_offer,
    validate_book_offer,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "BookOfferValidator",
    "AutobridgedOfferValidator",
    # Functions
    "validate_book_offer",
    "validate_autobridged_offer",
]
