"""
Core math modules

Quality-кодирование и funding-расчёты офферов поверх точной десятичной арифметики.
"""

# Quality
from src.core.math.quality import (
    QUALITY_EXPONENT_OFFSET,
    QUALITY_MANTISSA_DIGITS,
    ZERO_QUALITY_HEX,
    quality_from_amounts,
    quality_from_hex,
    quality_to_hex,
)

# Offer funding
from src.core.math.offer_funding import (
    apply_owner_funds,
    get_offer_quality,
    get_offer_taker_gets,
    get_offer_taker_gets_funded,
    get_offer_taker_pays,
    get_offer_taker_pays_funded,
    is_offer_fully_funded,
)

__all__ = [
    # Quality: Constants
    "QUALITY_EXPONENT_OFFSET",
    "QUALITY_MANTISSA_DIGITS",
    "ZERO_QUALITY_HEX",
    # Quality: Functions
    "quality_from_amounts",
    "quality_from_hex",
    "quality_to_hex",
    # Offer funding: Accessors
    "get_offer_quality",
    "get_offer_taker_gets",
    "get_offer_taker_gets_funded",
    "get_offer_taker_pays",
    "get_offer_taker_pays_funded",
    "is_offer_fully_funded",
    # Offer funding: Owner funds
    "apply_owner_funds",
]
