"""Autobridge — синтез офферов через bridge-валюту.

- AutobridgeCalculator: склейка leg one (input → bridge) и leg two
  (bridge → output) в autobridged офферы
- OwnerFundsLedger: leftover bridge-ликвидность по владельцам
- merge_offers_by_quality: объединение с прямой книгой
"""

from .book import merge_offers_by_quality
from .calculator import AutobridgeCalculator
from .config import AutobridgeConfig
from .ledger import OwnerFundsLedger

__all__ = [
    "AutobridgeCalculator",
    "AutobridgeConfig",
    "OwnerFundsLedger",
    "merge_offers_by_quality",
]
