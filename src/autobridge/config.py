"""Конфигурация Autobridge Engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AutobridgeConfig:
    """Конфигурация AutobridgeCalculator.

    - validate_contracts: прогонять raw-офферы (mapping) через JSON Schema
      book_offer до разбора в Offer
    - strict_leg_shape: сверять валюту/issuer issued-стороны каждого оффера
      с валютами движка (native/issued проверка выполняется всегда)
    """
    validate_contracts: bool = True
    strict_leg_shape: bool = True
