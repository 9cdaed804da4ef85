"""Leftover funds ledger — неиспользованная bridge-ликвидность по владельцам.

Leftover возникает, когда leg-one оффер владельца был частично поглощён
leg-two оффером того же владельца и после clamp оказался funded меньше,
чем до unclamp. Эти средства переносятся на худшие (по quality) leg-one
офферы того же владельца.

Инвариант: значения всегда native и неотрицательны.
"""

import logging
from typing import Dict

from src.core.domain.account import validate_account
from src.core.domain.amount import Amount
from src.core.domain.errors import InvalidAmount


logger = logging.getLogger(__name__)


def _validate_leftover(amount: object) -> Amount:
    if not isinstance(amount, Amount):
        raise InvalidAmount(f"Leftover amount is invalid: {amount!r}")
    if not amount.is_native():
        raise InvalidAmount(f"Leftover amount must be native, got {amount}")
    if amount.is_negative():
        raise InvalidAmount(f"Leftover amount cannot be negative: {amount}")
    return amount


class OwnerFundsLedger:
    """Mapping account → leftover (native Amount), по умолчанию ноль."""

    def __init__(self):
        self._leftover: Dict[str, Amount] = {}

    def clear(self) -> None:
        self._leftover = {}

    def get(self, account: str) -> Amount:
        validate_account(account)
        return self._leftover.get(account, Amount.zero())

    def add(self, account: str, amount: Amount) -> Amount:
        """Прибавить к leftover владельца; возвращает новое значение."""
        validate_account(account)
        _validate_leftover(amount)

        updated = self.get(account) + amount
        self._leftover[account] = updated

        logger.debug("Leftover of %s increased by %s to %s", account, amount.to_text(), updated.to_text())
        return updated

    def set(self, account: str, amount: Amount) -> None:
        validate_account(account)
        self._leftover[account] = _validate_leftover(amount)

    def reset(self, account: str) -> Amount:
        validate_account(account)
        self._leftover[account] = Amount.zero()
        return self._leftover[account]

    def snapshot(self) -> Dict[str, Amount]:
        return dict(self._leftover)

    def __len__(self) -> int:
        return len(self._leftover)
