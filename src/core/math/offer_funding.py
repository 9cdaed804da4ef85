"""
Offer Funding — accessors funded/nominal сумм оффера и расчёт funding

Accessors — чистые функции над Offer, возвращающие Amount в активе
соответствующей стороны оффера. Если funded-поля не заданы, оффер
считается полностью funded.

apply_owner_funds распределяет баланс владельца по его офферам в порядке
книги (лучшая quality первой): каждый следующий оффер получает только то,
что осталось после номиналов предыдущих офферов того же владельца.
"""

import logging
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from src.core.domain.amount import AMOUNT_CONTEXT, Amount, Numeric, to_decimal
from src.core.domain.offer import Offer
from src.core.math.quality import quality_from_amounts


logger = logging.getLogger(__name__)


# =============================================================================
# ACCESSORS
# =============================================================================


def get_offer_taker_gets(offer: Offer) -> Amount:
    return offer.taker_gets


def get_offer_taker_pays(offer: Offer) -> Amount:
    return offer.taker_pays


def get_offer_quality(offer: Offer) -> Decimal:
    """Quality оффера; выводится из номиналов, если не задана явно."""
    if offer.quality is not None:
        return offer.quality
    return quality_from_amounts(offer.taker_pays, offer.taker_gets)


def get_offer_taker_gets_funded(offer: Offer) -> Amount:
    gets = offer.taker_gets
    if offer.taker_gets_funded is None:
        return gets
    return Amount(offer.taker_gets_funded, gets.currency, gets.issuer)


def get_offer_taker_pays_funded(offer: Offer) -> Amount:
    """
    Funded taker_pays.

    Приоритет: явное поле → taker_gets_funded * quality → номинал.
    """
    pays = offer.taker_pays
    if offer.taker_pays_funded is not None:
        return Amount(offer.taker_pays_funded, pays.currency, pays.issuer)
    if offer.taker_gets_funded is not None:
        return get_offer_taker_gets_funded(offer).multiply(
            get_offer_quality(offer), pays.currency, pays.issuer
        )
    return pays


def is_offer_fully_funded(offer: Offer) -> bool:
    if offer.is_fully_funded is not None:
        return offer.is_fully_funded
    return get_offer_taker_gets_funded(offer) >= offer.taker_gets


# =============================================================================
# OWNER FUNDS
# =============================================================================


def apply_owner_funds(
    offers: Iterable[Offer],
    owner_funds: Mapping[str, Numeric],
) -> list[Offer]:
    """
    Расчёт funded сумм по балансам владельцев.

    Args:
        offers: Офферы одной книги в порядке quality (лучшие первыми)
        owner_funds: Баланс владельца в активе taker_gets. Если владелец
            отсутствует, используется поле owner_funds самого оффера; если
            нет и его — оффер возвращается без изменений.

    Returns:
        Новые Offer с заполненными taker_gets_funded / taker_pays_funded /
        is_fully_funded / owner_funds
    """
    offered_totals: dict[str, Decimal] = {}
    result: list[Offer] = []

    for offer in offers:
        raw_funds: Optional[Numeric] = owner_funds.get(offer.account, offer.owner_funds)
        if raw_funds is None:
            result.append(offer)
            continue

        funds = to_decimal(raw_funds)
        nominal_gets = offer.taker_gets.value
        previous_total = offered_totals.get(offer.account, Decimal(0))
        available = max(AMOUNT_CONTEXT.subtract(funds, previous_total), Decimal(0))

        if available >= nominal_gets:
            update = {
                "taker_gets_funded": nominal_gets,
                "taker_pays_funded": offer.taker_pays.value,
                "is_fully_funded": True,
            }
        else:
            update = {
                "taker_gets_funded": available,
                "taker_pays_funded": AMOUNT_CONTEXT.multiply(available, get_offer_quality(offer)),
                "is_fully_funded": False,
            }
            logger.debug(
                "Offer of %s underfunded: funded=%s nominal=%s",
                offer.account,
                available,
                nominal_gets,
            )

        update["owner_funds"] = funds
        offered_totals[offer.account] = AMOUNT_CONTEXT.add(previous_total, nominal_gets)
        result.append(offer.model_copy(update=update))

    return result
