"""Слияние прямой книги с autobridged офферами.

Прямые офферы пары output/input и синтетические autobridged офферы
объединяются в одну книгу по возрастанию quality (лучшие первыми).
При равной quality прямой оффер идёт раньше autobridged.
"""

from decimal import Decimal
from typing import Iterable, List, Mapping, Union

from src.core.domain.offer import AutobridgedOffer, Offer
from src.core.math.offer_funding import get_offer_quality


BookEntry = Union[Offer, AutobridgedOffer]


def _entry_quality(entry: BookEntry) -> Decimal:
    if isinstance(entry, AutobridgedOffer):
        return entry.quality_value
    return get_offer_quality(entry)


def merge_offers_by_quality(
    direct_offers: Iterable[Union[Offer, Mapping]],
    autobridged_offers: Iterable[AutobridgedOffer],
) -> List[BookEntry]:
    """
    Объединённая книга, отсортированная по quality.

    Args:
        direct_offers: Прямые офферы (Offer или ledger JSON)
        autobridged_offers: Результат AutobridgeCalculator.calculate()

    Returns:
        Список офферов по возрастанию quality
    """
    entries: List[BookEntry] = [
        offer if isinstance(offer, Offer) else Offer.model_validate(offer)
        for offer in direct_offers
    ]
    entries.extend(autobridged_offers)

    # sorted() стабилен: прямые офферы остаются перед autobridged при равной quality
    return sorted(entries, key=_entry_quality)
