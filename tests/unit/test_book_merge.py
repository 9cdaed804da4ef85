"""
Тесты для merge_offers_by_quality

Прямая книга EUR → USD объединяется с autobridged офферами
по возрастанию quality; при равенстве прямой оффер идёт первым.
"""

from decimal import Decimal

from src.autobridge import AutobridgeCalculator, merge_offers_by_quality
from src.core.domain import Amount, AutobridgedOffer, Offer


A = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
B = "rpUirQxhaFqMp7YHPLMZCWxgZQbaZkp4bM"
ISSUER = "r9cZA1mLK5R5Am25ArfXFmqgNwjZgnfk59"


def direct_offer(account, gets, pays):
    return {
        "Account": account,
        "TakerGets": {"value": gets, "currency": "EUR", "issuer": ISSUER},
        "TakerPays": {"value": pays, "currency": "USD", "issuer": ISSUER},
    }


def autobridged(gets, pays):
    calculator = AutobridgeCalculator("EUR", "USD", [], [], issuer_gets=ISSUER, issuer_pays=ISSUER)
    return calculator.format_autobridged_offer(
        Amount(Decimal(gets), "EUR", ISSUER),
        Amount(Decimal(pays), "USD", ISSUER),
    )


class TestMergeOffersByQuality:
    """Порядок объединённой книги."""

    def test_sorted_by_quality(self):
        merged = merge_offers_by_quality(
            [direct_offer(A, "10", "15"), direct_offer(B, "10", "11")],
            [autobridged("40", "50")],
        )

        assert isinstance(merged[0], Offer)
        assert merged[0].account == B
        assert isinstance(merged[1], AutobridgedOffer)
        assert merged[2].account == A

    def test_direct_first_on_tie(self):
        merged = merge_offers_by_quality(
            [direct_offer(A, "4", "5")],
            [autobridged("40", "50")],
        )

        assert isinstance(merged[0], Offer)
        assert isinstance(merged[1], AutobridgedOffer)

    def test_accepts_models(self):
        offer = Offer.model_validate(direct_offer(A, "1", "1"))
        assert merge_offers_by_quality([offer], [])[0] is offer

    def test_empty(self):
        assert merge_offers_by_quality([], []) == []
