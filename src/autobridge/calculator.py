"""Autobridge Calculator — синтез офферов input → output через bridge-валюту.

Склеивает две отсортированные (лучшая quality первой) книги:
- leg one: TakerGets = bridge (native), TakerPays = input currency
- leg two: TakerGets = output currency, TakerPays = bridge (native)

в упорядоченную последовательность autobridged офферов за один проход
двумя указателями (O(n + m)).

Funding:
- Офферы одного владельца в обеих ногах: clamp leg one снимается на время
  итерации (средства остаются у владельца), затем применяется заново.
  Если после этого leg one нужно меньше, чем было funded — разница
  записывается в leftover владельца.
- Не полностью funded leg-one оффер другого владельца пополняется
  из его leftover (top-up), но не выше оставшегося номинала.
- Частичное поглощение leg one другим владельцем уменьшает и номинал,
  и funded: номинал всегда равен непроданному остатку оффера.

Предусловие: один calculate() на экземпляр. Leftover очищается при каждом
вызове, но рабочие копии офферов — нет, поэтому повторный вызов работает
с уже поглощёнными офферами. Для независимого прогона создайте новый
экземпляр.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from jsonschema import ValidationError

from src.autobridge.config import AutobridgeConfig
from src.autobridge.ledger import OwnerFundsLedger
from src.core.contracts import BookOfferValidator
from src.core.domain.account import validate_account
from src.core.domain.amount import Amount, decimal_to_text
from src.core.domain.currency import currency_to_hex, is_native_currency, validate_currency
from src.core.domain.errors import ContractViolation, InvalidAmount, InvalidOffer
from src.core.domain.offer import AutobridgedOffer, IssuedValue, Offer
from src.core.math.offer_funding import (
    get_offer_quality,
    get_offer_taker_gets_funded,
    get_offer_taker_pays_funded,
    is_offer_fully_funded,
)
from src.core.math.quality import quality_from_amounts, quality_to_hex


logger = logging.getLogger(__name__)

OfferInput = Union[Offer, Mapping]


# =============================================================================
# WORKING OFFER
# =============================================================================


@dataclass
class _WorkingOffer:
    """Изменяемая рабочая копия оффера, принадлежащая движку."""

    account: str
    taker_gets: Amount
    taker_pays: Amount
    quality: Decimal
    taker_gets_funded: Amount
    taker_pays_funded: Amount
    is_fully_funded: bool
    book_directory: Optional[str] = None
    sequence: Optional[int] = None

    @classmethod
    def from_offer(cls, offer: Offer) -> "_WorkingOffer":
        return cls(
            account=offer.account,
            taker_gets=offer.taker_gets,
            taker_pays=offer.taker_pays,
            quality=get_offer_quality(offer),
            taker_gets_funded=get_offer_taker_gets_funded(offer),
            taker_pays_funded=get_offer_taker_pays_funded(offer),
            is_fully_funded=is_offer_fully_funded(offer),
            book_directory=offer.book_directory,
            sequence=offer.sequence,
        )

    def to_offer(self) -> Offer:
        return Offer(
            account=self.account,
            sequence=self.sequence,
            book_directory=self.book_directory,
            taker_gets=self.taker_gets,
            taker_pays=self.taker_pays,
            quality=self.quality,
            taker_gets_funded=self.taker_gets_funded.value,
            taker_pays_funded=self.taker_pays_funded.value,
            is_fully_funded=self.is_fully_funded,
        )


# =============================================================================
# CALCULATOR
# =============================================================================


class AutobridgeCalculator:
    """Расчёт autobridged офферов по двум ногам через bridge-валюту.

    Args:
        currency_gets: output currency (то, что получает taker)
        currency_pays: input currency (то, что платит taker)
        leg_one_offers: офферы input → bridge (Offer или ledger JSON)
        leg_two_offers: офферы bridge → output (Offer или ledger JSON)
        issuer_gets: issuer output currency
        issuer_pays: issuer input currency
        config: конфигурация движка

    Raises:
        ContractViolation: невалидные валюты, issuer'ы или форма офферов
        jsonschema.ValidationError: raw оффер не проходит book_offer контракт
        pydantic.ValidationError: raw оффер не разбирается в Offer
    """

    def __init__(
        self,
        currency_gets: str,
        currency_pays: str,
        leg_one_offers: Iterable[OfferInput],
        leg_two_offers: Iterable[OfferInput],
        issuer_gets: Optional[str] = None,
        issuer_pays: Optional[str] = None,
        config: Optional[AutobridgeConfig] = None,
    ):
        self.config = config or AutobridgeConfig()

        self._currency_gets = self._validate_issued_currency(currency_gets)
        self._currency_pays = self._validate_issued_currency(currency_pays)
        self._issuer_gets = validate_account(issuer_gets) if issuer_gets is not None else None
        self._issuer_pays = validate_account(issuer_pays) if issuer_pays is not None else None

        self._contract_validator = BookOfferValidator() if self.config.validate_contracts else None

        # Рабочие копии принадлежат движку; объекты вызывающего не изменяются
        self._leg_one: List[_WorkingOffer] = [
            self._take_leg_one_offer(offer) for offer in leg_one_offers
        ]
        self._leg_two: List[_WorkingOffer] = [
            self._take_leg_two_offer(offer) for offer in leg_two_offers
        ]

        self._owner_funds_leftover = OwnerFundsLedger()
        self._calculated = False

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @property
    def leftover_ledger(self) -> OwnerFundsLedger:
        return self._owner_funds_leftover

    @property
    def leg_one_offers(self) -> Sequence[Offer]:
        """Снапшот текущего состояния рабочих leg-one офферов."""
        return tuple(entry.to_offer() for entry in self._leg_one)

    @property
    def leg_two_offers(self) -> Sequence[Offer]:
        return tuple(entry.to_offer() for entry in self._leg_two)

    def calculate(self) -> List[AutobridgedOffer]:
        """
        Упорядоченный (по quality) список autobridged офферов.

        Исчерпание любой из ног завершает проход; оставшиеся офферы
        другой ноги отбрасываются.
        """
        if self._calculated:
            logger.warning(
                "calculate() called again on the same AutobridgeCalculator; "
                "working offers were already consumed by the previous run"
            )
        self._calculated = True

        leg_one_pointer = 0
        leg_two_pointer = 0
        offers_autobridged: List[AutobridgedOffer] = []

        self._owner_funds_leftover.clear()

        while leg_one_pointer < len(self._leg_one) and leg_two_pointer < len(self._leg_two):
            leg_one = self._leg_one[leg_one_pointer]
            leg_two = self._leg_two[leg_two_pointer]
            leftover_funds = self._owner_funds_leftover.get(leg_one.account)
            init_funded: Optional[Amount] = None

            if leg_one.account == leg_two.account:
                init_funded = self._unclamp_leg_one_owner_funds(leg_one)
            elif not leg_one.is_fully_funded and not leftover_funds.is_zero():
                self._adjust_leg_one_funded_amount(leg_one)

            leg_one_taker_gets_funded = leg_one.taker_gets_funded
            leg_two_taker_pays_funded = leg_two.taker_pays_funded

            if leg_one_taker_gets_funded.is_zero():
                logger.debug("Leg one offer #%d unfunded, skipping", leg_one_pointer)
                leg_one_pointer += 1
                continue

            if leg_two_taker_pays_funded.is_zero():
                logger.debug("Leg two offer #%d unfunded, skipping", leg_two_pointer)
                if init_funded is not None:
                    # Leg one остаётся на следующую итерацию, возможно с другим владельцем
                    self._set_leg_one_taker_gets_funded(leg_one, init_funded)
                leg_two_pointer += 1
                continue

            leg_one_index, leg_two_index = leg_one_pointer, leg_two_pointer
            comparison = leg_one_taker_gets_funded.compare(leg_two_taker_pays_funded)

            if comparison > 0:
                autobridged_offer = self._autobridge_with_clamped_leg_one(
                    leg_one, leg_two, init_funded
                )
                branch = "clamp_leg_one"
                leg_two_pointer += 1
            elif comparison < 0:
                autobridged_offer = self._autobridge_with_clamped_leg_two(leg_one, leg_two)
                branch = "clamp_leg_two"
                leg_one_pointer += 1
            else:
                autobridged_offer = self._autobridge_without_clamps(leg_one, leg_two)
                branch = "no_clamp"
                leg_one_pointer += 1
                leg_two_pointer += 1

            logger.debug(
                "Autobridged offer (%s) from leg one #%d / leg two #%d: gets=%s pays=%s quality=%s",
                branch,
                leg_one_index,
                leg_two_index,
                autobridged_offer.taker_gets.value,
                autobridged_offer.taker_pays.value,
                autobridged_offer.quality,
            )
            offers_autobridged.append(autobridged_offer)

        logger.info(
            "Autobridge %s/%s: %d leg one, %d leg two offers -> %d autobridged",
            self._currency_pays,
            self._currency_gets,
            len(self._leg_one),
            len(self._leg_two),
            len(offers_autobridged),
        )
        return offers_autobridged

    def format_autobridged_offer(self, taker_gets: Amount, taker_pays: Amount) -> AutobridgedOffer:
        """
        Сборка autobridged оффера и синтетических значений (quality, BookDirectory).

        Args:
            taker_gets: сумма в output currency
            taker_pays: сумма в input currency

        Raises:
            InvalidAmount: Если суммы не Amount или не в ожидаемых валютах
        """
        if not isinstance(taker_gets, Amount):
            raise InvalidAmount("Autobridged taker gets is invalid")
        if not isinstance(taker_pays, Amount):
            raise InvalidAmount("Autobridged taker pays is invalid")

        currency_gets_hex = currency_to_hex(self._currency_gets)
        currency_pays_hex = currency_to_hex(self._currency_pays)

        if taker_gets.is_native() or currency_to_hex(taker_gets.currency) != currency_gets_hex:
            raise InvalidAmount(f"Autobridged taker gets must be {self._currency_gets}, got {taker_gets}")
        if taker_pays.is_native() or currency_to_hex(taker_pays.currency) != currency_pays_hex:
            raise InvalidAmount(f"Autobridged taker pays must be {self._currency_pays}, got {taker_pays}")

        quality = quality_from_amounts(taker_pays, taker_gets)
        taker_gets_value = taker_gets.to_text()
        taker_pays_value = taker_pays.to_text()

        return AutobridgedOffer(
            taker_gets=IssuedValue(
                value=taker_gets_value,
                currency=currency_gets_hex,
                issuer=self._issuer_gets if self._issuer_gets is not None else taker_gets.issuer,
            ),
            taker_pays=IssuedValue(
                value=taker_pays_value,
                currency=currency_pays_hex,
                issuer=self._issuer_pays if self._issuer_pays is not None else taker_pays.issuer,
            ),
            quality=decimal_to_text(quality),
            taker_gets_funded=taker_gets_value,
            taker_pays_funded=taker_pays_value,
            autobridged=True,
            book_directory=quality_to_hex(quality),
        )

    # -------------------------------------------------------------------------
    # Clamp cases
    # -------------------------------------------------------------------------

    def _autobridge_with_clamped_leg_one(
        self,
        leg_one: _WorkingOffer,
        leg_two: _WorkingOffer,
        init_funded: Optional[Amount],
    ) -> AutobridgedOffer:
        """Leg one даёт больше bridge, чем нужно leg two: clamp по leg two."""
        leg_one_taker_gets_funded = leg_one.taker_gets_funded
        leg_two_taker_pays_funded = leg_two.taker_pays_funded

        autobridged_taker_gets = leg_two.taker_gets_funded
        autobridged_taker_pays = leg_two_taker_pays_funded.multiply(
            leg_one.quality, leg_one.taker_pays.currency, leg_one.taker_pays.issuer
        )

        if init_funded is not None:
            self._set_leg_one_taker_gets(leg_one, leg_one.taker_gets - leg_two_taker_pays_funded)
            self._clamp_leg_one_owner_funds(leg_one, init_funded)
        else:
            # Leg one поглощён не полностью: номинал и funded уменьшаются на p2,
            # иначе последующий unclamp вернул бы уже проданную часть
            self._set_leg_one_taker_gets(leg_one, leg_one.taker_gets - leg_two_taker_pays_funded)
            self._set_leg_one_taker_gets_funded(
                leg_one, leg_one_taker_gets_funded - leg_two_taker_pays_funded
            )

        return self.format_autobridged_offer(autobridged_taker_gets, autobridged_taker_pays)

    def _autobridge_with_clamped_leg_two(
        self,
        leg_one: _WorkingOffer,
        leg_two: _WorkingOffer,
    ) -> AutobridgedOffer:
        """Leg two принимает больше bridge, чем даёт leg one: clamp по leg one."""
        leg_one_taker_gets_funded = leg_one.taker_gets_funded

        autobridged_taker_gets = leg_one_taker_gets_funded.divide(
            leg_two.quality, leg_two.taker_gets.currency, leg_two.taker_gets.issuer
        )
        autobridged_taker_pays = leg_one.taker_pays_funded

        # Leg two поглощён не полностью
        leg_two.taker_gets_funded = leg_two.taker_gets_funded - autobridged_taker_gets
        leg_two.taker_pays_funded = leg_two.taker_pays_funded - leg_one_taker_gets_funded

        return self.format_autobridged_offer(autobridged_taker_gets, autobridged_taker_pays)

    def _autobridge_without_clamps(
        self,
        leg_one: _WorkingOffer,
        leg_two: _WorkingOffer,
    ) -> AutobridgedOffer:
        return self.format_autobridged_offer(leg_two.taker_gets_funded, leg_one.taker_pays_funded)

    # -------------------------------------------------------------------------
    # Funding clamp (leg one)
    # -------------------------------------------------------------------------

    def _unclamp_leg_one_owner_funds(self, leg_one: _WorkingOffer) -> Amount:
        """
        Снятие funding clamp: владелец обеих ног, поток leg one → leg two
        не покидает его аккаунт.

        Returns:
            funded сумма до снятия clamp (для последующего clamp)
        """
        init_funded = leg_one.taker_gets_funded
        self._set_leg_one_taker_gets_funded(leg_one, leg_one.taker_gets)
        return init_funded

    def _clamp_leg_one_owner_funds(self, leg_one: _WorkingOffer, init_funded: Amount) -> None:
        """
        Повторное применение clamp после итерации с тем же владельцем.

        Если уменьшенный номинал всё ещё больше исходного funded — funded
        восстанавливается. Иначе излишек funded уходит в leftover владельца.
        """
        taker_gets = leg_one.taker_gets

        if taker_gets > init_funded:
            self._set_leg_one_taker_gets_funded(leg_one, init_funded)
        else:
            self._set_leg_one_taker_gets_funded(leg_one, taker_gets)
            self._owner_funds_leftover.add(leg_one.account, init_funded - taker_gets)

    def _adjust_leg_one_funded_amount(self, leg_one: _WorkingOffer) -> None:
        """Top-up не полностью funded leg-one оффера из leftover владельца."""
        if leg_one.is_fully_funded:
            raise InvalidOffer("Leg one offer cannot be fully funded")

        funded_sum = leg_one.taker_gets_funded + self._owner_funds_leftover.get(leg_one.account)

        if funded_sum >= leg_one.taker_gets:
            self._set_leg_one_taker_gets_funded(leg_one, leg_one.taker_gets)
            self._owner_funds_leftover.set(leg_one.account, funded_sum - leg_one.taker_gets)
        else:
            self._set_leg_one_taker_gets_funded(leg_one, funded_sum)
            self._owner_funds_leftover.reset(leg_one.account)

        logger.debug(
            "Leg one offer of %s topped up to %s (nominal %s)",
            leg_one.account,
            leg_one.taker_gets_funded.to_text(),
            leg_one.taker_gets.to_text(),
        )

    def _set_leg_one_taker_gets_funded(self, leg_one: _WorkingOffer, taker_gets_funded: Amount) -> None:
        """
        Funded taker_gets + производный taker_pays_funded.

        is_fully_funded только выставляется в True (funded == номинал) и
        никогда не сбрасывается: полностью funded оффер не участвует в top-up.
        """
        if not isinstance(taker_gets_funded, Amount) or not taker_gets_funded.is_native():
            raise InvalidAmount(f"Taker gets funded is invalid: {taker_gets_funded!r}")

        leg_one.taker_gets_funded = taker_gets_funded
        leg_one.taker_pays_funded = taker_gets_funded.multiply(
            leg_one.quality, leg_one.taker_pays.currency, leg_one.taker_pays.issuer
        )
        if taker_gets_funded.compare(leg_one.taker_gets) == 0:
            leg_one.is_fully_funded = True

    def _set_leg_one_taker_gets(self, leg_one: _WorkingOffer, taker_gets: Amount) -> None:
        """Номинальный taker_gets; taker_pays пересчитывается по исходной quality."""
        if not isinstance(taker_gets, Amount) or not taker_gets.is_native():
            raise InvalidAmount(f"Taker gets is invalid: {taker_gets!r}")

        leg_one.taker_gets = taker_gets
        leg_one.taker_pays = taker_gets.multiply(
            leg_one.quality, leg_one.taker_pays.currency, leg_one.taker_pays.issuer
        )

    # -------------------------------------------------------------------------
    # Input ownership
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_issued_currency(code: str) -> str:
        validate_currency(code)
        if is_native_currency(code):
            raise ContractViolation(f"Autobridged currency must be issued, got {code!r}")
        return code

    def _parse_offer(self, offer: OfferInput) -> Offer:
        if isinstance(offer, Offer):
            return offer
        if isinstance(offer, Mapping):
            if self._contract_validator is not None:
                try:
                    self._contract_validator.validate(dict(offer))
                except ValidationError:
                    logger.debug(
                        "Raw offer rejected by %s contract: %s",
                        self._contract_validator.schema_name,
                        "; ".join(self._contract_validator.describe_errors(dict(offer))),
                    )
                    raise
            return Offer.model_validate(offer)
        raise InvalidOffer(f"Offer must be Offer or mapping, got {type(offer).__name__}")

    def _matches(self, amount: Amount, currency: str, issuer: Optional[str]) -> bool:
        if currency_to_hex(amount.currency) != currency_to_hex(currency):
            return False
        return issuer is None or amount.issuer == issuer

    def _take_leg_one_offer(self, offer: OfferInput) -> _WorkingOffer:
        parsed = self._parse_offer(offer)

        if not parsed.taker_gets.is_native() or parsed.taker_pays.is_native():
            raise InvalidOffer("Leg one offer is invalid: expected native TakerGets and issued TakerPays")
        if self.config.strict_leg_shape and not self._matches(
            parsed.taker_pays, self._currency_pays, self._issuer_pays
        ):
            raise InvalidOffer(
                f"Leg one offer TakerPays {parsed.taker_pays} does not match "
                f"{self._currency_pays}/{self._issuer_pays or '*'}"
            )

        return _WorkingOffer.from_offer(parsed)

    def _take_leg_two_offer(self, offer: OfferInput) -> _WorkingOffer:
        parsed = self._parse_offer(offer)

        if parsed.taker_gets.is_native() or not parsed.taker_pays.is_native():
            raise InvalidOffer("Leg two offer is invalid: expected issued TakerGets and native TakerPays")
        if self.config.strict_leg_shape and not self._matches(
            parsed.taker_gets, self._currency_gets, self._issuer_gets
        ):
            raise InvalidOffer(
                f"Leg two offer TakerGets {parsed.taker_gets} does not match "
                f"{self._currency_gets}/{self._issuer_gets or '*'}"
            )

        return _WorkingOffer.from_offer(parsed)
