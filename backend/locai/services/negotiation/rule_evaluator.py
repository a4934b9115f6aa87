"""Rule evaluator — picks the single discount strategy for a booking request.

Strategies are tried in a fixed order and the first one that matches wins, even
when a later strategy would pay more.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from locai.data.currency import format_price
from locai.errors import ComputationError
from locai.services.negotiation.config import NegotiationSettings

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    PIX = "pix"
    EXTENDED_STAY = "extended_stay"
    BOOK_NOW = "book_now"
    CASH = "cash"
    CARD_INSTALLMENT = "card_installment"
    NONE = "none"


class DiscountType(str, Enum):
    PAYMENT_METHOD = "payment_method"
    EXTENDED_STAY = "extended_stay"
    BOOK_NOW = "book_now"
    INSTALLMENT = "installment"
    NONE = "none"


@dataclass(frozen=True)
class DiscountCriteria:
    property_name: str
    check_in: date
    check_out: date
    total_price: float
    client_phone: str | None = None
    payment_method: str | None = None  # pix | card | cash
    book_now: bool = False
    extend_stay: int = 0  # extra nights
    lead_temperature: str | None = None  # cold | warm | hot

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


@dataclass(frozen=True)
class StrategyMatch:
    strategy: Strategy
    discount_type: DiscountType
    percentage: float
    reason: str
    conditions: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiscountResult:
    strategy: Strategy
    type: DiscountType
    percentage: float
    amount: float
    original_price: float
    final_price: float
    reason: str
    message: str = ""
    conditions: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        data = {
            "type": self.type.value,
            "strategy": self.strategy.value,
            "percentage": self.percentage,
            "amount": self.amount,
            "originalPrice": self.original_price,
            "finalPrice": self.final_price,
            "reason": self.reason,
            "message": self.message,
        }
        if self.conditions:
            data["conditions"] = list(self.conditions)
        return data


NEGOTIATION_DISABLED_REASON = "Negociação não disponível no momento"


class DiscountStrategy(ABC):
    strategy: Strategy

    @abstractmethod
    def match(
        self,
        criteria: DiscountCriteria,
        settings: NegotiationSettings,
    ) -> StrategyMatch | None:
        ...


class PixPaymentStrategy(DiscountStrategy):
    strategy = Strategy.PIX

    def match(self, criteria, settings) -> StrategyMatch | None:
        if criteria.payment_method != "pix" or not settings.pix_discount_enabled:
            return None
        return StrategyMatch(
            strategy=self.strategy,
            discount_type=DiscountType.PAYMENT_METHOD,
            percentage=settings.pix_discount_percentage,
            reason="Desconto especial para pagamento à vista no PIX",
            conditions=("Pagamento integral via PIX",),
        )


class ExtendedStayStrategy(DiscountStrategy):
    strategy = Strategy.EXTENDED_STAY

    def match(self, criteria, settings) -> StrategyMatch | None:
        if criteria.extend_stay <= 0 or not settings.extended_stay_discount_enabled:
            return None

        total_days = criteria.nights + criteria.extend_stay
        # Highest discount among the tiers the stay qualifies for, not the highest threshold
        applicable = [r for r in settings.extended_stay_rules if total_days >= r.min_days]
        if not applicable:
            return None
        best = max(applicable, key=lambda r: r.discount_percentage)

        return StrategyMatch(
            strategy=self.strategy,
            discount_type=DiscountType.EXTENDED_STAY,
            percentage=best.discount_percentage,
            reason=f"Desconto especial para {total_days} dias",
            conditions=(
                f"Reservar {total_days} dias no total",
                f"{criteria.extend_stay} dias extras com desconto",
            ),
        )


class BookNowStrategy(DiscountStrategy):
    strategy = Strategy.BOOK_NOW

    def match(self, criteria, settings) -> StrategyMatch | None:
        if not criteria.book_now or not settings.book_now_discount_enabled:
            return None
        return StrategyMatch(
            strategy=self.strategy,
            discount_type=DiscountType.BOOK_NOW,
            percentage=settings.book_now_discount_percentage,
            reason="Desconto exclusivo para fechar a reserva agora",
            conditions=(f"Confirmar reserva nas próximas {settings.book_now_time_limit} horas",),
        )


class CashPaymentStrategy(DiscountStrategy):
    strategy = Strategy.CASH

    def match(self, criteria, settings) -> StrategyMatch | None:
        if criteria.payment_method != "cash" or not settings.cash_discount_enabled:
            return None
        return StrategyMatch(
            strategy=self.strategy,
            discount_type=DiscountType.PAYMENT_METHOD,
            percentage=settings.cash_discount_percentage,
            reason="Desconto especial para pagamento em dinheiro",
            conditions=("Pagamento integral em dinheiro",),
        )


class CardInstallmentStrategy(DiscountStrategy):
    """Financing terms only — always a zero percent discount."""

    strategy = Strategy.CARD_INSTALLMENT

    def match(self, criteria, settings) -> StrategyMatch | None:
        if criteria.payment_method != "card" or not settings.installment_enabled:
            return None
        return StrategyMatch(
            strategy=self.strategy,
            discount_type=DiscountType.INSTALLMENT,
            percentage=0.0,
            reason=f"Parcelamento em até {settings.max_installments}x sem juros no cartão",
            conditions=(
                "Pagamento via cartão de crédito",
                f"Até {settings.max_installments} parcelas sem juros",
                f"Parcela mínima de {format_price(settings.min_installment_value)}",
            ),
        )


# First match wins.
STRATEGY_ORDER: tuple[DiscountStrategy, ...] = (
    PixPaymentStrategy(),
    ExtendedStayStrategy(),
    BookNowStrategy(),
    CashPaymentStrategy(),
    CardInstallmentStrategy(),
)

NO_DISCOUNT = StrategyMatch(
    strategy=Strategy.NONE,
    discount_type=DiscountType.NONE,
    percentage=0.0,
    reason="",
)


def select_strategy(
    criteria: DiscountCriteria,
    settings: NegotiationSettings,
) -> StrategyMatch:
    if not settings.allow_ai_negotiation:
        return StrategyMatch(
            strategy=Strategy.NONE,
            discount_type=DiscountType.NONE,
            percentage=0.0,
            reason=NEGOTIATION_DISABLED_REASON,
        )

    for candidate in STRATEGY_ORDER:
        matched = candidate.match(criteria, settings)
        if matched is not None:
            return matched
    return NO_DISCOUNT


def evaluate_discount(
    criteria: DiscountCriteria,
    settings: NegotiationSettings,
) -> DiscountResult:
    """Select a strategy and apply the tenant's ceiling and price floor.

    The returned result has an empty ``message``; the composer fills it in.
    """
    original_price = criteria.total_price
    if original_price <= 0:
        raise ComputationError(
            "Discount requested for a non-positive price",
            details=f"totalPrice={original_price}",
        )

    matched = select_strategy(criteria, settings)
    logger.debug(f"Discount strategy selected: {matched.strategy.value} ({matched.percentage:g}%)")
    percentage = matched.percentage
    reason = matched.reason

    if percentage > settings.max_discount_percentage:
        percentage = settings.max_discount_percentage
        reason += f" (limitado a {settings.max_discount_percentage:g}%)"

    amount = original_price * percentage / 100
    final_price = original_price - amount

    floor = settings.min_price_after_discount
    if floor > 0 and final_price < floor:
        if original_price <= floor:
            # Already at or below the floor: never raise the price, just drop the discount
            final_price = original_price
        else:
            final_price = floor
        amount = original_price - final_price
        percentage = amount * 100 / original_price
        reason += " (ajustado ao preço mínimo permitido)"

    return DiscountResult(
        strategy=matched.strategy,
        type=matched.discount_type,
        percentage=percentage,
        amount=amount,
        original_price=original_price,
        final_price=final_price,
        reason=reason,
        conditions=matched.conditions,
    )
