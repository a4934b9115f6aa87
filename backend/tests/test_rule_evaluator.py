"""
Tests for strategy selection, the discount ceiling and the minimum-price floor.
"""

from datetime import date, timedelta

import pytest

from locai.errors import ComputationError
from locai.services.negotiation.config import (
    EarlyBookingRule,
    ExtendedStayRule,
    LastMinuteRule,
    NegotiationSettings,
)
from locai.services.negotiation.rule_evaluator import (
    NEGOTIATION_DISABLED_REASON,
    DiscountType,
    Strategy,
    evaluate_discount,
)


class TestStrategySelection:
    """Which strategy wins for a given request."""

    def test_pix_discount_applied(self, make_criteria):
        """PIX at 10% on R$ 1.000 leaves R$ 900."""
        settings = NegotiationSettings(pix_discount_percentage=10.0, max_discount_percentage=30.0)
        result = evaluate_discount(make_criteria(payment_method="pix"), settings)

        assert result.type == DiscountType.PAYMENT_METHOD
        assert result.strategy == Strategy.PIX
        assert result.percentage == 10.0
        assert result.amount == 100.0
        assert result.final_price == 900.0
        assert result.original_price == 1000.0
        assert result.conditions == ("Pagamento integral via PIX",)

    def test_pix_beats_extended_stay_and_book_now(self, make_criteria):
        """Fixed precedence: PIX wins even when other strategies would pay more."""
        settings = NegotiationSettings(
            pix_discount_percentage=2.0,
            extended_stay_rules=(ExtendedStayRule(7, 10.0),),
            book_now_discount_percentage=8.0,
            max_discount_percentage=30.0,
        )
        criteria = make_criteria(payment_method="pix", extend_stay=7, book_now=True)

        result = evaluate_discount(criteria, settings)
        assert result.strategy == Strategy.PIX
        assert result.percentage == 2.0

    def test_extended_stay_uses_highest_qualifying_tier(self, make_criteria):
        """3 nights + 7 extra = 10 days: qualifies for the 7-day tier only."""
        settings = NegotiationSettings(
            extended_stay_rules=(ExtendedStayRule(7, 5.0), ExtendedStayRule(14, 10.0)),
            max_discount_percentage=30.0,
        )
        result = evaluate_discount(make_criteria(extend_stay=7), settings)

        assert result.type == DiscountType.EXTENDED_STAY
        assert result.percentage == 5.0
        assert result.amount == 50.0
        assert result.final_price == 950.0
        assert result.reason == "Desconto especial para 10 dias"

    def test_extended_stay_without_qualifying_tier_falls_through(self, make_criteria):
        """A short extension with no matching tier lets book-now take over."""
        settings = NegotiationSettings(book_now_discount_percentage=3.0)
        result = evaluate_discount(make_criteria(extend_stay=1, book_now=True), settings)

        assert result.strategy == Strategy.BOOK_NOW
        assert result.percentage == 3.0

    def test_cash_discount_when_enabled(self, make_criteria):
        settings = NegotiationSettings(cash_discount_enabled=True, cash_discount_percentage=7.0)
        result = evaluate_discount(make_criteria(payment_method="cash"), settings)

        assert result.strategy == Strategy.CASH
        assert result.type == DiscountType.PAYMENT_METHOD
        assert result.final_price == 930.0

    def test_cash_disabled_yields_no_discount(self, make_criteria):
        settings = NegotiationSettings(cash_discount_enabled=False)
        result = evaluate_discount(make_criteria(payment_method="cash"), settings)

        assert result.strategy == Strategy.NONE
        assert result.final_price == 1000.0

    def test_card_installment_is_zero_percent(self, make_criteria):
        result = evaluate_discount(make_criteria(payment_method="card"), NegotiationSettings())

        assert result.type == DiscountType.INSTALLMENT
        assert result.percentage == 0.0
        assert result.amount == 0.0
        assert result.final_price == 1000.0
        assert "Até 10 parcelas sem juros" in result.conditions
        assert "Parcela mínima de R$ 100,00" in result.conditions

    def test_negotiation_disabled_returns_none(self, make_criteria):
        settings = NegotiationSettings(allow_ai_negotiation=False, pix_discount_percentage=10.0)
        result = evaluate_discount(make_criteria(payment_method="pix", book_now=True), settings)

        assert result.type == DiscountType.NONE
        assert result.percentage == 0.0
        assert result.final_price == 1000.0
        assert result.reason == NEGOTIATION_DISABLED_REASON

    def test_no_matching_strategy(self, make_criteria):
        result = evaluate_discount(make_criteria(), NegotiationSettings())

        assert result.strategy == Strategy.NONE
        assert result.amount == 0.0
        assert result.conditions == ()


class TestBookingWindowCategories:
    """Early-booking and last-minute tiers feed the opportunity combinations only."""

    def test_early_booking_tenant_gets_no_discount_on_bare_request(self, make_criteria):
        settings = NegotiationSettings(
            early_booking_discount_enabled=True,
            early_booking_rules=(EarlyBookingRule(30, 8.0),),
        )
        result = evaluate_discount(make_criteria(), settings)

        assert result.strategy == Strategy.NONE
        assert result.percentage == 0.0
        assert result.final_price == 1000.0

    def test_last_minute_tenant_gets_no_discount_near_check_in(self, make_criteria):
        settings = NegotiationSettings(
            last_minute_discount_enabled=True,
            last_minute_rules=(LastMinuteRule(7, 10.0),),
        )
        near = make_criteria(check_in=date.today(), check_out=date.today() + timedelta(days=2))

        assert evaluate_discount(near, settings).type == DiscountType.NONE

    def test_card_still_wins_with_window_categories_enabled(self, make_criteria):
        settings = NegotiationSettings(
            early_booking_discount_enabled=True,
            last_minute_discount_enabled=True,
        )
        result = evaluate_discount(make_criteria(payment_method="card"), settings)

        assert result.strategy == Strategy.CARD_INSTALLMENT
        assert result.percentage == 0.0


class TestLimits:
    """Ceiling and floor adjustments."""

    def test_percentage_clamped_to_maximum(self, make_criteria):
        settings = NegotiationSettings(pix_discount_percentage=40.0, max_discount_percentage=30.0)
        result = evaluate_discount(make_criteria(payment_method="pix"), settings)

        assert result.percentage == 30.0
        assert result.final_price == 700.0
        assert result.reason.endswith("(limitado a 30%)")

    def test_floor_raises_final_price(self, make_criteria):
        """PIX 10% would give R$ 900 but the floor is R$ 950."""
        settings = NegotiationSettings(
            pix_discount_percentage=10.0,
            max_discount_percentage=30.0,
            min_price_after_discount=950.0,
        )
        result = evaluate_discount(make_criteria(payment_method="pix"), settings)

        assert result.final_price == 950.0
        assert result.amount == 50.0
        assert result.percentage == 5.0
        assert "ajustado ao preço mínimo permitido" in result.reason

    def test_floor_above_original_price_removes_discount(self, make_criteria):
        settings = NegotiationSettings(pix_discount_percentage=10.0, min_price_after_discount=950.0)
        result = evaluate_discount(make_criteria(payment_method="pix", total_price=800.0), settings)

        assert result.final_price == 800.0
        assert result.amount == 0.0
        assert result.percentage == 0.0

    @pytest.mark.parametrize("payment_method", ["pix", "cash", "card", None])
    def test_result_stays_within_bounds(self, make_criteria, payment_method):
        settings = NegotiationSettings(
            pix_discount_percentage=50.0,
            cash_discount_enabled=True,
            cash_discount_percentage=25.0,
            max_discount_percentage=20.0,
            min_price_after_discount=850.0,
        )
        result = evaluate_discount(make_criteria(payment_method=payment_method, book_now=True), settings)

        assert 0 <= result.percentage <= settings.max_discount_percentage
        assert result.final_price >= settings.min_price_after_discount
        assert result.final_price == pytest.approx(result.original_price - result.amount)


class TestEvaluationContract:

    def test_non_positive_price_raises(self, make_criteria):
        with pytest.raises(ComputationError):
            evaluate_discount(make_criteria(total_price=0.0), NegotiationSettings())

    def test_same_input_same_result(self, make_criteria):
        settings = NegotiationSettings(pix_discount_percentage=10.0)
        criteria = make_criteria(payment_method="pix")

        assert evaluate_discount(criteria, settings) == evaluate_discount(criteria, settings)

    def test_to_dict_uses_camel_case(self, make_criteria):
        data = evaluate_discount(make_criteria(payment_method="pix"), NegotiationSettings()).to_dict()

        assert data["type"] == "payment_method"
        assert data["originalPrice"] == 1000.0
        assert data["finalPrice"] == 950.0
        assert data["conditions"] == ["Pagamento integral via PIX"]

    def test_to_dict_omits_empty_conditions(self, make_criteria):
        data = evaluate_discount(make_criteria(), NegotiationSettings()).to_dict()
        assert "conditions" not in data
