"""Combinator — lists a tenant's discount opportunities and ranks stacked combinations.

Only five fixed scenario templates are evaluated. Discounts inside a scenario are
added together and capped at the tenant's ceiling; there is no search over every
permutation of categories.
"""

import logging

from locai.data.currency import format_price
from locai.services.negotiation.config import NegotiationSettings
from locai.services.negotiation.message_composer import compose_scenario_pitch

logger = logging.getLogger(__name__)

CATEGORY_KEYS = ("paymentMethod", "extendedStay", "earlyBooking", "lastMinute", "bookNow")


def build_opportunities(settings: NegotiationSettings) -> dict:
    """Describe every discount category the tenant offers, in the wire shape."""
    active = settings.allow_ai_negotiation

    extended_tiers = sorted(settings.extended_stay_rules, key=lambda r: r.min_days)
    early_tiers = sorted(settings.early_booking_rules, key=lambda r: r.days_in_advance)
    # Widest window first: the entry-level last-minute deal
    last_minute_tiers = sorted(settings.last_minute_rules, key=lambda r: -r.days_before_check_in)

    pix_enabled = active and settings.pix_discount_enabled
    cash_enabled = active and settings.cash_discount_enabled
    card_enabled = active and settings.installment_enabled

    return {
        "paymentMethod": {
            "enabled": pix_enabled or cash_enabled or card_enabled,
            "options": [
                {
                    "method": "pix",
                    "enabled": pix_enabled,
                    "discount": settings.pix_discount_percentage if pix_enabled else 0,
                    "label": "PIX",
                    "description": "Pagamento à vista via PIX",
                    "recommended": True,
                    "conditions": "Pagamento imediato",
                },
                {
                    "method": "cash",
                    "enabled": cash_enabled,
                    "discount": settings.cash_discount_percentage if cash_enabled else 0,
                    "label": "Dinheiro",
                    "description": "Pagamento em dinheiro",
                    "recommended": False,
                    "conditions": "Pagamento no check-in",
                },
                {
                    "method": "card",
                    "enabled": card_enabled,
                    "discount": 0,
                    "label": "Cartão de Crédito",
                    "description": f"Parcelamento em até {settings.max_installments}x sem juros",
                    "recommended": False,
                    "conditions": f"Parcela mínima de {format_price(settings.min_installment_value)}",
                },
            ],
        },
        "extendedStay": {
            "enabled": active and settings.extended_stay_discount_enabled and bool(extended_tiers),
            "tiers": [
                {
                    "minNights": r.min_days,
                    "discount": r.discount_percentage,
                    "label": f"{r.min_days}+ noites",
                    "description": f"Desconto para estadias de {r.min_days} noites ou mais",
                }
                for r in extended_tiers
            ],
        },
        "earlyBooking": {
            "enabled": active and settings.early_booking_discount_enabled and bool(early_tiers),
            "tiers": [
                {
                    "daysInAdvance": r.days_in_advance,
                    "discount": r.discount_percentage,
                    "label": f"{r.days_in_advance}+ dias de antecedência",
                    "description": f"Reserve com {r.days_in_advance} dias de antecedência",
                }
                for r in early_tiers
            ],
        },
        "lastMinute": {
            "enabled": active and settings.last_minute_discount_enabled and bool(last_minute_tiers),
            "tiers": [
                {
                    "daysUntilCheckIn": r.days_before_check_in,
                    "discount": r.discount_percentage,
                    "label": f"Check-in em até {r.days_before_check_in} dias",
                    "description": f"Check-in em até {r.days_before_check_in} dias",
                }
                for r in last_minute_tiers
            ],
        },
        "bookNow": {
            "enabled": active and settings.book_now_discount_enabled,
            "discount": settings.book_now_discount_percentage,
            "timeLimitHours": settings.book_now_time_limit,
            "label": "Fechar Agora",
            "description": "Desconto adicional para confirmar imediatamente",
            "conditions": f"Cliente deve aceitar a proposta em até {settings.book_now_time_limit} horas",
        },
        "limits": {
            "maxTotalDiscount": settings.max_discount_percentage,
            "maxStackedDiscounts": settings.max_stacked_discounts,
            "discountStackingRules": "additive",
            "minPriceAfterDiscount": settings.min_price_after_discount,
        },
    }


def _pix_option(opportunities: dict) -> dict | None:
    option = next(o for o in opportunities["paymentMethod"]["options"] if o["method"] == "pix")
    return option if option["enabled"] else None


def _combination(
    scenario: str,
    description: str,
    discounts: list[dict],
    limits: dict,
    recommended: bool,
    **pitch_values,
) -> dict | None:
    if len(discounts) > limits["maxStackedDiscounts"]:
        return None

    raw = sum(d["value"] for d in discounts)
    total = min(raw, limits["maxTotalDiscount"])
    return {
        "scenario": scenario,
        "description": description,
        "discounts": discounts,
        "rawDiscount": raw,
        "totalDiscount": total,
        "capped": total < raw,
        "recommended": recommended,
        "pitch": compose_scenario_pitch(scenario, total, **pitch_values),
    }


def calculate_best_combinations(opportunities: dict) -> list[dict]:
    """Evaluate the fixed scenarios and rank them by total discount, highest first.

    PIX is the base of every scenario; a scenario whose categories are not all
    enabled is left out rather than zeroed.
    """
    pix = _pix_option(opportunities)
    if pix is None:
        return []

    limits = opportunities["limits"]
    extended = opportunities["extendedStay"]
    early = opportunities["earlyBooking"]
    last_minute = opportunities["lastMinute"]
    book_now = opportunities["bookNow"]
    pix_discount = {"type": "PIX", "value": pix["discount"]}

    candidates = []

    if book_now["enabled"]:
        candidates.append(_combination(
            "immediate_booking",
            "Cliente quer fechar agora",
            [pix_discount, {"type": "Book Now", "value": book_now["discount"]}],
            limits,
            recommended=True,
        ))

    if extended["enabled"]:
        tier = extended["tiers"][0]
        candidates.append(_combination(
            "extended_stay",
            "Cliente pode estender estadia",
            [pix_discount, {"type": f"Extended Stay ({tier['minNights']}+ dias)", "value": tier["discount"]}],
            limits,
            recommended=True,
            min_nights=tier["minNights"],
        ))

    if early["enabled"]:
        tier = early["tiers"][0]
        candidates.append(_combination(
            "early_booking",
            "Cliente reservando com antecedência",
            [pix_discount, {"type": f"Early Booking ({tier['daysInAdvance']}+ dias)", "value": tier["discount"]}],
            limits,
            recommended=True,
            days_in_advance=tier["daysInAdvance"],
        ))

    if last_minute["enabled"]:
        tier = last_minute["tiers"][0]
        candidates.append(_combination(
            "last_minute",
            "Check-in próximo",
            [pix_discount, {"type": "Last Minute", "value": tier["discount"]}],
            limits,
            recommended=False,
        ))

    if extended["enabled"] and book_now["enabled"]:
        tier = extended["tiers"][0]
        candidates.append(_combination(
            "maximum_discount",
            "Desconto máximo possível",
            [
                pix_discount,
                {"type": "Extended Stay", "value": tier["discount"]},
                {"type": "Book Now", "value": book_now["discount"]},
            ],
            limits,
            recommended=True,
            min_nights=tier["minNights"],
        ))

    combinations = [c for c in candidates if c is not None]
    skipped = len(candidates) - len(combinations)
    if skipped:
        logger.debug(f"{skipped} scenario(s) exceed maxStackedDiscounts={limits['maxStackedDiscounts']}")

    # Stable sort keeps template order on ties
    return sorted(combinations, key=lambda c: c["totalDiscount"], reverse=True)


def summarize(opportunities: dict, combinations: list[dict], negotiation_enabled: bool) -> dict:
    enabled_categories = sum(1 for key in CATEGORY_KEYS if opportunities[key]["enabled"])
    return {
        "totalDiscountTypes": enabled_categories,
        "maxPossibleDiscount": opportunities["limits"]["maxTotalDiscount"],
        "recommendedApproach": (
            combinations[0]["description"] if combinations else "Apresentar o valor cheio sem desconto"
        ),
        "negotiationEnabled": negotiation_enabled,
    }
