"""Discount engine — the two negotiation operations exposed to the booking agent."""

import logging
from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from locai.services.negotiation.combinator import (
    build_opportunities,
    calculate_best_combinations,
    summarize,
)
from locai.services.negotiation.message_composer import MessageContext, compose_discount_message
from locai.services.negotiation.rule_evaluator import DiscountCriteria, DiscountResult, evaluate_discount
from locai.services.negotiation.settings_loader import mask_tenant_id, settings_loader
from locai.services.negotiation.tip_generator import generate_negotiation_tips

logger = logging.getLogger(__name__)


class DiscountEngine:
    """Reads tenant settings once per call; everything after that is pure computation."""

    async def calculate_discount(
        self,
        db: AsyncSession,
        tenant_id: str,
        criteria: DiscountCriteria,
    ) -> DiscountResult:
        settings = await settings_loader.load(db, tenant_id)

        result = evaluate_discount(criteria, settings)
        message = compose_discount_message(
            MessageContext(
                strategy=result.strategy.value,
                percentage=result.percentage,
                original_price=result.original_price,
                final_price=result.final_price,
                reason=result.reason,
                property_name=criteria.property_name,
            ),
            settings,
        )

        logger.info(
            f"Discount for tenant {mask_tenant_id(tenant_id)}: {result.strategy.value} "
            f"{result.percentage:.2f}% → {result.final_price:.2f} "
            f"(lead={criteria.lead_temperature or 'unknown'})"
        )
        return replace(result, message=message)

    async def check_opportunities(self, db: AsyncSession, tenant_id: str) -> dict:
        settings = await settings_loader.load(db, tenant_id)

        opportunities = build_opportunities(settings)
        combinations = calculate_best_combinations(opportunities)
        tips = generate_negotiation_tips(opportunities, settings)

        logger.info(
            f"Opportunities for tenant {mask_tenant_id(tenant_id)}: "
            f"{len(combinations)} combination(s), {len(tips)} tip(s)"
        )
        return {
            "opportunities": opportunities,
            "bestCombinations": combinations,
            "negotiationTips": tips,
            "summary": summarize(opportunities, combinations, settings.allow_ai_negotiation),
        }


discount_engine = DiscountEngine()
