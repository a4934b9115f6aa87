"""AI function router — dynamic discount and discount-opportunity lookups for the booking agent."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from locai.database import get_db
from locai.errors import NegotiationError, ValidationError
from locai.schemas.negotiation import DiscountRequest, OpportunitiesRequest
from locai.services.negotiation.discount_engine import discount_engine
from locai.services.negotiation.rule_evaluator import DiscountCriteria
from locai.services.negotiation.settings_loader import mask_tenant_id

logger = logging.getLogger(__name__)

router = APIRouter()


def _meta(request: Request, started: float) -> dict:
    return {
        "requestId": request.state.request_id,
        "processingTime": round((time.perf_counter() - started) * 1000),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _validate(req: DiscountRequest):
    if not req.tenant_id:
        raise ValidationError("TenantId is required")
    if req.total_price <= 0:
        raise ValidationError("totalPrice must be greater than zero", details=f"totalPrice={req.total_price}")
    if req.check_out <= req.check_in:
        raise ValidationError("checkOut must be after checkIn")


@router.post("/calculate-dynamic-discount")
async def calculate_dynamic_discount(
    req: DiscountRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Pick the single discount strategy for a booking request and compose the pitch."""
    started = time.perf_counter()
    request_id = request.state.request_id
    logger.info(
        f"[{request_id}] Calculating discount for tenant {mask_tenant_id(req.tenant_id)} "
        f"property={req.property_name!r} payment={req.payment_method} extend={req.extend_stay}"
    )

    _validate(req)

    criteria = DiscountCriteria(
        property_name=req.property_name,
        check_in=req.check_in,
        check_out=req.check_out,
        total_price=req.total_price,
        client_phone=req.client_phone,
        payment_method=req.payment_method,
        book_now=req.book_now,
        extend_stay=req.extend_stay,
        lead_temperature=req.lead_temperature,
    )

    try:
        result = await discount_engine.calculate_discount(db, req.tenant_id, criteria)
    except NegotiationError:
        raise
    except Exception as e:
        logger.exception(f"[{request_id}] Discount calculation failed")
        raise NegotiationError("Failed to calculate discount", details=str(e)) from e

    meta = _meta(request, started)
    logger.info(f"[{request_id}] Discount calculated: {result.type.value} in {meta['processingTime']}ms")
    return {"success": True, "data": result.to_dict(), "meta": meta}


@router.post("/check-discount-opportunities")
async def check_discount_opportunities(
    req: OpportunitiesRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """List every discount the tenant allows, ranked combinations and negotiation tips."""
    started = time.perf_counter()
    request_id = request.state.request_id
    logger.info(f"[{request_id}] Checking discount opportunities for tenant {mask_tenant_id(req.tenant_id)}")

    if not req.tenant_id:
        raise ValidationError("TenantId is required")

    try:
        data = await discount_engine.check_opportunities(db, req.tenant_id)
    except NegotiationError:
        raise
    except Exception as e:
        logger.exception(f"[{request_id}] Opportunity check failed")
        raise NegotiationError("Failed to check discount opportunities", details=str(e)) from e

    return {"success": True, "data": data, "meta": _meta(request, started)}
