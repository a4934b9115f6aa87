"""Tenant negotiation settings router — read, replace, and apply presets."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from locai.database import get_db
from locai.dependencies import TenantContext, get_current_tenant
from locai.schemas.negotiation import ApplyPresetRequest, NegotiationSettingsUpdate
from locai.services.negotiation.config import DEFAULT_NEGOTIATION_SETTINGS
from locai.services.negotiation.settings_loader import settings_loader, settings_to_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/negotiation")
async def get_negotiation_settings(
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
):
    """Current settings, or the defaults when the tenant never saved any."""
    loaded, is_default = await settings_loader.load_with_source(db, tenant.tenant_id)
    return {"success": True, "data": settings_to_document(loaded), "isDefault": is_default}


@router.put("/negotiation")
async def update_negotiation_settings(
    req: NegotiationSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
):
    """Replace the tenant's settings. Fields left out take the default preset's values."""
    saved = await settings_loader.save(
        db,
        tenant.tenant_id,
        req.to_settings(DEFAULT_NEGOTIATION_SETTINGS),
        updated_by=tenant.user_id,
    )
    return {
        "success": True,
        "data": settings_to_document(saved),
        "message": "Configurações atualizadas com sucesso",
    }


@router.post("/negotiation")
async def apply_negotiation_preset(
    req: ApplyPresetRequest,
    db: AsyncSession = Depends(get_db),
    tenant: TenantContext = Depends(get_current_tenant),
):
    """Overwrite the tenant's settings with a built-in preset."""
    saved = await settings_loader.apply_preset(db, tenant.tenant_id, req.preset, updated_by=tenant.user_id)
    logger.info(f"Preset {req.preset!r} applied")
    return {
        "success": True,
        "data": settings_to_document(saved),
        "message": f'Preset "{req.preset}" aplicado com sucesso',
    }
