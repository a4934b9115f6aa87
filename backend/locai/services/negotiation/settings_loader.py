"""Settings loader — resolves a tenant's negotiation settings, falling back to defaults.

Reads go through the redis cache; writes replace the stored document and
invalidate the cached copy.
"""

import logging

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from locai.errors import UpstreamError, ValidationError
from locai.models.tenant_settings import NEGOTIATION_SECTION, TenantSettings
from locai.schemas.negotiation import NegotiationSettingsDocument
from locai.services.cache_service import cache_service
from locai.services.negotiation.config import (
    DEFAULT_NEGOTIATION_SETTINGS,
    NEGOTIATION_PRESETS,
    NegotiationSettings,
)

logger = logging.getLogger(__name__)


def mask_tenant_id(tenant_id: str | None) -> str:
    """Log-safe tenant id: first 8 characters only."""
    return f"{(tenant_id or '')[:8]}***"


def normalize_settings(raw: dict) -> NegotiationSettings:
    """Turn a stored document into a fully-populated settings value."""
    try:
        return NegotiationSettingsDocument.model_validate(raw).to_settings(DEFAULT_NEGOTIATION_SETTINGS)
    except SchemaValidationError as e:
        raise UpstreamError("Stored negotiation settings are malformed", details=str(e)) from e


def settings_to_document(settings: NegotiationSettings) -> dict:
    return NegotiationSettingsDocument.from_settings(settings).to_wire()


class SettingsLoader:

    @staticmethod
    def _require_tenant(tenant_id: str | None) -> str:
        if not tenant_id or not tenant_id.strip():
            raise ValidationError("TenantId is required")
        return tenant_id

    async def _fetch_row(self, db: AsyncSession, tenant_id: str) -> TenantSettings | None:
        try:
            result = await db.execute(
                select(TenantSettings).where(
                    TenantSettings.tenant_id == tenant_id,
                    TenantSettings.section == NEGOTIATION_SECTION,
                )
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Settings read failed for tenant {mask_tenant_id(tenant_id)}: {e}")
            raise UpstreamError("Failed to read negotiation settings", details=str(e)) from e

    async def _from_cache(self, tenant_id: str) -> tuple[NegotiationSettings, bool] | None:
        """Cached ``(settings, is_default)``; an entry that does not parse counts as a miss."""
        cached = await cache_service.get_negotiation_settings(tenant_id)
        if cached is None:
            return None
        try:
            return normalize_settings(cached["data"]), bool(cached["isDefault"])
        except (KeyError, TypeError, UpstreamError) as e:
            logger.warning(f"Ignoring unusable cached settings for tenant {mask_tenant_id(tenant_id)}: {e!r}")
            return None

    async def load_with_source(
        self, db: AsyncSession, tenant_id: str | None
    ) -> tuple[NegotiationSettings, bool]:
        """Return ``(settings, is_default)``. Never returns partial settings."""
        tenant_id = self._require_tenant(tenant_id)

        cached = await self._from_cache(tenant_id)
        if cached is not None:
            return cached

        row = await self._fetch_row(db, tenant_id)
        if row is None:
            logger.info(f"No negotiation settings for tenant {mask_tenant_id(tenant_id)} — using defaults")
            loaded, is_default = DEFAULT_NEGOTIATION_SETTINGS, True
        else:
            loaded, is_default = normalize_settings(row.data or {}), False

        await cache_service.set_negotiation_settings(
            tenant_id, {"data": settings_to_document(loaded), "isDefault": is_default}
        )
        return loaded, is_default

    async def load(self, db: AsyncSession, tenant_id: str | None) -> NegotiationSettings:
        loaded, _ = await self.load_with_source(db, tenant_id)
        return loaded

    async def save(
        self,
        db: AsyncSession,
        tenant_id: str | None,
        new_settings: NegotiationSettings,
        updated_by: str | None = None,
    ) -> NegotiationSettings:
        """Replace the tenant's stored settings document."""
        tenant_id = self._require_tenant(tenant_id)
        document = settings_to_document(new_settings)

        row = await self._fetch_row(db, tenant_id)
        try:
            if row is None:
                db.add(TenantSettings(
                    tenant_id=tenant_id,
                    section=NEGOTIATION_SECTION,
                    data=document,
                    updated_by=updated_by,
                ))
            else:
                row.data = document
                row.updated_by = updated_by
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Settings write failed for tenant {mask_tenant_id(tenant_id)}: {e}")
            raise UpstreamError("Failed to save negotiation settings", details=str(e)) from e

        await cache_service.invalidate_negotiation_settings(tenant_id)
        logger.info(
            f"Negotiation settings updated for tenant {mask_tenant_id(tenant_id)} "
            f"(allow={new_settings.allow_ai_negotiation}, max={new_settings.max_discount_percentage:g}%)"
        )
        return new_settings

    async def apply_preset(
        self,
        db: AsyncSession,
        tenant_id: str | None,
        preset: str,
        updated_by: str | None = None,
    ) -> NegotiationSettings:
        preset_settings = NEGOTIATION_PRESETS.get(preset)
        if preset_settings is None:
            raise ValidationError(
                "Preset inválido. Use: default, aggressive, conservative, ou high_season",
                details=f"preset={preset!r}",
            )
        return await self.save(db, tenant_id, preset_settings, updated_by=updated_by)


settings_loader = SettingsLoader()
