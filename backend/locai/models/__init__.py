from locai.models.tenant_settings import NEGOTIATION_SECTION, TenantSettings

__all__ = [
    "NEGOTIATION_SECTION",
    "TenantSettings",
]
