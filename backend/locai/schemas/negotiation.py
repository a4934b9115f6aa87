from dataclasses import asdict, replace
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from locai.services.negotiation.config import (
    DEFAULT_NEGOTIATION_SETTINGS,
    EarlyBookingRule,
    ExtendedStayRule,
    LastMinuteRule,
    NegotiationSettings,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Settings document ───


class ExtendedStayRuleSchema(CamelModel):
    min_days: int = Field(ge=1)
    discount_percentage: float = Field(ge=0, le=100)

    def to_rule(self) -> ExtendedStayRule:
        return ExtendedStayRule(min_days=self.min_days, discount_percentage=self.discount_percentage)


class EarlyBookingRuleSchema(CamelModel):
    days_in_advance: int = Field(ge=0)
    discount_percentage: float = Field(ge=0, le=100)

    def to_rule(self) -> EarlyBookingRule:
        return EarlyBookingRule(days_in_advance=self.days_in_advance, discount_percentage=self.discount_percentage)


class LastMinuteRuleSchema(CamelModel):
    days_before_check_in: int = Field(ge=0)
    discount_percentage: float = Field(ge=0, le=100)

    def to_rule(self) -> LastMinuteRule:
        return LastMinuteRule(
            days_before_check_in=self.days_before_check_in,
            discount_percentage=self.discount_percentage,
        )


class NegotiationSettingsDocument(CamelModel):
    """Stored/wire shape of a tenant's negotiation settings.

    Every field is optional: ``to_settings`` fills the gaps from a base preset, so
    the rest of the engine always receives a fully-populated value.
    """

    allow_ai_negotiation: bool | None = Field(default=None, alias="allowAINegotiation")

    pix_discount_enabled: bool | None = None
    pix_discount_percentage: float | None = Field(default=None, ge=0, le=100)
    cash_discount_enabled: bool | None = None
    cash_discount_percentage: float | None = Field(default=None, ge=0, le=100)

    installment_enabled: bool | None = None
    max_installments: int | None = Field(default=None, ge=1)
    min_installment_value: float | None = Field(default=None, ge=0)

    extended_stay_discount_enabled: bool | None = None
    extended_stay_rules: list[ExtendedStayRuleSchema] | None = None
    early_booking_discount_enabled: bool | None = None
    early_booking_rules: list[EarlyBookingRuleSchema] | None = None
    last_minute_discount_enabled: bool | None = None
    last_minute_rules: list[LastMinuteRuleSchema] | None = None

    book_now_discount_enabled: bool | None = None
    book_now_discount_percentage: float | None = Field(default=None, ge=0, le=100)
    book_now_time_limit: int | None = Field(default=None, ge=1)

    max_discount_percentage: float | None = Field(default=None, ge=0, le=100)
    min_price_after_discount: float | None = Field(default=None, ge=0)
    max_stacked_discounts: int | None = Field(default=None, ge=1)

    price_justifications: list[str] | None = None
    allow_suggest_alternatives: bool | None = None
    upsell_enabled: bool | None = None
    upsell_suggestions: list[str] | None = None
    negotiation_notes: str | None = None

    def to_settings(self, base: NegotiationSettings = DEFAULT_NEGOTIATION_SETTINGS) -> NegotiationSettings:
        overrides = {}
        for name, value in self:
            if value is None:
                continue
            if name.endswith("_rules"):
                value = tuple(rule.to_rule() for rule in value)
            elif isinstance(value, list):
                value = tuple(value)
            overrides[name] = value
        return replace(base, **overrides)

    @classmethod
    def from_settings(cls, settings: NegotiationSettings) -> "NegotiationSettingsDocument":
        return cls.model_validate(asdict(settings))

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class NegotiationSettingsUpdate(NegotiationSettingsDocument):
    """Full replacement from the settings screen; unspecified fields take the default preset."""

    allow_ai_negotiation: bool = Field(alias="allowAINegotiation")
    pix_discount_enabled: bool
    pix_discount_percentage: float = Field(ge=0, le=100)
    max_discount_percentage: float = Field(ge=0, le=100)


class ApplyPresetRequest(CamelModel):
    preset: str


# ─── Discount endpoints ───


class DiscountRequest(CamelModel):
    tenant_id: str | None = None
    property_name: str = Field(min_length=1)
    check_in: date
    check_out: date
    total_price: float
    client_phone: str | None = None
    payment_method: Literal["pix", "card", "cash"] | None = None
    book_now: bool = False
    extend_stay: int = Field(default=0, ge=0)
    lead_temperature: Literal["cold", "warm", "hot"] | None = None

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def _date_part(cls, value):
        # Accept full ISO timestamps; only the calendar date matters
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value


class OpportunitiesRequest(CamelModel):
    tenant_id: str | None = None
