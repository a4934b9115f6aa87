"""Negotiation settings — immutable per-tenant configuration and the built-in presets."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtendedStayRule:
    """Discount for stays of at least ``min_days`` nights."""
    min_days: int
    discount_percentage: float


@dataclass(frozen=True)
class EarlyBookingRule:
    """Discount for bookings made at least ``days_in_advance`` days before check-in."""
    days_in_advance: int
    discount_percentage: float


@dataclass(frozen=True)
class LastMinuteRule:
    """Discount for check-ins at most ``days_before_check_in`` days away."""
    days_before_check_in: int
    discount_percentage: float


@dataclass(frozen=True)
class NegotiationSettings:
    """Fully-populated negotiation configuration for one tenant.

    Produced by the settings loader; downstream code never null-checks a field.
    """
    allow_ai_negotiation: bool = True

    # Payment method
    pix_discount_enabled: bool = True
    pix_discount_percentage: float = 5.0
    cash_discount_enabled: bool = False
    cash_discount_percentage: float = 0.0

    # Card financing (no discount)
    installment_enabled: bool = True
    max_installments: int = 10
    min_installment_value: float = 100.0

    # Tiers
    extended_stay_discount_enabled: bool = True
    extended_stay_rules: tuple[ExtendedStayRule, ...] = (
        ExtendedStayRule(min_days=7, discount_percentage=5.0),
        ExtendedStayRule(min_days=14, discount_percentage=10.0),
        ExtendedStayRule(min_days=28, discount_percentage=15.0),
    )
    early_booking_discount_enabled: bool = False
    early_booking_rules: tuple[EarlyBookingRule, ...] = (
        EarlyBookingRule(days_in_advance=30, discount_percentage=5.0),
        EarlyBookingRule(days_in_advance=60, discount_percentage=8.0),
    )
    last_minute_discount_enabled: bool = False
    last_minute_rules: tuple[LastMinuteRule, ...] = (
        LastMinuteRule(days_before_check_in=7, discount_percentage=5.0),
        LastMinuteRule(days_before_check_in=3, discount_percentage=10.0),
    )

    # Close-now incentive
    book_now_discount_enabled: bool = True
    book_now_discount_percentage: float = 3.0
    book_now_time_limit: int = 2  # hours to accept

    # Limits
    max_discount_percentage: float = 15.0
    min_price_after_discount: float = 0.0
    max_stacked_discounts: int = 3

    # Agent guidance
    price_justifications: tuple[str, ...] = ()
    allow_suggest_alternatives: bool = False
    upsell_enabled: bool = False
    upsell_suggestions: tuple[str, ...] = ()
    negotiation_notes: str | None = None


DEFAULT_NEGOTIATION_SETTINGS = NegotiationSettings()

AGGRESSIVE_NEGOTIATION_SETTINGS = NegotiationSettings(
    pix_discount_percentage=10.0,
    cash_discount_enabled=True,
    cash_discount_percentage=10.0,
    max_installments=12,
    extended_stay_rules=(
        ExtendedStayRule(min_days=5, discount_percentage=5.0),
        ExtendedStayRule(min_days=7, discount_percentage=10.0),
        ExtendedStayRule(min_days=14, discount_percentage=15.0),
        ExtendedStayRule(min_days=30, discount_percentage=20.0),
    ),
    early_booking_discount_enabled=True,
    early_booking_rules=(
        EarlyBookingRule(days_in_advance=30, discount_percentage=5.0),
        EarlyBookingRule(days_in_advance=60, discount_percentage=10.0),
        EarlyBookingRule(days_in_advance=90, discount_percentage=15.0),
    ),
    last_minute_discount_enabled=True,
    last_minute_rules=(
        LastMinuteRule(days_before_check_in=7, discount_percentage=10.0),
        LastMinuteRule(days_before_check_in=3, discount_percentage=15.0),
        LastMinuteRule(days_before_check_in=1, discount_percentage=20.0),
    ),
    book_now_discount_percentage=8.0,
    max_discount_percentage=30.0,
    allow_suggest_alternatives=True,
)

CONSERVATIVE_NEGOTIATION_SETTINGS = NegotiationSettings(
    pix_discount_percentage=3.0,
    max_installments=6,
    extended_stay_rules=(
        ExtendedStayRule(min_days=14, discount_percentage=5.0),
        ExtendedStayRule(min_days=30, discount_percentage=10.0),
    ),
    book_now_discount_enabled=False,
    book_now_discount_percentage=0.0,
    max_discount_percentage=10.0,
    max_stacked_discounts=2,
)

# High season: no discounts, financing only.
HIGH_SEASON_NEGOTIATION_SETTINGS = NegotiationSettings(
    pix_discount_enabled=False,
    pix_discount_percentage=0.0,
    max_installments=12,
    extended_stay_discount_enabled=False,
    extended_stay_rules=(),
    early_booking_rules=(),
    last_minute_rules=(),
    book_now_discount_enabled=False,
    book_now_discount_percentage=0.0,
    max_discount_percentage=0.0,
    max_stacked_discounts=1,
)

NEGOTIATION_PRESETS: dict[str, NegotiationSettings] = {
    "default": DEFAULT_NEGOTIATION_SETTINGS,
    "aggressive": AGGRESSIVE_NEGOTIATION_SETTINGS,
    "conservative": CONSERVATIVE_NEGOTIATION_SETTINGS,
    "high_season": HIGH_SEASON_NEGOTIATION_SETTINGS,
}
