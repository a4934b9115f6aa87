"""Currency formatting — tenants price in Brazilian reais."""

CURRENCY_SYMBOL = "R$"


def format_price(amount: float) -> str:
    """Format an amount as ``R$ 1.234,56``."""
    formatted = f"{amount:,.2f}"
    # Swap the en-US separators for the pt-BR ones
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{CURRENCY_SYMBOL} {formatted}"


def format_percentage(value: float) -> str:
    """Render a percentage without a trailing ``.0``; fractional values keep one decimal."""
    rounded = round(value, 1)
    if rounded == int(rounded):
        return f"{int(rounded)}%"
    return f"{rounded:.1f}".replace(".", ",") + "%"
