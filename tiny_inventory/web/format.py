"""Display formatting used by the templates."""

from decimal import Decimal


def format_currency(value: float | Decimal | int | None) -> str:
    """Format a number as US dollars, e.g. 1299.9 -> "$1,299.90"."""
    if value is None:
        return "-"
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_number(value: float | int | None) -> str:
    """Format a number with thousands separators, e.g. 1234 -> "1,234"."""
    if value is None:
        return "-"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,}"
    return f"{int(value):,}"


def page_title(title: str | None, app_name: str = "Tiny Inventory") -> str:
    return f"{title} | {app_name}" if title else app_name
