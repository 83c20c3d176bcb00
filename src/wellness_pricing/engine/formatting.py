"""Display helpers for money and percentages."""
from .precision import round_half_up


def format_currency(value: float) -> str:
    """Format as US dollars, e.g. $1,080.00 or -$500.00."""
    amount = round_half_up(value, 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float, places: int = 1) -> str:
    """Format a percentage value (53.7 -> '53.7%')."""
    return f"{round_half_up(value, places):.{places}f}%"
