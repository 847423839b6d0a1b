"""Currency and percentage formatting shared by reports, recommendations and the CLI."""

from decimal import ROUND_HALF_UP, Decimal


def format_currency(amount: Decimal, fraction_digits: int = 2) -> str:
    """Format as US dollars, e.g. ``$1,234.56`` or ``-$1,234.56``."""
    quantum = Decimal(1).scaleb(-fraction_digits)
    rounded = Decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}${abs(rounded):,.{fraction_digits}f}"


def format_percent(rate: Decimal, fraction_digits: int = 1) -> str:
    """Format a ratio as a percentage: ``Decimal("0.247")`` -> ``24.7%``."""
    quantum = Decimal(1).scaleb(-fraction_digits)
    pct = (Decimal(rate) * 100).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{pct:.{fraction_digits}f}%"
