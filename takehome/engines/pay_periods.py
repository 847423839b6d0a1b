"""Pay-period normalization.

The one place that knows how many pay periods make up a year. Multipliers are
fixed counts, not calendar-accurate day counts, so that
``from_annual(to_annual(x, p), p) == x`` for every period.
"""

from decimal import Decimal

from takehome.exceptions import UnsupportedPayPeriodError
from takehome.models.enums import PayPeriod

PERIODS_PER_YEAR: dict[PayPeriod, int] = {
    PayPeriod.ANNUAL: 1,
    PayPeriod.MONTHLY: 12,
    PayPeriod.SEMI_MONTHLY: 24,
    PayPeriod.BIWEEKLY: 26,
    PayPeriod.WEEKLY: 52,
}

# Approximate calendar length of one pay period, used only to estimate how
# many paychecks remain in the year. Annual pay has no meaningful length.
PERIOD_LENGTH_DAYS: dict[PayPeriod, int] = {
    PayPeriod.WEEKLY: 7,
    PayPeriod.BIWEEKLY: 14,
    PayPeriod.SEMI_MONTHLY: 15,
    PayPeriod.MONTHLY: 30,
}


def to_annual(amount: Decimal, period: PayPeriod) -> Decimal:
    """Convert a per-period amount to an annual amount."""
    return amount * PERIODS_PER_YEAR[period]


def from_annual(amount: Decimal, period: PayPeriod) -> Decimal:
    """Convert an annual amount to a per-period amount."""
    return amount / PERIODS_PER_YEAR[period]


def period_length_days(period: PayPeriod) -> int:
    try:
        return PERIOD_LENGTH_DAYS[period]
    except KeyError:
        raise UnsupportedPayPeriodError(period) from None
