"""Safe harbor engine.

Computes the withholding needed to avoid the underpayment penalty
(IRC Section 6654; CA R&TC Section 19136) and turns the remainder into a
per-paycheck withholding plan.
"""

import logging
import math
from datetime import date
from decimal import Decimal

from takehome.engines.brackets import (
    CALIFORNIA_SAFE_HARBOR_RATE,
    SAFE_HARBOR_HIGH_EARNER_RATE,
    SAFE_HARBOR_HIGH_EARNER_THRESHOLD,
    SAFE_HARBOR_STANDARD_RATE,
)
from takehome.engines.pay_periods import period_length_days
from takehome.exceptions import InvalidInputError
from takehome.models.enums import FilingStatus, PayPeriod
from takehome.models.reports import SafeHarborCalculation, WithholdingPlan

logger = logging.getLogger(__name__)


def _require_periods(periods_remaining: int) -> None:
    if periods_remaining <= 0:
        raise InvalidInputError(
            "periods_remaining", f"must be at least 1, got {periods_remaining}"
        )


class SafeHarborEngine:
    """Federal and California safe harbor targets and withholding plans."""

    def is_high_earner(self, annual_income: Decimal, filing_status: FilingStatus) -> bool:
        """High earners must meet 110% of prior-year tax instead of 100%."""
        return annual_income > SAFE_HARBOR_HIGH_EARNER_THRESHOLD[filing_status]

    def calculate_federal_safe_harbor(
        self,
        annual_income: Decimal,
        prior_year_tax: Decimal,
        current_withholding: Decimal,
        filing_status: FilingStatus,
    ) -> SafeHarborCalculation:
        high_earner = self.is_high_earner(annual_income, filing_status)
        percentage = SAFE_HARBOR_HIGH_EARNER_RATE if high_earner else SAFE_HARBOR_STANDARD_RATE
        return self._build(prior_year_tax, percentage, high_earner, current_withholding)

    def calculate_california_safe_harbor(
        self,
        annual_income: Decimal,
        prior_year_tax: Decimal,
        current_withholding: Decimal,
        filing_status: FilingStatus,
    ) -> SafeHarborCalculation:
        """California uses a flat 90% of prior-year tax for every income tier."""
        return self._build(
            prior_year_tax,
            CALIFORNIA_SAFE_HARBOR_RATE,
            self.is_high_earner(annual_income, filing_status),
            current_withholding,
        )

    @staticmethod
    def _build(
        prior_year_tax: Decimal,
        percentage: Decimal,
        high_earner: bool,
        current_withholding: Decimal,
    ) -> SafeHarborCalculation:
        if prior_year_tax < 0:
            raise InvalidInputError("prior_year_tax", f"must be non-negative, got {prior_year_tax}")
        safe_harbor_amount = prior_year_tax * percentage
        return SafeHarborCalculation(
            prior_year_tax=prior_year_tax,
            safe_harbor_percentage=percentage,
            is_high_earner=high_earner,
            safe_harbor_amount=safe_harbor_amount,
            current_withholding=current_withholding,
            remaining_withholding_needed=max(safe_harbor_amount - current_withholding, Decimal("0")),
            is_on_track=current_withholding >= safe_harbor_amount,
        )

    def create_withholding_plan(
        self,
        remaining_withholding_needed: Decimal,
        periods_remaining: int,
        current_pay_period_withholding: Decimal,
    ) -> WithholdingPlan:
        """Spread the remaining safe-harbor amount over the paychecks left this year."""
        _require_periods(periods_remaining)
        projected = current_pay_period_withholding * periods_remaining
        return WithholdingPlan(
            pay_periods_remaining=periods_remaining,
            additional_withholding_per_period=remaining_withholding_needed / periods_remaining,
            current_pay_period_withholding=current_pay_period_withholding,
            projected_annual_withholding=projected,
            projected_shortfall=max(remaining_withholding_needed - projected, Decimal("0")),
        )

    def calculate_remaining_pay_periods(
        self, frequency: PayPeriod, reference_date: date | None = None
    ) -> int:
        """Estimate paychecks left between *reference_date* and December 31.

        Uses fixed period lengths (7/14/15/30 days), not an employer payroll
        calendar, so the count can be off by one near period boundaries.
        """
        reference_date = reference_date or date.today()
        days_remaining = (date(reference_date.year, 12, 31) - reference_date).days
        periods = math.ceil(days_remaining / period_length_days(frequency))
        logger.debug("%d days left in %d -> %d %s periods", days_remaining, reference_date.year, periods, frequency)
        return periods

    def calculate_no_math_solution(
        self,
        prior_year_tax: Decimal,
        periods_remaining: int,
        is_high_earner: bool = True,
    ) -> Decimal:
        """Per-paycheck withholding that covers the whole safe harbor, ignoring
        anything already withheld this year."""
        _require_periods(periods_remaining)
        multiplier = SAFE_HARBOR_HIGH_EARNER_RATE if is_high_earner else SAFE_HARBOR_STANDARD_RATE
        return prior_year_tax * multiplier / periods_remaining

    def calculate_year_end_catch_up(
        self, safe_harbor_amount: Decimal, projected_withholding: Decimal
    ) -> Decimal:
        """One-time withholding needed on the last paycheck to reach safe harbor."""
        return max(safe_harbor_amount - projected_withholding, Decimal("0"))
