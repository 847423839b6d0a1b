"""Dual-earner withholding gap analysis and W-4 recommendations.

Payroll withholding tables treat each job as the household's only income.
When two incomes are combined on one return, the second income starts in a
higher bracket than either employer assumed, so the household under-withholds.
"""

import logging
from decimal import ROUND_CEILING, Decimal

from takehome.engines.brackets import (
    MULTIPLE_JOBS_RATES,
    W4_HIGHER_RATE_GAP_THRESHOLD,
    W4_MULTIPLE_JOBS_GAP_THRESHOLD,
)
from takehome.engines.jurisdiction import TaxCalculator
from takehome.exceptions import InvalidInputError
from takehome.formatting import format_currency
from takehome.models.enums import FilingStatus, W4FilingStatus
from takehome.models.inputs import W4Settings
from takehome.models.reports import DualEarnerAnalysis, W4Recommendation

logger = logging.getLogger(__name__)


class DualEarnerAnalyzer:
    """Compares combined-return tax against per-job single-filer withholding."""

    def __init__(self, calculator: TaxCalculator | None = None) -> None:
        self.calculator = calculator or TaxCalculator()

    def analyze_dual_earner_household(
        self,
        primary_income: Decimal,
        primary_withholding: Decimal,
        secondary_income: Decimal,
        secondary_withholding: Decimal,
        filing_status: FilingStatus,
    ) -> DualEarnerAnalysis:
        combined_income = primary_income + secondary_income
        combined_withholding = primary_withholding + secondary_withholding

        combined_tax = self.calculator.calculate_federal_tax(combined_income, filing_status)
        # Each employer withholds as if its job were a single filer's only income.
        separate_estimate = (
            self.calculator.calculate_federal_tax(primary_income, FilingStatus.SINGLE)
            + self.calculator.calculate_federal_tax(secondary_income, FilingStatus.SINGLE)
        )

        gap = max(combined_tax - separate_estimate, Decimal("0"))
        monthly = (gap / 12).to_integral_value(rounding=ROUND_CEILING)

        logger.debug(
            "Dual earner: combined tax %s vs separate %s, gap %s", combined_tax, separate_estimate, gap
        )

        return DualEarnerAnalysis(
            filing_status=filing_status,
            primary_income=primary_income,
            primary_withholding=primary_withholding,
            secondary_income=secondary_income,
            secondary_withholding=secondary_withholding,
            combined_income=combined_income,
            combined_withholding=combined_withholding,
            combined_tax=combined_tax,
            separate_withholding_estimate=separate_estimate,
            withholding_gap=gap,
            recommended_w4_adjustment=monthly,
        )

    def create_w4_recommendations(
        self,
        analysis: DualEarnerAnalysis,
        current_w4: W4Settings | None = None,
    ) -> W4Recommendation:
        """Turn a withholding gap into an ordered list of W-4 changes."""
        gap = analysis.withholding_gap
        recommendations: list[str] = []

        if gap > 0:
            recommendations.append(
                f"Add {format_currency(analysis.recommended_w4_adjustment, 0)} additional "
                f"withholding per month on line 4(c) of the higher earner's W-4."
            )

        if gap > W4_HIGHER_RATE_GAP_THRESHOLD:
            filing_status = W4FilingStatus.MARRIED_WITHHOLD_AT_HIGHER
            recommendations.append(
                "For the second earner, select 'Married, but withhold at higher "
                "Single rate' on the W-4 form."
            )
        else:
            filing_status = W4FilingStatus.MARRIED

        if (
            current_w4 is not None
            and not current_w4.multiple_jobs
            and gap > W4_MULTIPLE_JOBS_GAP_THRESHOLD
        ):
            recommendations.append(
                "Check the box in Step 2(c) for 'Multiple Jobs' on the higher earner's W-4."
            )

        recommendations.append(
            "Consider turning off all allowances/credits on the second earner's W-4 "
            "to increase withholding."
        )

        return W4Recommendation(
            filing_status=filing_status,
            additional_withholding=analysis.recommended_w4_adjustment,
            recommended_changes=recommendations,
        )

    def calculate_multiple_jobs_impact(
        self, primary_income: Decimal, secondary_income: Decimal
    ) -> Decimal:
        """Rough extra annual withholding from checking W-4 Step 2(c).

        Not the IRS Multiple Jobs Worksheet: a percentage of the lower income
        chosen by the higher income's tier.
        """
        if primary_income < 0 or secondary_income < 0:
            raise InvalidInputError("income", "incomes must be non-negative")
        lower = min(primary_income, secondary_income)
        higher = max(primary_income, secondary_income)
        for upper_bound, rate in MULTIPLE_JOBS_RATES:
            if upper_bound is None or higher <= upper_bound:
                return lower * rate
        return Decimal("0")
