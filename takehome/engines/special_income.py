"""Special income tax impact engine.

Bonuses, RSU vests, capital gains and K-1 income land on top of regular
wages. Each item's federal tax is the delta between the tax on base income
plus the item and the tax on base income alone.
"""

import logging
from decimal import Decimal

from takehome.engines.brackets import (
    LTCG_RATE_CUTOFFS,
    QBI_DEDUCTION_RATE,
    SELF_EMPLOYMENT_MEDICARE_RATE,
    SELF_EMPLOYMENT_TAX_RATE,
    SELF_EMPLOYMENT_WAGE_BASE,
    SUPPLEMENTAL_MANDATORY_THRESHOLD,
    SUPPLEMENTAL_WITHHOLDING_RATE,
    SUPPLEMENTAL_WITHHOLDING_RATE_OVER_1M,
)
from takehome.engines.evaluator import marginal_rate
from takehome.engines.jurisdiction import TaxCalculator, safe_ratio
from takehome.exceptions import InvalidInputError
from takehome.models.enums import FilingStatus, HoldingPeriod
from takehome.models.inputs import SpecialIncomeItem
from takehome.models.reports import K1TaxEstimate, SpecialIncomeImpact, SpecialIncomeSummary

logger = logging.getLogger(__name__)


class SpecialIncomeEngine:
    """Federal tax impact of lump-sum income on top of base wages."""

    def __init__(self, calculator: TaxCalculator | None = None) -> None:
        self.calculator = calculator or TaxCalculator()

    def _incremental_tax(
        self, base_income: Decimal, additional: Decimal, filing_status: FilingStatus
    ) -> Decimal:
        base_tax = self.calculator.calculate_federal_tax(base_income, filing_status)
        combined_tax = self.calculator.calculate_federal_tax(base_income + additional, filing_status)
        return combined_tax - base_tax

    def calculate_special_income_tax_impact(
        self,
        base_income: Decimal,
        items: list[SpecialIncomeItem],
        filing_status: FilingStatus,
    ) -> list[SpecialIncomeImpact]:
        """Tax impact of each item, each stacked alone on *base_income*.

        Items are not stacked on one another, so two items that jointly cross
        a bracket boundary are each taxed at the lower rate here. See
        ``calculate_stacked_special_income_tax`` for the cumulative figure.
        """
        brackets = self.calculator.tables.federal_brackets[filing_status]
        impacts = []
        for item in items:
            additional_tax = self._incremental_tax(base_income, item.amount, filing_status)
            impacts.append(
                SpecialIncomeImpact(
                    item_type=item.type,
                    amount=item.amount,
                    withholding=item.withholding,
                    additional_tax=additional_tax,
                    effective_tax_rate=safe_ratio(additional_tax, item.amount),
                    withholding_shortfall=max(additional_tax - item.withholding, Decimal("0")),
                    marginal_tax_rate=marginal_rate(base_income + item.amount, brackets),
                )
            )
        return impacts

    def calculate_stacked_special_income_tax(
        self,
        base_income: Decimal,
        items: list[SpecialIncomeItem],
        filing_status: FilingStatus,
    ) -> Decimal:
        """Federal tax on all items added to *base_income* together."""
        total = sum((item.amount for item in items), Decimal("0"))
        return self._incremental_tax(base_income, total, filing_status)

    def calculate_total_special_income_tax_impact(
        self,
        base_income: Decimal,
        items: list[SpecialIncomeItem],
        filing_status: FilingStatus,
    ) -> SpecialIncomeSummary:
        """Summarize item impacts.

        ``net_tax_due`` is negative when withholding exceeds the additional
        tax, i.e. a refund position.
        """
        impacts = self.calculate_special_income_tax_impact(base_income, items, filing_status)

        total_income = sum((item.amount for item in items), Decimal("0"))
        total_tax = sum((impact.additional_tax for impact in impacts), Decimal("0"))
        total_withholding = sum((item.withholding for item in items), Decimal("0"))
        stacked_tax = self.calculate_stacked_special_income_tax(base_income, items, filing_status)

        if stacked_tax != total_tax:
            logger.debug(
                "Special income: per-item total %s differs from stacked total %s", total_tax, stacked_tax
            )

        return SpecialIncomeSummary(
            total_additional_income=total_income,
            total_additional_tax=total_tax,
            stacked_additional_tax=stacked_tax,
            total_withholding=total_withholding,
            net_tax_due=total_tax - total_withholding,
            blended_effective_rate=safe_ratio(total_tax, total_income),
            itemized_impacts=impacts,
        )

    def get_capital_gains_tax_rate(
        self,
        annual_income: Decimal,
        filing_status: FilingStatus,
        holding_period: HoldingPeriod,
    ) -> Decimal:
        """Rate applied to a capital gain.

        Short-term gains are ordinary income, so the rate is the marginal
        bracket rate. Long-term gains use the 0/15/20% cutoffs by income.
        """
        if holding_period == HoldingPeriod.SHORT_TERM:
            return marginal_rate(annual_income, self.calculator.tables.federal_brackets[filing_status])

        for upper_bound, rate in LTCG_RATE_CUTOFFS[filing_status]:
            if upper_bound is None or annual_income < upper_bound:
                return rate
        return LTCG_RATE_CUTOFFS[filing_status][-1][1]

    def estimate_k1_tax_liability(
        self,
        base_income: Decimal,
        k1_income: Decimal,
        filing_status: FilingStatus,
        is_qbi: bool = True,
    ) -> K1TaxEstimate:
        """Estimate federal income tax and self-employment tax on K-1 income.

        Self-employment tax applies 15.3% up to the wage base and 2.9% above
        it. This treats all K-1 income as active partnership income.
        """
        if k1_income < 0:
            raise InvalidInputError("k1_income", f"must be non-negative, got {k1_income}")

        qbi_deduction = k1_income * QBI_DEDUCTION_RATE if is_qbi else Decimal("0")
        federal_tax = self._incremental_tax(base_income, k1_income - qbi_deduction, filing_status)

        se_tax = (
            min(k1_income, SELF_EMPLOYMENT_WAGE_BASE) * SELF_EMPLOYMENT_TAX_RATE
            + max(k1_income - SELF_EMPLOYMENT_WAGE_BASE, Decimal("0")) * SELF_EMPLOYMENT_MEDICARE_RATE
        )
        total_tax = federal_tax + se_tax

        return K1TaxEstimate(
            federal_tax=federal_tax,
            self_employment_tax=se_tax,
            qbi_deduction=qbi_deduction,
            total_tax=total_tax,
            effective_rate=safe_ratio(total_tax, k1_income),
        )

    @staticmethod
    def get_supplemental_withholding_rate(annual_income: Decimal) -> Decimal:
        """Flat federal withholding rate on supplemental wages (bonuses, RSUs)."""
        if annual_income > SUPPLEMENTAL_MANDATORY_THRESHOLD:
            return SUPPLEMENTAL_WITHHOLDING_RATE_OVER_1M
        return SUPPLEMENTAL_WITHHOLDING_RATE
