"""Result records produced by the engines."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from takehome.models.enums import (
    FilingStatus,
    PayPeriod,
    SpecialIncomeType,
    W4FilingStatus,
)


class CalculationResult(BaseModel):
    """Take-home pay breakdown, expressed in ``pay_period`` units.

    ``effective_tax_rate`` is a ratio and is the same in every pay period.
    ``medicare_tax`` already includes ``additional_medicare_tax``.
    """

    pay_period: PayPeriod
    filing_status: FilingStatus
    annual_income: Decimal
    gross_income: Decimal
    federal_tax: Decimal
    state_tax: Decimal
    city_tax: Decimal
    fica_tax: Decimal
    medicare_tax: Decimal
    additional_medicare_tax: Decimal
    total_tax: Decimal
    net_income: Decimal
    effective_tax_rate: Decimal
    warnings: list[str] = []


class SafeHarborCalculation(BaseModel):
    prior_year_tax: Decimal
    safe_harbor_percentage: Decimal
    is_high_earner: bool
    safe_harbor_amount: Decimal
    current_withholding: Decimal
    remaining_withholding_needed: Decimal
    is_on_track: bool


class WithholdingPlan(BaseModel):
    pay_periods_remaining: int
    additional_withholding_per_period: Decimal
    current_pay_period_withholding: Decimal
    projected_annual_withholding: Decimal
    projected_shortfall: Decimal


class DualEarnerAnalysis(BaseModel):
    filing_status: FilingStatus
    primary_income: Decimal
    primary_withholding: Decimal
    secondary_income: Decimal
    secondary_withholding: Decimal
    combined_income: Decimal
    combined_withholding: Decimal
    combined_tax: Decimal
    separate_withholding_estimate: Decimal
    withholding_gap: Decimal
    recommended_w4_adjustment: Decimal


class W4Recommendation(BaseModel):
    filing_status: W4FilingStatus
    additional_withholding: Decimal
    adjust_dependents: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    recommended_changes: list[str]


class SpecialIncomeImpact(BaseModel):
    """Federal tax added by one item stacked alone on base income.

    ``marginal_tax_rate`` is the bracket rate on the next $1,000 above base
    income plus the item, not the item's average rate (that is
    ``effective_tax_rate``).
    """

    item_type: SpecialIncomeType
    amount: Decimal
    withholding: Decimal
    additional_tax: Decimal
    effective_tax_rate: Decimal
    withholding_shortfall: Decimal
    marginal_tax_rate: Decimal


class SpecialIncomeSummary(BaseModel):
    """Aggregate of independently-stacked item impacts.

    ``total_additional_tax`` sums per-item deltas, each measured against the
    same base income. ``stacked_additional_tax`` is the tax on all items
    added together; the two differ when items jointly cross a bracket.
    """

    total_additional_income: Decimal
    total_additional_tax: Decimal
    stacked_additional_tax: Decimal
    total_withholding: Decimal
    net_tax_due: Decimal
    blended_effective_rate: Decimal
    itemized_impacts: list[SpecialIncomeImpact]


class K1TaxEstimate(BaseModel):
    federal_tax: Decimal
    self_employment_tax: Decimal
    qbi_deduction: Decimal
    total_tax: Decimal
    effective_rate: Decimal


class HoldingPeriodRequirements(BaseModel):
    qualifying_disposition_date: date
    long_term_capital_gains_date: date


class ISOTaxImplications(BaseModel):
    bargain_element: Decimal
    regular_tax_amount: Decimal
    amt_adjustment: Decimal
    amt_tax_amount: Decimal
    amt_exposure: Decimal
    holding_period_requirements: HoldingPeriodRequirements


class NSOTaxImplications(BaseModel):
    bargain_element: Decimal
    ordinary_income_tax: Decimal
    fica_tax: Decimal
    medicare_tax: Decimal
    total_tax_liability: Decimal
    effective_tax_rate: Decimal
    withholding: Decimal
    withholding_shortfall: Decimal


class AMTCalculation(BaseModel):
    regular_tax_liability: Decimal
    amt_income: Decimal
    amt_exemption: Decimal
    amt_liability: Decimal
    amt_exposure: Decimal


class ChecklistStep(BaseModel):
    step: str
    description: str
    deadline: date | None = None
    is_required: bool


class Election83bChecklist(BaseModel):
    exercise_date: date
    deadline_date: date
    steps: list[ChecklistStep]


class Election83bBenefits(BaseModel):
    tax_without_election: Decimal
    tax_with_election: Decimal
    potential_savings: Decimal
    risk_of_loss: Decimal
