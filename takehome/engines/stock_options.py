"""Stock option exercise engine: ISO, NSO, AMT and 83(b) elections.

AMT follows Form 6251 in simplified form: AMTI is base income plus
adjustments (the ISO bargain element), the exemption phases out at 25 cents
per dollar above the phase-out start, and the remainder is taxed at 26% up
to the 28% threshold and 28% above it.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal

from takehome.engines.brackets import (
    AMT_28_PERCENT_THRESHOLD,
    AMT_EXEMPTION,
    AMT_LOWER_RATE,
    AMT_PHASEOUT_RATE,
    AMT_PHASEOUT_START,
    AMT_UPPER_RATE,
    ELECTION_83B_FILING_DAYS,
)
from takehome.engines.jurisdiction import TaxCalculator, safe_ratio
from takehome.models.enums import FilingStatus, OptionType
from takehome.models.inputs import SpecialIncomeItem
from takehome.models.reports import (
    AMTCalculation,
    ChecklistStep,
    Election83bBenefits,
    Election83bChecklist,
    HoldingPeriodRequirements,
    ISOTaxImplications,
    NSOTaxImplications,
)

logger = logging.getLogger(__name__)


class StockOptionEngine:
    """Computes tax consequences of exercising ISOs and NSOs."""

    def __init__(self, calculator: TaxCalculator | None = None) -> None:
        self.calculator = calculator or TaxCalculator()

    @staticmethod
    def bargain_element(item: SpecialIncomeItem) -> Decimal:
        """Spread at exercise: the supplied value, else (FMV - strike) x shares."""
        if item.bargain_element is not None:
            return max(item.bargain_element, Decimal("0"))
        spread = (item.fair_market_value or Decimal("0")) - (item.exercise_price or Decimal("0"))
        return max(spread * (item.number_of_shares or Decimal("0")), Decimal("0"))

    @staticmethod
    def _add_years(d: date, years: int) -> date:
        # Feb 29 rolls forward to Mar 1 so a full year has always elapsed.
        try:
            return d.replace(year=d.year + years)
        except ValueError:
            return d.replace(year=d.year + years, month=3, day=1)

    def _ordinary_delta(
        self, base_income: Decimal, additional: Decimal, filing_status: FilingStatus
    ) -> Decimal:
        without = self.calculator.calculate_federal_tax(base_income, filing_status)
        with_item = self.calculator.calculate_federal_tax(base_income + additional, filing_status)
        return with_item - without

    # ------------------------------------------------------------------
    # ISO / NSO
    # ------------------------------------------------------------------

    def calculate_iso_tax_implications(
        self,
        base_income: Decimal,
        item: SpecialIncomeItem,
        filing_status: FilingStatus,
    ) -> ISOTaxImplications:
        """Regular tax, AMT and holding dates for an ISO exercise.

        An ISO exercise is not a regular-tax event unless the shares are sold
        in a disqualifying disposition, in which case the bargain element is
        ordinary income. For AMT the bargain element is always an adjustment.
        """
        bargain = self.bargain_element(item)

        regular_tax = Decimal("0")
        if item.disqualifying_disposition:
            regular_tax = self._ordinary_delta(base_income, bargain, filing_status)

        amt_tax = self.calculate_amt_tax(base_income, bargain, filing_status)
        exposure = max(amt_tax - regular_tax, Decimal("0"))

        exercise_date = item.effective_date or date.today()
        one_year = self._add_years(exercise_date, 1)

        logger.debug("ISO exercise: bargain %s, AMT %s, exposure %s", bargain, amt_tax, exposure)

        return ISOTaxImplications(
            bargain_element=bargain,
            regular_tax_amount=regular_tax,
            amt_adjustment=bargain,
            amt_tax_amount=amt_tax,
            amt_exposure=exposure,
            holding_period_requirements=HoldingPeriodRequirements(
                qualifying_disposition_date=one_year + timedelta(days=1),
                long_term_capital_gains_date=one_year,
            ),
        )

    def calculate_nso_tax_implications(
        self,
        base_income: Decimal,
        item: SpecialIncomeItem,
        filing_status: FilingStatus,
    ) -> NSOTaxImplications:
        """The NSO bargain element is wages: income tax, Social Security and Medicare."""
        tables = self.calculator.tables
        bargain = self.bargain_element(item)

        ordinary_tax = self._ordinary_delta(base_income, bargain, filing_status)
        fica_tax = (
            self.calculator.calculate_fica_tax(base_income + bargain)
            - self.calculator.calculate_fica_tax(base_income)
        )

        # Additional Medicare Tax only on the slice of the bargain above the threshold.
        threshold = tables.additional_medicare_threshold[filing_status]
        medicare_tax = bargain * tables.medicare_rate
        if base_income > threshold:
            medicare_tax += bargain * tables.additional_medicare_rate
        elif base_income + bargain > threshold:
            medicare_tax += (base_income + bargain - threshold) * tables.additional_medicare_rate

        total = ordinary_tax + fica_tax + medicare_tax

        return NSOTaxImplications(
            bargain_element=bargain,
            ordinary_income_tax=ordinary_tax,
            fica_tax=fica_tax,
            medicare_tax=medicare_tax,
            total_tax_liability=total,
            effective_tax_rate=safe_ratio(total, bargain),
            withholding=item.withholding,
            withholding_shortfall=max(total - item.withholding, Decimal("0")),
        )

    # ------------------------------------------------------------------
    # AMT
    # ------------------------------------------------------------------

    @staticmethod
    def _amt_exemption(amt_income: Decimal, filing_status: FilingStatus) -> Decimal:
        reduction = max(amt_income - AMT_PHASEOUT_START[filing_status], Decimal("0")) * AMT_PHASEOUT_RATE
        return max(AMT_EXEMPTION[filing_status] - reduction, Decimal("0"))

    def calculate_amt_tax(
        self,
        base_income: Decimal,
        amt_adjustments: Decimal,
        filing_status: FilingStatus,
    ) -> Decimal:
        """Tentative minimum tax on base income plus AMT adjustments."""
        amt_income = base_income + amt_adjustments
        amt_base = max(amt_income - self._amt_exemption(amt_income, filing_status), Decimal("0"))

        threshold = AMT_28_PERCENT_THRESHOLD[filing_status]
        if amt_base <= threshold:
            return amt_base * AMT_LOWER_RATE
        return threshold * AMT_LOWER_RATE + (amt_base - threshold) * AMT_UPPER_RATE

    def calculate_full_amt(
        self,
        base_income: Decimal,
        amt_adjustments: Decimal,
        filing_status: FilingStatus,
    ) -> AMTCalculation:
        regular_tax = self.calculator.calculate_federal_tax(base_income, filing_status)
        amt_income = base_income + amt_adjustments
        amt_liability = self.calculate_amt_tax(base_income, amt_adjustments, filing_status)

        return AMTCalculation(
            regular_tax_liability=regular_tax,
            amt_income=amt_income,
            amt_exemption=self._amt_exemption(amt_income, filing_status),
            amt_liability=amt_liability,
            amt_exposure=max(amt_liability - regular_tax, Decimal("0")),
        )

    # ------------------------------------------------------------------
    # 83(b) election
    # ------------------------------------------------------------------

    def generate_83b_election_checklist(self, exercise_date: date) -> Election83bChecklist:
        """Filing steps for an 83(b) election, due 30 days after exercise."""
        deadline = exercise_date + timedelta(days=ELECTION_83B_FILING_DAYS)

        steps = [
            ChecklistStep(
                step="Complete 83(b) election form",
                description=(
                    "Fill out the 83(b) election form with your personal information, "
                    "stock details, and valuation."
                ),
                is_required=True,
            ),
            ChecklistStep(
                step="Sign and date the election form",
                description="Sign and date the completed 83(b) election form.",
                is_required=True,
            ),
            ChecklistStep(
                step="Make three copies of the signed form",
                description=(
                    "Make three copies: one for the IRS, one for your employer, "
                    "and one for your personal records."
                ),
                is_required=True,
            ),
            ChecklistStep(
                step="Mail the form to the IRS",
                description="Mail the original signed form to the IRS office where you file your tax returns.",
                deadline=deadline,
                is_required=True,
            ),
            ChecklistStep(
                step="Send certified mail with return receipt",
                description="Use certified mail with return receipt requested to prove timely filing.",
                deadline=deadline,
                is_required=False,
            ),
            ChecklistStep(
                step="Provide copy to employer",
                description="Give a copy of the election to your employer for their records.",
                deadline=deadline,
                is_required=True,
            ),
            ChecklistStep(
                step="Attach copy to tax return",
                description="Attach a copy to your tax return for the year of exercise.",
                is_required=True,
            ),
        ]

        return Election83bChecklist(exercise_date=exercise_date, deadline_date=deadline, steps=steps)

    @staticmethod
    def is_eligible_for_83b_election(option_type: OptionType, is_unvested: bool) -> bool:
        """An 83(b) election only matters for unvested shares; ISOs and NSOs alike."""
        return is_unvested

    @staticmethod
    def calculate_83b_election_benefits(
        exercise_price: Decimal,
        current_fmv: Decimal,
        estimated_future_fmv: Decimal,
        shares: Decimal,
        marginal_rate: Decimal,
    ) -> Election83bBenefits:
        """Compare tax on the spread now (with election) against at vesting (without).

        ``risk_of_loss`` is the tax paid up front that is not recovered if the
        shares become worthless.
        """
        without_election = (estimated_future_fmv - exercise_price) * shares * marginal_rate
        with_election = (current_fmv - exercise_price) * shares * marginal_rate
        return Election83bBenefits(
            tax_without_election=without_election,
            tax_with_election=with_election,
            potential_savings=without_election - with_election,
            risk_of_loss=with_election,
        )
