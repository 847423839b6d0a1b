"""Jurisdiction tax resolution and take-home pay.

Applies federal brackets, state (flat or progressive) and city rates, Social
Security and Medicare (including the 0.9% Additional Medicare Tax) to an
annualized income, then re-expresses the result in the caller's pay period.

Unknown states and cities are not errors: they contribute zero tax and the
reason is reported in ``CalculationResult.warnings``.
"""

import logging
from decimal import Decimal

from takehome.engines.brackets import load_default_tables
from takehome.engines.evaluator import evaluate_bracket_tax
from takehome.engines.pay_periods import from_annual, to_annual
from takehome.models.enums import FilingStatus, StateTaxType
from takehome.models.inputs import CalculationInput
from takehome.models.reports import CalculationResult
from takehome.models.tables import TaxTables

logger = logging.getLogger(__name__)


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return Decimal("0")
    return numerator / denominator


class TaxCalculator:
    """Computes federal, state, city and payroll taxes from a rate configuration."""

    def __init__(self, tables: TaxTables | None = None) -> None:
        self.tables = tables if tables is not None else load_default_tables()

    # ------------------------------------------------------------------
    # Individual taxes (annual amounts)
    # ------------------------------------------------------------------

    def calculate_federal_tax(
        self, annual_income: Decimal, filing_status: FilingStatus
    ) -> Decimal:
        """Compute federal ordinary income tax using progressive brackets."""
        return evaluate_bracket_tax(
            annual_income, self.tables.federal_brackets[filing_status]
        )

    def calculate_state_tax(
        self,
        annual_income: Decimal,
        state: str,
        filing_status: FilingStatus = FilingStatus.SINGLE,
        warnings: list[str] | None = None,
    ) -> Decimal:
        """Compute state income tax. Unknown states owe nothing."""
        state_rate = self.tables.state_rates.get(state)
        if state_rate is None:
            if state:
                logger.info("No rate configured for state %r; state tax is 0", state)
                if warnings is not None:
                    warnings.append(f"No tax rate configured for state '{state}'. State tax set to $0.")
            return Decimal("0")

        if state_rate.type == StateTaxType.FLAT:
            return annual_income * state_rate.rate

        brackets = state_rate.brackets.get(filing_status) or state_rate.brackets[FilingStatus.SINGLE]
        return evaluate_bracket_tax(annual_income, brackets)

    def calculate_city_tax(
        self,
        annual_income: Decimal,
        city: str,
        state: str,
        warnings: list[str] | None = None,
    ) -> Decimal:
        """Compute city income tax; zero unless the city belongs to *state*."""
        if not city:
            return Decimal("0")

        city_rate = self.tables.city_rates.get(city)
        if city_rate is None or city_rate.state != state:
            logger.info("City %r not configured for state %r; city tax is 0", city, state)
            if warnings is not None:
                warnings.append(
                    f"City '{city}' has no tax rate configured for '{state}'. City tax set to $0."
                )
            return Decimal("0")

        return annual_income * city_rate.rate

    def calculate_fica_tax(self, annual_income: Decimal) -> Decimal:
        """Social Security tax: 6.2% up to the wage base."""
        return min(annual_income, self.tables.social_security_wage_base) * self.tables.social_security_rate

    def calculate_medicare_tax(
        self, annual_income: Decimal, filing_status: FilingStatus
    ) -> tuple[Decimal, Decimal]:
        """Compute Medicare tax.

        Returns:
            (regular_tax, additional_tax)
            regular_tax: 1.45% on all income
            additional_tax: 0.9% on income exceeding the filing-status threshold
        """
        regular = annual_income * self.tables.medicare_rate
        threshold = self.tables.additional_medicare_threshold[filing_status]
        excess = max(annual_income - threshold, Decimal("0"))
        return regular, excess * self.tables.additional_medicare_rate

    # ------------------------------------------------------------------
    # Take-home pay
    # ------------------------------------------------------------------

    def calculate_take_home_pay(self, calc_input: CalculationInput) -> CalculationResult:
        """Compute take-home pay for one pay period of *calc_input*."""
        warnings: list[str] = []
        period = calc_input.pay_period
        status = calc_input.filing_status

        annual_income = to_annual(calc_input.gross_income, period)

        federal_tax = self.calculate_federal_tax(annual_income, status)
        state_tax = self.calculate_state_tax(annual_income, calc_input.state, status, warnings)
        city_tax = self.calculate_city_tax(annual_income, calc_input.city, calc_input.state, warnings)
        fica_tax = self.calculate_fica_tax(annual_income)
        medicare_tax, additional_medicare_tax = self.calculate_medicare_tax(annual_income, status)

        total_tax = (
            federal_tax + state_tax + city_tax
            + fica_tax + medicare_tax + additional_medicare_tax
        )
        net_income = annual_income - total_tax
        effective_tax_rate = safe_ratio(total_tax, annual_income)

        logger.debug(
            "Take-home for %s %s income %s: federal=%s state=%s city=%s fica=%s medicare=%s+%s",
            period, status, annual_income, federal_tax, state_tax, city_tax,
            fica_tax, medicare_tax, additional_medicare_tax,
        )

        return CalculationResult(
            pay_period=period,
            filing_status=status,
            annual_income=annual_income,
            gross_income=calc_input.gross_income,
            federal_tax=from_annual(federal_tax, period),
            state_tax=from_annual(state_tax, period),
            city_tax=from_annual(city_tax, period),
            fica_tax=from_annual(fica_tax, period),
            medicare_tax=from_annual(medicare_tax + additional_medicare_tax, period),
            additional_medicare_tax=from_annual(additional_medicare_tax, period),
            total_tax=from_annual(total_tax, period),
            net_income=from_annual(net_income, period),
            effective_tax_rate=effective_tax_rate,
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Lookups for the form layer
    # ------------------------------------------------------------------

    def available_states(self) -> list[str]:
        return sorted(self.tables.state_rates)

    def available_cities(self, state: str) -> list[str]:
        return sorted(
            city for city, rate in self.tables.city_rates.items() if rate.state == state
        )
