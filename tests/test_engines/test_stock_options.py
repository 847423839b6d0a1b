"""Tests for ISO, NSO, AMT and 83(b) computations.

AMT (non-joint): exemption $81,300, phase-out 25% above $578,150,
26% up to $103,050 of AMT base and 28% above.
"""

from datetime import date
from decimal import Decimal

import pytest

from takehome.engines.stock_options import StockOptionEngine
from takehome.models.enums import FilingStatus, OptionType, SpecialIncomeType
from takehome.models.inputs import SpecialIncomeItem

BASE = Decimal("100000")


@pytest.fixture
def engine(calculator):
    return StockOptionEngine(calculator)


@pytest.fixture
def iso_exercise() -> SpecialIncomeItem:
    """1,000 shares at $10 strike, $50 FMV -> $40,000 bargain element."""
    return SpecialIncomeItem(
        type=SpecialIncomeType.ISO,
        exercise_price=Decimal("10"),
        fair_market_value=Decimal("50"),
        number_of_shares=Decimal("1000"),
        effective_date=date(2024, 3, 15),
    )


@pytest.fixture
def nso_exercise() -> SpecialIncomeItem:
    """1,000 shares at $10 strike, $30 FMV -> $20,000 bargain element."""
    return SpecialIncomeItem(
        type=SpecialIncomeType.NSO,
        exercise_price=Decimal("10"),
        fair_market_value=Decimal("30"),
        number_of_shares=Decimal("1000"),
        withholding=Decimal("4400"),
    )


class TestBargainElement:
    def test_derived(self, iso_exercise):
        assert StockOptionEngine.bargain_element(iso_exercise) == Decimal("40000")

    def test_supplied_value_wins(self, iso_exercise):
        item = iso_exercise.model_copy(update={"bargain_element": Decimal("25000")})
        assert StockOptionEngine.bargain_element(item) == Decimal("25000")

    def test_underwater_floored_at_zero(self):
        item = SpecialIncomeItem(
            type=SpecialIncomeType.ISO,
            exercise_price=Decimal("50"),
            fair_market_value=Decimal("30"),
            number_of_shares=Decimal("100"),
        )
        assert StockOptionEngine.bargain_element(item) == Decimal("0")


class TestISO:
    def test_qualifying_hold(self, engine, iso_exercise):
        """AMTI $140,000 - $81,300 = $58,700 x 26% = $15,262; no regular tax."""
        result = engine.calculate_iso_tax_implications(BASE, iso_exercise, FilingStatus.SINGLE)
        assert result.bargain_element == Decimal("40000")
        assert result.regular_tax_amount == Decimal("0")
        assert result.amt_adjustment == Decimal("40000")
        assert result.amt_tax_amount == Decimal("15262")
        assert result.amt_exposure == Decimal("15262")

    def test_disqualifying_disposition(self, engine, iso_exercise):
        """Bargain element taxed as ordinary income: tax($140,000) - tax($100,000) = $9,589.50."""
        item = iso_exercise.model_copy(update={"disqualifying_disposition": True})
        result = engine.calculate_iso_tax_implications(BASE, item, FilingStatus.SINGLE)
        assert result.regular_tax_amount == Decimal("9589.50")
        assert result.amt_exposure == Decimal("5672.50")

    def test_holding_dates(self, engine, iso_exercise):
        result = engine.calculate_iso_tax_implications(BASE, iso_exercise, FilingStatus.SINGLE)
        dates = result.holding_period_requirements
        assert dates.long_term_capital_gains_date == date(2025, 3, 15)
        assert dates.qualifying_disposition_date == date(2025, 3, 16)

    def test_leap_day_exercise(self, engine, iso_exercise):
        item = iso_exercise.model_copy(update={"effective_date": date(2024, 2, 29)})
        dates = engine.calculate_iso_tax_implications(BASE, item, FilingStatus.SINGLE).holding_period_requirements
        assert dates.long_term_capital_gains_date == date(2025, 3, 1)
        assert dates.qualifying_disposition_date == date(2025, 3, 2)

    def test_leap_day_exercise_to_leap_year(self):
        assert StockOptionEngine._add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)

    def test_exposure_never_negative(self, engine, iso_exercise):
        for disqualifying in (False, True):
            item = iso_exercise.model_copy(update={"disqualifying_disposition": disqualifying})
            for base in (Decimal("0"), Decimal("50000"), Decimal("400000")):
                result = engine.calculate_iso_tax_implications(base, item, FilingStatus.MFJ)
                assert result.amt_exposure >= 0


class TestNSO:
    def test_below_wage_base_and_surtax(self, engine, nso_exercise):
        """Income tax $4,789.50; SS $20,000 x 6.2% = $1,240; Medicare $290."""
        result = engine.calculate_nso_tax_implications(BASE, nso_exercise, FilingStatus.SINGLE)
        assert result.bargain_element == Decimal("20000")
        assert result.ordinary_income_tax == Decimal("4789.50")
        assert result.fica_tax == Decimal("1240")
        assert result.medicare_tax == Decimal("290")
        assert result.total_tax_liability == Decimal("6319.50")
        assert result.effective_tax_rate == Decimal("0.315975")
        assert result.withholding == Decimal("4400")
        assert result.withholding_shortfall == Decimal("1919.50")

    def test_social_security_stops_at_wage_base(self, engine, nso_exercise):
        """Only $8,600 of the bargain falls under the $168,600 wage base."""
        result = engine.calculate_nso_tax_implications(Decimal("160000"), nso_exercise, FilingStatus.SINGLE)
        assert result.fica_tax == Decimal("533.20")

    def test_medicare_surtax_on_slice_above_threshold(self, engine, nso_exercise):
        """$190,000 + $20,000 crosses $200,000 by $10,000: $290 + $90."""
        result = engine.calculate_nso_tax_implications(Decimal("190000"), nso_exercise, FilingStatus.SINGLE)
        assert result.medicare_tax == Decimal("380")

    def test_medicare_surtax_when_already_above(self, engine, nso_exercise):
        """$290 + 0.9% x $20,000 = $470."""
        result = engine.calculate_nso_tax_implications(Decimal("250000"), nso_exercise, FilingStatus.SINGLE)
        assert result.medicare_tax == Decimal("470")

    def test_zero_bargain(self, engine):
        item = SpecialIncomeItem(type=SpecialIncomeType.NSO)
        result = engine.calculate_nso_tax_implications(BASE, item, FilingStatus.SINGLE)
        assert result.total_tax_liability == Decimal("0")
        assert result.effective_tax_rate == Decimal("0")


class TestAMT:
    def test_two_rate_tiers(self, engine):
        """AMT base $118,700: $103,050 x 26% = $26,793 + $15,650 x 28% = $4,382."""
        assert engine.calculate_amt_tax(Decimal("200000"), Decimal("0"), FilingStatus.SINGLE) == Decimal("31175")

    def test_married_exemption(self, engine):
        """$300,000 - $126,500 = $173,500 x 26% = $45,110."""
        assert engine.calculate_amt_tax(Decimal("300000"), Decimal("0"), FilingStatus.MFJ) == Decimal("45110")

    def test_exemption_phase_out(self, engine):
        """AMTI $700,000: exemption $81,300 - 25% x $121,850 = $50,837.50."""
        result = engine.calculate_full_amt(Decimal("700000"), Decimal("0"), FilingStatus.SINGLE)
        assert result.amt_exemption == Decimal("50837.50")

    def test_exemption_fully_phased_out(self, engine):
        result = engine.calculate_full_amt(Decimal("1000000"), Decimal("0"), FilingStatus.SINGLE)
        assert result.amt_exemption == Decimal("0")

    def test_full_amt_with_adjustment(self, engine):
        """Regular tax $17,053; tentative AMT on $200,000 AMTI is $31,175."""
        result = engine.calculate_full_amt(BASE, Decimal("100000"), FilingStatus.SINGLE)
        assert result.regular_tax_liability == Decimal("17053")
        assert result.amt_income == Decimal("200000")
        assert result.amt_exemption == Decimal("81300")
        assert result.amt_liability == Decimal("31175")
        assert result.amt_exposure == Decimal("14122")

    def test_no_exposure_without_adjustments(self, engine):
        """Tentative AMT $4,862 is below regular tax $17,053."""
        result = engine.calculate_full_amt(BASE, Decimal("0"), FilingStatus.SINGLE)
        assert result.amt_liability == Decimal("4862")
        assert result.amt_exposure == Decimal("0")


class TestElection83b:
    def test_deadline_is_thirty_days(self, engine):
        checklist = engine.generate_83b_election_checklist(date(2025, 1, 1))
        assert checklist.exercise_date == date(2025, 1, 1)
        assert checklist.deadline_date == date(2025, 1, 31)

    def test_steps(self, engine):
        checklist = engine.generate_83b_election_checklist(date(2025, 1, 1))
        assert [s.step for s in checklist.steps] == [
            "Complete 83(b) election form",
            "Sign and date the election form",
            "Make three copies of the signed form",
            "Mail the form to the IRS",
            "Send certified mail with return receipt",
            "Provide copy to employer",
            "Attach copy to tax return",
        ]
        deadlines = [s.deadline for s in checklist.steps]
        assert deadlines == [None, None, None, date(2025, 1, 31), date(2025, 1, 31), date(2025, 1, 31), None]
        assert [s.is_required for s in checklist.steps] == [True, True, True, True, False, True, True]

    def test_deadline_crosses_month(self, engine):
        checklist = engine.generate_83b_election_checklist(date(2024, 2, 15))
        assert checklist.deadline_date == date(2024, 3, 16)

    def test_eligibility(self):
        assert StockOptionEngine.is_eligible_for_83b_election(OptionType.ISO, is_unvested=True) is True
        assert StockOptionEngine.is_eligible_for_83b_election(OptionType.NSO, is_unvested=True) is True
        assert StockOptionEngine.is_eligible_for_83b_election(OptionType.NSO, is_unvested=False) is False

    def test_benefits(self):
        """10,000 shares, $1 strike, $2 now, $10 at vesting, 37%.

        Without: $9 x 10,000 x 37% = $33,300. With: $1 x 10,000 x 37% = $3,700.
        """
        benefits = StockOptionEngine.calculate_83b_election_benefits(
            Decimal("1"), Decimal("2"), Decimal("10"), Decimal("10000"), Decimal("0.37")
        )
        assert benefits.tax_without_election == Decimal("33300")
        assert benefits.tax_with_election == Decimal("3700")
        assert benefits.potential_savings == Decimal("29600")
        assert benefits.risk_of_loss == Decimal("3700")
