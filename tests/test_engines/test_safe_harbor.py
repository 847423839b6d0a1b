"""Tests for safe harbor targets and withholding plans.

IRC 6654(d)(1)(C): 110% of prior-year tax when AGI exceeds $150,000
($75,000 here for non-joint filers); California uses 90%.
"""

from datetime import date
from decimal import Decimal

import pytest

from takehome.engines.safe_harbor import SafeHarborEngine
from takehome.exceptions import InvalidInputError, UnsupportedPayPeriodError
from takehome.models.enums import FilingStatus, PayPeriod


@pytest.fixture
def engine():
    return SafeHarborEngine()


class TestFederalSafeHarbor:
    def test_high_earner_married(self, engine):
        """$160,000 MFJ > $150,000 -> 110% x $10,000 = $11,000."""
        result = engine.calculate_federal_safe_harbor(
            Decimal("160000"), Decimal("10000"), Decimal("0"), FilingStatus.MFJ
        )
        assert result.is_high_earner is True
        assert result.safe_harbor_percentage == Decimal("1.10")
        assert result.safe_harbor_amount == Decimal("11000")
        assert result.remaining_withholding_needed == Decimal("11000")
        assert result.is_on_track is False

    def test_standard_married(self, engine):
        """$140,000 MFJ -> 100% x $10,000 = $10,000."""
        result = engine.calculate_federal_safe_harbor(
            Decimal("140000"), Decimal("10000"), Decimal("4000"), FilingStatus.MFJ
        )
        assert result.is_high_earner is False
        assert result.safe_harbor_amount == Decimal("10000")
        assert result.remaining_withholding_needed == Decimal("6000")

    def test_remaining_floored_at_zero(self, engine):
        result = engine.calculate_federal_safe_harbor(
            Decimal("140000"), Decimal("10000"), Decimal("12500"), FilingStatus.MFJ
        )
        assert result.remaining_withholding_needed == Decimal("0")
        assert result.is_on_track is True

    def test_exactly_on_target_is_on_track(self, engine):
        result = engine.calculate_federal_safe_harbor(
            Decimal("140000"), Decimal("10000"), Decimal("10000"), FilingStatus.MFJ
        )
        assert result.is_on_track is True

    def test_negative_prior_year_tax_raises(self, engine):
        with pytest.raises(InvalidInputError, match="prior_year_tax"):
            engine.calculate_federal_safe_harbor(
                Decimal("100000"), Decimal("-1"), Decimal("0"), FilingStatus.SINGLE
            )


class TestHighEarnerThreshold:
    def test_single_threshold_is_strict(self, engine):
        assert engine.is_high_earner(Decimal("75000"), FilingStatus.SINGLE) is False
        assert engine.is_high_earner(Decimal("75001"), FilingStatus.SINGLE) is True

    def test_married_threshold(self, engine):
        assert engine.is_high_earner(Decimal("150000"), FilingStatus.MFJ) is False
        assert engine.is_high_earner(Decimal("150001"), FilingStatus.MFJ) is True


class TestCaliforniaSafeHarbor:
    def test_ninety_percent(self, engine):
        """90% x $10,000 = $9,000 regardless of income."""
        result = engine.calculate_california_safe_harbor(
            Decimal("300000"), Decimal("10000"), Decimal("0"), FilingStatus.SINGLE
        )
        assert result.safe_harbor_amount == Decimal("9000")
        assert result.safe_harbor_percentage == Decimal("0.90")


class TestWithholdingPlan:
    def test_plan(self, engine):
        """$6,000 over 12 periods = $500 extra; $400 x 12 = $4,800 projected; $1,200 short."""
        plan = engine.create_withholding_plan(Decimal("6000"), 12, Decimal("400"))
        assert plan.pay_periods_remaining == 12
        assert plan.additional_withholding_per_period == Decimal("500")
        assert plan.projected_annual_withholding == Decimal("4800")
        assert plan.projected_shortfall == Decimal("1200")

    def test_shortfall_floored_at_zero(self, engine):
        plan = engine.create_withholding_plan(Decimal("1000"), 10, Decimal("400"))
        assert plan.projected_shortfall == Decimal("0")

    def test_zero_periods_raises(self, engine):
        with pytest.raises(InvalidInputError, match="periods_remaining"):
            engine.create_withholding_plan(Decimal("1000"), 0, Decimal("0"))


class TestRemainingPayPeriods:
    def test_december_first(self, engine):
        """30 days to Dec 31."""
        ref = date(2024, 12, 1)
        assert engine.calculate_remaining_pay_periods(PayPeriod.WEEKLY, ref) == 5
        assert engine.calculate_remaining_pay_periods(PayPeriod.BIWEEKLY, ref) == 3
        assert engine.calculate_remaining_pay_periods(PayPeriod.SEMI_MONTHLY, ref) == 2
        assert engine.calculate_remaining_pay_periods(PayPeriod.MONTHLY, ref) == 1

    def test_start_of_year(self, engine):
        """365 days / 14 = 26.07 -> 27."""
        assert engine.calculate_remaining_pay_periods(PayPeriod.BIWEEKLY, date(2024, 1, 1)) == 27

    def test_year_end(self, engine):
        assert engine.calculate_remaining_pay_periods(PayPeriod.WEEKLY, date(2024, 12, 31)) == 0

    def test_annual_unsupported(self, engine):
        with pytest.raises(UnsupportedPayPeriodError):
            engine.calculate_remaining_pay_periods(PayPeriod.ANNUAL, date(2024, 6, 1))


class TestShortcuts:
    def test_no_math_high_earner(self, engine):
        """$20,000 x 110% / 10 = $2,200."""
        assert engine.calculate_no_math_solution(Decimal("20000"), 10) == Decimal("2200")

    def test_no_math_standard(self, engine):
        assert engine.calculate_no_math_solution(Decimal("20000"), 10, is_high_earner=False) == Decimal("2000")

    def test_no_math_zero_periods_raises(self, engine):
        with pytest.raises(InvalidInputError):
            engine.calculate_no_math_solution(Decimal("20000"), 0)

    def test_year_end_catch_up(self, engine):
        assert engine.calculate_year_end_catch_up(Decimal("11000"), Decimal("10000")) == Decimal("1000")
        assert engine.calculate_year_end_catch_up(Decimal("11000"), Decimal("12000")) == Decimal("0")
