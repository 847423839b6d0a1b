"""Tests for dual-earner withholding gap analysis.

Joint brackets are exactly double the single brackets below the 35% bracket,
so a gap only appears once combined income reaches the joint 37% bracket
($731,200) before either single 37% bracket ($609,350).
"""

from decimal import Decimal

import pytest

from takehome.engines.dual_earner import DualEarnerAnalyzer
from takehome.models.enums import FilingStatus, W4FilingStatus
from takehome.models.inputs import W4Settings


@pytest.fixture
def analyzer(calculator):
    return DualEarnerAnalyzer(calculator)


class TestAnalyzeHousehold:
    def test_no_gap_below_top_bracket(self, analyzer):
        """$100k + $100k MFJ: joint tax $34,106 == 2 x single $17,053."""
        analysis = analyzer.analyze_dual_earner_household(
            Decimal("100000"), Decimal("12000"), Decimal("100000"), Decimal("12000"), FilingStatus.MFJ
        )
        assert analysis.combined_income == Decimal("200000")
        assert analysis.combined_withholding == Decimal("24000")
        assert analysis.combined_tax == Decimal("34106")
        assert analysis.separate_withholding_estimate == Decimal("34106")
        assert analysis.withholding_gap == Decimal("0")
        assert analysis.recommended_w4_adjustment == Decimal("0")

    def test_moderate_gap(self, analyzer):
        """$425k + $425k MFJ.

        Joint: $196,669.50 through $731,200 + $118,800 x 37% = $240,625.50.
        Single each: $55,678.50 + $181,275 x 35% = $119,124.75; x 2 = $238,249.50.
        Gap $2,376; $198/month.
        """
        analysis = analyzer.analyze_dual_earner_household(
            Decimal("425000"), Decimal("0"), Decimal("425000"), Decimal("0"), FilingStatus.MFJ
        )
        assert analysis.combined_tax == Decimal("240625.50")
        assert analysis.separate_withholding_estimate == Decimal("238249.50")
        assert analysis.withholding_gap == Decimal("2376")
        assert analysis.recommended_w4_adjustment == Decimal("198")

    def test_large_gap_rounds_monthly_up(self, analyzer):
        """$700k + $700k MFJ: gap $9,750; $812.50/month -> $813."""
        analysis = analyzer.analyze_dual_earner_household(
            Decimal("700000"), Decimal("0"), Decimal("700000"), Decimal("0"), FilingStatus.MFJ
        )
        assert analysis.withholding_gap == Decimal("9750")
        assert analysis.recommended_w4_adjustment == Decimal("813")

    def test_gap_never_negative(self, analyzer):
        for primary, secondary in [(50000, 0), (150000, 100000), (300000, 20000)]:
            analysis = analyzer.analyze_dual_earner_household(
                Decimal(primary), Decimal("0"), Decimal(secondary), Decimal("0"), FilingStatus.MFJ
            )
            assert analysis.withholding_gap >= 0


class TestW4Recommendations:
    def _analysis(self, analyzer, income):
        return analyzer.analyze_dual_earner_household(
            Decimal(income), Decimal("0"), Decimal(income), Decimal("0"), FilingStatus.MFJ
        )

    def test_no_gap_only_closing_line(self, analyzer):
        rec = analyzer.create_w4_recommendations(self._analysis(analyzer, 100000))
        assert rec.filing_status == W4FilingStatus.MARRIED
        assert rec.additional_withholding == Decimal("0")
        assert len(rec.recommended_changes) == 1
        assert "allowances" in rec.recommended_changes[0]

    def test_moderate_gap_without_current_w4(self, analyzer):
        rec = analyzer.create_w4_recommendations(self._analysis(analyzer, 425000))
        assert rec.filing_status == W4FilingStatus.MARRIED
        assert rec.recommended_changes[0].startswith("Add $198 additional withholding per month")
        assert len(rec.recommended_changes) == 2

    def test_moderate_gap_suggests_multiple_jobs_box(self, analyzer):
        rec = analyzer.create_w4_recommendations(
            self._analysis(analyzer, 425000), W4Settings(multiple_jobs=False)
        )
        assert len(rec.recommended_changes) == 3
        assert "Step 2(c)" in rec.recommended_changes[1]

    def test_multiple_jobs_already_checked(self, analyzer):
        rec = analyzer.create_w4_recommendations(
            self._analysis(analyzer, 425000), W4Settings(multiple_jobs=True)
        )
        assert not any("Step 2(c)" in line for line in rec.recommended_changes)

    def test_large_gap_withhold_at_higher_rate(self, analyzer):
        rec = analyzer.create_w4_recommendations(
            self._analysis(analyzer, 700000), W4Settings(multiple_jobs=False)
        )
        assert rec.filing_status == W4FilingStatus.MARRIED_WITHHOLD_AT_HIGHER
        assert rec.additional_withholding == Decimal("813")
        assert rec.recommended_changes[0].startswith("Add $813")
        assert "higher Single rate" in rec.recommended_changes[1]
        assert "Step 2(c)" in rec.recommended_changes[2]
        assert "allowances" in rec.recommended_changes[-1]
        assert rec.adjust_dependents == Decimal("0")


class TestMultipleJobsImpact:
    def test_low_tier(self, analyzer):
        """Higher income <= $75k -> 3% of $50,000 = $1,500."""
        assert analyzer.calculate_multiple_jobs_impact(Decimal("70000"), Decimal("50000")) == Decimal("1500")

    def test_middle_tier_boundary(self, analyzer):
        """Exactly $150k stays in the 4% tier: 4% x $60,000 = $2,400."""
        assert analyzer.calculate_multiple_jobs_impact(Decimal("60000"), Decimal("150000")) == Decimal("2400")

    def test_high_tier(self, analyzer):
        assert analyzer.calculate_multiple_jobs_impact(Decimal("200000"), Decimal("50000")) == Decimal("3000")
