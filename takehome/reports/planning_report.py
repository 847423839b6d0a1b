"""Planning report generator: safe harbor, dual earner, special income and stock options."""

from takehome.models.reports import (
    AMTCalculation,
    DualEarnerAnalysis,
    Election83bChecklist,
    ISOTaxImplications,
    NSOTaxImplications,
    SafeHarborCalculation,
    SpecialIncomeSummary,
    W4Recommendation,
    WithholdingPlan,
)
from takehome.reports.environment import build_environment


class PlanningReportGenerator:
    """Renders the planning engines' results as plain text."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render_safe_harbor(
        self,
        federal: SafeHarborCalculation,
        plan: WithholdingPlan,
        california: SafeHarborCalculation | None = None,
    ) -> str:
        template = self.env.get_template("safe_harbor.txt")
        return template.render(federal=federal, california=california, plan=plan)

    def render_dual_earner(
        self, analysis: DualEarnerAnalysis, recommendation: W4Recommendation
    ) -> str:
        template = self.env.get_template("dual_earner.txt")
        return template.render(analysis=analysis, rec=recommendation)

    def render_special_income(self, summary: SpecialIncomeSummary) -> str:
        template = self.env.get_template("special_income.txt")
        return template.render(summary=summary)

    def render_iso(self, iso: ISOTaxImplications) -> str:
        template = self.env.get_template("iso.txt")
        return template.render(iso=iso)

    def render_nso(self, nso: NSOTaxImplications) -> str:
        template = self.env.get_template("nso.txt")
        return template.render(nso=nso)

    def render_amt(self, amt: AMTCalculation) -> str:
        template = self.env.get_template("amt.txt")
        return template.render(amt=amt)

    def render_83b_checklist(self, checklist: Election83bChecklist) -> str:
        """Render the 83(b) filing checklist with its deadline."""
        template = self.env.get_template("election_83b.txt")
        return template.render(checklist=checklist)
