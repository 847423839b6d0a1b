"""Take-home pay summary report generator."""

from takehome.models.inputs import CalculationInput
from takehome.models.reports import CalculationResult
from takehome.reports.environment import build_environment


class TakeHomeSummaryGenerator:
    """Generates a human-readable paycheck breakdown."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, result: CalculationResult, calc_input: CalculationInput) -> str:
        """Render take-home summary report."""
        template = self.env.get_template("take_home_summary.txt")
        return template.render(result=result, inp=calc_input)
