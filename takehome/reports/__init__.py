"""Plain-text report generation."""

from takehome.reports.planning_report import PlanningReportGenerator
from takehome.reports.take_home_summary import TakeHomeSummaryGenerator

__all__ = [
    "PlanningReportGenerator",
    "TakeHomeSummaryGenerator",
]
