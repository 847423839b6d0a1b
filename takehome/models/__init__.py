"""Data models for the take-home pay planner."""

from takehome.models.enums import (
    FilingStatus,
    HoldingPeriod,
    OptionType,
    PayPeriod,
    SpecialIncomeType,
    StateTaxType,
    W4FilingStatus,
)
from takehome.models.inputs import CalculationInput, SpecialIncomeItem, W4Settings
from takehome.models.reports import (
    AMTCalculation,
    CalculationResult,
    ChecklistStep,
    DualEarnerAnalysis,
    Election83bBenefits,
    Election83bChecklist,
    HoldingPeriodRequirements,
    ISOTaxImplications,
    K1TaxEstimate,
    NSOTaxImplications,
    SafeHarborCalculation,
    SpecialIncomeImpact,
    SpecialIncomeSummary,
    W4Recommendation,
    WithholdingPlan,
)
from takehome.models.tables import CityTaxRate, StateTaxRate, TaxBracket, TaxTables

__all__ = [
    "AMTCalculation",
    "CalculationInput",
    "CalculationResult",
    "ChecklistStep",
    "CityTaxRate",
    "DualEarnerAnalysis",
    "Election83bBenefits",
    "Election83bChecklist",
    "FilingStatus",
    "HoldingPeriod",
    "HoldingPeriodRequirements",
    "ISOTaxImplications",
    "K1TaxEstimate",
    "NSOTaxImplications",
    "OptionType",
    "PayPeriod",
    "SafeHarborCalculation",
    "SpecialIncomeImpact",
    "SpecialIncomeItem",
    "SpecialIncomeSummary",
    "SpecialIncomeType",
    "StateTaxRate",
    "StateTaxType",
    "TaxBracket",
    "TaxTables",
    "W4FilingStatus",
    "W4Recommendation",
    "W4Settings",
    "WithholdingPlan",
]
