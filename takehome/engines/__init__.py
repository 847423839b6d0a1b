"""Tax computation engines."""

from takehome.engines.dual_earner import DualEarnerAnalyzer
from takehome.engines.jurisdiction import TaxCalculator
from takehome.engines.safe_harbor import SafeHarborEngine
from takehome.engines.special_income import SpecialIncomeEngine
from takehome.engines.stock_options import StockOptionEngine

__all__ = [
    "DualEarnerAnalyzer",
    "SafeHarborEngine",
    "SpecialIncomeEngine",
    "StockOptionEngine",
    "TaxCalculator",
]
