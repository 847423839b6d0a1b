"""Shared test fixtures for the take-home pay planner."""

from decimal import Decimal

import pytest

from takehome.engines.brackets import load_default_tables
from takehome.engines.jurisdiction import TaxCalculator
from takehome.models.enums import SpecialIncomeType
from takehome.models.inputs import SpecialIncomeItem
from takehome.models.tables import TaxTables


@pytest.fixture
def tables() -> TaxTables:
    return load_default_tables()


@pytest.fixture
def calculator(tables: TaxTables) -> TaxCalculator:
    return TaxCalculator(tables)


@pytest.fixture
def sample_bonus() -> SpecialIncomeItem:
    """$20,000 bonus withheld at the 22% supplemental rate."""
    return SpecialIncomeItem(
        type=SpecialIncomeType.BONUS,
        amount=Decimal("20000"),
        withholding=Decimal("4400"),
    )
