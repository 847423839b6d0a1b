"""Input records supplied by the caller (form layer, CLI, or another service)."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from takehome.models.enums import FilingStatus, HoldingPeriod, PayPeriod, SpecialIncomeType


class CalculationInput(BaseModel):
    gross_income: Decimal = Field(ge=0)
    pay_period: PayPeriod = PayPeriod.ANNUAL
    state: str = ""
    city: str = ""
    district: str = ""
    filing_status: FilingStatus = FilingStatus.SINGLE


class SpecialIncomeItem(BaseModel):
    """A lump-sum income event: bonus, RSU vest, capital gain, K-1, or option exercise.

    Stock-option fields are only meaningful for ISO/NSO items. ``bargain_element``
    may be supplied directly; otherwise it is derived from FMV, exercise price
    and share count.
    """

    type: SpecialIncomeType
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    withholding: Decimal = Field(default=Decimal("0"), ge=0)
    effective_date: date | None = None
    holding_period: HoldingPeriod | None = None
    # Stock option details
    exercise_price: Decimal | None = Field(default=None, ge=0)
    fair_market_value: Decimal | None = Field(default=None, ge=0)
    number_of_shares: Decimal | None = Field(default=None, ge=0)
    bargain_element: Decimal | None = None
    election_83b: bool = False
    election_83b_date: date | None = None
    disqualifying_disposition: bool = False

    @model_validator(mode="after")
    def _withholding_within_amount(self) -> "SpecialIncomeItem":
        # Option exercises carry their value in the bargain element, not amount.
        if self.type in (SpecialIncomeType.ISO, SpecialIncomeType.NSO):
            return self
        if self.withholding > self.amount:
            raise ValueError("withholding cannot exceed the income amount")
        return self


class W4Settings(BaseModel):
    """The caller's current W-4 elections, used to refine recommendations."""

    filing_status: FilingStatus = FilingStatus.MFJ
    multiple_jobs: bool = False
    claim_dependents: Decimal = Decimal("0")
    other_income: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    extra_withholding: Decimal = Decimal("0")
