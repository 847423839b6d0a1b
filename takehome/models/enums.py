"""Enumerations for the take-home pay planner."""

from enum import StrEnum


class FilingStatus(StrEnum):
    SINGLE = "single"
    MFJ = "married"
    MFS = "marriedSeparate"
    HOH = "headOfHousehold"


class PayPeriod(StrEnum):
    ANNUAL = "annual"
    MONTHLY = "monthly"
    SEMI_MONTHLY = "semiMonthly"
    BIWEEKLY = "biweekly"
    WEEKLY = "weekly"


class SpecialIncomeType(StrEnum):
    BONUS = "bonus"
    RSU = "rsu"
    CAPITAL_GAINS = "capitalGains"
    K1 = "k1"
    ISO = "iso"
    NSO = "nso"
    OTHER = "other"


class HoldingPeriod(StrEnum):
    SHORT_TERM = "shortTerm"
    LONG_TERM = "longTerm"


class StateTaxType(StrEnum):
    FLAT = "flat"
    PROGRESSIVE = "progressive"


class W4FilingStatus(StrEnum):
    """Filing status box recommended on a W-4 (includes the higher-rate option)."""

    SINGLE = "single"
    MARRIED = "married"
    HOH = "headOfHousehold"
    MARRIED_WITHHOLD_AT_HIGHER = "marriedWithholdAtHigher"


class OptionType(StrEnum):
    ISO = "iso"
    NSO = "nso"
