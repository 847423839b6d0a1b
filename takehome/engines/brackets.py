"""Tax rate configuration.

Federal brackets, state and city rates, payroll tax parameters, and the
planning constants (safe harbor, AMT, capital gains, K-1) used by the engines.
Never hardcode rates in computation functions.

Sources:
  - Federal brackets 2024: IRS Rev. Proc. 2023-34
  - California brackets 2024: FTB Publication 1001 (2024)
  - State/city flat rates: top marginal rates as of May 2024 (simplified)
"""

from decimal import Decimal
from functools import lru_cache

from takehome.models.enums import FilingStatus, StateTaxType
from takehome.models.tables import CityTaxRate, StateTaxRate, TaxBracket, TaxTables

DEFAULT_TAX_YEAR = 2024


def _table(bounds: list[tuple[Decimal | None, Decimal]]) -> tuple[TaxBracket, ...]:
    """Build contiguous TaxBrackets from (upper_bound, rate) pairs."""
    brackets: list[TaxBracket] = []
    floor = Decimal("0")
    for upper_bound, rate in bounds:
        brackets.append(TaxBracket(min=floor, max=upper_bound, rate=rate))
        if upper_bound is not None:
            floor = upper_bound
    return tuple(brackets)


# ---------------------------------------------------------------------------
# Federal ordinary income brackets: {filing_status: [(upper_bound, rate), ...]}
# Upper bound is Decimal or None for the top bracket.
# ---------------------------------------------------------------------------
FEDERAL_BRACKETS: dict[FilingStatus, list[tuple[Decimal | None, Decimal]]] = {
    FilingStatus.SINGLE: [
        (Decimal("11600"), Decimal("0.10")),
        (Decimal("47150"), Decimal("0.12")),
        (Decimal("100525"), Decimal("0.22")),
        (Decimal("191950"), Decimal("0.24")),
        (Decimal("243725"), Decimal("0.32")),
        (Decimal("609350"), Decimal("0.35")),
        (None, Decimal("0.37")),
    ],
    FilingStatus.MFJ: [
        (Decimal("23200"), Decimal("0.10")),
        (Decimal("94300"), Decimal("0.12")),
        (Decimal("201050"), Decimal("0.22")),
        (Decimal("383900"), Decimal("0.24")),
        (Decimal("487450"), Decimal("0.32")),
        (Decimal("731200"), Decimal("0.35")),
        (None, Decimal("0.37")),
    ],
    FilingStatus.MFS: [
        (Decimal("11600"), Decimal("0.10")),
        (Decimal("47150"), Decimal("0.12")),
        (Decimal("100525"), Decimal("0.22")),
        (Decimal("191950"), Decimal("0.24")),
        (Decimal("243725"), Decimal("0.32")),
        (Decimal("365600"), Decimal("0.35")),
        (None, Decimal("0.37")),
    ],
    FilingStatus.HOH: [
        (Decimal("16550"), Decimal("0.10")),
        (Decimal("63100"), Decimal("0.12")),
        (Decimal("100500"), Decimal("0.22")),
        (Decimal("191950"), Decimal("0.24")),
        (Decimal("243700"), Decimal("0.32")),
        (Decimal("609350"), Decimal("0.35")),
        (None, Decimal("0.37")),
    ],
}

# ---------------------------------------------------------------------------
# California brackets (2024): CA Revenue and Taxation Code Section 17041
# ---------------------------------------------------------------------------
CALIFORNIA_BRACKETS: dict[FilingStatus, list[tuple[Decimal | None, Decimal]]] = {
    FilingStatus.SINGLE: [
        (Decimal("10412"), Decimal("0.01")),
        (Decimal("24684"), Decimal("0.02")),
        (Decimal("38959"), Decimal("0.04")),
        (Decimal("54081"), Decimal("0.06")),
        (Decimal("68350"), Decimal("0.08")),
        (Decimal("349137"), Decimal("0.093")),
        (Decimal("418961"), Decimal("0.103")),
        (Decimal("698271"), Decimal("0.113")),
        (None, Decimal("0.123")),
    ],
    FilingStatus.MFJ: [
        (Decimal("20824"), Decimal("0.01")),
        (Decimal("49368"), Decimal("0.02")),
        (Decimal("77918"), Decimal("0.04")),
        (Decimal("108162"), Decimal("0.06")),
        (Decimal("136700"), Decimal("0.08")),
        (Decimal("698274"), Decimal("0.093")),
        (Decimal("837922"), Decimal("0.103")),
        (Decimal("1396542"), Decimal("0.113")),
        (None, Decimal("0.123")),
    ],
    FilingStatus.HOH: [
        (Decimal("20839"), Decimal("0.01")),
        (Decimal("49371"), Decimal("0.02")),
        (Decimal("63644"), Decimal("0.04")),
        (Decimal("78765"), Decimal("0.06")),
        (Decimal("93037"), Decimal("0.08")),
        (Decimal("474824"), Decimal("0.093")),
        (Decimal("569790"), Decimal("0.103")),
        (Decimal("949649"), Decimal("0.113")),
        (None, Decimal("0.123")),
    ],
}

# ---------------------------------------------------------------------------
# Flat state rates (top marginal rate where the state is progressive).
# States listed in PROGRESSIVE_STATE_BRACKETS override this table.
# ---------------------------------------------------------------------------
FLAT_STATE_RATES: dict[str, Decimal] = {
    "Alabama": Decimal("0.05"),
    "Alaska": Decimal("0.00"),
    "Arizona": Decimal("0.0459"),
    "Arkansas": Decimal("0.047"),
    "Colorado": Decimal("0.044"),
    "Connecticut": Decimal("0.0699"),
    "Delaware": Decimal("0.066"),
    "District of Columbia": Decimal("0.0995"),
    "Florida": Decimal("0.00"),
    "Georgia": Decimal("0.0575"),
    "Hawaii": Decimal("0.11"),
    "Idaho": Decimal("0.059"),
    "Illinois": Decimal("0.0495"),
    "Indiana": Decimal("0.0323"),
    "Iowa": Decimal("0.0575"),
    "Kansas": Decimal("0.057"),
    "Kentucky": Decimal("0.045"),
    "Louisiana": Decimal("0.0425"),
    "Maine": Decimal("0.0715"),
    "Maryland": Decimal("0.0575"),
    "Massachusetts": Decimal("0.05"),
    "Michigan": Decimal("0.0425"),
    "Minnesota": Decimal("0.0985"),
    "Mississippi": Decimal("0.05"),
    "Missouri": Decimal("0.049"),
    "Montana": Decimal("0.0675"),
    "Nebraska": Decimal("0.0664"),
    "Nevada": Decimal("0.00"),
    "New Hampshire": Decimal("0.05"),  # interest and dividends only
    "New Jersey": Decimal("0.1075"),
    "New Mexico": Decimal("0.059"),
    "New York": Decimal("0.109"),
    "North Carolina": Decimal("0.0475"),
    "North Dakota": Decimal("0.0290"),
    "Ohio": Decimal("0.0399"),
    "Oklahoma": Decimal("0.0475"),
    "Oregon": Decimal("0.099"),
    "Pennsylvania": Decimal("0.0307"),
    "Rhode Island": Decimal("0.0599"),
    "South Carolina": Decimal("0.07"),
    "South Dakota": Decimal("0.00"),
    "Tennessee": Decimal("0.00"),
    "Texas": Decimal("0.00"),
    "Utah": Decimal("0.0485"),
    "Vermont": Decimal("0.0875"),
    "Virginia": Decimal("0.0575"),
    "Washington": Decimal("0.00"),
    "West Virginia": Decimal("0.065"),
    "Wisconsin": Decimal("0.0765"),
    "Wyoming": Decimal("0.00"),
}

PROGRESSIVE_STATE_BRACKETS: dict[str, dict[FilingStatus, list[tuple[Decimal | None, Decimal]]]] = {
    "California": CALIFORNIA_BRACKETS,
}

# ---------------------------------------------------------------------------
# City/local income tax: {city: (state, rate)}
# ---------------------------------------------------------------------------
CITY_RATES: dict[str, tuple[str, Decimal]] = {
    "New York City": ("New York", Decimal("0.03876")),
    "Yonkers": ("New York", Decimal("0.016")),
    "Philadelphia": ("Pennsylvania", Decimal("0.0399")),
    "Pittsburgh": ("Pennsylvania", Decimal("0.03")),
    "Scranton": ("Pennsylvania", Decimal("0.0295")),
    "Reading": ("Pennsylvania", Decimal("0.0235")),
    "Allentown": ("Pennsylvania", Decimal("0.0235")),
    "Columbus": ("Ohio", Decimal("0.025")),
    "Cleveland": ("Ohio", Decimal("0.025")),
    "Cincinnati": ("Ohio", Decimal("0.019")),
    "Toledo": ("Ohio", Decimal("0.0225")),
    "Akron": ("Ohio", Decimal("0.025")),
    "Dayton": ("Ohio", Decimal("0.0225")),
    "Detroit": ("Michigan", Decimal("0.024")),
    "Grand Rapids": ("Michigan", Decimal("0.015")),
    "Lansing": ("Michigan", Decimal("0.01")),
    "Flint": ("Michigan", Decimal("0.01")),
    "St. Louis": ("Missouri", Decimal("0.01")),
    "Kansas City": ("Missouri", Decimal("0.01")),
    "Louisville": ("Kentucky", Decimal("0.0285")),
    "Lexington": ("Kentucky", Decimal("0.0225")),
    "Birmingham": ("Alabama", Decimal("0.01")),
    "Montgomery": ("Alabama", Decimal("0.01")),
    "Baltimore": ("Maryland", Decimal("0.032")),
    "Annapolis": ("Maryland", Decimal("0.025")),
    "Indianapolis": ("Indiana", Decimal("0.0202")),
    "Fort Wayne": ("Indiana", Decimal("0.015")),
    "Des Moines": ("Iowa", Decimal("0.01")),
    "Cedar Rapids": ("Iowa", Decimal("0.01")),
    "San Francisco": ("California", Decimal("0.01")),
    "Los Angeles": ("California", Decimal("0.00")),
    "San Diego": ("California", Decimal("0.00")),
    "Chicago": ("Illinois", Decimal("0.00")),
    "Springfield": ("Illinois", Decimal("0.00")),
    "Dallas": ("Texas", Decimal("0.00")),
    "Houston": ("Texas", Decimal("0.00")),
    "Austin": ("Texas", Decimal("0.00")),
    "Miami": ("Florida", Decimal("0.00")),
    "Orlando": ("Florida", Decimal("0.00")),
    "Tampa": ("Florida", Decimal("0.00")),
    "Seattle": ("Washington", Decimal("0.00")),
    "Spokane": ("Washington", Decimal("0.00")),
    "Portland": ("Oregon", Decimal("0.00")),
    "Salem": ("Oregon", Decimal("0.00")),
    "Denver": ("Colorado", Decimal("0.00")),
    "Boulder": ("Colorado", Decimal("0.00")),
    "Phoenix": ("Arizona", Decimal("0.00")),
    "Tucson": ("Arizona", Decimal("0.00")),
    "Las Vegas": ("Nevada", Decimal("0.00")),
    "Reno": ("Nevada", Decimal("0.00")),
    "Salt Lake City": ("Utah", Decimal("0.00")),
    "Provo": ("Utah", Decimal("0.00")),
    "Boston": ("Massachusetts", Decimal("0.00")),
    "Cambridge": ("Massachusetts", Decimal("0.00")),
    "Hartford": ("Connecticut", Decimal("0.00")),
    "New Haven": ("Connecticut", Decimal("0.00")),
    "Newark": ("New Jersey", Decimal("0.01")),
    "Jersey City": ("New Jersey", Decimal("0.01")),
    "Richmond": ("Virginia", Decimal("0.00")),
    "Virginia Beach": ("Virginia", Decimal("0.00")),
    "Charlotte": ("North Carolina", Decimal("0.00")),
    "Raleigh": ("North Carolina", Decimal("0.00")),
    "Atlanta": ("Georgia", Decimal("0.00")),
    "Savannah": ("Georgia", Decimal("0.00")),
    "Nashville": ("Tennessee", Decimal("0.00")),
    "Memphis": ("Tennessee", Decimal("0.00")),
    "Washington D.C.": ("District of Columbia", Decimal("0.00")),
}

# ---------------------------------------------------------------------------
# Payroll taxes (IRC Sections 3101(a), 3101(b))
# Additional Medicare thresholds are statutory and NOT inflation-adjusted.
# ---------------------------------------------------------------------------
SOCIAL_SECURITY_RATE = Decimal("0.062")
SOCIAL_SECURITY_WAGE_BASE = Decimal("168600")  # 2024
MEDICARE_RATE = Decimal("0.0145")
ADDITIONAL_MEDICARE_TAX_RATE = Decimal("0.009")
ADDITIONAL_MEDICARE_TAX_THRESHOLD: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("200000"),
    FilingStatus.MFJ: Decimal("250000"),
    FilingStatus.MFS: Decimal("125000"),
    FilingStatus.HOH: Decimal("200000"),
}

# ---------------------------------------------------------------------------
# Safe harbor (IRC Section 6654(d)(1)(C); CA R&TC Section 19136)
# High earners must pay 110% of prior-year tax instead of 100%.
# ---------------------------------------------------------------------------
SAFE_HARBOR_STANDARD_RATE = Decimal("1.00")
SAFE_HARBOR_HIGH_EARNER_RATE = Decimal("1.10")
SAFE_HARBOR_HIGH_EARNER_THRESHOLD: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("75000"),
    FilingStatus.MFJ: Decimal("150000"),
    FilingStatus.MFS: Decimal("75000"),
    FilingStatus.HOH: Decimal("75000"),
}
CALIFORNIA_SAFE_HARBOR_RATE = Decimal("0.90")

# ---------------------------------------------------------------------------
# W-4 recommendation thresholds
# ---------------------------------------------------------------------------
W4_HIGHER_RATE_GAP_THRESHOLD = Decimal("5000")
W4_MULTIPLE_JOBS_GAP_THRESHOLD = Decimal("2000")

# Rough additional withholding from checking W-4 Step 2(c), by higher earner's income.
MULTIPLE_JOBS_RATES: list[tuple[Decimal | None, Decimal]] = [
    (Decimal("75000"), Decimal("0.03")),
    (Decimal("150000"), Decimal("0.04")),
    (None, Decimal("0.06")),
]

# ---------------------------------------------------------------------------
# Supplemental wage withholding (Treas. Reg. 31.3402(g)-1)
# ---------------------------------------------------------------------------
SUPPLEMENTAL_WITHHOLDING_RATE = Decimal("0.22")
SUPPLEMENTAL_WITHHOLDING_RATE_OVER_1M = Decimal("0.37")
SUPPLEMENTAL_MANDATORY_THRESHOLD = Decimal("1000000")

# ---------------------------------------------------------------------------
# Long-term capital gains rate cutoffs: (upper_bound, rate) by income
# ---------------------------------------------------------------------------
LTCG_RATE_CUTOFFS: dict[FilingStatus, list[tuple[Decimal | None, Decimal]]] = {
    FilingStatus.SINGLE: [
        (Decimal("44625"), Decimal("0.00")),
        (Decimal("492300"), Decimal("0.15")),
        (None, Decimal("0.20")),
    ],
    FilingStatus.MFJ: [
        (Decimal("89250"), Decimal("0.00")),
        (Decimal("553850"), Decimal("0.15")),
        (None, Decimal("0.20")),
    ],
    FilingStatus.MFS: [
        (Decimal("44625"), Decimal("0.00")),
        (Decimal("276900"), Decimal("0.15")),
        (None, Decimal("0.20")),
    ],
    FilingStatus.HOH: [
        (Decimal("59750"), Decimal("0.00")),
        (Decimal("523050"), Decimal("0.15")),
        (None, Decimal("0.20")),
    ],
}
MARGINAL_RATE_BUMP = Decimal("1000")

# ---------------------------------------------------------------------------
# K-1 pass-through income: Section 199A QBI deduction and SE tax (Schedule SE)
# ---------------------------------------------------------------------------
QBI_DEDUCTION_RATE = Decimal("0.20")
SELF_EMPLOYMENT_TAX_RATE = Decimal("0.153")
SELF_EMPLOYMENT_MEDICARE_RATE = Decimal("0.029")
SELF_EMPLOYMENT_WAGE_BASE = Decimal("160200")

# ---------------------------------------------------------------------------
# AMT (Form 6251): exemption, phase-out start, and 28% rate threshold
# ---------------------------------------------------------------------------
AMT_EXEMPTION: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("81300"),
    FilingStatus.MFJ: Decimal("126500"),
    FilingStatus.MFS: Decimal("81300"),
    FilingStatus.HOH: Decimal("81300"),
}
AMT_PHASEOUT_START: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("578150"),
    FilingStatus.MFJ: Decimal("1156300"),
    FilingStatus.MFS: Decimal("578150"),
    FilingStatus.HOH: Decimal("578150"),
}
AMT_PHASEOUT_RATE = Decimal("0.25")
AMT_28_PERCENT_THRESHOLD: dict[FilingStatus, Decimal] = {
    FilingStatus.SINGLE: Decimal("103050"),
    FilingStatus.MFJ: Decimal("206100"),
    FilingStatus.MFS: Decimal("103050"),
    FilingStatus.HOH: Decimal("103050"),
}
AMT_LOWER_RATE = Decimal("0.26")
AMT_UPPER_RATE = Decimal("0.28")

# ---------------------------------------------------------------------------
# 83(b) election: must be filed within 30 days (IRC Section 83(b)(2))
# ---------------------------------------------------------------------------
ELECTION_83B_FILING_DAYS = 30


def build_default_tables() -> TaxTables:
    """Assemble the built-in rate configuration."""
    state_rates = {
        state: StateTaxRate(type=StateTaxType.FLAT, rate=rate)
        for state, rate in FLAT_STATE_RATES.items()
    }
    for state, by_status in PROGRESSIVE_STATE_BRACKETS.items():
        state_rates[state] = StateTaxRate(
            type=StateTaxType.PROGRESSIVE,
            brackets={status: _table(bounds) for status, bounds in by_status.items()},
        )

    return TaxTables(
        tax_year=DEFAULT_TAX_YEAR,
        federal_brackets={
            status: _table(bounds) for status, bounds in FEDERAL_BRACKETS.items()
        },
        state_rates=state_rates,
        city_rates={
            city: CityTaxRate(state=state, rate=rate)
            for city, (state, rate) in CITY_RATES.items()
        },
        social_security_rate=SOCIAL_SECURITY_RATE,
        social_security_wage_base=SOCIAL_SECURITY_WAGE_BASE,
        medicare_rate=MEDICARE_RATE,
        additional_medicare_rate=ADDITIONAL_MEDICARE_TAX_RATE,
        additional_medicare_threshold=dict(ADDITIONAL_MEDICARE_TAX_THRESHOLD),
    )


@lru_cache(maxsize=1)
def load_default_tables() -> TaxTables:
    """Return the built-in tables, built once per process."""
    return build_default_tables()
