"""Typer CLI interface for the take-home pay planner."""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from takehome.engines import (
    DualEarnerAnalyzer,
    SafeHarborEngine,
    SpecialIncomeEngine,
    StockOptionEngine,
    TaxCalculator,
)
from takehome.exceptions import TablesLoadError, TaxComputationError
from takehome.formatting import format_currency, format_percent
from takehome.models import (
    CalculationInput,
    FilingStatus,
    PayPeriod,
    SpecialIncomeItem,
    SpecialIncomeType,
    StateTaxType,
    TaxTables,
    W4Settings,
)
from takehome.reports import PlanningReportGenerator, TakeHomeSummaryGenerator

app = typer.Typer(
    name="takehome",
    help="Take-home pay, withholding and tax planning calculator.",
)

FILING_STATUS_MAP = {
    "SINGLE": FilingStatus.SINGLE,
    "MFJ": FilingStatus.MFJ,
    "MFS": FilingStatus.MFS,
    "HOH": FilingStatus.HOH,
}

FILING_STATUS_HELP = "Filing status: SINGLE, MFJ, MFS, HOH"
TABLES_HELP = "JSON file with alternate tax tables (defaults to built-in 2024 rates)"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log computed figures to stderr"),
) -> None:
    """Take-home pay, withholding and tax planning calculator."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Option parsing helpers
# ---------------------------------------------------------------------------


def _parse_filing_status(value: str) -> FilingStatus:
    status = FILING_STATUS_MAP.get(value.upper())
    if status is not None:
        return status
    try:
        return FilingStatus(value)
    except ValueError:
        valid = ", ".join(FILING_STATUS_MAP.keys())
        typer.echo(f"Error: Invalid filing status '{value}'. Valid: {valid}", err=True)
        raise typer.Exit(1)


def _parse_pay_period(value: str) -> PayPeriod:
    lookup = {period.value.lower(): period for period in PayPeriod}
    period = lookup.get(value.replace("-", "").replace("_", "").lower())
    if period is None:
        valid = ", ".join(p.value for p in PayPeriod)
        typer.echo(f"Error: Invalid pay period '{value}'. Valid: {valid}", err=True)
        raise typer.Exit(1)
    return period


def _parse_date(value: str, option: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"Error: {option} must be a date in YYYY-MM-DD format, got '{value}'", err=True)
        raise typer.Exit(1)


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def _load_calculator(tables: Path | None) -> TaxCalculator:
    if tables is None:
        return TaxCalculator()
    try:
        return TaxCalculator(TaxTables.from_json_file(tables))
    except TablesLoadError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _fail(error: TaxComputationError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _option_item(**fields) -> SpecialIncomeItem:
    """Build an ISO/NSO item from command options, exiting on invalid values."""
    try:
        return SpecialIncomeItem(**fields)
    except ValueError as e:
        typer.echo(f"Error: Invalid option values: {e}", err=True)
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command(name="take-home")
def take_home(
    gross: float = typer.Argument(..., help="Gross pay for one pay period"),
    period: str = typer.Option(
        "annual",
        "--period",
        "-p",
        help="Pay period: annual, monthly, semiMonthly, biweekly, weekly",
    ),
    state: str = typer.Option("", "--state", help="State name, e.g. 'California'"),
    city: str = typer.Option("", "--city", help="City name, e.g. 'New York City'"),
    district: str = typer.Option("", "--district", help="School or local district, shown on the summary"),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Break one paycheck into federal, state, city and payroll taxes."""
    fs = _parse_filing_status(filing_status)
    pay_period = _parse_pay_period(period)
    if gross < 0:
        typer.echo("Error: gross pay must be non-negative", err=True)
        raise typer.Exit(1)

    calc_input = CalculationInput(
        gross_income=_dec(gross),
        pay_period=pay_period,
        state=state,
        city=city,
        district=district,
        filing_status=fs,
    )
    result = _load_calculator(tables).calculate_take_home_pay(calc_input)

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
        return
    typer.echo(TakeHomeSummaryGenerator().render(result, calc_input))


@app.command(name="safe-harbor")
def safe_harbor(
    income: float = typer.Option(..., "--income", help="Projected annual income"),
    prior_year_tax: float = typer.Option(..., "--prior-year-tax", help="Prior-year total federal tax"),
    withheld: float = typer.Option(0.0, "--withheld", help="Federal tax withheld so far this year"),
    per_paycheck: float = typer.Option(
        0.0, "--per-paycheck", help="Federal withholding on each remaining paycheck"
    ),
    frequency: str = typer.Option("biweekly", "--frequency", "-f", help="Pay frequency"),
    periods: int | None = typer.Option(
        None, "--periods", help="Paychecks left this year (estimated from --as-of if omitted)"
    ),
    as_of: str | None = typer.Option(None, "--as-of", help="Reference date YYYY-MM-DD (default today)"),
    prior_year_state_tax: float | None = typer.Option(
        None, "--prior-year-state-tax", help="Prior-year California tax (adds the CA safe harbor)"
    ),
    state_withheld: float = typer.Option(0.0, "--state-withheld", help="California tax withheld so far"),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
) -> None:
    """Withholding needed to reach the underpayment-penalty safe harbor."""
    fs = _parse_filing_status(filing_status)
    pay_period = _parse_pay_period(frequency)
    reference = _parse_date(as_of, "--as-of") if as_of else None
    engine = SafeHarborEngine()

    try:
        federal = engine.calculate_federal_safe_harbor(
            _dec(income), _dec(prior_year_tax), _dec(withheld), fs
        )
        california = None
        if prior_year_state_tax is not None:
            california = engine.calculate_california_safe_harbor(
                _dec(income), _dec(prior_year_state_tax), _dec(state_withheld), fs
            )
        remaining = periods if periods is not None else engine.calculate_remaining_pay_periods(
            pay_period, reference
        )
        plan = engine.create_withholding_plan(
            federal.remaining_withholding_needed, remaining, _dec(per_paycheck)
        )
    except TaxComputationError as e:
        _fail(e)

    typer.echo(PlanningReportGenerator().render_safe_harbor(federal, plan, california))


@app.command(name="dual-earner")
def dual_earner(
    primary: float = typer.Option(..., "--primary", help="Higher earner's annual wages"),
    secondary: float = typer.Option(..., "--secondary", help="Second earner's annual wages"),
    primary_withholding: float = typer.Option(0.0, "--primary-withholding", help="Annual federal withholding, job 1"),
    secondary_withholding: float = typer.Option(
        0.0, "--secondary-withholding", help="Annual federal withholding, job 2"
    ),
    multiple_jobs: bool | None = typer.Option(
        None,
        "--multiple-jobs/--no-multiple-jobs",
        help="Whether the current W-4 already has Step 2(c) checked",
    ),
    filing_status: str = typer.Option("MFJ", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """Estimate the under-withholding from two jobs on one joint return."""
    fs = _parse_filing_status(filing_status)
    analyzer = DualEarnerAnalyzer(_load_calculator(tables))

    try:
        analysis = analyzer.analyze_dual_earner_household(
            _dec(primary), _dec(primary_withholding), _dec(secondary), _dec(secondary_withholding), fs
        )
        impact = analyzer.calculate_multiple_jobs_impact(_dec(primary), _dec(secondary))
    except TaxComputationError as e:
        _fail(e)

    current_w4 = W4Settings(multiple_jobs=multiple_jobs) if multiple_jobs is not None else None
    recommendation = analyzer.create_w4_recommendations(analysis, current_w4)

    typer.echo(PlanningReportGenerator().render_dual_earner(analysis, recommendation))
    typer.echo(f"Checking Step 2(c) adds roughly {format_currency(impact, 0)} of withholding per year.")


def _parse_item(raw: str) -> SpecialIncomeItem:
    """Parse ``TYPE:AMOUNT[:WITHHOLDING]``, e.g. ``bonus:20000:4400``."""
    parts = raw.split(":")
    if len(parts) not in (2, 3):
        typer.echo(f"Error: Invalid item '{raw}'. Expected TYPE:AMOUNT[:WITHHOLDING]", err=True)
        raise typer.Exit(1)
    try:
        item_type = SpecialIncomeType(parts[0])
    except ValueError:
        valid = ", ".join(t.value for t in SpecialIncomeType)
        typer.echo(f"Error: Invalid income type '{parts[0]}'. Valid: {valid}", err=True)
        raise typer.Exit(1)
    try:
        amount = Decimal(parts[1])
        withholding = Decimal(parts[2]) if len(parts) == 3 else Decimal("0")
        return SpecialIncomeItem(type=item_type, amount=amount, withholding=withholding)
    except ArithmeticError:
        typer.echo(f"Error: Invalid amount in item '{raw}'", err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.echo(f"Error: Invalid item '{raw}': {e}", err=True)
        raise typer.Exit(1)


@app.command(name="special-income")
def special_income(
    items: list[str] = typer.Option(
        ..., "--item", "-i", help="Special income as TYPE:AMOUNT[:WITHHOLDING], repeatable"
    ),
    base_income: float = typer.Option(..., "--base-income", help="Annual wages before special income"),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """Federal tax owed on bonuses, RSU vests, gains and K-1 income."""
    fs = _parse_filing_status(filing_status)
    parsed = [_parse_item(raw) for raw in items]
    engine = SpecialIncomeEngine(_load_calculator(tables))

    try:
        summary = engine.calculate_total_special_income_tax_impact(_dec(base_income), parsed, fs)
    except TaxComputationError as e:
        _fail(e)

    typer.echo(PlanningReportGenerator().render_special_income(summary))
    rate = engine.get_supplemental_withholding_rate(_dec(base_income))
    typer.echo(f"Employer supplemental withholding rate: {rate:.0%}")


@app.command()
def iso(
    base_income: float = typer.Option(..., "--base-income", help="Annual ordinary income"),
    strike: float = typer.Option(..., "--strike", help="Exercise price per share"),
    fmv: float = typer.Option(..., "--fmv", help="Fair market value per share at exercise"),
    shares: float = typer.Option(..., "--shares", help="Number of shares exercised"),
    exercise_date: str | None = typer.Option(None, "--exercise-date", help="YYYY-MM-DD (default today)"),
    disqualifying: bool = typer.Option(
        False, "--disqualifying", help="Shares sold in a disqualifying disposition this year"
    ),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """Regular tax, AMT exposure and holding dates for an ISO exercise."""
    fs = _parse_filing_status(filing_status)
    item = _option_item(
        type=SpecialIncomeType.ISO,
        exercise_price=_dec(strike),
        fair_market_value=_dec(fmv),
        number_of_shares=_dec(shares),
        effective_date=_parse_date(exercise_date, "--exercise-date") if exercise_date else None,
        disqualifying_disposition=disqualifying,
    )

    try:
        result = StockOptionEngine(_load_calculator(tables)).calculate_iso_tax_implications(
            _dec(base_income), item, fs
        )
    except TaxComputationError as e:
        _fail(e)

    typer.echo(PlanningReportGenerator().render_iso(result))


@app.command()
def nso(
    base_income: float = typer.Option(..., "--base-income", help="Annual wages before the exercise"),
    strike: float = typer.Option(..., "--strike", help="Exercise price per share"),
    fmv: float = typer.Option(..., "--fmv", help="Fair market value per share at exercise"),
    shares: float = typer.Option(..., "--shares", help="Number of shares exercised"),
    withholding: float = typer.Option(0.0, "--withholding", help="Tax withheld on the exercise"),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """Income, Social Security and Medicare tax on an NSO exercise."""
    fs = _parse_filing_status(filing_status)
    item = _option_item(
        type=SpecialIncomeType.NSO,
        exercise_price=_dec(strike),
        fair_market_value=_dec(fmv),
        number_of_shares=_dec(shares),
        withholding=_dec(withholding),
    )

    try:
        result = StockOptionEngine(_load_calculator(tables)).calculate_nso_tax_implications(
            _dec(base_income), item, fs
        )
    except TaxComputationError as e:
        _fail(e)

    typer.echo(PlanningReportGenerator().render_nso(result))


@app.command()
def amt(
    base_income: float = typer.Option(..., "--base-income", help="Regular taxable income"),
    adjustments: float = typer.Option(0.0, "--adjustments", help="AMT adjustments, e.g. ISO bargain element"),
    filing_status: str = typer.Option("SINGLE", "--filing-status", "-s", help=FILING_STATUS_HELP),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """Compare tentative minimum tax against regular tax."""
    fs = _parse_filing_status(filing_status)

    try:
        result = StockOptionEngine(_load_calculator(tables)).calculate_full_amt(
            _dec(base_income), _dec(adjustments), fs
        )
    except TaxComputationError as e:
        _fail(e)

    typer.echo(PlanningReportGenerator().render_amt(result))


@app.command(name="election-83b")
def election_83b(
    exercise_date: str = typer.Argument(..., help="Exercise date YYYY-MM-DD"),
    strike: float | None = typer.Option(None, "--strike", help="Exercise price per share"),
    fmv: float | None = typer.Option(None, "--fmv", help="Fair market value per share today"),
    future_fmv: float | None = typer.Option(None, "--future-fmv", help="Estimated FMV per share at vesting"),
    shares: float | None = typer.Option(None, "--shares", help="Number of unvested shares"),
    rate: float = typer.Option(0.37, "--rate", help="Marginal tax rate for the comparison"),
) -> None:
    """83(b) filing checklist, and optionally the tax trade-off of electing."""
    exercised = _parse_date(exercise_date, "exercise date")
    engine = StockOptionEngine()

    checklist = engine.generate_83b_election_checklist(exercised)
    typer.echo(PlanningReportGenerator().render_83b_checklist(checklist))

    if None in (strike, fmv, future_fmv, shares):
        return

    benefits = engine.calculate_83b_election_benefits(
        _dec(strike), _dec(fmv), _dec(future_fmv), _dec(shares), _dec(rate)
    )
    typer.echo("ELECTION TRADE-OFF")
    typer.echo(f"  Tax at vesting (no election): {format_currency(benefits.tax_without_election):>14}")
    typer.echo(f"  Tax now (with election):      {format_currency(benefits.tax_with_election):>14}")
    typer.echo(f"  Potential savings:            {format_currency(benefits.potential_savings):>14}")
    typer.echo(f"  At risk if shares go to $0:   {format_currency(benefits.risk_of_loss):>14}")


@app.command()
def states(
    state: str | None = typer.Option(None, "--state", help="List the cities configured for this state"),
    tables: Path | None = typer.Option(None, "--tables", help=TABLES_HELP),
) -> None:
    """List configured state rates, or the city rates of one state."""
    calculator = _load_calculator(tables)
    console = Console()

    if state is None:
        tbl = Table(title=f"State Income Tax ({calculator.tables.tax_year})", show_header=True)
        tbl.add_column("State", style="cyan")
        tbl.add_column("Type")
        tbl.add_column("Rate", justify="right", style="green")
        for name in calculator.available_states():
            rate = calculator.tables.state_rates[name]
            shown = format_percent(rate.rate, 2) if rate.type == StateTaxType.FLAT else "brackets"
            tbl.add_row(name, rate.type.value, shown)
        console.print(tbl)
        return

    cities = calculator.available_cities(state)
    if not cities:
        typer.echo(f"No cities configured for '{state}'.")
        return
    tbl = Table(title=f"City Income Tax: {state}", show_header=True)
    tbl.add_column("City", style="cyan")
    tbl.add_column("Rate", justify="right", style="green")
    for name in cities:
        tbl.add_row(name, format_percent(calculator.tables.city_rates[name].rate, 2))
    console.print(tbl)
