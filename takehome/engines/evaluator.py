"""Progressive bracket tax evaluation.

Every income-tax figure in the package (federal, progressive state, the
marginal-delta methods of the planning engines) goes through
``evaluate_bracket_tax``.
"""

from collections.abc import Sequence
from decimal import Decimal

from takehome.engines.brackets import MARGINAL_RATE_BUMP
from takehome.exceptions import InvalidInputError
from takehome.models.tables import TaxBracket


def evaluate_bracket_tax(income: Decimal, brackets: Sequence[TaxBracket]) -> Decimal:
    """Apply progressive tax brackets to income.

    Brackets must be contiguous and ascending with an unbounded top bracket.
    Each bracket taxes at most ``max - min`` dollars, so a boundary dollar is
    counted exactly once and the result is continuous in ``income``.

    Raises:
        InvalidInputError: income is negative or the bracket table is empty.
    """
    if income < 0:
        raise InvalidInputError("income", f"must be non-negative, got {income}")
    if not brackets:
        raise InvalidInputError("brackets", "bracket table is empty")

    tax = Decimal("0")
    remaining = income

    for bracket in brackets:
        if remaining <= 0:
            break
        if bracket.max is None:
            taxable_in_bracket = remaining
        else:
            taxable_in_bracket = min(remaining, bracket.max - bracket.min)
        tax += taxable_in_bracket * bracket.rate
        remaining -= taxable_in_bracket

    return tax


def marginal_rate(
    income: Decimal,
    brackets: Sequence[TaxBracket],
    bump: Decimal = MARGINAL_RATE_BUMP,
) -> Decimal:
    """Approximate the marginal rate as the tax on the next ``bump`` dollars."""
    base_tax = evaluate_bracket_tax(income, brackets)
    bumped_tax = evaluate_bracket_tax(income + bump, brackets)
    return (bumped_tax - base_tax) / bump
