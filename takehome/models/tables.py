"""Rate configuration models.

A ``TaxTables`` instance is the read-only rate configuration every engine is
built from: federal brackets per filing status, state and city rates, and the
payroll (Social Security / Medicare) parameters. The built-in tables live in
``takehome.engines.brackets``; alternates can be loaded from JSON.

Bracket tables are tuples and mappings are exposed as ``MappingProxyType``,
so one cached instance can be shared by every calculator.
"""

import json
from collections.abc import Mapping, Sequence
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from takehome.exceptions import TablesLoadError
from takehome.models.enums import FilingStatus, StateTaxType


def _read_only(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


class TaxBracket(BaseModel):
    """One marginal-rate band. ``max=None`` marks the unbounded top bracket."""

    model_config = ConfigDict(frozen=True)

    min: Decimal = Field(ge=0)
    max: Decimal | None = None
    rate: Decimal = Field(ge=0, le=1)


def check_bracket_table(brackets: Sequence[TaxBracket], label: str) -> None:
    """Raise ValueError unless *brackets* start at 0, are contiguous and end unbounded."""
    if not brackets:
        raise ValueError(f"{label}: bracket table is empty")
    if brackets[0].min != Decimal("0"):
        raise ValueError(f"{label}: first bracket must start at 0")
    for bracket in brackets:
        if bracket.max is not None and bracket.max <= bracket.min:
            raise ValueError(f"{label}: bracket max {bracket.max} must exceed min {bracket.min}")
    for lower, upper in zip(brackets, brackets[1:]):
        if lower.max is None or lower.max != upper.min:
            raise ValueError(f"{label}: brackets are not contiguous at {lower.max}")
    if brackets[-1].max is not None:
        raise ValueError(f"{label}: top bracket must be unbounded")


class StateTaxRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: StateTaxType
    rate: Decimal | None = None
    # Progressive states: brackets per filing status, SINGLE is the fallback table.
    brackets: Mapping[FilingStatus, tuple[TaxBracket, ...]] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("brackets")
    @classmethod
    def _freeze_brackets(cls, value: Mapping) -> Mapping:
        return _read_only(value)

    @field_serializer("brackets")
    def _serialize_brackets(self, value: Mapping) -> dict:
        return dict(value)

    @model_validator(mode="after")
    def _check_shape(self) -> "StateTaxRate":
        if self.type == StateTaxType.FLAT and self.rate is None:
            raise ValueError("flat state rate requires 'rate'")
        if self.type == StateTaxType.PROGRESSIVE:
            if FilingStatus.SINGLE not in self.brackets:
                raise ValueError("progressive state rate requires a 'single' bracket table")
            for status, table in self.brackets.items():
                check_bracket_table(table, f"state/{status}")
        return self


class CityTaxRate(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: str
    rate: Decimal = Field(ge=0, le=1)


class TaxTables(BaseModel):
    """Complete rate configuration for one modeled tax year."""

    model_config = ConfigDict(frozen=True)

    tax_year: int
    federal_brackets: Mapping[FilingStatus, tuple[TaxBracket, ...]]
    state_rates: Mapping[str, StateTaxRate] = Field(default_factory=dict, validate_default=True)
    city_rates: Mapping[str, CityTaxRate] = Field(default_factory=dict, validate_default=True)
    social_security_rate: Decimal = Decimal("0.062")
    social_security_wage_base: Decimal
    medicare_rate: Decimal = Decimal("0.0145")
    additional_medicare_rate: Decimal = Decimal("0.009")
    additional_medicare_threshold: Mapping[FilingStatus, Decimal]

    @field_validator(
        "federal_brackets", "state_rates", "city_rates", "additional_medicare_threshold"
    )
    @classmethod
    def _freeze_mappings(cls, value: Mapping) -> Mapping:
        return _read_only(value)

    @field_serializer(
        "federal_brackets", "state_rates", "city_rates", "additional_medicare_threshold"
    )
    def _serialize_mappings(self, value: Mapping) -> dict:
        return dict(value)

    @model_validator(mode="after")
    def _check_complete(self) -> "TaxTables":
        for status in FilingStatus:
            if status not in self.federal_brackets:
                raise ValueError(f"missing federal brackets for {status}")
            check_bracket_table(self.federal_brackets[status], f"federal/{status}")
            if status not in self.additional_medicare_threshold:
                raise ValueError(f"missing Additional Medicare threshold for {status}")
        return self

    @classmethod
    def from_json_file(cls, path: Path) -> "TaxTables":
        """Load and validate tables from a JSON file."""
        try:
            data = json.loads(Path(path).read_text(), parse_float=Decimal)
        except (OSError, json.JSONDecodeError) as exc:
            raise TablesLoadError(str(path), str(exc)) from exc
        try:
            return cls(**data)
        except ValidationError as exc:
            raise TablesLoadError(str(path), str(exc)) from exc
