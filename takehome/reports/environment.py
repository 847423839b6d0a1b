"""Shared Jinja2 environment for the text report templates."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from takehome.formatting import format_currency, format_percent

TEMPLATE_DIR = Path(__file__).parent / "templates"


def build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["currency"] = format_currency
    env.filters["percent"] = format_percent
    return env
