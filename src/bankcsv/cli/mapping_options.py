"""Shared click options for describing a column mapping."""

import functools
from typing import Any

import click

from bankcsv.domain.entities import DateFormat

MAPPING_OPTION_NAMES = (
    "date_column",
    "date_format",
    "amount_column",
    "debit_column",
    "credit_column",
    "description_column",
    "merchant_column",
    "status_column",
    "negative_in_parentheses",
    "thousand_separator",
    "decimal_separator",
    "skip_header_rows",
)

_SEPARATOR_NAMES = {"comma": ",", "dot": ".", "none": "", "auto": "auto"}


def _separator(value: str | None) -> str | None:
    if value is None:
        return None
    return _SEPARATOR_NAMES.get(value, value)


def mapping_options(func):
    """Add column mapping options to a command.

    The decorated command receives a single ``mapping_overrides`` dict with
    only the options the user actually supplied.
    """
    options = [
        click.option("--date-column", help="Header of the date column"),
        click.option(
            "--date-format",
            type=click.Choice([f.value for f in DateFormat]),
            help="Layout of the date column",
        ),
        click.option("--amount-column", help="Header of a single signed amount column"),
        click.option("--debit-column", help="Header of the debit (money out) column"),
        click.option("--credit-column", help="Header of the credit (money in) column"),
        click.option("--description-column", help="Header of the description column"),
        click.option("--merchant-column", help="Header of the merchant/payee column"),
        click.option("--status-column", help="Header of the posted/pending status column"),
        click.option(
            "--negative-in-parentheses/--no-negative-in-parentheses",
            default=None,
            help="Treat amounts like (12.50) as negative",
        ),
        click.option(
            "--thousand-separator",
            type=click.Choice(["comma", "dot", "none", "auto"]),
            help="Thousands separator in amounts",
        ),
        click.option(
            "--decimal-separator",
            type=click.Choice(["comma", "dot", "auto"]),
            help="Decimal separator in amounts",
        ),
        click.option("--skip-header-rows", type=click.IntRange(min=1), help="Header lines before data (default 1)"),
    ]

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        overrides: dict[str, Any] = {}
        for name in MAPPING_OPTION_NAMES:
            value = kwargs.pop(name, None)
            if name in ("thousand_separator", "decimal_separator"):
                value = _separator(value)
            if value is not None:
                overrides[name] = value
        kwargs["mapping_overrides"] = overrides
        return func(*args, **kwargs)

    for option in reversed(options):
        wrapper = option(wrapper)
    return wrapper


def describe_mapping(mapping: dict[str, Any]) -> list[str]:
    """Render a (possibly partial) mapping as display lines."""
    lines = []
    for name in MAPPING_OPTION_NAMES[:8]:
        value = mapping.get(name)
        label = name.replace("_", " ").capitalize()
        lines.append(f"  {label + ':':<22}{value if value else '-'}")
    lines.append(f"  {'Amount mode:':<22}{mapping.get('amount_mode', 'single')}")
    return lines
