"""Amount parsing utilities."""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from bankcsv.domain.entities import (
    AmountMode,
    ColumnMapping,
    ParseError,
    TransactionType,
)

CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹]")
_NUMBER = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


@dataclass(frozen=True)
class AmountResult:
    """Normalized amount: non-negative magnitude plus direction."""

    amount: Decimal
    type: TransactionType


def detect_separators(value: str) -> tuple[str, str]:
    """Infer (thousand_separator, decimal_separator) from a number string.

    The last separator is the decimal point unless it is followed by
    exactly three digits, in which case it groups thousands. A separator
    that occurs more than once always groups thousands.
    """
    dots = value.count(".")
    commas = value.count(",")
    if dots == 0 and commas == 0:
        return "", "."
    if dots and commas:
        if value.rfind(".") > value.rfind(","):
            return ",", "."
        return ".", ","

    sep = "." if dots else ","
    other = "," if sep == "." else "."
    if max(dots, commas) > 1:
        return sep, other
    digits_after = value[value.rfind(sep) + 1:]
    if len(digits_after) == 3 and digits_after.isdigit():
        return sep, other
    if len(digits_after) == 2 and digits_after.isdigit():
        return "", sep
    # Neither rule applies; fall back to '.' as the decimal point.
    return ("", ".") if sep == "." else (",", ".")


def parse_amount(
    amount_str: str,
    negative_in_parentheses: bool = False,
    thousand_separator: str = "auto",
    decimal_separator: str = "auto",
) -> Decimal:
    """Parse an amount string into a signed Decimal.

    Handles various formats:
    - "123.45", "-123.45", "123.45-"
    - "$123.45", "-$1,234.56", "€ 1.234,56"
    - "(123.45)" when negative_in_parentheses is set

    Args:
        amount_str: Amount string
        negative_in_parentheses: Treat a value wrapped in (...) as negative
        thousand_separator: ',', '.', '' or 'auto'
        decimal_separator: '.', ',' or 'auto'

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string is empty or not numeric
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()

    is_negative = False
    if negative_in_parentheses and cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1].strip()

    cleaned = CURRENCY_SYMBOLS.sub("", cleaned)
    cleaned = re.sub(r"\s+", "", cleaned)

    if cleaned.startswith("-"):
        is_negative = not is_negative
        cleaned = cleaned[1:]
    elif cleaned.startswith("+"):
        cleaned = cleaned[1:]
    elif cleaned.endswith("-"):
        is_negative = not is_negative
        cleaned = cleaned[:-1]

    thousand, decimal = thousand_separator, decimal_separator
    if thousand == "auto" or decimal == "auto":
        detected_thousand, detected_decimal = detect_separators(cleaned)
        if thousand == "auto" and decimal == "auto":
            thousand, decimal = detected_thousand, detected_decimal
        elif thousand == "auto":
            thousand = {".": ",", ",": "."}[decimal]
        else:
            decimal = {".": ",", ",": "."}.get(thousand, detected_decimal)

    if thousand:
        cleaned = cleaned.replace(thousand, "")
    if decimal != ".":
        cleaned = cleaned.replace(decimal, ".")

    if not _NUMBER.match(cleaned):
        raise ValueError(f"Could not parse amount '{amount_str}'")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}") from e
    return -amount if is_negative else amount


def _parse_optional(
    raw: str, mapping: ColumnMapping
) -> Optional[Decimal]:
    if not raw or not raw.strip():
        return None
    return parse_amount(
        raw,
        negative_in_parentheses=mapping.negative_in_parentheses,
        thousand_separator=mapping.thousand_separator,
        decimal_separator=mapping.decimal_separator,
    )


def normalize_amount(
    raw_row: dict[str, str], mapping: ColumnMapping, row_number: int
) -> AmountResult | ParseError:
    """Turn a row's amount field(s) into a magnitude and transaction type.

    Never raises: every failure comes back as a ParseError for the row.

    Args:
        raw_row: Header -> raw value for one row
        mapping: Validated column mapping
        row_number: Row number used in error reports

    Returns:
        AmountResult on success, ParseError otherwise
    """
    if mapping.amount_mode == AmountMode.SINGLE:
        column = mapping.amount_column
        raw = raw_row.get(column, "")
        try:
            value = _parse_optional(raw, mapping)
        except ValueError:
            return ParseError(row=row_number, column=column, message="Invalid amount format", raw_value=raw)
        if value is None:
            return ParseError(row=row_number, column=column, message="Missing amount", raw_value=raw)
        kind = TransactionType.EXPENSE if value < 0 else TransactionType.INCOME
        return AmountResult(amount=abs(value), type=kind)

    values: dict[str, Optional[Decimal]] = {}
    for column in (mapping.debit_column, mapping.credit_column):
        raw = raw_row.get(column, "")
        try:
            values[column] = _parse_optional(raw, mapping)
        except ValueError:
            return ParseError(row=row_number, column=column, message="Invalid amount format", raw_value=raw)

    debit = values[mapping.debit_column]
    credit = values[mapping.credit_column]
    has_debit = debit is not None and debit != 0
    has_credit = credit is not None and credit != 0
    raw_pair = (
        f"debit: {raw_row.get(mapping.debit_column, '')}, "
        f"credit: {raw_row.get(mapping.credit_column, '')}"
    )
    if has_debit and has_credit:
        return ParseError(
            row=row_number,
            message="Ambiguous amount: both debit and credit columns have values",
            raw_value=raw_pair,
        )
    if has_debit:
        return AmountResult(amount=abs(debit), type=TransactionType.EXPENSE)
    if has_credit:
        return AmountResult(amount=abs(credit), type=TransactionType.INCOME)
    return ParseError(
        row=row_number,
        message="Missing both debit and credit values",
        raw_value=raw_pair,
    )
