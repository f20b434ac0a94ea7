"""Row parsing and validation.

Applies a validated ColumnMapping to every data row. Each row yields
exactly one verdict, either a ParsedRow or a ParseError, and a bad row
never stops the rows after it.
"""

import logging
from typing import Optional

from bankcsv.domain.entities import (
    ColumnMapping,
    ParsedRow,
    ParseError,
    ParseResult,
    TransactionStatus,
)
from bankcsv.domain.errors import MappingError
from bankcsv.utils.amount_parser import normalize_amount
from bankcsv.utils.date_parser import format_iso, parse_date
from bankcsv.utils.tokenizer import row_to_dict, tokenize

logger = logging.getLogger(__name__)

POSTED_STATUSES = {"posted", "cleared", "complete", "completed", "settled"}
PENDING_STATUSES = {"pending", "processing", "hold", "authorization", "authorized"}


def normalize_status(raw: Optional[str]) -> Optional[TransactionStatus]:
    """Map a bank's status wording onto posted/pending, or None if unknown."""
    value = (raw or "").strip().lower()
    if value in POSTED_STATUSES:
        return TransactionStatus.POSTED
    if value in PENDING_STATUSES:
        return TransactionStatus.PENDING
    return None


def _value(row: dict[str, str], column: Optional[str]) -> str:
    if not column:
        return ""
    return (row.get(column) or "").strip()


def parse_row(row: dict[str, str], mapping: ColumnMapping, row_number: int) -> ParsedRow | ParseError:
    """Parse one data row.

    Args:
        row: Header -> raw value
        mapping: Validated column mapping
        row_number: 1-indexed record number of the row in the file

    Returns:
        ParsedRow on success, ParseError describing the first problem otherwise
    """
    raw_date = _value(row, mapping.date_column)
    if not raw_date:
        return ParseError(
            row=row_number,
            column=mapping.date_column,
            message="Missing date",
            raw_value=row.get(mapping.date_column, ""),
        )

    try:
        txn_date = format_iso(parse_date(raw_date, mapping.date_format))
    except ValueError as e:
        return ParseError(row=row_number, column=mapping.date_column, message=str(e), raw_value=raw_date)

    amount = normalize_amount(row, mapping, row_number)
    if isinstance(amount, ParseError):
        return amount

    merchant = _value(row, mapping.merchant_column) or None
    description = _value(row, mapping.description_column) or merchant
    if not description:
        description = f"Transaction on {txn_date} for {amount.amount:.2f}"

    status = None
    if mapping.status_column:
        status = normalize_status(row.get(mapping.status_column))

    return ParsedRow(
        date=txn_date,
        description=description,
        amount=amount.amount,
        type=amount.type,
        merchant=merchant,
        status=status,
        raw_row=dict(row),
        row_number=row_number,
    )


def parse_rows(headers: list[str], rows: list[list[str]], mapping: ColumnMapping) -> ParseResult:
    """Parse all tokenized rows with a validated mapping.

    The first ``skip_header_rows - 1`` data rows are treated as extra header
    lines and dropped. Row numbers count CSV records with the header as
    record 1 (blank lines are not counted), so with the
    default of one header row the first data row is row 2.

    Args:
        headers: Header names from the tokenizer
        rows: Data rows from the tokenizer
        mapping: Validated column mapping

    Returns:
        ParseResult with one entry per data row across transactions and errors
    """
    if not isinstance(mapping, ColumnMapping):
        raise MappingError("Rows can only be parsed with a validated ColumnMapping")

    transactions: list[ParsedRow] = []
    errors: list[ParseError] = []
    skip = mapping.skip_header_rows - 1
    data_rows = rows[skip:]

    for offset, values in enumerate(data_rows):
        row_number = offset + mapping.skip_header_rows + 1
        verdict = parse_row(row_to_dict(headers, values), mapping, row_number)
        if isinstance(verdict, ParseError):
            logger.debug("Skipping %s", verdict)
            errors.append(verdict)
        else:
            transactions.append(verdict)

    logger.debug(
        "Parsed %d rows: %d transactions, %d errors",
        len(data_rows),
        len(transactions),
        len(errors),
    )
    return ParseResult(
        transactions=transactions,
        errors=errors,
        headers=list(headers),
        total_rows=len(data_rows),
    )


def parse_text(text: str, mapping: ColumnMapping) -> ParseResult:
    """Tokenize CSV text and parse it with a validated mapping."""
    headers, rows = tokenize(text)
    return parse_rows(headers, rows, mapping)
