"""Tests for row parsing and validation."""

import pytest
from dataclasses import replace
from decimal import Decimal

from bankcsv.domain.entities import (
    ColumnMapping,
    DateFormat,
    ParsedRow,
    TransactionStatus,
    TransactionType,
)
from bankcsv.domain.errors import MappingError
from bankcsv.domain.row_parser import normalize_status, parse_row, parse_rows, parse_text


def test_parse_simple_file(fixtures_dir, simple_mapping):
    """Test parsing the basic example file."""
    text = (fixtures_dir / "simple.csv").read_text(encoding="utf-8")
    result = parse_text(text, simple_mapping)

    assert result.errors == []
    assert result.total_rows == 2
    assert result.headers == ["Date", "Description", "Amount"]

    coffee, pay = result.transactions
    assert coffee.date == "2024-01-05"
    assert coffee.description == "Coffee Shop"
    assert coffee.amount == Decimal("4.50")
    assert coffee.type == TransactionType.EXPENSE
    assert coffee.row_number == 2
    assert pay.amount == Decimal("2000.00")
    assert pay.type == TransactionType.INCOME
    assert pay.row_number == 3


def test_bad_row_does_not_stop_parsing(simple_mapping):
    """Test that one failing row is reported and the rest still parse."""
    text = (
        "Date,Description,Amount\n"
        "2024-01-05,A,-1\n"
        "not-a-date,B,-2\n"
        "2024-01-07,C,-3\n"
    )
    result = parse_text(text, simple_mapping)

    assert [t.description for t in result.transactions] == ["A", "C"]
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.row == 3
    assert error.column == "Date"
    assert error.raw_value == "not-a-date"
    assert len(result.transactions) + len(result.errors) == result.total_rows


def test_missing_date(simple_mapping):
    result = parse_text("Date,Description,Amount\n,B,-2\n", simple_mapping)
    assert result.errors[0].message == "Missing date"


def test_date_checked_before_amount(simple_mapping):
    """Test that a row with two problems reports the date first."""
    result = parse_text("Date,Description,Amount\n2024-13-01,B,abc\n", simple_mapping)
    assert result.errors[0].column == "Date"


def test_invalid_amount_row(simple_mapping):
    result = parse_text("Date,Description,Amount\n2024-01-05,B,abc\n", simple_mapping)
    assert result.errors[0].message == "Invalid amount format"
    assert result.errors[0].row == 2


def test_short_row_reports_missing_amount(simple_mapping):
    """Test that a row with fewer fields than headers is padded."""
    result = parse_text("Date,Description,Amount\n2024-01-05,Coffee\n", simple_mapping)
    assert result.errors[0].message == "Missing amount"


def test_description_falls_back_to_merchant(fixtures_dir, split_mapping):
    """Test the split fixture: merchant fallback, status mapping and errors."""
    text = (fixtures_dir / "split.csv").read_text(encoding="utf-8")
    result = parse_text(text, split_mapping)

    assert result.total_rows == 4
    card, salary = result.transactions
    assert card.date == "2024-01-15"
    assert card.type == TransactionType.EXPENSE
    assert card.amount == Decimal("25.00")
    assert card.merchant == "ACME Hardware"
    assert card.status == TransactionStatus.POSTED

    assert salary.description == "Employer Inc"
    assert salary.type == TransactionType.INCOME
    assert salary.status == TransactionStatus.POSTED

    assert [e.row for e in result.errors] == [4, 5]
    assert result.errors[0].message == "Missing both debit and credit values"
    assert result.errors[1].message.startswith("Ambiguous amount")


def test_synthesized_description():
    """Test the description used when neither description nor merchant is set."""
    mapping = ColumnMapping(date_column="Date", date_format=DateFormat.ISO, amount_column="Amount")
    result = parse_text("Date,Amount\n2024-01-05,-4.50\n", mapping)
    assert result.transactions[0].description == "Transaction on 2024-01-05 for 4.50"


def test_synthesized_description_pads_amount():
    """Test that the amount in a made-up description always has two decimals."""
    mapping = ColumnMapping(date_column="Date", date_format=DateFormat.ISO, amount_column="Amount")
    short = parse_text("Date,Amount\n2024-01-05,-4.5\n2024-01-06,12\n", mapping)
    assert [t.description for t in short.transactions] == [
        "Transaction on 2024-01-05 for 4.50",
        "Transaction on 2024-01-06 for 12.00",
    ]


def test_status_absent_without_status_column(simple_mapping):
    result = parse_text("Date,Description,Amount\n2024-01-05,A,-1\n", simple_mapping)
    assert result.transactions[0].status is None
    assert result.transactions[0].merchant is None


def test_european_file(fixtures_dir):
    """Test semicolon delimiter, day-first dates and comma decimals."""
    mapping = ColumnMapping(
        date_column="Datum",
        date_format=DateFormat.EU,
        amount_column="Bedrag",
        description_column="Omschrijving",
    )
    text = (fixtures_dir / "european.csv").read_text(encoding="utf-8")
    result = parse_text(text, mapping)

    assert result.errors == []
    groceries, salary = result.transactions
    assert groceries.date == "2024-01-15"
    assert groceries.description == "Albert Heijn; Amsterdam"
    assert groceries.amount == Decimal("1234.56")
    assert groceries.type == TransactionType.EXPENSE
    assert salary.amount == Decimal("2500.00")
    assert salary.type == TransactionType.INCOME


def test_quoted_values(fixtures_dir, simple_mapping):
    text = (fixtures_dir / "quoted.csv").read_text(encoding="utf-8")
    result = parse_text(text, simple_mapping)
    assert [t.description for t in result.transactions] == ["Smith, John", '5" nail']


def test_extra_header_rows(simple_mapping):
    """Test skipping a banner line below the header."""
    mapping = replace(simple_mapping, skip_header_rows=2)
    text = "Date,Description,Amount\nExported 2024-02-01,,\n2024-01-05,A,-1\n"
    result = parse_text(text, mapping)
    assert result.total_rows == 1
    assert result.errors == []
    assert result.transactions[0].row_number == 3


def test_parse_rows_requires_validated_mapping():
    with pytest.raises(MappingError):
        parse_rows(["Date"], [["2024-01-01"]], {"date_column": "Date"})


def test_parse_row_keeps_raw_row(simple_mapping):
    row = {"Date": "2024-01-05", "Description": "A", "Amount": "-1"}
    parsed = parse_row(row, simple_mapping, 2)
    assert isinstance(parsed, ParsedRow)
    assert parsed.raw_row == row


def test_parsing_is_deterministic(fixtures_dir, split_mapping):
    """Test that parsing the same text twice gives equal results."""
    text = (fixtures_dir / "split.csv").read_text(encoding="utf-8")
    assert parse_text(text, split_mapping) == parse_text(text, split_mapping)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Posted", TransactionStatus.POSTED),
        ("cleared", TransactionStatus.POSTED),
        (" SETTLED ", TransactionStatus.POSTED),
        ("Pending", TransactionStatus.PENDING),
        ("AUTHORIZED", TransactionStatus.PENDING),
        ("hold", TransactionStatus.PENDING),
        ("reversed", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected
