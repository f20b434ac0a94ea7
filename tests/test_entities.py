"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError
from decimal import Decimal

from bankcsv.domain.entities import (
    ColumnMapping,
    DateFormat,
    ImportSession,
    ImportStep,
    ParsedRow,
    ParseError,
    TransactionType,
)


class TestParseError:
    """Tests for ParseError rendering."""

    def test_str_with_column_and_value(self):
        error = ParseError(row=3, message="Missing amount", column="Amount", raw_value="")
        assert str(error) == "Row 3 (Amount): Missing amount ['']"

    def test_str_without_column(self):
        error = ParseError(row=5, message="Missing both debit and credit values")
        assert str(error) == "Row 5: Missing both debit and credit values"


def test_column_mapping_is_frozen(simple_mapping):
    with pytest.raises(FrozenInstanceError):
        simple_mapping.date_column = "Other"


def test_column_mapping_defaults():
    mapping = ColumnMapping(date_column="Date", date_format=DateFormat.ISO, amount_column="Amount")
    assert mapping.skip_header_rows == 1
    assert mapping.negative_in_parentheses is False
    assert mapping.decimal_separator == "auto"


def test_parsed_row_equality_ignores_raw_row():
    """Test that two rows with the same values compare equal."""
    a = ParsedRow(
        date="2024-01-05",
        description="A",
        amount=Decimal("1"),
        type=TransactionType.EXPENSE,
        row_number=2,
        raw_row={"x": "1"},
    )
    b = ParsedRow(
        date="2024-01-05",
        description="A",
        amount=Decimal("1"),
        type=TransactionType.EXPENSE,
        row_number=2,
        raw_row={"y": "2"},
    )
    assert a == b


def test_date_format_values():
    """Test that date formats serialize to their display pattern."""
    assert DateFormat("DD/MM/YYYY") == DateFormat.EU
    assert [f.value for f in DateFormat][:3] == ["YYYY-MM-DD", "MM/DD/YYYY", "DD/MM/YYYY"]


def test_import_session_defaults():
    session = ImportSession(step=ImportStep.UPLOAD, headers=["Date"])
    assert session.mapping is None
    assert session.missing_columns == []
    assert session.detected_mapping == {}
