"""Tests for column auto-detection."""

from bankcsv.utils.column_detector import detect_columns


def test_detect_basic_layout():
    """Test detection of a Date/Description/Amount file."""
    mapping = detect_columns(["Date", "Description", "Amount"])
    assert mapping["date_column"] == "Date"
    assert mapping["description_column"] == "Description"
    assert mapping["amount_column"] == "Amount"
    assert mapping["amount_mode"] == "single"


def test_detect_is_case_insensitive():
    """Test that header case does not matter."""
    mapping = detect_columns(["DATE", "MEMO", "AMOUNT"])
    assert mapping["date_column"] == "DATE"
    assert mapping["description_column"] == "MEMO"
    assert mapping["amount_column"] == "AMOUNT"


def test_detect_split_layout():
    """Test that debit and credit columns switch to split mode."""
    mapping = detect_columns(["Posted Date", "Details", "Payee", "Debit", "Credit", "Status"])
    assert mapping["amount_mode"] == "split"
    assert mapping["debit_column"] == "Debit"
    assert mapping["credit_column"] == "Credit"
    assert mapping["merchant_column"] == "Payee"
    assert mapping["status_column"] == "Status"
    assert "amount_column" not in mapping


def test_amount_column_wins_over_debit_credit():
    """Test that a single amount column keeps single mode."""
    mapping = detect_columns(["Date", "Amount", "Debit", "Credit"])
    assert mapping["amount_mode"] == "single"
    assert mapping["amount_column"] == "Amount"
    assert "debit_column" not in mapping
    assert "credit_column" not in mapping


def test_detect_alternative_names():
    """Test that synonyms from other banks are recognized."""
    mapping = detect_columns(["Transaction Date", "Memo", "Value"])
    assert mapping["date_column"] == "Transaction Date"
    assert mapping["description_column"] == "Memo"
    assert mapping["amount_column"] == "Value"


def test_header_is_claimed_once():
    """Test that a header used for the date is not reused for status."""
    mapping = detect_columns(["Posted Date", "Amount"])
    assert mapping["date_column"] == "Posted Date"
    assert "status_column" not in mapping


def test_money_in_money_out():
    """Test UK-style money in/out headers."""
    mapping = detect_columns(["Date", "Narrative", "Money Out", "Money In"])
    assert mapping["amount_mode"] == "split"
    assert mapping["debit_column"] == "Money Out"
    assert mapping["credit_column"] == "Money In"
    assert mapping["description_column"] == "Narrative"


def test_unknown_headers_only_defaults():
    """Test that unrecognized headers leave roles absent."""
    mapping = detect_columns(["Datum", "Omschrijving", "Bedrag"])
    assert "date_column" not in mapping
    assert "amount_column" not in mapping
    assert mapping["skip_header_rows"] == 1
    assert mapping["thousand_separator"] == "auto"
    assert mapping["decimal_separator"] == "auto"
    assert mapping["negative_in_parentheses"] is False


def test_detection_does_not_guess_date_format():
    """Test that column detection leaves the date format to the date detector."""
    mapping = detect_columns(["Date", "Amount"])
    assert "date_format" not in mapping
