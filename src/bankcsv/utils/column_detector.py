"""Column auto-detection from CSV headers."""

from typing import Any, Optional

from bankcsv.domain.entities import AmountMode

# Role -> candidate header substrings, matched case-insensitively in order.
COLUMN_PATTERNS: dict[str, list[str]] = {
    "date": ["date", "transaction date", "posted date", "posting date", "trans date", "value date"],
    "description": ["description", "memo", "narrative", "details", "transaction", "particulars", "reference"],
    "amount": ["amount", "value", "sum", "total"],
    "debit": ["debit", "withdrawal", "payment", "money out", "outflow"],
    "credit": ["credit", "deposit", "money in", "inflow"],
    "merchant": ["merchant", "payee", "vendor", "name", "counterparty"],
    "status": ["status", "state", "transaction status", "posted", "pending"],
}

# Roles are claimed in this order; a header claimed by one role is not
# offered to later ones.
DETECTION_ORDER = ["date", "description", "amount", "debit", "credit", "merchant", "status"]

DEFAULT_MAPPING: dict[str, Any] = {
    "skip_header_rows": 1,
    "negative_in_parentheses": False,
    "thousand_separator": "auto",
    "decimal_separator": "auto",
    "amount_mode": AmountMode.SINGLE.value,
}


def _find_column(headers: list[str], patterns: list[str], taken: set[str]) -> Optional[str]:
    lowered = [h.lower() for h in headers]
    for pattern in patterns:
        for header, lower in zip(headers, lowered):
            if header in taken:
                continue
            if pattern in lower:
                return header
    return None


def detect_columns(headers: list[str]) -> dict[str, Any]:
    """Guess a column mapping from header names.

    Detection is advisory. The result is a partial mapping (snake_case keys
    matching ``ColumnMapping`` fields) that always includes the parsing
    defaults, and any role without a matching header is simply absent.

    Args:
        headers: Header names from the CSV file

    Returns:
        Partial mapping dict
    """
    found: dict[str, str] = {}
    taken: set[str] = set()
    for role in DETECTION_ORDER:
        column = _find_column(headers, COLUMN_PATTERNS[role], taken)
        if column is not None:
            found[role] = column
            taken.add(column)

    mapping = dict(DEFAULT_MAPPING)
    if "date" in found:
        mapping["date_column"] = found["date"]
    if "description" in found:
        mapping["description_column"] = found["description"]
    if "merchant" in found:
        mapping["merchant_column"] = found["merchant"]
    if "status" in found:
        mapping["status_column"] = found["status"]

    if "debit" in found and "credit" in found and "amount" not in found:
        mapping["amount_mode"] = AmountMode.SPLIT.value
        mapping["debit_column"] = found["debit"]
        mapping["credit_column"] = found["credit"]
    elif "amount" in found:
        mapping["amount_column"] = found["amount"]

    return mapping
