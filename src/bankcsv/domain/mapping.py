"""Column mapping validation and (de)serialization.

``validate_mapping`` is the single gate between a loosely-shaped mapping
(auto-detected, user-edited, or loaded from storage) and the row parser.
"""

import json
from dataclasses import asdict, fields
from typing import Any, Optional

from bankcsv.domain.entities import (
    AmountMode,
    ColumnMapping,
    DateFormat,
    DECIMAL_SEPARATORS,
    THOUSAND_SEPARATORS,
)
from bankcsv.domain.errors import MappingError, missing_columns_message

MAPPING_VERSION = 1

_FIELD_NAMES = {f.name for f in fields(ColumnMapping)}

# camelCase keys as sent by web clients
_ALIASES = {
    "dateColumn": "date_column",
    "dateFormat": "date_format",
    "amountMode": "amount_mode",
    "amountColumn": "amount_column",
    "debitColumn": "debit_column",
    "creditColumn": "credit_column",
    "descriptionColumn": "description_column",
    "merchantColumn": "merchant_column",
    "statusColumn": "status_column",
    "negativeInParentheses": "negative_in_parentheses",
    "thousandSeparator": "thousand_separator",
    "decimalSeparator": "decimal_separator",
    "skipHeaderRows": "skip_header_rows",
}

_AMOUNT_STRATEGIES = {
    AmountMode.SINGLE: ("amount_column",),
    AmountMode.SPLIT: ("debit_column", "credit_column"),
}


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name in _FIELD_NAMES:
            result[name] = value
    return result


def _clean_column(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


_TRUE_WORDS = {"true", "yes", "1"}
_FALSE_WORDS = {"false", "no", "0", ""}


def _parse_flag(name: str, value: Any) -> bool:
    """Read a boolean that may arrive as a bool or as text from a client."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise MappingError(f"Invalid {name} '{value}'. Must be true or false")


def validate_mapping(data: ColumnMapping | dict[str, Any]) -> ColumnMapping:
    """Validate a mapping and return it as an explicit ColumnMapping.

    Args:
        data: ColumnMapping or partial mapping dict (snake_case or camelCase keys)

    Returns:
        Validated ColumnMapping

    Raises:
        MappingError: If required fields are missing or the amount
            configuration is contradictory
    """
    values = asdict(data) if isinstance(data, ColumnMapping) else _normalize_keys(dict(data))

    for name in (
        "date_column",
        "amount_column",
        "debit_column",
        "credit_column",
        "description_column",
        "merchant_column",
        "status_column",
    ):
        values[name] = _clean_column(values.get(name))

    if values["date_column"] is None:
        raise MappingError("Mapping is missing the date column")

    raw_format = values.get("date_format")
    if raw_format is None or raw_format == "":
        raise MappingError("Mapping is missing the date format")
    try:
        date_format = DateFormat(raw_format)
    except ValueError:
        allowed = ", ".join(f.value for f in DateFormat)
        raise MappingError(f"Unrecognized date format '{raw_format}'. Must be one of: {allowed}")

    try:
        amount_mode = AmountMode(values.get("amount_mode") or AmountMode.SINGLE.value)
    except ValueError:
        raise MappingError(
            f"Invalid amount mode '{values.get('amount_mode')}'. Must be 'single' or 'split'"
        )

    specified = {
        mode: all(values[name] for name in names) for mode, names in _AMOUNT_STRATEGIES.items()
    }
    if specified[AmountMode.SINGLE] and specified[AmountMode.SPLIT]:
        raise MappingError(
            "Mapping specifies both a single amount column and debit/credit columns"
        )
    if not specified[amount_mode]:
        if amount_mode == AmountMode.SINGLE:
            raise MappingError("Single amount mode requires an amount column")
        raise MappingError("Split amount mode requires both debit and credit columns")
    if amount_mode == AmountMode.SPLIT and values["debit_column"] == values["credit_column"]:
        raise MappingError("Debit and credit columns must be different")

    thousand = values.get("thousand_separator", "auto")
    thousand = "auto" if thousand is None else thousand
    decimal = values.get("decimal_separator", "auto") or "auto"
    if thousand not in THOUSAND_SEPARATORS:
        raise MappingError(f"Invalid thousand separator '{thousand}'")
    if decimal not in DECIMAL_SEPARATORS:
        raise MappingError(f"Invalid decimal separator '{decimal}'")
    if decimal != "auto" and thousand == decimal:
        raise MappingError("Thousand and decimal separators must differ")

    skip = values.get("skip_header_rows", 1)
    try:
        skip = int(1 if skip is None else skip)
    except (TypeError, ValueError):
        raise MappingError(f"Invalid skip_header_rows '{skip}'")
    if skip < 1:
        raise MappingError("skip_header_rows must be at least 1")

    other_mode = AmountMode.SPLIT if amount_mode == AmountMode.SINGLE else AmountMode.SINGLE
    for name in _AMOUNT_STRATEGIES[other_mode]:
        values[name] = None

    return ColumnMapping(
        date_column=values["date_column"],
        date_format=date_format,
        amount_mode=amount_mode,
        amount_column=values["amount_column"],
        debit_column=values["debit_column"],
        credit_column=values["credit_column"],
        description_column=values["description_column"],
        merchant_column=values["merchant_column"],
        status_column=values["status_column"],
        negative_in_parentheses=_parse_flag(
            "negative_in_parentheses", values.get("negative_in_parentheses")
        ),
        thousand_separator=thousand,
        decimal_separator=decimal,
        skip_header_rows=skip,
    )


def merge_mapping(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Apply user overrides (None values ignored) on top of a partial mapping.

    Overriding the columns of one amount strategy switches the mode and
    drops the columns of the other one.
    """
    merged = dict(base)
    changes = {k: v for k, v in _normalize_keys(overrides).items() if v is not None}
    merged.update(changes)

    if "amount_mode" not in changes:
        if "amount_column" in changes:
            merged["amount_mode"] = AmountMode.SINGLE.value
        elif "debit_column" in changes or "credit_column" in changes:
            merged["amount_mode"] = AmountMode.SPLIT.value

    mode = merged.get("amount_mode") or AmountMode.SINGLE.value
    other = AmountMode.SPLIT if mode == AmountMode.SINGLE.value else AmountMode.SINGLE
    for name in _AMOUNT_STRATEGIES[other]:
        if name not in changes:
            merged.pop(name, None)
    return merged


def missing_columns(mapping: ColumnMapping, headers: list[str]) -> list[str]:
    """Return mapped column names that are not present in the headers."""
    present = set(headers)
    mapped = mapping.required_columns() + [
        c
        for c in (mapping.description_column, mapping.merchant_column, mapping.status_column)
        if c
    ]
    return [c for c in mapped if c not in present]


def missing_required_columns(mapping: ColumnMapping, headers: list[str]) -> list[str]:
    """Return required (date/amount) columns that are not present in the headers."""
    present = set(headers)
    return [c for c in mapping.required_columns() if c not in present]


def check_mapping_fits(mapping: ColumnMapping, headers: list[str]) -> None:
    """Raise MappingError if the file lacks a column the mapping requires."""
    missing = missing_required_columns(mapping, headers)
    if missing:
        raise MappingError(missing_columns_message(missing), missing_columns=missing)


def mapping_to_dict(mapping: ColumnMapping) -> dict[str, Any]:
    """Return a JSON-ready dict including the mapping schema version."""
    data = asdict(mapping)
    data["date_format"] = mapping.date_format.value
    data["amount_mode"] = mapping.amount_mode.value
    data["version"] = MAPPING_VERSION
    return data


def mapping_to_json(mapping: ColumnMapping) -> str:
    return json.dumps(mapping_to_dict(mapping), sort_keys=True)


def mapping_from_json(text: Optional[str]) -> Optional[ColumnMapping]:
    """Load a stored mapping. Stored mappings are re-validated on load."""
    if not text:
        return None
    data = json.loads(text)
    version = data.pop("version", MAPPING_VERSION)
    if version != MAPPING_VERSION:
        raise MappingError(f"Unsupported column mapping version {version}")
    return validate_mapping(data)
