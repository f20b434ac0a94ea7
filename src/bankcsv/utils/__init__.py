"""Utility functions for bankcsv."""

from bankcsv.utils.tokenizer import tokenize
from bankcsv.utils.column_detector import detect_columns
from bankcsv.utils.date_parser import detect_date_format, parse_date
from bankcsv.utils.amount_parser import normalize_amount, parse_amount
from bankcsv.utils.hashing import compute_transaction_hash

__all__ = [
    "tokenize",
    "detect_columns",
    "detect_date_format",
    "parse_date",
    "normalize_amount",
    "parse_amount",
    "compute_transaction_hash",
]
