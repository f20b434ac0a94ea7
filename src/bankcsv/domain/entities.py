"""Domain model entities for bankcsv.

These are pure data classes representing import concepts, independent of
database schema. Parsing results are plain values so they can be produced
during a preview and reproduced, unchanged, during a commit.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Any


class DateFormat(str, Enum):
    """Supported date layouts, in detection priority order."""

    ISO = "YYYY-MM-DD"
    US = "MM/DD/YYYY"
    EU = "DD/MM/YYYY"
    US_DASH = "MM-DD-YYYY"
    EU_DASH = "DD-MM-YYYY"
    US_SHORT = "M/D/YYYY"
    EU_SHORT = "D/M/YYYY"


class AmountMode(str, Enum):
    """How the amount is encoded in the file."""

    SINGLE = "single"
    SPLIT = "split"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    POSTED = "posted"
    PENDING = "pending"


THOUSAND_SEPARATORS = (",", ".", "", "auto")
DECIMAL_SEPARATORS = (".", ",", "auto")


@dataclass(frozen=True)
class ColumnMapping:
    """Binding of semantic transaction fields to raw CSV header names.

    Instances are only ever handed to the row parser after passing
    ``bankcsv.domain.mapping.validate_mapping``.
    """

    date_column: str
    date_format: DateFormat
    amount_mode: AmountMode = AmountMode.SINGLE
    amount_column: Optional[str] = None
    debit_column: Optional[str] = None
    credit_column: Optional[str] = None
    description_column: Optional[str] = None
    merchant_column: Optional[str] = None
    status_column: Optional[str] = None
    negative_in_parentheses: bool = False
    thousand_separator: str = "auto"
    decimal_separator: str = "auto"
    skip_header_rows: int = 1

    def required_columns(self) -> list[str]:
        """Header names that must be present in a file for this mapping."""
        columns = [self.date_column]
        if self.amount_mode == AmountMode.SINGLE:
            columns.append(self.amount_column)
        else:
            columns.extend([self.debit_column, self.credit_column])
        return [c for c in columns if c]


@dataclass(frozen=True)
class ParsedRow:
    """A successfully parsed transaction candidate."""

    date: str
    description: str
    amount: Decimal
    type: TransactionType
    row_number: int
    raw_row: dict[str, str] = field(default_factory=dict, compare=False)
    merchant: Optional[str] = None
    status: Optional[TransactionStatus] = None


@dataclass(frozen=True)
class ParseError:
    """A row-scoped parse failure. Other rows are unaffected."""

    row: int
    message: str
    column: Optional[str] = None
    raw_value: Optional[str] = None

    def __str__(self) -> str:
        location = f"Row {self.row}"
        if self.column:
            location += f" ({self.column})"
        text = f"{location}: {self.message}"
        if self.raw_value is not None:
            text += f" [{self.raw_value!r}]"
        return text


@dataclass(frozen=True)
class ParseResult:
    """Output of parsing a whole file: one verdict per data row."""

    transactions: list[ParsedRow]
    errors: list[ParseError]
    headers: list[str]
    total_rows: int


@dataclass(frozen=True)
class ImportAccount:
    """Ledger account that CSV files are imported into."""

    id: int
    name: str
    institution: str
    created_at: datetime
    owner_id: Optional[str] = None
    column_mapping: Optional[ColumnMapping] = None
    last_synced_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Stored ledger transaction created by an import."""

    id: int
    account_id: int
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    merchant: Optional[str]
    status: TransactionStatus
    imported_at: datetime


@dataclass(frozen=True)
class DedupRecord:
    """Marks a content fingerprint as already imported into an account."""

    account_id: int
    hash: str
    transaction_id: Optional[int] = None


@dataclass(frozen=True)
class FilePreview:
    """Result of inspecting an uploaded file before any mapping is chosen."""

    headers: list[str]
    sample_rows: list[dict[str, str]]
    detected_mapping: dict[str, Any]
    total_rows: int
    date_format_ambiguous: bool = False


@dataclass(frozen=True)
class ImportPreview:
    """Dry-run outcome of an import. Nothing is written."""

    transactions: list[ParsedRow]
    total_count: int
    duplicate_count: int
    errors: list[ParseError]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a committed import."""

    imported: int
    skipped: int
    errors: list[ParseError]


class ImportStep(str, Enum):
    """Stages of an import session. RESULT is terminal."""

    UPLOAD = "upload"
    MAPPING = "mapping"
    PREVIEW = "preview"
    RESULT = "result"


@dataclass(frozen=True)
class ImportSession:
    """Where an import currently stands and what it will parse with."""

    step: ImportStep
    headers: list[str]
    account_id: Optional[int] = None
    mapping: Optional[ColumnMapping] = None
    detected_mapping: dict[str, Any] = field(default_factory=dict)
    missing_columns: list[str] = field(default_factory=list)
