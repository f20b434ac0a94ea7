"""CSV import domain service.

An import moves through UPLOAD -> MAPPING -> PREVIEW -> RESULT. MAPPING
is skipped when the account already has a saved mapping that fits the
file. Previews never write; a commit re-parses the file with the
account's saved mapping and inserts only rows whose content hash is not
yet recorded for the account.
"""

import logging
import threading
from collections import Counter
from dataclasses import replace
from datetime import datetime, UTC
from typing import Any, Optional

from bankcsv.database.base import Database
from bankcsv.domain.account import AccountService
from bankcsv.domain.entities import (
    ColumnMapping,
    FilePreview,
    ImportPreview,
    ImportResult,
    ImportSession,
    ImportStep,
    ParsedRow,
    ParseResult,
)
from bankcsv.domain.errors import (
    MappingError,
    ValidationError,
    account_has_no_mapping,
)
from bankcsv.domain.mapping import (
    check_mapping_fits,
    missing_required_columns,
    validate_mapping,
)
from bankcsv.domain.row_parser import parse_rows
from bankcsv.utils.column_detector import detect_columns
from bankcsv.utils.date_parser import detect_date_format, is_ambiguous_date_sample
from bankcsv.utils.hashing import compute_transaction_hash
from bankcsv.utils.tokenizer import decode_bytes, row_to_dict, tokenize

logger = logging.getLogger(__name__)

SAMPLE_ROW_COUNT = 5
DATE_SAMPLE_COUNT = 10
PREVIEW_TRANSACTION_LIMIT = 20


class CSVImportService:
    """Service for previewing and importing CSV files."""

    # Serializes hash-check-then-insert per account within this process
    _account_locks: dict[int, threading.Lock] = {}
    _account_locks_guard = threading.Lock()

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)

    @classmethod
    def _lock_for(cls, account_id: int) -> threading.Lock:
        with cls._account_locks_guard:
            return cls._account_locks.setdefault(account_id, threading.Lock())

    @staticmethod
    def _read(data: bytes | str) -> tuple[list[str], list[list[str]]]:
        """Decode and tokenize file content. Raises file-level errors."""
        return tokenize(decode_bytes(data))

    @staticmethod
    def _detect(headers: list[str], rows: list[list[str]]) -> tuple[dict[str, Any], bool]:
        detected = detect_columns(headers)
        ambiguous = False
        date_column = detected.get("date_column")
        if date_column:
            samples = [row_to_dict(headers, r)[date_column] for r in rows[:DATE_SAMPLE_COUNT]]
            date_format = detect_date_format(samples)
            if date_format is not None:
                detected["date_format"] = date_format.value
                ambiguous = is_ambiguous_date_sample(samples, date_format)
        return detected, ambiguous

    def preview_file(self, data: bytes | str) -> FilePreview:
        """Inspect a file and guess its column mapping. Nothing is stored.

        Args:
            data: Raw file content

        Returns:
            FilePreview with headers, the first rows, the detected mapping and
            the number of data rows

        Raises:
            FileFormatError: If the file is empty, unreadable or has no data rows
        """
        headers, rows = self._read(data)
        detected, ambiguous = self._detect(headers, rows)
        if ambiguous:
            logger.info(
                "Date format %s chosen by default; day/month order is ambiguous",
                detected.get("date_format"),
            )
        return FilePreview(
            headers=headers,
            sample_rows=[row_to_dict(headers, r) for r in rows[:SAMPLE_ROW_COUNT]],
            detected_mapping=detected,
            total_rows=len(rows),
            date_format_ambiguous=ambiguous,
        )

    def start_session(self, data: bytes | str, account_id: Optional[int] = None) -> ImportSession:
        """Begin an import from an uploaded file.

        Moves straight to PREVIEW when the account has a saved mapping whose
        required columns all appear in the file, and to MAPPING otherwise.
        In the latter case ``missing_columns`` lists what the saved mapping
        needed but the file lacks.

        Raises:
            FileFormatError: If the file cannot be tokenized
            NotFoundError: If account_id does not exist
        """
        headers, rows = self._read(data)
        detected, _ = self._detect(headers, rows)
        session = ImportSession(
            step=ImportStep.MAPPING,
            headers=headers,
            account_id=account_id,
            detected_mapping=detected,
        )
        if account_id is None:
            return session

        account = self.account_service.require_account(account_id)
        if account.column_mapping is None:
            return session

        missing = missing_required_columns(account.column_mapping, headers)
        if missing:
            logger.info(
                "Saved mapping of account %s does not fit file, missing: %s",
                account_id,
                ", ".join(missing),
            )
            return replace(session, missing_columns=missing)
        return replace(session, step=ImportStep.PREVIEW, mapping=account.column_mapping)

    def confirm_mapping(
        self, session: ImportSession, mapping: ColumnMapping | dict[str, Any]
    ) -> ImportSession:
        """Accept a user-confirmed mapping and move the session to PREVIEW.

        Raises:
            ValidationError: If the session is already finished
            MappingError: If the mapping is invalid or does not fit the file
        """
        if session.step not in (ImportStep.MAPPING, ImportStep.PREVIEW):
            raise ValidationError(f"Cannot change mapping of an import in step '{session.step.value}'")
        column_mapping = validate_mapping(mapping)
        check_mapping_fits(column_mapping, session.headers)
        return replace(
            session,
            step=ImportStep.PREVIEW,
            mapping=column_mapping,
            missing_columns=[],
        )

    def _resolve_mapping(
        self,
        mapping: Optional[ColumnMapping | dict[str, Any]],
        account_id: Optional[int],
    ) -> ColumnMapping:
        if mapping is not None:
            return validate_mapping(mapping)
        if account_id is not None:
            account = self.account_service.require_account(account_id)
            if account.column_mapping is not None:
                return account.column_mapping
        raise MappingError("No column mapping provided")

    def _parse(self, data: bytes | str, mapping: ColumnMapping) -> ParseResult:
        headers, rows = self._read(data)
        check_mapping_fits(mapping, headers)
        return parse_rows(headers, rows, mapping)

    @staticmethod
    def _hash_rows(transactions: list[ParsedRow]) -> list[tuple[ParsedRow, str]]:
        """Fingerprint rows in file order, numbering repeats of the same transaction."""
        occurrences: Counter[str] = Counter()
        hashed = []
        for t in transactions:
            content_hash = compute_transaction_hash(t.date, t.amount, t.description)
            occurrences[content_hash] += 1
            count = occurrences[content_hash]
            if count > 1:
                content_hash = compute_transaction_hash(
                    t.date, t.amount, t.description, occurrence=count
                )
            hashed.append((t, content_hash))
        return hashed

    @staticmethod
    def _split_new(
        hashed: list[tuple[ParsedRow, str]], existing: set[str]
    ) -> list[tuple[ParsedRow, str]]:
        """Keep rows whose hash is not yet recorded for the account."""
        return [(row, content_hash) for row, content_hash in hashed if content_hash not in existing]

    def preview_import(
        self,
        data: bytes | str,
        mapping: Optional[ColumnMapping | dict[str, Any]] = None,
        account_id: Optional[int] = None,
        limit: int = PREVIEW_TRANSACTION_LIMIT,
    ) -> ImportPreview:
        """Dry-run an import and report what a commit would do.

        Args:
            data: Raw file content
            mapping: Mapping to parse with; defaults to the account's saved mapping
            account_id: Account whose stored hashes are checked for duplicates
            limit: Maximum number of parsed transactions returned

        Returns:
            ImportPreview with the first transactions, total and duplicate
            counts, and all row errors

        Raises:
            FileFormatError: On file-level problems
            MappingError: If no usable mapping is available
        """
        column_mapping = self._resolve_mapping(mapping, account_id)
        result = self._parse(data, column_mapping)
        hashed = self._hash_rows(result.transactions)

        existing: set[str] = set()
        if account_id is not None and hashed:
            existing = self.db.get_existing_hashes(account_id, [h for _, h in hashed])
        duplicate_count = len(hashed) - len(self._split_new(hashed, existing))

        return ImportPreview(
            transactions=result.transactions[:limit],
            total_count=len(result.transactions),
            duplicate_count=duplicate_count,
            errors=result.errors,
        )

    def commit_import(self, data: bytes | str, account_id: int) -> ImportResult:
        """Import a file into an account using the account's saved mapping.

        Rows already imported (same content hash) are skipped, so committing
        the same file twice imports nothing the second time. New transactions
        and their dedup records are written in a single all-or-nothing batch,
        and the account's last_synced_at is updated.

        Args:
            data: Raw file content
            account_id: Target account

        Returns:
            ImportResult with imported and skipped counts and row errors

        Raises:
            NotFoundError: If the account does not exist
            MappingError: If the account has no mapping or it does not fit the file
            FileFormatError: On file-level problems
            ConflictError: If a concurrent import recorded the same hashes first
        """
        account = self.account_service.require_account(account_id)
        if account.column_mapping is None:
            raise MappingError(account_has_no_mapping(account_id))

        result = self._parse(data, account.column_mapping)
        hashed = self._hash_rows(result.transactions)

        with self._lock_for(account_id):
            existing = self.db.get_existing_hashes(account_id, [h for _, h in hashed])
            new_rows = self._split_new(hashed, existing)
            self.db.insert_import_batch(account_id, new_rows, synced_at=datetime.now(UTC))

        imported = len(new_rows)
        skipped = len(hashed) - imported
        logger.info(
            "Imported %d transactions into account %s (%d duplicates skipped, %d row errors)",
            imported,
            account_id,
            skipped,
            len(result.errors),
        )
        return ImportResult(imported=imported, skipped=skipped, errors=result.errors)

    def commit_session(self, session: ImportSession, data: bytes | str) -> ImportResult:
        """Commit a previewed session, saving its mapping on the account if changed.

        Raises:
            ValidationError: If the session is not in PREVIEW or has no account
        """
        if session.step != ImportStep.PREVIEW or session.mapping is None:
            raise ValidationError("Only a previewed import with a confirmed mapping can be committed")
        if session.account_id is None:
            raise ValidationError("An account is required to commit an import")

        account = self.account_service.require_account(session.account_id)
        if account.column_mapping != session.mapping:
            self.account_service.update_account_mapping(session.account_id, session.mapping)
        return self.commit_import(data, session.account_id)
