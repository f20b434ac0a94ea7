"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from bankcsv.domain.entities import (
    ColumnMapping,
    DedupRecord,
    ImportAccount,
    ParsedRow,
    Transaction,
)


class Database(ABC):
    """Abstract store for import accounts, transactions and dedup hashes."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        institution: str,
        column_mapping: Optional[ColumnMapping] = None,
        owner_id: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[ImportAccount]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner_id: Optional[str] = None) -> list[ImportAccount]:
        """List accounts, optionally only those of one owner."""
        pass

    @abstractmethod
    def update_account_mapping(self, account_id: int, column_mapping: ColumnMapping) -> None:
        """Replace the saved column mapping of an account."""
        pass

    @abstractmethod
    def update_account_name(
        self, account_id: int, name: str, institution: Optional[str] = None
    ) -> None:
        """Update account name and optionally institution."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions imported into an account."""
        pass

    # Dedup operations
    @abstractmethod
    def get_existing_hashes(self, account_id: int, hashes: list[str]) -> set[str]:
        """Return the subset of hashes already recorded for the account."""
        pass

    @abstractmethod
    def list_dedup_records(self, account_id: int) -> list[DedupRecord]:
        """List all dedup records of an account."""
        pass

    @abstractmethod
    def insert_import_batch(
        self,
        account_id: int,
        rows: list[tuple[ParsedRow, str]],
        synced_at: datetime,
    ) -> list[DedupRecord]:
        """Insert transactions with their hashes and stamp last_synced_at.

        The batch is all-or-nothing: on any failure nothing is written.

        Args:
            account_id: Target account
            rows: (parsed row, content hash) pairs to insert
            synced_at: Timestamp stored as the account's last_synced_at

        Returns:
            One DedupRecord per inserted transaction

        Raises:
            ConflictError: If a hash was recorded concurrently
        """
        pass

    # Transaction operations
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self, account_id: Optional[int] = None) -> list[Transaction]:
        """List transactions, optionally filtered by account."""
        pass
