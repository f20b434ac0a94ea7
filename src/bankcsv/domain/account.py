"""Account domain service."""

import logging
from typing import Any, Optional

from bankcsv.database.base import Database
from bankcsv.domain.entities import ColumnMapping, ImportAccount
from bankcsv.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_name_taken,
    account_not_found,
)
from bankcsv.domain.mapping import validate_mapping

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing import accounts and their saved mappings."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        institution: str,
        mapping: Optional[ColumnMapping | dict[str, Any]] = None,
        owner_id: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            institution: Bank or institution name
            mapping: Optional column mapping to save with the account
            owner_id: Optional owner the account belongs to

        Returns:
            Account ID

        Raises:
            ValidationError: If name or institution is blank
            MappingError: If the mapping is invalid
            ConflictError: If the owner already has an account with this name
        """
        name = (name or "").strip()
        institution = (institution or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        if not institution:
            raise ValidationError("Institution name is required")

        column_mapping = validate_mapping(mapping) if mapping is not None else None

        # Check if account with same name exists
        for acc in self.db.list_accounts(owner_id=owner_id):
            if acc.name == name and acc.owner_id == owner_id:
                raise ConflictError(account_name_taken(name))

        account_id = self.db.create_account(
            name=name,
            institution=institution,
            column_mapping=column_mapping,
            owner_id=owner_id,
        )
        logger.info("Created account %s (%s)", account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[ImportAccount]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> ImportAccount:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, owner_id: Optional[str] = None) -> list[ImportAccount]:
        """List accounts.

        Args:
            owner_id: Optional owner to filter by

        Returns:
            List of account entities
        """
        return self.db.list_accounts(owner_id=owner_id)

    def update_account_mapping(
        self, account_id: int, mapping: ColumnMapping | dict[str, Any]
    ) -> ColumnMapping:
        """Validate and save a new column mapping for an account.

        Args:
            account_id: Account ID
            mapping: New mapping

        Returns:
            The validated mapping as stored

        Raises:
            NotFoundError: If account not found
            MappingError: If the mapping is invalid
        """
        self.require_account(account_id)
        column_mapping = validate_mapping(mapping)
        self.db.update_account_mapping(account_id, column_mapping)
        logger.info("Updated column mapping for account %s", account_id)
        return column_mapping

    def rename_account(
        self, account_id: int, name: str, institution: Optional[str] = None
    ) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If account not found
            ConflictError: If name already exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        self.require_account(account_id)
        self.db.update_account_name(
            account_id=account_id,
            name=name,
            institution=institution.strip() if institution else None,
        )

    def delete_account(self, account_id: int) -> None:
        """Delete an account that has no imported transactions.

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account has imported transactions
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_account(account_id)
