"""Shared domain error messages and error types."""

from typing import Optional, Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class FileFormatError(ValidationError):
    """File-level failure. Raised before any row is processed."""


class EmptyFileError(FileFormatError):
    """The file has no header row."""


class NoDataError(FileFormatError):
    """The file has a header row but no data rows."""


class UnreadableFileError(FileFormatError):
    """The file content could not be decoded as text."""


class MappingError(ValidationError):
    """Column mapping is incomplete, contradictory or does not fit the file.

    Attributes:
        missing_columns: Header names the mapping refers to that are absent
            from the file (empty when the mapping itself is invalid).
    """

    def __init__(self, message: str, missing_columns: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.missing_columns = list(missing_columns or [])


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_taken(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def account_has_no_mapping(account_id: int) -> str:
    """Return message for an account without a saved column mapping."""
    return f"Account {account_id} has no column mapping configured"


def missing_columns_message(missing: Sequence[str]) -> str:
    """Return message for mapped columns absent from a file."""
    return f"CSV file missing required columns: {', '.join(missing)}"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account has imported transactions."""
    return (
        f"Cannot delete account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete them first."
    )
