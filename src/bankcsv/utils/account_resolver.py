"""Utility for resolving account names to IDs."""

from typing import Optional

from bankcsv.domain.account import AccountService
from bankcsv.domain.errors import NotFoundError


def resolve_account(
    account_service: AccountService, account: str | int, owner_id: Optional[str] = None
) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)
        owner_id: Optional owner to restrict name lookups to

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(f"Account ID {account} not found")
        return account

    # Try to parse as integer (handles string IDs like "1")
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None
    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    # Try to find by name
    for acc in account_service.list_accounts(owner_id=owner_id):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
