"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON encoding of
saved column mappings.
"""

from bankcsv.domain import entities as domain
from bankcsv.domain.mapping import mapping_from_json
from bankcsv.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    ImportHash as ORMImportHash,
)


def account_to_domain(orm_account: ORMAccount) -> domain.ImportAccount:
    """Convert SQLAlchemy Account model to domain ImportAccount entity."""
    return domain.ImportAccount(
        id=orm_account.id,
        name=orm_account.name,
        institution=orm_account.institution,
        owner_id=orm_account.owner_id,
        column_mapping=mapping_from_json(orm_account.column_mapping),
        last_synced_at=orm_account.last_synced_at,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=orm_transaction.amount,
        type=domain.TransactionType(orm_transaction.type),
        merchant=orm_transaction.merchant,
        status=domain.TransactionStatus(orm_transaction.status),
        imported_at=orm_transaction.imported_at,
    )


def import_hash_to_domain(orm_hash: ORMImportHash) -> domain.DedupRecord:
    """Convert SQLAlchemy ImportHash model to domain DedupRecord entity."""
    return domain.DedupRecord(
        account_id=orm_hash.account_id,
        hash=orm_hash.hash,
        transaction_id=orm_hash.transaction_id,
    )
