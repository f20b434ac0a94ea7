"""Tests for account service and account resolution."""

import pytest

from bankcsv.domain.entities import DateFormat
from bankcsv.domain.errors import (
    ConflictError,
    DependencyError,
    MappingError,
    NotFoundError,
    ValidationError,
)
from bankcsv.utils.account_resolver import resolve_account


def test_create_account_with_mapping(account_service, simple_mapping):
    account_id = account_service.create_account("Checking", "Chase", mapping=simple_mapping)
    account = account_service.get_account(account_id)

    assert account.name == "Checking"
    assert account.institution == "Chase"
    assert account.column_mapping == simple_mapping
    assert account.last_synced_at is None


def test_create_account_with_mapping_dict(account_service):
    account_id = account_service.create_account(
        "Checking",
        "Chase",
        mapping={"dateColumn": "Date", "dateFormat": "MM/DD/YYYY", "amountColumn": "Amount"},
    )
    mapping = account_service.get_account(account_id).column_mapping
    assert mapping.date_format == DateFormat.US


def test_create_account_trims_names(account_service):
    account_id = account_service.create_account("  Savings ", " ING ")
    account = account_service.get_account(account_id)
    assert account.name == "Savings"
    assert account.institution == "ING"
    assert account.column_mapping is None


@pytest.mark.parametrize("name,institution", [("", "Bank"), ("   ", "Bank"), ("Name", "")])
def test_create_account_requires_names(account_service, name, institution):
    with pytest.raises(ValidationError):
        account_service.create_account(name, institution)


def test_create_account_invalid_mapping(account_service):
    with pytest.raises(MappingError):
        account_service.create_account("Checking", "Chase", mapping={"date_column": "Date"})
    assert account_service.list_accounts() == []


def test_duplicate_name(account_service, sample_account):
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(sample_account.name, "Other Bank")


def test_same_name_for_different_owners(account_service):
    first = account_service.create_account("Checking", "Bank", owner_id="alice")
    second = account_service.create_account("Checking", "Bank", owner_id="bob")
    assert first != second
    assert [a.id for a in account_service.list_accounts(owner_id="alice")] == [first]


def test_require_account(account_service):
    with pytest.raises(NotFoundError, match="Account 42 not found"):
        account_service.require_account(42)
    assert account_service.get_account(42) is None


def test_update_account_mapping(account_service, sample_account, split_mapping):
    saved = account_service.update_account_mapping(sample_account.id, split_mapping)
    assert saved == split_mapping
    assert account_service.get_account(sample_account.id).column_mapping == split_mapping


def test_update_mapping_validates(account_service, sample_account, simple_mapping):
    with pytest.raises(MappingError):
        account_service.update_account_mapping(sample_account.id, {"date_column": "Date"})
    assert account_service.get_account(sample_account.id).column_mapping == simple_mapping


def test_update_mapping_unknown_account(account_service, simple_mapping):
    with pytest.raises(NotFoundError):
        account_service.update_account_mapping(999, simple_mapping)


def test_rename_account(account_service, sample_account):
    account_service.rename_account(sample_account.id, "Renamed", institution="New Bank")
    account = account_service.get_account(sample_account.id)
    assert account.name == "Renamed"
    assert account.institution == "New Bank"


def test_rename_to_existing_name(account_service, sample_account):
    account_service.create_account("Other", "Bank")
    with pytest.raises(ConflictError):
        account_service.rename_account(sample_account.id, "Other")


def test_delete_account(account_service, sample_account):
    account_service.delete_account(sample_account.id)
    assert account_service.get_account(sample_account.id) is None


def test_delete_account_with_transactions(account_service, import_service, sample_account, fixtures_dir):
    import_service.commit_import((fixtures_dir / "simple.csv").read_bytes(), sample_account.id)
    with pytest.raises(DependencyError, match="2 transactions"):
        account_service.delete_account(sample_account.id)


class TestResolveAccount:
    """Tests for resolving account names and IDs."""

    def test_by_name(self, account_service, sample_account):
        assert resolve_account(account_service, "Test Account") == sample_account.id

    def test_by_id_string(self, account_service, sample_account):
        assert resolve_account(account_service, str(sample_account.id)) == sample_account.id

    def test_by_id(self, account_service, sample_account):
        assert resolve_account(account_service, sample_account.id) == sample_account.id

    def test_unknown_name(self, account_service):
        with pytest.raises(NotFoundError, match="'Nope' not found"):
            resolve_account(account_service, "Nope")

    def test_unknown_id(self, account_service):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, "77")
