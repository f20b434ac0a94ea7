"""Shared pytest fixtures for bankcsv tests."""

import tempfile
import os
from pathlib import Path
import pytest

from bankcsv.database.factories import create_sqlite_database
from bankcsv.domain.account import AccountService
from bankcsv.domain.csv_import import CSVImportService
from bankcsv.domain.entities import AmountMode, ColumnMapping, DateFormat


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db)


@pytest.fixture
def simple_mapping():
    """Mapping for the Date,Description,Amount layout."""
    return ColumnMapping(
        date_column="Date",
        date_format=DateFormat.ISO,
        amount_mode=AmountMode.SINGLE,
        amount_column="Amount",
        description_column="Description",
    )


@pytest.fixture
def split_mapping():
    """Mapping for the debit/credit layout in fixtures/split.csv."""
    return ColumnMapping(
        date_column="Posted Date",
        date_format=DateFormat.US,
        amount_mode=AmountMode.SPLIT,
        debit_column="Debit",
        credit_column="Credit",
        description_column="Details",
        merchant_column="Payee",
        status_column="Status",
    )


@pytest.fixture
def sample_account(account_service, simple_mapping):
    """Create a sample account with a saved mapping."""
    account_id = account_service.create_account(
        name="Test Account", institution="Test Bank", mapping=simple_mapping
    )
    return account_service.get_account(account_id)


@pytest.fixture
def unmapped_account(account_service):
    """Create a sample account without a saved mapping."""
    account_id = account_service.create_account(name="Fresh Account", institution="Test Bank")
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
