"""Shared pytest fixtures for ledgerwell tests."""

import tempfile
import os
from datetime import datetime, UTC
import pytest

from ledgerwell.database.factories import create_sqlite_database
from ledgerwell.domain.account import AccountService
from ledgerwell.domain.backup import BackupService
from ledgerwell.domain.currency import CurrencyService
from ledgerwell.domain.entities import (
    Account,
    AppSettings,
    BackupSnapshot,
    Currency,
    Transaction,
)
from ledgerwell.domain.settings import SettingsService
from ledgerwell.domain.transaction import TransactionService
from ledgerwell.domain.seed import BASE_CURRENCY


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
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def currency_service(temp_db):
    """Create a CurrencyService with a temporary database."""
    return CurrencyService(temp_db)


@pytest.fixture
def settings_service(temp_db):
    """Create a SettingsService with a temporary database."""
    return SettingsService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample USD account for testing."""
    account_id = account_service.create_account(name="Friends", currency_code="USD")
    return account_service.get_account(account_id)


@pytest.fixture
def sample_transaction(transaction_service, sample_account):
    """Create a sample credit transaction for testing."""
    transaction_id = transaction_service.create_transaction(
        account_id=sample_account.id,
        type="credit",
        amount=50.0,
        name="John",
        date=datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
        description="Dinner",
    )
    return transaction_service.get_transaction(transaction_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


# Snapshot builders shared by backup tests

USD = BASE_CURRENCY
BTC = Currency(id="custom_btc", code="BTC", name="Bitcoin", symbol="₿", rate=0.000015, is_custom=True)
STAMP = datetime(2024, 1, 1, tzinfo=UTC)


def make_account(account_id, name, currency=USD, **kwargs):
    return Account(
        id=account_id,
        name=name,
        currency=currency,
        created_at=kwargs.pop("created_at", STAMP),
        updated_at=kwargs.pop("updated_at", STAMP),
        **kwargs,
    )


def make_transaction(transaction_id, account_id, name, amount, date, type="credit", currency=USD, **kwargs):
    return Transaction(
        id=transaction_id,
        account_id=account_id,
        type=type,
        amount=amount,
        currency=currency,
        name=name,
        date=date,
        created_at=kwargs.pop("created_at", date),
        updated_at=kwargs.pop("updated_at", date),
        **kwargs,
    )


def make_snapshot(accounts=(), transactions=(), custom_currencies=(), settings=None, **kwargs):
    return BackupSnapshot(
        version=kwargs.pop("version", "1.0.0"),
        export_date=kwargs.pop("export_date", "2024-02-01T00:00:00.000Z"),
        accounts=list(accounts),
        transactions=list(transactions),
        settings=settings or AppSettings(default_currency=USD, language="en"),
        custom_currencies=list(custom_currencies),
        **kwargs,
    )
