"""Tests for transaction commands and service."""

from datetime import datetime, UTC

import pytest

from ledgerwell.cli.main import cli
from ledgerwell.domain.errors import NotFoundError, ValidationError


def test_add_transaction(cli_runner, temp_db, sample_account):
    """Test adding a transaction by account name."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "add",
            "--account",
            "Friends",
            "--type",
            "credit",
            "--amount",
            "$25.50",
            "--name",
            "John",
            "--date",
            "2024-01-15",
        ],
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "transaction", "list"])
    assert "John" in result.output
    assert "2024-01-15" in result.output
    assert "$25.50" in result.output


def test_add_transaction_invalid_amount(cli_runner, temp_db, sample_account):
    """Test adding a transaction with an unparseable amount."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "add",
            "--account",
            "Friends",
            "--type",
            "debt",
            "--amount",
            "lots",
            "--name",
            "John",
        ],
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_add_transaction_negative_amount(cli_runner, temp_db, sample_account):
    """Test that amounts must be positive."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "transaction",
            "add",
            "--account",
            "Friends",
            "--type",
            "debt",
            "--amount",
            "-5",
            "--name",
            "John",
        ],
    )

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_list_transactions_date_filter(cli_runner, temp_db, sample_transaction):
    """Test filtering transactions by date."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "list", "--start-date", "2024-02-01"],
    )

    assert result.exit_code == 0
    assert "No transactions found" in result.output


def test_delete_transaction(cli_runner, temp_db, sample_transaction):
    """Test deleting a transaction with --yes."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "delete", sample_transaction.id, "--yes"],
    )

    assert result.exit_code == 0
    assert f"Deleted transaction {sample_transaction.id}" in result.output


def test_delete_missing_transaction(cli_runner, temp_db):
    """Test deleting a transaction that does not exist."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "delete", "missing", "--yes"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_updates_totals(self, transaction_service, account_service, sample_transaction):
        account = account_service.get_account(sample_transaction.account_id)
        assert account.total_owed_to_me == 50.0
        assert sample_transaction.currency.code == "USD"

    def test_invalid_type(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                sample_account.id, "loan", 5.0, "John", datetime.now(UTC)
            )

    def test_blank_name(self, transaction_service, sample_account):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                sample_account.id, "debt", 5.0, "  ", datetime.now(UTC)
            )

    def test_missing_account(self, transaction_service):
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction("missing", "debt", 5.0, "John", datetime.now(UTC))

    def test_update_amount_recalculates(self, transaction_service, account_service, sample_transaction):
        transaction_service.update_transaction(sample_transaction.id, amount=80.0)
        account = account_service.get_account(sample_transaction.account_id)
        assert account.total_owed_to_me == 80.0

    def test_move_to_other_account(self, transaction_service, account_service, sample_transaction):
        family_id = account_service.create_account(name="Family", currency_code="EUR")

        transaction_service.update_transaction(sample_transaction.id, account_id=family_id)

        moved = transaction_service.get_transaction(sample_transaction.id)
        assert moved.account_id == family_id
        assert moved.currency.code == "EUR"
        assert account_service.get_account(family_id).total_owed_to_me == 50.0
        assert account_service.get_account(sample_transaction.account_id).total_owed_to_me == 0.0

    def test_delete_recalculates(self, transaction_service, account_service, sample_transaction):
        transaction_service.delete_transaction(sample_transaction.id)
        account = account_service.get_account(sample_transaction.account_id)
        assert account.total_owed_to_me == 0.0
