"""Tests for backup commands."""

from datetime import datetime, UTC

import pytest

from conftest import make_account, make_snapshot, make_transaction
from ledgerwell.cli.main import cli
from ledgerwell.database.factories import create_sqlite_database
from ledgerwell.domain.backup_format import serialize_backup
from ledgerwell.domain.entities import AppSettings
from ledgerwell.domain.seed import BASE_CURRENCY


@pytest.fixture
def backup_file(tmp_path):
    """Write a small valid backup to disk."""
    when = datetime(2024, 1, 15, tzinfo=UTC)
    snapshot = make_snapshot(
        accounts=[make_account("a1", "Friends"), make_account("a2", "Family")],
        transactions=[
            make_transaction("t1", "a1", "Groceries", 100.0, when),
            make_transaction("t2", "a2", "John", 20.0, when, type="debt"),
        ],
        settings=AppSettings(default_currency=BASE_CURRENCY, language="de"),
    )
    path = tmp_path / "backup.csv"
    path.write_text(serialize_backup(snapshot), encoding="utf-8")
    return path


@pytest.fixture
def invalid_backup_file(tmp_path):
    """Write a backup with three validation errors."""
    when = datetime(2024, 1, 15, tzinfo=UTC)
    snapshot = make_snapshot(
        accounts=[make_account("a1", "")],
        transactions=[
            make_transaction("t1", "a1", "John", -5.0, when),
            make_transaction("t2", "a1", "Jane", 5.0, when, type="loan"),
        ],
    )
    path = tmp_path / "broken.csv"
    path.write_text(serialize_backup(snapshot), encoding="utf-8")
    return path


def fresh_view(temp_db):
    """Open a second connection so reads see what the CLI wrote."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    return db


def test_export(cli_runner, temp_db, sample_transaction, tmp_path):
    """Test exporting to a directory."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "export", "--output-dir", str(tmp_path)]
    )

    assert result.exit_code == 0
    assert "Backup written to" in result.output
    assert len(list(tmp_path.glob("LedgerWell_Backup_*.csv"))) == 1


def test_export_dir_from_environment(cli_runner, temp_db, tmp_path, monkeypatch):
    """Test that LEDGERWELL_BACKUP_DIR sets the export directory."""
    monkeypatch.setenv("LEDGERWELL_BACKUP_DIR", str(tmp_path))

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "backup", "export"])

    assert result.exit_code == 0
    assert len(list(tmp_path.glob("LedgerWell_Backup_*.csv"))) == 1


def test_stats_empty(cli_runner, temp_db):
    """Test live stats with no data."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "backup", "stats"])

    assert result.exit_code == 0
    assert "Accounts: 0" in result.output
    assert "Date range: (no transactions)" in result.output


def test_inspect_valid(cli_runner, temp_db, backup_file):
    """Test inspecting a valid backup."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "inspect", str(backup_file)]
    )

    assert result.exit_code == 0
    assert "Accounts: 2" in result.output
    assert "Friends (USD)" in result.output
    assert "Date range: 2024-01-15 to 2024-01-15" in result.output
    assert "Backup is valid." in result.output


def test_inspect_reports_all_errors(cli_runner, temp_db, invalid_backup_file):
    """Test that every validation error is printed."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "inspect", str(invalid_backup_file)]
    )

    assert result.exit_code == 1
    assert result.output.count("Error:") == 3
    assert "Invalid account at position 1" in result.output


def test_restore_invalid_changes_nothing(cli_runner, temp_db, sample_account, invalid_backup_file):
    """Test that an invalid backup is not restored."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(invalid_backup_file), "--replace", "--yes"],
    )

    assert result.exit_code == 1
    assert "Backup not restored." in result.output
    assert [a.name for a in fresh_view(temp_db).get_accounts()] == ["Friends"]


def test_restore_replace(cli_runner, temp_db, sample_transaction, backup_file):
    """Test replacing all data with a backup."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(backup_file), "--replace", "--yes"],
    )

    assert result.exit_code == 0
    assert "Accounts: 2 added" in result.output
    assert "Transactions: 2 added" in result.output
    assert "Settings restored." in result.output

    db = fresh_view(temp_db)
    assert sorted(a.name for a in db.get_accounts()) == ["Family", "Friends"]
    assert db.get_transaction(sample_transaction.id) is None
    assert db.get_settings().language == "de"


def test_restore_replace_declined(cli_runner, temp_db, sample_account, backup_file):
    """Test that declining the replace confirmation keeps the data."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(backup_file), "--replace"],
        input="n\n",
    )

    assert result.exit_code == 0
    assert "Restore cancelled." in result.output
    assert [a.name for a in fresh_view(temp_db).get_accounts()] == ["Friends"]


def test_restore_merge_skips_duplicates(cli_runner, temp_db, sample_account, transaction_service, backup_file):
    """Test merging into existing data."""
    transaction_service.create_transaction(
        sample_account.id, "credit", 100.0, "groceries", datetime(2024, 1, 15, 5, 0, tzinfo=UTC)
    )

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "restore", str(backup_file), "--merge"]
    )

    assert result.exit_code == 0
    assert "Accounts: 1 added, 0 renamed, 1 already present" in result.output
    assert "Transactions: 1 added, 1 skipped as duplicates" in result.output

    db = fresh_view(temp_db)
    assert sorted(a.name for a in db.get_accounts()) == ["Family", "Friends"]
    assert len(db.get_transactions()) == 2


def test_restore_merge_keep_duplicates(cli_runner, temp_db, sample_account, backup_file):
    """Test merging with --keep-duplicates renames clashing accounts."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(backup_file), "--merge", "--keep-duplicates"],
    )

    assert result.exit_code == 0
    assert "1 renamed" in result.output
    names = sorted(a.name for a in fresh_view(temp_db).get_accounts())
    assert names == ["Family", "Friends", "Friends (Imported)"]


def test_restore_prompts_for_file_and_cancels(cli_runner, temp_db, sample_account):
    """Test that an empty file answer cancels cleanly."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "restore"], input="\n"
    )

    assert result.exit_code == 0
    assert "Restore cancelled." in result.output


def test_restore_prompts_for_mode(cli_runner, temp_db, backup_file):
    """Test that the restore mode is asked for when not given."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(backup_file)],
        input="merge\n",
    )

    assert result.exit_code == 0
    assert "Accounts: 2 added" in result.output


def test_restore_rejects_negative_tolerance(cli_runner, temp_db, backup_file):
    """Test that duplicate thresholds are validated."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "backup",
            "restore",
            str(backup_file),
            "--merge",
            "--amount-tolerance",
            "-1",
        ],
    )

    assert result.exit_code == 1
    assert "amount_tolerance" in result.output


def test_restore_rejects_huge_date_window(cli_runner, temp_db, backup_file):
    """Test that an out-of-range date window is an error, not a crash."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "backup",
            "restore",
            str(backup_file),
            "--merge",
            "--date-window-hours",
            "1e12",
        ],
    )

    assert result.exit_code == 1
    assert "Error: date window of 1e+12 hours is too large" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_restore_missing_file(cli_runner, temp_db, tmp_path):
    """Test restoring a file that does not exist."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "backup", "restore", str(tmp_path / "nope.csv"), "--merge"],
    )

    assert result.exit_code == 1
    assert "Cannot read backup file" in result.output
