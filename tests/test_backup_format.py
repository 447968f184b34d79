"""Tests for the backup file codec."""

import math
from datetime import datetime, UTC

import pytest

from conftest import BTC, USD, make_account, make_snapshot, make_transaction
from ledgerwell.domain.backup_format import (
    ACCOUNTS,
    TRANSACTIONS,
    backup_filename,
    parse_backup,
    serialize_backup,
)
from ledgerwell.domain.entities import AppSettings
from ledgerwell.domain.errors import BackupFormatError


JAN_15 = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def snapshot():
    account = make_account(
        "acc-1", "Friends", description="People I lend to", total_owed=0.0, total_owed_to_me=100.0
    )
    crypto = make_account("acc-2", "Crypto", currency=BTC)
    txn = make_transaction(
        "txn-1",
        "acc-1",
        'Bob, "The Rock"',
        100.0,
        JAN_15,
        description='Bob, "The Rock" said\nhi',
    )
    return make_snapshot(
        accounts=[account, crypto],
        transactions=[txn],
        custom_currencies=[BTC],
        settings=AppSettings(default_currency=BTC, language="fr", theme="dark", auto_update_rates=False),
    )


def test_backup_filename():
    assert backup_filename(JAN_15) == "LedgerWell_Backup_2024-01-15T10-30-00.csv"


def test_sections_in_order(snapshot):
    text = serialize_backup(snapshot)
    positions = [
        text.index(f"[{name}]")
        for name in ("METADATA", "SETTINGS", "CUSTOM_CURRENCIES", "ACCOUNTS", "TRANSACTIONS")
    ]
    assert positions == sorted(positions)


def test_round_trip_preserves_snapshot(snapshot):
    parsed = parse_backup(serialize_backup(snapshot))

    assert parsed.version == snapshot.version
    assert parsed.export_date == snapshot.export_date
    assert parsed.accounts == snapshot.accounts
    assert parsed.transactions == snapshot.transactions
    assert parsed.custom_currencies == snapshot.custom_currencies
    assert parsed.settings == snapshot.settings
    assert parsed.rejected_rows == []


def test_awkward_description_survives(snapshot):
    parsed = parse_backup(serialize_backup(snapshot))
    assert parsed.transactions[0].description == 'Bob, "The Rock" said\nhi'
    assert parsed.transactions[0].name == 'Bob, "The Rock"'


def test_crlf_inside_field_survives():
    txn = make_transaction("txn-1", "acc-1", "John", 5.0, JAN_15, description="line one\r\nline two")
    snapshot = make_snapshot(accounts=[make_account("acc-1", "Friends")], transactions=[txn])

    parsed = parse_backup(serialize_backup(snapshot))

    assert parsed.transactions[0].description == "line one\r\nline two"


def test_unclosed_quote_is_format_error(snapshot):
    text = serialize_backup(snapshot) + '\nacc-9,"never closed'
    with pytest.raises(BackupFormatError):
        parse_backup(text)


def test_amounts_written_as_plain_decimals():
    txn = make_transaction("t", "a", "Tiny", 0.0000001, JAN_15)
    text = serialize_backup(make_snapshot(accounts=[make_account("a", "A")], transactions=[txn]))
    assert "0.0000001" in text
    assert "e-" not in text


def test_empty_tables_keep_headers():
    text = serialize_backup(make_snapshot())
    parsed = parse_backup(text)
    assert "[ACCOUNTS]\nid,name," in text
    assert parsed.accounts == []
    assert parsed.transactions == []


def test_bom_is_ignored(snapshot):
    parsed = parse_backup("\ufeff" + serialize_backup(snapshot))
    assert parsed.version == "1.0.0"
    assert len(parsed.accounts) == 2


def test_not_a_backup():
    with pytest.raises(BackupFormatError, match="no known sections"):
        parse_backup("date,amount\n2024-01-01,5\n")


def test_unknown_section_ignored(snapshot):
    text = serialize_backup(snapshot) + "\n\n[EXTRA]\nwhatever,1\n"
    parsed = parse_backup(text)
    assert len(parsed.transactions) == 1


def test_missing_sections_yield_defaults():
    parsed = parse_backup("[METADATA]\nversion,1.0.0\n")
    assert parsed.accounts == []
    assert parsed.transactions == []
    assert parsed.custom_currencies == []
    assert parsed.settings.default_currency is None
    assert parsed.settings.language == ""


def test_unreadable_rows_are_rejected_not_fatal(snapshot):
    text = serialize_backup(snapshot)
    bad_row = "txn-bad,acc-1,credit,abc,usd,USD,US Dollar,$,1,false,Eve,,2024-01-01T00:00:00.000Z,,"
    text = text + "\n" + bad_row

    parsed = parse_backup(text)

    assert len(parsed.transactions) == 1
    assert len(parsed.rejected_rows) == 1
    assert parsed.rejected_rows[0].startswith(f"{TRANSACTIONS} row 2")
    assert "amount" in parsed.rejected_rows[0]


def test_bad_account_date_rejected(snapshot):
    text = serialize_backup(snapshot).replace(
        "2024-01-01T00:00:00.000Z", "not-a-date", 1
    )
    parsed = parse_backup(text)
    assert any(row.startswith(f"{ACCOUNTS} row 1") for row in parsed.rejected_rows)


def test_blank_amount_becomes_nan():
    text = (
        "[ACCOUNTS]\nid,name,currency_code\na,A,USD\n\n"
        "[TRANSACTIONS]\nid,accountId,type,amount,name,date\n"
        "t,a,Credit,,John,2024-01-01T00:00:00Z\n"
    )
    parsed = parse_backup(text)
    assert math.isnan(parsed.transactions[0].amount)
    assert parsed.transactions[0].type == "credit"


def test_timestamp_with_offset_normalized_to_utc():
    text = (
        "[TRANSACTIONS]\nid,accountId,type,amount,name,date\n"
        "t,a,debt,5,John,2024-01-01T02:00:00+02:00\n"
    )
    parsed = parse_backup(text)
    assert parsed.transactions[0].date == datetime(2024, 1, 1, tzinfo=UTC)


def test_default_currency_flattened(snapshot):
    text = serialize_backup(snapshot)
    assert "defaultCurrency_code,BTC" in text
    assert "autoUpdateRates,false" in text
    assert USD.code in text
