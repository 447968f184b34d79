"""Backup codec: snapshot <-> sectioned CSV text.

The file holds five sections in a fixed order:

    [METADATA]            key,value rows
    [SETTINGS]            key,value rows
    [CUSTOM_CURRENCIES]   table
    [ACCOUNTS]            table
    [TRANSACTIONS]        table

Nested currencies are flattened with a ``currency_`` (or
``defaultCurrency_``) prefix. Dates are ISO-8601 UTC, numbers plain decimal
text and booleans ``true``/``false``.
"""

import logging
import math
from datetime import datetime, UTC
from typing import Callable, Optional, TypeVar

from ledgerwell.domain.entities import (
    Account,
    AppSettings,
    BackupSnapshot,
    Currency,
    Transaction,
)
from ledgerwell.domain.errors import BackupFormatError
from ledgerwell.utils.amount_parser import format_number
from ledgerwell.utils.date_parser import format_timestamp, parse_timestamp
from ledgerwell.utils.sectioned_csv import (
    escape_field,
    join_fields,
    parse_key_value_section,
    parse_table_section,
    split_sections,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

METADATA = "METADATA"
SETTINGS = "SETTINGS"
CUSTOM_CURRENCIES = "CUSTOM_CURRENCIES"
ACCOUNTS = "ACCOUNTS"
TRANSACTIONS = "TRANSACTIONS"
SECTIONS = (METADATA, SETTINGS, CUSTOM_CURRENCIES, ACCOUNTS, TRANSACTIONS)

CURRENCY_FIELDS = ("id", "code", "name", "symbol", "rate", "isCustom")
ACCOUNT_COLUMNS = (
    ("id", "name", "description", "totalOwed", "totalOwedToMe")
    + tuple(f"currency_{f}" for f in CURRENCY_FIELDS)
    + ("createdAt", "updatedAt")
)
TRANSACTION_COLUMNS = (
    ("id", "accountId", "type", "amount")
    + tuple(f"currency_{f}" for f in CURRENCY_FIELDS)
    + ("name", "description", "date", "createdAt", "updatedAt")
)

BACKUP_FILE_PREFIX = "LedgerWell_Backup_"


def backup_filename(now: Optional[datetime] = None) -> str:
    """Suggested export file name, e.g. LedgerWell_Backup_2024-01-15T10-30-00.csv."""
    now = (now or datetime.now(UTC)).astimezone(UTC)
    return f"{BACKUP_FILE_PREFIX}{now.strftime('%Y-%m-%dT%H-%M-%S')}.csv"


# Encoding

def _bool(value: bool) -> str:
    return "true" if value else "false"


def _currency_values(currency: Currency) -> list[str]:
    return [
        escape_field(currency.id),
        escape_field(currency.code),
        escape_field(currency.name),
        escape_field(currency.symbol),
        format_number(currency.rate),
        _bool(currency.is_custom),
    ]


def _key_value(key: str, value: str) -> str:
    return f"{key},{escape_field(value)}"


def _settings_lines(settings: AppSettings) -> list[str]:
    lines = [
        _key_value("language", settings.language),
        _key_value("theme", settings.theme),
    ]
    currency = settings.default_currency
    if currency is not None:
        for field_name, value in zip(CURRENCY_FIELDS, _currency_values(currency)):
            # Values are already escaped
            lines.append(f"defaultCurrency_{field_name},{value}")
    lines.append(f"autoUpdateRates,{_bool(settings.auto_update_rates)}")
    return lines


def serialize_backup(snapshot: BackupSnapshot) -> str:
    """Encode a snapshot as sectioned CSV text."""
    lines = [f"[{METADATA}]"]
    lines.append(_key_value("version", snapshot.version))
    lines.append(_key_value("exportDate", snapshot.export_date))
    lines.append("")

    lines.append(f"[{SETTINGS}]")
    lines.extend(_settings_lines(snapshot.settings))
    lines.append("")

    lines.append(f"[{CUSTOM_CURRENCIES}]")
    lines.append(",".join(CURRENCY_FIELDS))
    for currency in snapshot.custom_currencies:
        lines.append(",".join(_currency_values(currency)))
    lines.append("")

    lines.append(f"[{ACCOUNTS}]")
    lines.append(",".join(ACCOUNT_COLUMNS))
    for account in snapshot.accounts:
        lines.append(
            ",".join(
                [
                    join_fields([account.id, account.name, account.description]),
                    format_number(account.total_owed),
                    format_number(account.total_owed_to_me),
                    *_currency_values(account.currency),
                    format_timestamp(account.created_at),
                    format_timestamp(account.updated_at),
                ]
            )
        )
    lines.append("")

    lines.append(f"[{TRANSACTIONS}]")
    lines.append(",".join(TRANSACTION_COLUMNS))
    for txn in snapshot.transactions:
        lines.append(
            ",".join(
                [
                    join_fields([txn.id, txn.account_id, txn.type]),
                    format_number(txn.amount),
                    *_currency_values(txn.currency),
                    join_fields([txn.name, txn.description]),
                    format_timestamp(txn.date),
                    format_timestamp(txn.created_at),
                    format_timestamp(txn.updated_at),
                ]
            )
        )

    logger.debug(
        "Serialized backup: %d custom currencies, %d accounts, %d transactions",
        len(snapshot.custom_currencies),
        len(snapshot.accounts),
        len(snapshot.transactions),
    )
    return "\n".join(lines)


# Decoding

def _float(value: str, field_name: str, blank: float) -> float:
    """Parse plain decimal text; a blank value yields `blank`."""
    if value is None or not value.strip():
        return blank
    text = value.strip()
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"invalid number '{text}' in {field_name}")


def _timestamp(value: str, field_name: str, blank: Optional[datetime] = None) -> datetime:
    if (value is None or not value.strip()) and blank is not None:
        return blank
    try:
        return parse_timestamp(value)
    except ValueError:
        raise ValueError(f"invalid date '{value}' in {field_name}")


def _currency_from(row: dict[str, str], prefix: str = "") -> Currency:
    return Currency(
        id=row.get(f"{prefix}id", ""),
        code=row.get(f"{prefix}code", "").strip(),
        name=row.get(f"{prefix}name", ""),
        symbol=row.get(f"{prefix}symbol", ""),
        rate=_float(row.get(f"{prefix}rate", ""), f"{prefix}rate", blank=1.0),
        is_custom=row.get(f"{prefix}isCustom", "").strip().lower() == "true",
    )


def _account_from(row: dict[str, str]) -> Account:
    now = datetime.now(UTC)
    created_at = _timestamp(row.get("createdAt", ""), "createdAt", blank=now)
    return Account(
        id=row.get("id", ""),
        name=row.get("name", ""),
        description=row.get("description") or None,
        total_owed=_float(row.get("totalOwed", ""), "totalOwed", blank=0.0),
        total_owed_to_me=_float(row.get("totalOwedToMe", ""), "totalOwedToMe", blank=0.0),
        currency=_currency_from(row, "currency_"),
        created_at=created_at,
        updated_at=_timestamp(row.get("updatedAt", ""), "updatedAt", blank=created_at),
    )


def _transaction_from(row: dict[str, str]) -> Transaction:
    date = _timestamp(row.get("date", ""), "date")
    created_at = _timestamp(row.get("createdAt", ""), "createdAt", blank=date)
    return Transaction(
        id=row.get("id", ""),
        account_id=row.get("accountId", ""),
        # Kept verbatim (normalized) so validation can reject unknown types
        type=row.get("type", "").strip().lower(),
        # A missing amount becomes NaN and is reported by validation
        amount=_float(row.get("amount", ""), "amount", blank=math.nan),
        currency=_currency_from(row, "currency_"),
        name=row.get("name", ""),
        description=row.get("description") or None,
        date=date,
        created_at=created_at,
        updated_at=_timestamp(row.get("updatedAt", ""), "updatedAt", blank=created_at),
    )


def _settings_from(values: dict[str, str]) -> AppSettings:
    default_currency = None
    if values.get("defaultCurrency_code") or values.get("defaultCurrency_id"):
        try:
            default_currency = _currency_from(values, "defaultCurrency_")
        except ValueError as e:
            raise BackupFormatError(f"Invalid settings: {e}")
    return AppSettings(
        default_currency=default_currency,
        language=values.get("language", "").strip(),
        theme=values.get("theme", "").strip() or "light",
        auto_update_rates=values.get("autoUpdateRates", "").strip().lower() == "true",
    )


def _map_rows(
    section: str,
    rows: list[dict[str, str]],
    mapper: Callable[[dict[str, str]], T],
    rejected: list[str],
) -> list[T]:
    """Map table rows, recording rows that cannot be mapped instead of failing."""
    results = []
    for index, row in enumerate(rows, start=1):
        try:
            results.append(mapper(row))
        except ValueError as e:
            message = f"{section} row {index}: {e}"
            logger.warning("Rejected backup row: %s", message)
            rejected.append(message)
    return results


def parse_backup(text: str) -> BackupSnapshot:
    """Decode sectioned CSV text into a snapshot.

    Rows whose numbers or dates cannot be read are left out of the snapshot
    and listed in `rejected_rows`.

    Raises:
        BackupFormatError: If the text has no backup sections, a quoted field
            is never closed, or the settings cannot be read
    """
    sections = split_sections(text.lstrip("\ufeff"))
    if not any(name in sections for name in SECTIONS):
        raise BackupFormatError("Not a backup file: no known sections found")
    for name in sections:
        if name not in SECTIONS:
            logger.debug("Ignoring unknown backup section [%s]", name)

    metadata = parse_key_value_section(sections.get(METADATA, []))
    settings = _settings_from(parse_key_value_section(sections.get(SETTINGS, [])))

    rejected: list[str] = []
    custom_currencies = _map_rows(
        CUSTOM_CURRENCIES,
        parse_table_section(sections.get(CUSTOM_CURRENCIES, [])),
        _currency_from,
        rejected,
    )
    accounts = _map_rows(
        ACCOUNTS, parse_table_section(sections.get(ACCOUNTS, [])), _account_from, rejected
    )
    transactions = _map_rows(
        TRANSACTIONS,
        parse_table_section(sections.get(TRANSACTIONS, [])),
        _transaction_from,
        rejected,
    )

    logger.debug(
        "Parsed backup: %d custom currencies, %d accounts, %d transactions, %d rejected rows",
        len(custom_currencies),
        len(accounts),
        len(transactions),
        len(rejected),
    )
    return BackupSnapshot(
        version=metadata.get("version", "").strip(),
        export_date=metadata.get("exportDate", "").strip(),
        accounts=accounts,
        transactions=transactions,
        settings=settings,
        custom_currencies=custom_currencies,
        rejected_rows=rejected,
    )
