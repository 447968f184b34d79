"""Summary figures for backups and the live dataset."""

from typing import Optional

from ledgerwell.domain.duplicates import DuplicateDetector
from ledgerwell.domain.entities import (
    Account,
    BackupSnapshot,
    BackupStats,
    Currency,
    DateRange,
    ImportPreview,
    Transaction,
)


def compute_stats(
    accounts: list[Account],
    transactions: list[Transaction],
    custom_currencies: list[Currency],
) -> BackupStats:
    """Count records and find the transaction date range.

    The date range is None when there are no transactions.
    """
    date_range = None
    if transactions:
        dates = sorted(txn.date for txn in transactions)
        date_range = DateRange(start=dates[0], end=dates[-1])

    return BackupStats(
        total_accounts=len(accounts),
        total_transactions=len(transactions),
        total_custom_currencies=len(custom_currencies),
        date_range=date_range,
    )


def get_backup_stats(snapshot: BackupSnapshot) -> BackupStats:
    """Statistics of a parsed (not yet applied) snapshot."""
    return compute_stats(snapshot.accounts, snapshot.transactions, snapshot.custom_currencies)


def build_import_preview(
    snapshot: BackupSnapshot,
    live_accounts: list[Account],
    live_transactions: list[Transaction],
    detector: Optional[DuplicateDetector] = None,
) -> ImportPreview:
    """Describe a snapshot for the user before a restore policy is chosen.

    Duplicate counts are what a merge would detect against the live data.
    """
    detector = detector or DuplicateDetector()
    currencies = sorted({acc.currency.code for acc in snapshot.accounts if acc.currency.code})
    labels = [f"{acc.name} ({acc.currency.code})" for acc in snapshot.accounts]

    return ImportPreview(
        stats=get_backup_stats(snapshot),
        currencies=currencies,
        account_labels=labels,
        duplicate_accounts=sum(
            1 for acc in snapshot.accounts if detector.is_duplicate_account(acc, live_accounts)
        ),
        duplicate_transactions=sum(
            1
            for txn in snapshot.transactions
            if detector.is_duplicate_transaction(txn, live_transactions)
        ),
    )
