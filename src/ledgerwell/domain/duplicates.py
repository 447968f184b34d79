"""Approximate duplicate detection for imported records.

IDs are regenerated across exports and re-imports, so matching relies on
user-visible fields:

- Accounts: same name (case-insensitive) and same currency code.
- Transactions: same counterparty name (case-insensitive, trimmed), same
  type, amounts within `amount_tolerance`, and dates less than
  `date_window` apart.

The heuristic can both miss edited records and merge genuinely distinct
same-day payments; the thresholds are therefore parameters.
"""

from datetime import timedelta
from typing import Iterable, Optional

from ledgerwell.domain.entities import Account, Transaction

DEFAULT_AMOUNT_TOLERANCE = 0.01
DEFAULT_DATE_WINDOW = timedelta(hours=24)


class DuplicateDetector:
    """Find probable duplicates of incoming accounts and transactions."""

    def __init__(
        self,
        amount_tolerance: float = DEFAULT_AMOUNT_TOLERANCE,
        date_window: timedelta = DEFAULT_DATE_WINDOW,
    ):
        """Initialize duplicate detector.

        Args:
            amount_tolerance: Amounts closer than this are considered equal
            date_window: Dates closer than this are considered the same event
        """
        if amount_tolerance < 0:
            raise ValueError("amount_tolerance must not be negative")
        if date_window < timedelta(0):
            raise ValueError("date_window must not be negative")
        self.amount_tolerance = amount_tolerance
        self.date_window = date_window

    def accounts_match(self, a: Account, b: Account) -> bool:
        return a.name.lower() == b.name.lower() and a.currency.code == b.currency.code

    def transactions_match(self, a: Transaction, b: Transaction) -> bool:
        return (
            a.name.strip().lower() == b.name.strip().lower()
            and a.type == b.type
            and abs(a.amount - b.amount) < self.amount_tolerance
            and abs(a.date - b.date) < self.date_window
        )

    def find_duplicate_account(
        self, candidate: Account, existing: Iterable[Account]
    ) -> Optional[Account]:
        """Return the first existing account matching candidate, if any."""
        return next((acc for acc in existing if self.accounts_match(candidate, acc)), None)

    def is_duplicate_account(self, candidate: Account, existing: Iterable[Account]) -> bool:
        return self.find_duplicate_account(candidate, existing) is not None

    def find_duplicate_transaction(
        self, candidate: Transaction, existing: Iterable[Transaction]
    ) -> Optional[Transaction]:
        """Return the first existing transaction matching candidate, if any."""
        return next((txn for txn in existing if self.transactions_match(candidate, txn)), None)

    def is_duplicate_transaction(
        self, candidate: Transaction, existing: Iterable[Transaction]
    ) -> bool:
        return self.find_duplicate_transaction(candidate, existing) is not None


_default_detector = DuplicateDetector()


def is_duplicate_account(candidate: Account, existing: Iterable[Account]) -> bool:
    """Check candidate against existing accounts with the default rule."""
    return _default_detector.is_duplicate_account(candidate, existing)


def is_duplicate_transaction(candidate: Transaction, existing: Iterable[Transaction]) -> bool:
    """Check candidate against existing transactions with default thresholds."""
    return _default_detector.is_duplicate_transaction(candidate, existing)
