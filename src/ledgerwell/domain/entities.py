"""Domain model entities for ledgerwell.

These are pure data classes representing business concepts, independent of
database schema and of the backup wire format. Field names are snake_case;
the backup codec is responsible for the camelCase column names.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

DEBT = "debt"
CREDIT = "credit"
TRANSACTION_TYPES = (DEBT, CREDIT)


@dataclass(frozen=True)
class Currency:
    """Currency with an exchange rate relative to the base unit (USD)."""

    id: str
    code: str
    name: str
    symbol: str
    rate: float
    is_custom: bool = False


@dataclass(frozen=True)
class Account:
    """Account grouping debts and credits in a single currency.

    total_owed and total_owed_to_me are caches derived from the account's
    transactions; AccountService.recalculate_totals keeps them current.
    """

    id: str
    name: str
    currency: Currency
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    total_owed: float = 0.0
    total_owed_to_me: float = 0.0


@dataclass(frozen=True)
class Transaction:
    """A debt (I owe `name`) or credit (`name` owes me)."""

    id: str
    account_id: str
    type: str
    amount: float
    currency: Currency
    name: str
    date: datetime
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class AppSettings:
    """Installation-wide settings."""

    default_currency: Optional[Currency]
    language: str = "en"
    theme: str = "light"
    auto_update_rates: bool = True


@dataclass(frozen=True)
class BackupSnapshot:
    """Exchange envelope for a full backup. Never persisted as such."""

    version: str
    export_date: str
    accounts: list[Account]
    transactions: list[Transaction]
    settings: AppSettings
    custom_currencies: list[Currency]
    rejected_rows: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DateRange:
    """First and last transaction date."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class BackupStats:
    """Summary figures for a snapshot or the live dataset."""

    total_accounts: int
    total_transactions: int
    total_custom_currencies: int
    date_range: Optional[DateRange]


@dataclass(frozen=True)
class ImportPreview:
    """What a restore would bring in, shown before choosing a policy."""

    stats: BackupStats
    currencies: list[str]
    account_labels: list[str]
    duplicate_accounts: int
    duplicate_transactions: int


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a snapshot."""

    errors: list[str]
    warnings: list[str]

    @property
    def is_valid(self) -> bool:
        return not self.errors


class ReconciliationPolicy(Enum):
    """How a snapshot is integrated with the live dataset."""

    REPLACE = "replace"
    MERGE = "merge"


@dataclass
class ReconciliationResult:
    """Counts and problems reported after a restore."""

    policy: ReconciliationPolicy
    accounts_added: int = 0
    transactions_added: int = 0
    accounts_skipped: int = 0
    transactions_skipped: int = 0
    accounts_renamed: int = 0
    currencies_restored: int = 0
    settings_restored: bool = False
    errors: list[str] = field(default_factory=list)
    id_mapping: dict[str, str] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        """True when some records could not be written."""
        return bool(self.errors)
