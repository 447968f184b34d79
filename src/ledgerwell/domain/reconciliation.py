"""Apply a validated backup snapshot to the live dataset.

Reconciliation runs in two phases. Planning is pure: given the snapshot, the
live data and a policy it decides, record by record, what will be written.
Applying writes the plan through the database layer in a fixed order:

1. (replace only) wipe all data
2. currencies
3. accounts, recording source ID -> persisted ID for each one
4. transactions, with their account reference rewritten through that mapping
5. (replace only) settings

The mapping is complete before the first transaction is written, and the ID
used for it is always the one persistence returned, never the one the
record was submitted with.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ledgerwell.database.base import Database
from ledgerwell.domain.account import AccountService
from ledgerwell.domain.backup_validation import validate_backup
from ledgerwell.domain.currency import merge_custom_currencies, storable_currencies
from ledgerwell.domain.duplicates import DuplicateDetector
from ledgerwell.domain.entities import (
    Account,
    AppSettings,
    BackupSnapshot,
    Currency,
    ReconciliationPolicy,
    ReconciliationResult,
    Transaction,
)
from ledgerwell.domain.errors import BackupValidationError, DomainError
from ledgerwell.domain.seed import BUILTIN_CODES, DEFAULT_CURRENCIES

logger = logging.getLogger(__name__)

IMPORTED_SUFFIX = " (Imported)"


class AccountAction(Enum):
    CREATE = "create"
    CREATE_RENAMED = "create_renamed"
    USE_EXISTING = "use_existing"


@dataclass(frozen=True)
class PlannedAccount:
    """What to do with one snapshot account."""

    source_id: str
    action: AccountAction
    # Record to write; None for USE_EXISTING
    account: Optional[Account] = None
    # Live account standing in for the source; set for USE_EXISTING
    existing_id: Optional[str] = None


@dataclass(frozen=True)
class PlannedTransaction:
    """What to do with one snapshot transaction.

    `transaction.account_id` still holds the snapshot's account ID; it is
    rewritten when the plan is applied.
    """

    transaction: Transaction
    duplicate: bool = False


@dataclass(frozen=True)
class ReconciliationPlan:
    policy: ReconciliationPolicy
    wipe: bool
    currencies: list[Currency]
    custom_currency_count: int
    accounts: list[PlannedAccount]
    transactions: list[PlannedTransaction]
    settings: Optional[AppSettings]


@dataclass(frozen=True)
class LiveState:
    """The live data a merge is planned against."""

    accounts: list[Account]
    transactions: list[Transaction]
    currencies: list[Currency]


class IdMapping:
    """Snapshot account ID -> persisted account ID."""

    def __init__(self):
        self._ids: dict[str, str] = {}

    def record(self, source_id: str, persisted_id: str) -> bool:
        """Map a snapshot ID; an ID already mapped keeps its first target."""
        if source_id in self._ids:
            logger.warning(
                "Account ID %s already mapped to %s; not remapping to %s",
                source_id,
                self._ids[source_id],
                persisted_id,
            )
            return False
        self._ids[source_id] = persisted_id
        return True

    def resolve(self, source_id: str) -> Optional[str]:
        return self._ids.get(source_id)

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def as_dict(self) -> dict[str, str]:
        return dict(self._ids)


def _unique_id(candidate: str, used: set[str]) -> str:
    """Return candidate, or a fresh ID if it is empty or already used."""
    record_id = candidate if candidate and candidate not in used else uuid.uuid4().hex
    used.add(record_id)
    return record_id


def _restorable_count(custom_currencies: list[Currency]) -> int:
    """Custom currencies that will be written; built-in codes never are."""
    return len({c.code for c in custom_currencies if c.code not in BUILTIN_CODES})


def _plan_transactions(
    transactions: list[Transaction],
    used_ids: set[str],
    live: list[Transaction],
    detector: Optional[DuplicateDetector],
    skip_duplicates: bool,
) -> list[PlannedTransaction]:
    planned = []
    for txn in transactions:
        duplicate = (
            skip_duplicates
            and detector is not None
            and detector.is_duplicate_transaction(txn, live)
        )
        if not duplicate:
            txn = replace(txn, id=_unique_id(txn.id, used_ids))
        planned.append(PlannedTransaction(transaction=txn, duplicate=duplicate))
    return planned


def plan_replace(snapshot: BackupSnapshot) -> ReconciliationPlan:
    """Plan a full replacement of the live data by the snapshot.

    Built-in currencies are reseeded and the snapshot's custom currencies
    added on top; every account and transaction is written, keeping its ID
    unless the snapshot repeats one. Transactions of a repeated account ID
    follow its first occurrence.
    """
    currencies = merge_custom_currencies(list(DEFAULT_CURRENCIES), snapshot.custom_currencies)

    used_account_ids: set[str] = set()
    accounts = [
        PlannedAccount(
            source_id=acc.id,
            action=AccountAction.CREATE,
            account=replace(acc, id=_unique_id(acc.id, used_account_ids)),
        )
        for acc in snapshot.accounts
    ]

    return ReconciliationPlan(
        policy=ReconciliationPolicy.REPLACE,
        wipe=True,
        currencies=storable_currencies(currencies),
        custom_currency_count=_restorable_count(snapshot.custom_currencies),
        accounts=accounts,
        transactions=_plan_transactions(snapshot.transactions, set(), [], None, False),
        settings=snapshot.settings,
    )


def plan_merge(
    snapshot: BackupSnapshot,
    live: LiveState,
    detector: Optional[DuplicateDetector] = None,
    skip_duplicates: bool = True,
) -> ReconciliationPlan:
    """Plan adding the snapshot to the live data.

    An account matching a live one is mapped onto it when `skip_duplicates`
    is set; otherwise it is created under a new ID with an "(Imported)"
    suffix. Transactions matching a live transaction are skipped when
    `skip_duplicates` is set. Live settings are left alone.
    """
    detector = detector or DuplicateDetector()
    currencies = merge_custom_currencies(live.currencies, snapshot.custom_currencies)

    used_account_ids = {acc.id for acc in live.accounts}
    accounts = []
    for acc in snapshot.accounts:
        existing = detector.find_duplicate_account(acc, live.accounts)
        if existing is None:
            accounts.append(
                PlannedAccount(
                    source_id=acc.id,
                    action=AccountAction.CREATE,
                    account=replace(acc, id=_unique_id(acc.id, used_account_ids)),
                )
            )
        elif skip_duplicates:
            accounts.append(
                PlannedAccount(
                    source_id=acc.id,
                    action=AccountAction.USE_EXISTING,
                    existing_id=existing.id,
                )
            )
        else:
            renamed = replace(
                acc,
                id=_unique_id("", used_account_ids),
                name=f"{acc.name}{IMPORTED_SUFFIX}",
            )
            accounts.append(
                PlannedAccount(
                    source_id=acc.id,
                    action=AccountAction.CREATE_RENAMED,
                    account=renamed,
                )
            )

    transactions = _plan_transactions(
        snapshot.transactions,
        {txn.id for txn in live.transactions},
        live.transactions,
        detector,
        skip_duplicates,
    )

    return ReconciliationPlan(
        policy=ReconciliationPolicy.MERGE,
        wipe=False,
        currencies=storable_currencies(currencies),
        custom_currency_count=_restorable_count(snapshot.custom_currencies),
        accounts=accounts,
        transactions=transactions,
        settings=None,
    )


class ReconciliationService:
    """Validate, plan and apply backup restores."""

    def __init__(self, db: Database, detector: Optional[DuplicateDetector] = None):
        """Initialize reconciliation service.

        Args:
            db: Database instance
            detector: Duplicate rule used by merges (defaults to the standard
                tolerances)
        """
        self.db = db
        self.detector = detector or DuplicateDetector()

    def live_state(self) -> LiveState:
        return LiveState(
            accounts=self.db.get_accounts(),
            transactions=self.db.get_transactions(),
            currencies=self.db.get_currencies(),
        )

    def plan(
        self,
        snapshot: BackupSnapshot,
        policy: ReconciliationPolicy,
        skip_duplicates: bool = True,
    ) -> ReconciliationPlan:
        if policy is ReconciliationPolicy.REPLACE:
            return plan_replace(snapshot)
        return plan_merge(snapshot, self.live_state(), self.detector, skip_duplicates)

    def reconcile(
        self,
        snapshot: BackupSnapshot,
        policy: ReconciliationPolicy,
        skip_duplicates: bool = True,
    ) -> ReconciliationResult:
        """Restore a snapshot under the given policy.

        Nothing is written unless the snapshot validates.

        Raises:
            BackupValidationError: If the snapshot has validation errors
        """
        validation = validate_backup(snapshot)
        if not validation.is_valid:
            raise BackupValidationError(validation)
        for warning in validation.warnings:
            logger.info("Backup warning: %s", warning)

        plan = self.plan(snapshot, policy, skip_duplicates)
        return self.apply(plan)

    def apply(self, plan: ReconciliationPlan) -> ReconciliationResult:
        """Write a plan through the database layer.

        Individual record failures are collected in the result and do not
        stop the restore; already written records stay written.
        """
        result = ReconciliationResult(policy=plan.policy)
        logger.info(
            "Applying %s restore: %d accounts, %d transactions",
            plan.policy.value,
            len(plan.accounts),
            len(plan.transactions),
        )

        if plan.wipe:
            self.db.clear_all_data()

        try:
            self.db.save_currencies(plan.currencies)
            result.currencies_restored = plan.custom_currency_count
        except SQLAlchemyError as e:
            self._record_error(result, f"Custom currencies not restored: {e}")

        mapping = self._apply_accounts(plan.accounts, result)
        touched = self._apply_transactions(plan.transactions, mapping, result)

        accounts = AccountService(self.db)
        for account_id in sorted(touched | set(mapping.as_dict().values())):
            try:
                accounts.recalculate_totals(account_id)
            except (SQLAlchemyError, DomainError) as e:
                self._record_error(result, f"Totals for account {account_id} not updated: {e}")

        if plan.settings is not None:
            try:
                self.db.save_settings(plan.settings)
                result.settings_restored = True
            except SQLAlchemyError as e:
                self._record_error(result, f"Settings not restored: {e}")

        result.id_mapping = mapping.as_dict()
        logger.info(
            "Restore finished: %d accounts added (%d renamed, %d skipped), "
            "%d transactions added (%d skipped), %d errors",
            result.accounts_added,
            result.accounts_renamed,
            result.accounts_skipped,
            result.transactions_added,
            result.transactions_skipped,
            len(result.errors),
        )
        return result

    def _apply_accounts(
        self, planned: list[PlannedAccount], result: ReconciliationResult
    ) -> IdMapping:
        mapping = IdMapping()
        for item in planned:
            if item.action is AccountAction.USE_EXISTING:
                mapping.record(item.source_id, item.existing_id)
                result.accounts_skipped += 1
                continue
            try:
                persisted_id = self.db.save_account(item.account)
            except (SQLAlchemyError, DomainError) as e:
                self._record_error(result, f"Account \"{item.account.name}\" not restored: {e}")
                continue
            if persisted_id != item.account.id:
                logger.debug("Account %s persisted as %s", item.account.id, persisted_id)
            mapping.record(item.source_id, persisted_id)
            result.accounts_added += 1
            if item.action is AccountAction.CREATE_RENAMED:
                result.accounts_renamed += 1
        return mapping

    def _apply_transactions(
        self,
        planned: list[PlannedTransaction],
        mapping: IdMapping,
        result: ReconciliationResult,
    ) -> set[str]:
        touched: set[str] = set()
        for item in planned:
            txn = item.transaction
            account_id = mapping.resolve(txn.account_id)
            if item.duplicate:
                result.transactions_skipped += 1
                continue
            if account_id is None:
                self._record_error(
                    result,
                    f"Transaction {txn.id} skipped: account {txn.account_id} was not restored",
                )
                continue
            try:
                self.db.save_transaction(replace(txn, account_id=account_id))
            except (SQLAlchemyError, DomainError) as e:
                self._record_error(result, f"Transaction {txn.id} not restored: {e}")
                continue
            result.transactions_added += 1
            touched.add(account_id)
        return touched

    @staticmethod
    def _record_error(result: ReconciliationResult, message: str) -> None:
        logger.warning(message)
        result.errors.append(message)
