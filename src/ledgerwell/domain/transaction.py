"""Transaction domain service."""

import math
import uuid
from dataclasses import replace
from datetime import datetime, UTC
from typing import Optional

from ledgerwell.database.base import Database
from ledgerwell.domain.account import AccountService
from ledgerwell.domain.entities import TRANSACTION_TYPES, Transaction as TransactionEntity
from ledgerwell.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)


def check_transaction_fields(type: str, amount: float, name: str) -> None:
    """Validate the user-entered fields of a transaction.

    Raises:
        ValidationError: If type, amount or name is invalid
    """
    if type not in TRANSACTION_TYPES:
        raise ValidationError(f"Invalid transaction type '{type}': expected debt or credit")
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"Invalid amount {amount}: must be greater than zero")
    if not name or not name.strip():
        raise ValidationError("Transaction name is required")


class TransactionService:
    """Service for managing transactions.

    Every change recalculates the cached totals of the affected accounts.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_service = AccountService(db)

    def create_transaction(
        self,
        account_id: str,
        type: str,
        amount: float,
        name: str,
        date: datetime,
        description: Optional[str] = None,
    ) -> str:
        """Create a transaction.

        Args:
            account_id: Account ID
            type: "debt" (I owe name) or "credit" (name owes me)
            amount: Positive amount in the account's currency
            name: Counterparty name
            date: Transaction date
            description: Optional description

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If type, amount or name is invalid
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        check_transaction_fields(type, amount, name)

        now = datetime.now(UTC)
        transaction = TransactionEntity(
            id=uuid.uuid4().hex,
            account_id=account_id,
            type=type,
            amount=float(amount),
            currency=account.currency,
            name=name.strip(),
            description=description or None,
            date=date,
            created_at=now,
            updated_at=now,
        )
        transaction_id = self.db.save_transaction(transaction)
        self.account_service.recalculate_totals(account_id)
        return transaction_id

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(self, account_id: Optional[str] = None) -> list[TransactionEntity]:
        """List transactions, newest first, optionally for one account."""
        return self.db.get_transactions(account_id=account_id)

    def update_transaction(
        self,
        transaction_id: str,
        account_id: Optional[str] = None,
        type: Optional[str] = None,
        amount: Optional[float] = None,
        name: Optional[str] = None,
        date: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update transaction fields. Only provided fields change.

        Moving a transaction to another account adopts that account's
        currency and recalculates both accounts.

        Raises:
            NotFoundError: If transaction or target account doesn't exist
            ValidationError: If a new field value is invalid
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        changes = {}
        if account_id is not None and account_id != txn.account_id:
            account = self.db.get_account(account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            changes["account_id"] = account_id
            changes["currency"] = account.currency
        if type is not None:
            changes["type"] = type
        if amount is not None:
            changes["amount"] = float(amount)
        if name is not None:
            changes["name"] = name.strip()
        if date is not None:
            changes["date"] = date
        if description is not None:
            changes["description"] = description or None

        updated = replace(txn, updated_at=datetime.now(UTC), **changes)
        check_transaction_fields(updated.type, updated.amount, updated.name)
        self.db.save_transaction(updated)

        self.account_service.recalculate_totals(updated.account_id)
        if updated.account_id != txn.account_id:
            self.account_service.recalculate_totals(txn.account_id)

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.delete_transaction(transaction_id)
        self.account_service.recalculate_totals(txn.account_id)
