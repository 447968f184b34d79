"""Account domain service."""

import uuid
from dataclasses import replace
from datetime import datetime, UTC
from typing import Optional

from ledgerwell.database.base import Database
from ledgerwell.domain.entities import DEBT, Account as AccountEntity
from ledgerwell.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    currency_not_found,
    duplicate_account_name,
)
from ledgerwell.domain.currency import CurrencyService


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db
        self.currency_service = CurrencyService(db)

    def create_account(
        self, name: str, currency_code: str, description: Optional[str] = None
    ) -> str:
        """Create a new account.

        Args:
            name: Account name
            currency_code: Currency ID or code
            description: Optional description

        Returns:
            Account ID

        Raises:
            ValidationError: If name is empty
            NotFoundError: If currency doesn't exist
            ConflictError: If an account with the same name exists in that currency
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name is required")

        currency = self.currency_service.get_currency(currency_code)
        if currency is None:
            raise NotFoundError(currency_not_found(currency_code))

        # Check if account with same name exists in this currency
        for acc in self.db.get_accounts():
            if acc.name.lower() == name.lower() and acc.currency.code == currency.code:
                raise ConflictError(duplicate_account_name(name, currency.code))

        now = datetime.now(UTC)
        account = AccountEntity(
            id=uuid.uuid4().hex,
            name=name,
            description=description or None,
            currency=currency,
            created_at=now,
            updated_at=now,
        )
        return self.db.save_account(account)

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.get_accounts()

    def update_account(
        self, account_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> None:
        """Rename an account and/or change its description.

        Args:
            account_id: Account ID to update
            name: New account name (if None, name is not updated)
            description: New description; empty string clears it

        Raises:
            NotFoundError: If account not found
            ValidationError: If the new name is empty
            ConflictError: If the new name is taken in the account's currency
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        changes = {}
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name is required")
            # Check for duplicate names (excluding current account)
            for acc in self.db.get_accounts():
                if (
                    acc.id != account_id
                    and acc.name.lower() == name.lower()
                    and acc.currency.code == account.currency.code
                ):
                    raise ConflictError(duplicate_account_name(name, account.currency.code))
            changes["name"] = name
        if description is not None:
            changes["description"] = description or None

        if changes:
            self.db.save_account(replace(account, updated_at=datetime.now(UTC), **changes))

    def delete_account(self, account_id: str) -> None:
        """Delete an account and its transactions.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.delete_account(account_id)

    def recalculate_totals(self, account_id: str) -> Optional[AccountEntity]:
        """Recompute the cached debt and credit totals of an account.

        Returns:
            The updated account, or None if the account no longer exists
        """
        account = self.db.get_account(account_id)
        if account is None:
            return None

        total_owed = 0.0
        total_owed_to_me = 0.0
        for txn in self.db.get_transactions(account_id=account_id):
            if txn.type == DEBT:
                total_owed += txn.amount
            else:
                total_owed_to_me += txn.amount

        if total_owed == account.total_owed and total_owed_to_me == account.total_owed_to_me:
            return account

        updated = replace(
            account,
            total_owed=total_owed,
            total_owed_to_me=total_owed_to_me,
            updated_at=datetime.now(UTC),
        )
        self.db.save_account(updated)
        return updated

    def recalculate_all(self) -> None:
        """Recompute totals for every account."""
        for account in self.db.get_accounts():
            self.recalculate_totals(account.id)
