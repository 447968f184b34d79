"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerwell.domain.entities import (
    Account,
    AppSettings,
    Currency,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for ledgerwell.

    Save operations are upserts keyed on the entity id and return the id the
    record was persisted under. An entity with an empty id is assigned a new
    one, so callers must always use the returned id.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def get_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def save_account(self, account: Account) -> str:
        """Insert or update an account. Returns the persisted account ID."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Delete an account together with its transactions."""
        pass

    # Transaction operations
    @abstractmethod
    def get_transactions(self, account_id: Optional[str] = None) -> list[Transaction]:
        """List transactions, optionally filtered by account."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> str:
        """Insert or update a transaction. Returns the persisted transaction ID."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    # Currency operations
    @abstractmethod
    def get_currencies(self) -> list[Currency]:
        """List built-in currencies overlaid with stored ones."""
        pass

    @abstractmethod
    def save_currencies(self, currencies: list[Currency]) -> None:
        """Replace the stored currency list."""
        pass

    # Settings operations
    @abstractmethod
    def get_settings(self) -> AppSettings:
        """Get settings, falling back to defaults when none are stored."""
        pass

    @abstractmethod
    def save_settings(self, settings: AppSettings) -> None:
        """Store settings."""
        pass

    @abstractmethod
    def clear_all_data(self) -> None:
        """Remove accounts, transactions, stored currencies and settings."""
        pass
