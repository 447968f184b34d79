"""Shared domain error messages and error types."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerwell.domain.entities import ValidationResult


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class BackupFormatError(ValidationError):
    """Backup text could not be parsed into a snapshot."""


class BackupValidationError(ValidationError):
    """Snapshot failed validation; carries the complete result."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        count = len(result.errors)
        super().__init__(
            f"Backup has {count} error{'s' if count != 1 else ''}: "
            + "; ".join(result.errors)
        )


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def currency_not_found(currency: str) -> str:
    """Return message for missing currency by ID or code."""
    return f"Currency '{currency}' not found"


def duplicate_account_name(name: str, currency_code: str) -> str:
    """Return message for an account name already used in a currency."""
    return f"Account '{name}' already exists in {currency_code}"


def builtin_currency_immutable(code: str) -> str:
    """Return message when a built-in currency would be modified."""
    return f"Currency {code} is built in and cannot be changed or deleted"
