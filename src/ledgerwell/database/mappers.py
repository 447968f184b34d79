"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including flattening the currency
embedded in accounts and transactions into `currency_*` columns.
"""

from datetime import datetime, UTC
from typing import Optional

from ledgerwell.domain import entities as domain
from ledgerwell.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    StoredCurrency as ORMCurrency,
    Settings as ORMSettings,
)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime (SQLite hands back naive values)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _currency_from_columns(row) -> domain.Currency:
    return domain.Currency(
        id=row.currency_id,
        code=row.currency_code,
        name=row.currency_name,
        symbol=row.currency_symbol,
        rate=row.currency_rate,
        is_custom=bool(row.currency_is_custom),
    )


def _currency_columns(currency: domain.Currency) -> dict:
    return {
        "currency_id": currency.id,
        "currency_code": currency.code,
        "currency_name": currency.name,
        "currency_symbol": currency.symbol,
        "currency_rate": currency.rate,
        "currency_is_custom": currency.is_custom,
    }


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        description=orm_account.description,
        total_owed=orm_account.total_owed,
        total_owed_to_me=orm_account.total_owed_to_me,
        currency=_currency_from_columns(orm_account),
        created_at=as_utc(orm_account.created_at),
        updated_at=as_utc(orm_account.updated_at),
    )


def account_columns(account: domain.Account) -> dict:
    """Column values for storing a domain Account."""
    return {
        "name": account.name,
        "description": account.description,
        "total_owed": account.total_owed,
        "total_owed_to_me": account.total_owed_to_me,
        "created_at": as_utc(account.created_at),
        "updated_at": as_utc(account.updated_at),
        **_currency_columns(account.currency),
    }


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        type=orm_transaction.type,
        amount=orm_transaction.amount,
        currency=_currency_from_columns(orm_transaction),
        name=orm_transaction.name,
        description=orm_transaction.description,
        date=as_utc(orm_transaction.date),
        created_at=as_utc(orm_transaction.created_at),
        updated_at=as_utc(orm_transaction.updated_at),
    )


def transaction_columns(transaction: domain.Transaction) -> dict:
    """Column values for storing a domain Transaction."""
    return {
        "account_id": transaction.account_id,
        "type": transaction.type,
        "amount": transaction.amount,
        "name": transaction.name,
        "description": transaction.description,
        "date": as_utc(transaction.date),
        "created_at": as_utc(transaction.created_at),
        "updated_at": as_utc(transaction.updated_at),
        **_currency_columns(transaction.currency),
    }


def currency_to_domain(orm_currency: ORMCurrency) -> domain.Currency:
    """Convert SQLAlchemy StoredCurrency model to domain Currency entity."""
    return domain.Currency(
        id=orm_currency.id,
        code=orm_currency.code,
        name=orm_currency.name,
        symbol=orm_currency.symbol,
        rate=orm_currency.rate,
        is_custom=bool(orm_currency.is_custom),
    )


def settings_to_domain(orm_settings: ORMSettings) -> domain.AppSettings:
    """Convert SQLAlchemy Settings row to domain AppSettings."""
    default_currency: Optional[domain.Currency] = None
    if orm_settings.default_currency_id is not None:
        default_currency = domain.Currency(
            id=orm_settings.default_currency_id,
            code=orm_settings.default_currency_code,
            name=orm_settings.default_currency_name,
            symbol=orm_settings.default_currency_symbol,
            rate=orm_settings.default_currency_rate,
            is_custom=bool(orm_settings.default_currency_is_custom),
        )
    return domain.AppSettings(
        default_currency=default_currency,
        language=orm_settings.language,
        theme=orm_settings.theme,
        auto_update_rates=bool(orm_settings.auto_update_rates),
    )


def settings_columns(settings: domain.AppSettings) -> dict:
    """Column values for storing domain AppSettings."""
    currency = settings.default_currency
    return {
        "language": settings.language,
        "theme": settings.theme,
        "auto_update_rates": settings.auto_update_rates,
        "default_currency_id": currency.id if currency else None,
        "default_currency_code": currency.code if currency else None,
        "default_currency_name": currency.name if currency else None,
        "default_currency_symbol": currency.symbol if currency else None,
        "default_currency_rate": currency.rate if currency else None,
        "default_currency_is_custom": currency.is_custom if currency else None,
    }
