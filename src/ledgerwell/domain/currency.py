"""Currency domain service."""

import math
import re
from dataclasses import replace
from typing import Optional

from ledgerwell.database.base import Database
from ledgerwell.domain.entities import Currency
from ledgerwell.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    builtin_currency_immutable,
    currency_not_found,
)
from ledgerwell.domain.seed import BASE_CURRENCY, BUILTIN_CODES, DEFAULT_CURRENCIES

CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")


class CurrencyService:
    """Service for built-in and custom currencies."""

    def __init__(self, db: Database):
        """Initialize currency service.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def validate_currency_code(code: str) -> bool:
        """Return True if code is three upper-case letters."""
        return bool(code) and CURRENCY_CODE_PATTERN.match(code) is not None

    @staticmethod
    def validate_exchange_rate(rate: float) -> bool:
        """Return True if rate is a finite number greater than zero."""
        return isinstance(rate, (int, float)) and math.isfinite(rate) and rate > 0

    @staticmethod
    def is_builtin(currency: Currency) -> bool:
        """Return True if currency is one of the built-in seed currencies."""
        return not currency.is_custom and any(c.id == currency.id for c in DEFAULT_CURRENCIES)

    @staticmethod
    def convert_amount(amount: float, from_currency: Currency, to_currency: Currency) -> float:
        """Convert an amount between currencies through the base unit."""
        if from_currency.code == to_currency.code:
            return amount
        return amount / from_currency.rate * to_currency.rate

    @staticmethod
    def format_amount(amount: float, currency: Currency) -> str:
        """Format an amount with the currency symbol and two decimals."""
        return f"{currency.symbol}{amount:,.2f}"

    def list_currencies(self) -> list[Currency]:
        """List built-in and custom currencies."""
        return self.db.get_currencies()

    def list_custom_currencies(self) -> list[Currency]:
        """List custom currencies only."""
        return [c for c in self.db.get_currencies() if c.is_custom]

    def get_currency(self, currency: str) -> Optional[Currency]:
        """Find a currency by ID or (case-insensitive) code."""
        currencies = self.db.get_currencies()
        for c in currencies:
            if c.id == currency:
                return c
        for c in currencies:
            if c.code == currency.upper():
                return c
        return None

    def create_custom_currency(self, code: str, name: str, symbol: str, rate: float) -> Currency:
        """Create and store a custom currency.

        Raises:
            ValidationError: If code or rate is invalid
            ConflictError: If a currency with the same code already exists
        """
        code = code.strip().upper()
        self._check_fields(code, name, rate)

        currencies = self.db.get_currencies()
        if any(c.code == code for c in currencies):
            raise ConflictError(f"Currency {code} already exists")

        currency = Currency(
            id=f"custom_{code.lower()}",
            code=code,
            name=name.strip(),
            symbol=symbol.strip() or code,
            rate=float(rate),
            is_custom=True,
        )
        self.db.save_currencies(storable_currencies(currencies) + [currency])
        return currency

    def update_custom_currency(
        self,
        currency_id: str,
        code: Optional[str] = None,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        rate: Optional[float] = None,
    ) -> Currency:
        """Edit a custom currency. Only provided fields change.

        Raises:
            NotFoundError: If currency doesn't exist
            ValidationError: If the currency is built in or a field is invalid
            ConflictError: If the new code is used by another currency
        """
        currencies = self.db.get_currencies()
        current = next((c for c in currencies if c.id == currency_id), None)
        if current is None:
            raise NotFoundError(currency_not_found(currency_id))
        if not current.is_custom:
            raise ValidationError(builtin_currency_immutable(current.code))

        updated = replace(
            current,
            code=code.strip().upper() if code is not None else current.code,
            name=name.strip() if name is not None else current.name,
            symbol=symbol.strip() if symbol is not None else current.symbol,
            rate=float(rate) if rate is not None else current.rate,
        )
        self._check_fields(updated.code, updated.name, updated.rate)
        if any(c.code == updated.code and c.id != currency_id for c in currencies):
            raise ConflictError(f"Currency {updated.code} already exists")

        self.db.save_currencies(
            [updated if c.id == currency_id else c for c in storable_currencies(currencies)]
        )

        settings = self.db.get_settings()
        if settings.default_currency is not None and settings.default_currency.id == currency_id:
            self.db.save_settings(replace(settings, default_currency=updated))
        return updated

    def delete_custom_currency(self, currency_id: str) -> None:
        """Delete a custom currency.

        If it was the default currency, the default falls back to the base
        currency.

        Raises:
            NotFoundError: If currency doesn't exist
            ValidationError: If the currency is built in
        """
        currencies = self.db.get_currencies()
        current = next((c for c in currencies if c.id == currency_id), None)
        if current is None:
            raise NotFoundError(currency_not_found(currency_id))
        if not current.is_custom:
            raise ValidationError(builtin_currency_immutable(current.code))

        self.db.save_currencies([c for c in storable_currencies(currencies) if c.id != currency_id])

        settings = self.db.get_settings()
        if settings.default_currency is not None and settings.default_currency.id == currency_id:
            self.db.save_settings(replace(settings, default_currency=BASE_CURRENCY))

    def _check_fields(self, code: str, name: str, rate: float) -> None:
        if not self.validate_currency_code(code):
            raise ValidationError(f"Invalid currency code '{code}': expected three letters A-Z")
        if not name or not name.strip():
            raise ValidationError("Currency name is required")
        if not self.validate_exchange_rate(rate):
            raise ValidationError(f"Invalid exchange rate {rate}: must be a positive finite number")


def storable_currencies(currencies: list[Currency]) -> list[Currency]:
    """Entries worth storing: custom currencies and changed built-ins."""
    return [c for c in currencies if c.is_custom or c not in DEFAULT_CURRENCIES]


def merge_custom_currencies(live: list[Currency], incoming: list[Currency]) -> list[Currency]:
    """Overlay incoming custom currencies on a live currency list by code.

    An incoming currency replaces a live custom currency with the same code,
    but never a built-in currency's definition.
    """
    merged = list(live)
    for currency in incoming:
        if currency.code in BUILTIN_CODES:
            continue
        currency = replace(currency, is_custom=True)
        index = next((i for i, c in enumerate(merged) if c.code == currency.code), None)
        # Currencies are stored by ID, so an ID owned by another code would shadow it
        taken = {c.id for i, c in enumerate(merged) if i != index}
        if not currency.id or currency.id in taken:
            currency = replace(currency, id=f"custom_{currency.code.lower()}")
        if index is None:
            merged.append(currency)
        else:
            merged[index] = currency
    return merged
