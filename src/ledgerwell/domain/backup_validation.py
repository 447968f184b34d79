"""Backup snapshot validation.

Every rule is checked and every violation reported, so a user can fix a
backup file in one pass. Errors block a restore; warnings do not.
"""

import math

from ledgerwell.domain.currency import CurrencyService
from ledgerwell.domain.entities import TRANSACTION_TYPES, BackupSnapshot, ValidationResult


def validate_backup(snapshot: BackupSnapshot) -> ValidationResult:
    """Check a parsed snapshot for structural and semantic problems.

    Args:
        snapshot: Parsed backup snapshot

    Returns:
        ValidationResult listing all errors and warnings found
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not snapshot.version:
        warnings.append("Backup version information missing")

    errors.extend(f"Unreadable row skipped: {message}" for message in snapshot.rejected_rows)

    for index, currency in enumerate(snapshot.custom_currencies, start=1):
        if not CurrencyService.validate_currency_code(currency.code):
            errors.append(f"Custom currency {index} has invalid code: \"{currency.code}\"")
        if not CurrencyService.validate_exchange_rate(currency.rate):
            errors.append(f"Custom currency {index} has invalid rate: {currency.rate}")

    if not snapshot.accounts:
        warnings.append("No accounts found in backup")

    account_ids = set()
    for index, account in enumerate(snapshot.accounts, start=1):
        if not account.id or not account.name:
            errors.append(f"Invalid account at position {index}")
        elif account.id in account_ids:
            errors.append(f"Account at position {index} repeats ID \"{account.id}\"")
        if account.currency is None or not account.currency.code:
            errors.append(f"Account \"{account.name}\" has invalid currency")
        account_ids.add(account.id)

    for index, txn in enumerate(snapshot.transactions, start=1):
        if not txn.id or not txn.account_id:
            errors.append(f"Invalid transaction at position {index}")
        elif txn.account_id not in account_ids:
            warnings.append(
                f"Transaction {index} references unknown account \"{txn.account_id}\" and will be skipped"
            )
        if txn.type not in TRANSACTION_TYPES:
            errors.append(f"Transaction {index} has invalid type: \"{txn.type}\"")
        if not math.isfinite(txn.amount) or txn.amount <= 0:
            errors.append(f"Transaction {index} has invalid amount: {txn.amount}")

    if not snapshot.settings.language:
        warnings.append("Settings missing language preference")
    if snapshot.settings.default_currency is None:
        errors.append("Settings missing default currency")

    return ValidationResult(errors=errors, warnings=warnings)
