"""Utility for resolving account names to IDs."""

from ledgerwell.domain.account import AccountService
from ledgerwell.domain.errors import NotFoundError, ValidationError


def resolve_account(account_service: AccountService, account: str) -> str:
    """Resolve account name or ID to account ID.

    IDs take precedence; names are matched case-insensitively.

    Args:
        account_service: AccountService instance
        account: Account ID or name

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
        ValidationError: If the name matches accounts in several currencies
    """
    account_obj = account_service.get_account(account)
    if account_obj is not None:
        return account_obj.id

    matches = [acc for acc in account_service.list_accounts() if acc.name.lower() == account.lower()]
    if len(matches) == 1:
        return matches[0].id
    if len(matches) > 1:
        codes = ", ".join(sorted(acc.currency.code for acc in matches))
        raise ValidationError(f"Account name '{account}' is ambiguous ({codes}); use the account ID")

    raise NotFoundError(f"Account '{account}' not found")
