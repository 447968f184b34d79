"""Account management commands."""

import click
from ledgerwell.cli.account_resolution import resolve_account_or_exit
from ledgerwell.cli.error_handling import handle_domain_error
from ledgerwell.domain.account import AccountService
from ledgerwell.domain.currency import CurrencyService


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--currency", "currency_code", default="USD", show_default=True, help="Currency code or ID")
@click.option("--description", help="Optional description")
@click.pass_context
def create_account(ctx, name: str, currency_code: str, description: str | None):
    """Create a new account.

    Account names must be unique within a currency.

    Examples:
        ledgerwell account create "Friends"
        ledgerwell account create "Family" --currency EUR
        ledgerwell account create "Work" --description "Shared lunches"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(
            name=name, currency_code=currency_code, description=description
        )
        click.echo(f"Created account '{name.strip()}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        owed = CurrencyService.format_amount(acc.total_owed, acc.currency)
        owed_to_me = CurrencyService.format_amount(acc.total_owed_to_me, acc.currency)
        click.echo(
            f"ID: {acc.id} | {acc.name:20s} | {acc.currency.code} | "
            f"I owe: {owed} | Owed to me: {owed_to_me}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", "new_name", help="New account name")
@click.option("--description", help="New description (empty string to clear)")
@click.pass_context
def update_account(ctx, account: str, new_name: str | None, description: str | None) -> None:
    """Rename an account or change its description.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerwell account update "Friends" --name "Close friends"
        ledgerwell account update 3f2a... --description ""
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.update_account(account_id, name=new_name, description=description)
        click.echo(f"Updated account '{service.get_account(account_id).name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account together with its transactions.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerwell account delete "Friends"
        ledgerwell account delete "Friends" --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    account_obj = service.get_account(account_id)
    transaction_count = len(db.get_transactions(account_id=account_id))

    # Confirm deletion
    prompt = f"Delete account '{account_obj.name}'"
    if transaction_count:
        prompt += f" and its {transaction_count} transaction{'s' if transaction_count != 1 else ''}"
    if not yes and not click.confirm(f"{prompt}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
