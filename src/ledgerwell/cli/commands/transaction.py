"""Transaction management commands."""

import click
from ledgerwell.cli.account_resolution import resolve_account_or_exit
from ledgerwell.cli.error_handling import handle_domain_error
from ledgerwell.domain.account import AccountService
from ledgerwell.domain.currency import CurrencyService
from ledgerwell.domain.entities import CREDIT, DEBT, TRANSACTION_TYPES
from ledgerwell.domain.transaction import TransactionService
from ledgerwell.utils.amount_parser import parse_amount
from ledgerwell.utils.date_parser import parse_date, start_of_day


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(TRANSACTION_TYPES),
    required=True,
    help=f"'{DEBT}' if you owe the person, '{CREDIT}' if they owe you",
)
@click.option("--amount", required=True, help="Transaction amount (positive, e.g., 25.50)")
@click.option("--name", required=True, help="Person or counterparty name")
@click.option("--date", default="today", show_default=True, help="Transaction date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_type: str,
    amount: str,
    name: str,
    date: str,
    description: str | None,
) -> None:
    """Record a debt or credit.

    Examples:
        ledgerwell transaction add --account Friends --type credit --amount 20 --name John
        ledgerwell transaction add --account Family --type debt --amount 50 --name Mom --date yesterday
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        txn_date = start_of_day(parse_date(date))
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = transaction_service.create_transaction(
            account_id=account_id,
            type=txn_type,
            amount=txn_amount,
            name=name,
            date=txn_date,
            description=description,
        )
        click.echo(f"Created transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--account", help="Move to another account (name or ID)")
@click.option("--type", "txn_type", type=click.Choice(TRANSACTION_TYPES), help="New type")
@click.option("--amount", help="New amount")
@click.option("--name", help="New counterparty name")
@click.option("--date", help="New date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--description", help="New description (empty string to clear)")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    account: str | None,
    txn_type: str | None,
    amount: str | None,
    name: str | None,
    date: str | None,
    description: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        ledgerwell transaction update 1b2c... --amount 75
        ledgerwell transaction update 1b2c... --account "Family"
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    txn_date = None
    if date is not None:
        try:
            txn_date = start_of_day(parse_date(date))
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        transaction_service.update_transaction(
            transaction_id=transaction_id,
            account_id=account_id,
            type=txn_type,
            amount=txn_amount,
            name=name,
            date=txn_date,
            description=description,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@click.pass_context
def list_transactions(ctx, account: str | None, start_date: str | None, end_date: str | None):
    """View transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    transactions = [
        txn
        for txn in service.list_transactions(account_id=account_id)
        if (start is None or txn.date.date() >= start) and (end is None or txn.date.date() <= end)
    ]
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<34} {'Date':<12} {'Type':<7} {'Amount':>14} {'Account':<16} {'Name':<16}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        amount_str = CurrencyService.format_amount(txn.amount, txn.currency)
        click.echo(
            f"{txn.id:<34} {txn.date.date().isoformat():<12} {txn.type:<7} {amount_str:>14} "
            f"{accounts.get(txn.account_id, 'Unknown'):<16} {txn.name:<16}"
        )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        ledgerwell transaction delete 1b2c...
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    # Confirm deletion
    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
