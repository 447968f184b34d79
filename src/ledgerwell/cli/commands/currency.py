"""Currency management commands."""

import click
from ledgerwell.cli.error_handling import handle_domain_error
from ledgerwell.domain.currency import CurrencyService
from ledgerwell.domain.errors import NotFoundError, currency_not_found
from ledgerwell.utils.amount_parser import format_number


@click.group()
def currency_group():
    """Manage built-in and custom currencies."""
    pass


@currency_group.command("list")
@click.option("--custom", is_flag=True, help="Show only custom currencies")
@click.pass_context
def list_currencies(ctx, custom: bool):
    """List currencies with their exchange rates."""
    service = CurrencyService(ctx.obj["db"])
    currencies = service.list_custom_currencies() if custom else service.list_currencies()
    if not currencies:
        click.echo("No currencies found.")
        return

    click.echo(f"\n{'Code':<6} {'Symbol':<6} {'Rate':>14}  Name")
    click.echo("-" * 60)
    for c in currencies:
        marker = " (custom)" if c.is_custom else ""
        click.echo(f"{c.code:<6} {c.symbol:<6} {format_number(c.rate):>14}  {c.name}{marker}")


@currency_group.command("add")
@click.argument("code")
@click.option("--name", required=True, help="Currency name")
@click.option("--symbol", default="", help="Display symbol (defaults to the code)")
@click.option("--rate", type=float, required=True, help="Units per 1 USD")
@click.pass_context
def add_currency(ctx, code: str, name: str, symbol: str, rate: float):
    """Add a custom currency.

    Examples:
        ledgerwell currency add BTC --name Bitcoin --symbol "₿" --rate 0.000015
    """
    service = CurrencyService(ctx.obj["db"])
    try:
        currency = service.create_custom_currency(code, name, symbol, rate)
        click.echo(f"Added currency {currency.code} (ID: {currency.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@currency_group.command("update")
@click.argument("currency")
@click.option("--code", help="New code")
@click.option("--name", help="New name")
@click.option("--symbol", help="New symbol")
@click.option("--rate", type=float, help="New rate (units per 1 USD)")
@click.pass_context
def update_currency(
    ctx,
    currency: str,
    code: str | None,
    name: str | None,
    symbol: str | None,
    rate: float | None,
):
    """Edit a custom currency.

    CURRENCY can be a currency code or ID.
    """
    service = CurrencyService(ctx.obj["db"])
    try:
        found = service.get_currency(currency)
        if found is None:
            raise NotFoundError(currency_not_found(currency))
        updated = service.update_custom_currency(
            found.id, code=code, name=name, symbol=symbol, rate=rate
        )
        click.echo(f"Updated currency {updated.code}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@currency_group.command("delete")
@click.argument("currency")
@click.pass_context
def delete_currency(ctx, currency: str):
    """Delete a custom currency.

    CURRENCY can be a currency code or ID. If it was the default currency,
    the default falls back to USD.
    """
    service = CurrencyService(ctx.obj["db"])
    try:
        found = service.get_currency(currency)
        if found is None:
            raise NotFoundError(currency_not_found(currency))
        service.delete_custom_currency(found.id)
        click.echo(f"Deleted currency {found.code}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register currency commands with main CLI."""
    cli.add_command(currency_group, name="currency")
