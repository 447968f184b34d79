"""Application settings commands."""

import click
from ledgerwell.cli.error_handling import handle_domain_error
from ledgerwell.domain.settings import SettingsService

SETTING_KEYS = ("language", "theme", "default-currency", "auto-update-rates")


@click.group()
def settings_group():
    """Show and change application settings."""
    pass


@settings_group.command("show")
@click.pass_context
def show_settings(ctx):
    """Show current settings."""
    settings = SettingsService(ctx.obj["db"]).get_settings()
    currency = settings.default_currency
    click.echo(f"language: {settings.language}")
    click.echo(f"theme: {settings.theme}")
    click.echo(f"default-currency: {currency.code if currency else '(none)'}")
    click.echo(f"auto-update-rates: {'on' if settings.auto_update_rates else 'off'}")


@settings_group.command("set")
@click.argument("key", type=click.Choice(SETTING_KEYS))
@click.argument("value")
@click.pass_context
def set_setting(ctx, key: str, value: str):
    """Change one setting.

    Examples:
        ledgerwell settings set language es
        ledgerwell settings set default-currency EUR
        ledgerwell settings set auto-update-rates off
    """
    service = SettingsService(ctx.obj["db"])
    try:
        if key == "language":
            service.set_language(value)
        elif key == "theme":
            service.set_theme(value)
        elif key == "default-currency":
            service.set_default_currency(value)
        else:
            flag = value.strip().lower()
            if flag not in ("on", "off", "true", "false"):
                raise ValueError("auto-update-rates must be 'on' or 'off'")
            service.set_auto_update_rates(flag in ("on", "true"))
        click.echo(f"Set {key} to {value}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register settings commands with main CLI."""
    cli.add_command(settings_group, name="settings")
