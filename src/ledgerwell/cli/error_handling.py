"""CLI error handling helpers."""

import click

from ledgerwell.domain.errors import BackupValidationError, DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, BackupValidationError):
        echo_validation(error.result)
        ctx.exit(1)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_validation(result) -> None:
    """Print every validation error, then every warning."""
    for message in result.errors:
        click.echo(f"Error: {message}", err=True)
    for message in result.warnings:
        click.echo(f"Warning: {message}", err=True)
