"""Backup export, inspection and restore commands."""

from datetime import timedelta

import click
from ledgerwell.cli.error_handling import echo_validation, handle_domain_error
from ledgerwell.domain.backup import BackupService
from ledgerwell.domain.duplicates import DEFAULT_AMOUNT_TOLERANCE, DuplicateDetector
from ledgerwell.domain.entities import BackupStats, ImportPreview, ReconciliationPolicy


@click.group()
def backup_group():
    """Export and restore complete backups."""
    pass


def _echo_stats(stats: BackupStats) -> None:
    click.echo(f"Accounts: {stats.total_accounts}")
    click.echo(f"Transactions: {stats.total_transactions}")
    click.echo(f"Custom currencies: {stats.total_custom_currencies}")
    if stats.date_range is None:
        click.echo("Date range: (no transactions)")
    else:
        click.echo(
            f"Date range: {stats.date_range.start.date().isoformat()} to "
            f"{stats.date_range.end.date().isoformat()}"
        )


def _echo_preview(preview: ImportPreview) -> None:
    _echo_stats(preview.stats)
    if preview.currencies:
        click.echo(f"Currencies: {', '.join(preview.currencies)}")
    for label in preview.account_labels:
        click.echo(f"  - {label}")
    click.echo(
        f"Already present: {preview.duplicate_accounts} account(s), "
        f"{preview.duplicate_transactions} transaction(s)"
    )


@backup_group.command("export")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    default=".",
    envvar="LEDGERWELL_BACKUP_DIR",
    help="Directory to write the backup to (overrides LEDGERWELL_BACKUP_DIR environment variable)",
)
@click.pass_context
def export_backup(ctx, output_dir: str):
    """Export all accounts, transactions, settings and custom currencies.

    Examples:
        ledgerwell backup export
        ledgerwell backup export --output-dir ~/backups
    """
    service = BackupService(ctx.obj["db"])
    try:
        path = service.export_current(output_dir)
    except OSError as e:
        click.echo(f"Error: Cannot write backup: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Backup written to {path}")


@backup_group.command("stats")
@click.pass_context
def live_stats(ctx):
    """Show what a backup of the current data would contain."""
    _echo_stats(BackupService(ctx.obj["db"]).get_live_stats())


@backup_group.command("inspect")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def inspect_backup(ctx, file: str):
    """Read and check a backup file without changing any data."""
    service = BackupService(ctx.obj["db"])
    try:
        snapshot = service.import_backup(file)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Backup version: {snapshot.version or '(unknown)'}")
    click.echo(f"Exported: {snapshot.export_date or '(unknown)'}")
    _echo_preview(service.preview(snapshot))

    result = service.validate_backup(snapshot)
    echo_validation(result)
    if not result.is_valid:
        ctx.exit(1)
    click.echo("Backup is valid.")


@backup_group.command("restore")
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.option("--replace", "policy", flag_value=ReconciliationPolicy.REPLACE.value, help="Delete all current data, then restore the backup")
@click.option("--merge", "policy", flag_value=ReconciliationPolicy.MERGE.value, help="Add the backup to the current data")
@click.option("--keep-duplicates", is_flag=True, help="When merging, import records that look like existing ones")
@click.option(
    "--amount-tolerance",
    type=float,
    default=DEFAULT_AMOUNT_TOLERANCE,
    show_default=True,
    help="Amounts closer than this count as equal when detecting duplicates",
)
@click.option(
    "--date-window-hours",
    type=float,
    default=24.0,
    show_default=True,
    help="Dates closer than this count as the same day when detecting duplicates",
)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def restore_backup(
    ctx,
    file: str | None,
    policy: str | None,
    keep_duplicates: bool,
    amount_tolerance: float,
    date_window_hours: float,
    yes: bool,
):
    """Restore a backup file.

    Without FILE, asks for a path; an empty answer cancels. Without --replace
    or --merge, asks which to use.

    Examples:
        ledgerwell backup restore LedgerWell_Backup_2024-01-15T10-30-00.csv --merge
        ledgerwell backup restore backup.csv --replace --yes
    """
    try:
        detector = DuplicateDetector(
            amount_tolerance=amount_tolerance,
            date_window=timedelta(hours=date_window_hours),
        )
    except OverflowError:
        handle_domain_error(ctx, ValueError(f"date window of {date_window_hours:g} hours is too large"))
    except ValueError as e:
        handle_domain_error(ctx, e)

    service = BackupService(ctx.obj["db"], detector=detector)

    if file is None:
        file = click.prompt("Backup file", default="", show_default=False).strip() or None

    try:
        snapshot = service.import_backup(file)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if snapshot is None:
        click.echo("Restore cancelled.")
        return

    result = service.validate_backup(snapshot)
    echo_validation(result)
    if not result.is_valid:
        click.echo("Backup not restored.", err=True)
        ctx.exit(1)

    _echo_preview(service.preview(snapshot))

    if policy is None:
        policy = click.prompt(
            "Restore mode",
            type=click.Choice([p.value for p in ReconciliationPolicy]),
            default=ReconciliationPolicy.MERGE.value,
        )
    policy = ReconciliationPolicy(policy)

    if (
        policy is ReconciliationPolicy.REPLACE
        and not yes
        and not click.confirm("Replace deletes all current data. Continue?")
    ):
        click.echo("Restore cancelled.")
        return

    try:
        outcome = service.reconcile(snapshot, policy, skip_duplicates=not keep_duplicates)
    except ValueError as e:
        handle_domain_error(ctx, e)

    for message in outcome.errors:
        click.echo(f"Error: {message}", err=True)
    click.echo(
        f"Accounts: {outcome.accounts_added} added, {outcome.accounts_renamed} renamed, "
        f"{outcome.accounts_skipped} already present"
    )
    click.echo(
        f"Transactions: {outcome.transactions_added} added, "
        f"{outcome.transactions_skipped} skipped as duplicates"
    )
    click.echo(f"Custom currencies restored: {outcome.currencies_restored}")
    if outcome.settings_restored:
        click.echo("Settings restored.")
    if outcome.partial:
        click.echo("Restore finished with errors.", err=True)
        ctx.exit(1)
    click.echo("Restore complete.")


def register_commands(cli: click.Group) -> None:
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
