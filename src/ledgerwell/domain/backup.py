"""Backup export, import and restore service."""

import logging
from datetime import datetime, UTC
from pathlib import Path
from typing import Optional, Union

from ledgerwell import __version__
from ledgerwell.database.base import Database
from ledgerwell.domain import backup_stats
from ledgerwell.domain.backup_format import backup_filename, parse_backup, serialize_backup
from ledgerwell.domain.backup_validation import validate_backup
from ledgerwell.domain.duplicates import DuplicateDetector
from ledgerwell.domain.entities import (
    Account,
    AppSettings,
    BackupSnapshot,
    BackupStats,
    Currency,
    ImportPreview,
    ReconciliationPolicy,
    ReconciliationResult,
    Transaction,
    ValidationResult,
)
from ledgerwell.domain.errors import BackupFormatError
from ledgerwell.domain.reconciliation import ReconciliationService
from ledgerwell.utils.date_parser import format_timestamp

logger = logging.getLogger(__name__)


class BackupService:
    """Service for exporting and restoring full-data backups."""

    def __init__(self, db: Database, detector: Optional[DuplicateDetector] = None):
        """Initialize backup service.

        Args:
            db: Database instance
            detector: Duplicate rule for previews and merges
        """
        self.db = db
        self.detector = detector or DuplicateDetector()

    def export_backup(
        self,
        accounts: list[Account],
        transactions: list[Transaction],
        settings: AppSettings,
        custom_currencies: list[Currency],
        output_dir: Union[str, Path],
    ) -> Path:
        """Write the given data to a new backup file.

        Args:
            accounts: Accounts to export
            transactions: Transactions to export
            settings: Application settings
            custom_currencies: User-defined currencies
            output_dir: Directory the backup file is created in

        Returns:
            Path of the written file
        """
        now = datetime.now(UTC)
        snapshot = BackupSnapshot(
            version=__version__,
            export_date=format_timestamp(now),
            accounts=accounts,
            transactions=transactions,
            settings=settings,
            custom_currencies=custom_currencies,
        )

        directory = Path(output_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / backup_filename(now)
        path.write_text(serialize_backup(snapshot), encoding="utf-8")

        logger.info(
            "Exported %d accounts and %d transactions to %s",
            len(accounts),
            len(transactions),
            path,
        )
        return path

    def export_current(self, output_dir: Union[str, Path]) -> Path:
        """Export everything currently stored."""
        return self.export_backup(
            accounts=self.db.get_accounts(),
            transactions=self.db.get_transactions(),
            settings=self.db.get_settings(),
            custom_currencies=[c for c in self.db.get_currencies() if c.is_custom],
            output_dir=output_dir,
        )

    def import_backup(self, path: Optional[Union[str, Path]]) -> Optional[BackupSnapshot]:
        """Read and parse a backup file.

        Args:
            path: Backup file, or None if the user cancelled the selection

        Returns:
            Parsed snapshot, or None when cancelled

        Raises:
            BackupFormatError: If the file cannot be read or is not a backup
        """
        if path is None:
            logger.info("Backup import cancelled")
            return None

        path = Path(path).expanduser()
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise BackupFormatError(f"Cannot read backup file {path}: {e}")
        return parse_backup(text)

    def validate_backup(self, snapshot: BackupSnapshot) -> ValidationResult:
        return validate_backup(snapshot)

    def get_backup_stats(self, snapshot: BackupSnapshot) -> BackupStats:
        return backup_stats.get_backup_stats(snapshot)

    def get_live_stats(self) -> BackupStats:
        """Statistics of the data currently stored."""
        return backup_stats.compute_stats(
            self.db.get_accounts(),
            self.db.get_transactions(),
            [c for c in self.db.get_currencies() if c.is_custom],
        )

    def preview(self, snapshot: BackupSnapshot) -> ImportPreview:
        return backup_stats.build_import_preview(
            snapshot,
            self.db.get_accounts(),
            self.db.get_transactions(),
            self.detector,
        )

    def reconcile(
        self,
        snapshot: BackupSnapshot,
        policy: ReconciliationPolicy,
        skip_duplicates: bool = True,
    ) -> ReconciliationResult:
        """Restore a snapshot; see ReconciliationService.reconcile."""
        service = ReconciliationService(self.db, self.detector)
        return service.reconcile(snapshot, policy, skip_duplicates=skip_duplicates)
