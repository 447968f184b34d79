"""Settings domain service."""

from dataclasses import replace

from ledgerwell.database.base import Database
from ledgerwell.domain.currency import CurrencyService
from ledgerwell.domain.entities import AppSettings
from ledgerwell.domain.errors import NotFoundError, ValidationError, currency_not_found
from ledgerwell.domain.seed import SUPPORTED_LANGUAGES, THEMES


class SettingsService:
    """Service for reading and changing application settings."""

    def __init__(self, db: Database):
        self.db = db
        self.currency_service = CurrencyService(db)

    def get_settings(self) -> AppSettings:
        return self.db.get_settings()

    def set_language(self, language: str) -> AppSettings:
        language = language.strip().lower()
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationError(
                f"Unsupported language '{language}'. Supported: {', '.join(SUPPORTED_LANGUAGES)}"
            )
        return self._save(language=language)

    def set_theme(self, theme: str) -> AppSettings:
        theme = theme.strip().lower()
        if theme not in THEMES:
            raise ValidationError(f"Unsupported theme '{theme}'. Supported: {', '.join(THEMES)}")
        return self._save(theme=theme)

    def set_default_currency(self, currency: str) -> AppSettings:
        found = self.currency_service.get_currency(currency)
        if found is None:
            raise NotFoundError(currency_not_found(currency))
        return self._save(default_currency=found)

    def set_auto_update_rates(self, enabled: bool) -> AppSettings:
        return self._save(auto_update_rates=enabled)

    def _save(self, **changes) -> AppSettings:
        settings = replace(self.db.get_settings(), **changes)
        self.db.save_settings(settings)
        return settings
