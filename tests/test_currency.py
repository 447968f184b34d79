"""Tests for currencies and settings."""

import pytest

from ledgerwell.cli.main import cli
from ledgerwell.domain.currency import CurrencyService, merge_custom_currencies
from ledgerwell.domain.errors import ConflictError, NotFoundError, ValidationError
from ledgerwell.domain.seed import DEFAULT_CURRENCIES, DEFAULT_SETTINGS

from conftest import BTC


class TestCurrencyService:
    """Tests for built-in and custom currencies."""

    def test_builtins_listed(self, currency_service):
        codes = [c.code for c in currency_service.list_currencies()]
        assert codes[0] == "USD"
        assert len(codes) == len(DEFAULT_CURRENCIES)
        assert currency_service.list_custom_currencies() == []

    def test_get_currency_by_code_or_id(self, currency_service):
        assert currency_service.get_currency("eur").code == "EUR"
        assert currency_service.get_currency("gbp").code == "GBP"
        assert currency_service.get_currency("nope") is None

    def test_create_custom_currency(self, currency_service):
        created = currency_service.create_custom_currency("btc", "Bitcoin", "₿", 0.000015)

        assert created.id == "custom_btc"
        assert created.code == "BTC"
        assert created.is_custom
        assert currency_service.list_custom_currencies() == [created]

    def test_invalid_code(self, currency_service):
        with pytest.raises(ValidationError):
            currency_service.create_custom_currency("BITCOIN", "Bitcoin", "B", 1.0)

    def test_invalid_rate(self, currency_service):
        with pytest.raises(ValidationError):
            currency_service.create_custom_currency("BTC", "Bitcoin", "B", 0)

    def test_existing_code(self, currency_service):
        with pytest.raises(ConflictError):
            currency_service.create_custom_currency("EUR", "Euro again", "E", 1.0)

    def test_update_custom_currency(self, currency_service):
        currency_service.create_custom_currency("BTC", "Bitcoin", "B", 0.00002)
        updated = currency_service.update_custom_currency("custom_btc", rate=0.00001)
        assert updated.rate == 0.00001
        assert currency_service.get_currency("BTC").rate == 0.00001

    def test_builtin_is_immutable(self, currency_service):
        with pytest.raises(ValidationError):
            currency_service.update_custom_currency("eur", rate=2.0)
        with pytest.raises(ValidationError):
            currency_service.delete_custom_currency("eur")

    def test_delete_missing(self, currency_service):
        with pytest.raises(NotFoundError):
            currency_service.delete_custom_currency("custom_zzz")

    def test_deleting_default_falls_back_to_usd(self, currency_service, settings_service):
        currency_service.create_custom_currency("BTC", "Bitcoin", "B", 0.00002)
        settings_service.set_default_currency("BTC")

        currency_service.delete_custom_currency("custom_btc")

        assert settings_service.get_settings().default_currency.code == "USD"

    def test_convert_and_format(self):
        usd, eur = DEFAULT_CURRENCIES[0], DEFAULT_CURRENCIES[1]
        assert CurrencyService.convert_amount(100.0, usd, eur) == pytest.approx(85.0)
        assert CurrencyService.convert_amount(85.0, eur, usd) == pytest.approx(100.0)
        assert CurrencyService.format_amount(1234.5, usd) == "$1,234.50"


class TestMergeCustomCurrencies:
    """Tests for merging custom currencies by code."""

    def test_appends_new_code(self):
        merged = merge_custom_currencies(list(DEFAULT_CURRENCIES), [BTC])
        assert merged[-1] == BTC

    def test_builtin_code_ignored(self):
        fake_usd = BTC.__class__(id="x", code="USD", name="Fake", symbol="F", rate=5.0, is_custom=True)
        merged = merge_custom_currencies(list(DEFAULT_CURRENCIES), [fake_usd])
        assert merged == list(DEFAULT_CURRENCIES)

    def test_id_clash_reassigned(self):
        clash = BTC.__class__(id="eur", code="XAU", name="Gold", symbol="Au", rate=0.0005, is_custom=False)
        merged = merge_custom_currencies(list(DEFAULT_CURRENCIES), [clash])
        assert merged[-1].id == "custom_xau"
        assert merged[-1].is_custom


class TestSettingsService:
    """Tests for application settings."""

    def test_defaults(self, settings_service):
        assert settings_service.get_settings() == DEFAULT_SETTINGS

    def test_set_language_and_theme(self, settings_service):
        settings_service.set_language("ES")
        settings_service.set_theme("dark")
        settings = settings_service.get_settings()
        assert settings.language == "es"
        assert settings.theme == "dark"

    def test_unsupported_values(self, settings_service):
        with pytest.raises(ValidationError):
            settings_service.set_language("xx")
        with pytest.raises(ValidationError):
            settings_service.set_theme("neon")
        with pytest.raises(NotFoundError):
            settings_service.set_default_currency("XYZ")


def test_currency_cli_add_and_list(cli_runner, temp_db):
    """Test adding a custom currency from the command line."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "currency", "add", "BTC", "--name", "Bitcoin", "--rate", "0.000015"],
    )
    assert result.exit_code == 0
    assert "Added currency BTC" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "currency", "list", "--custom"])
    assert "BTC" in result.output
    assert "0.000015" in result.output


def test_settings_cli(cli_runner, temp_db):
    """Test changing and showing settings from the command line."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "settings", "set", "default-currency", "eur"]
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "settings", "show"])
    assert "default-currency: EUR" in result.output
    assert "language: en" in result.output
