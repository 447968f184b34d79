"""Domain layer for ledgerwell application."""

_SERVICES = {
    "AccountService": "ledgerwell.domain.account",
    "TransactionService": "ledgerwell.domain.transaction",
    "CurrencyService": "ledgerwell.domain.currency",
    "SettingsService": "ledgerwell.domain.settings",
    "BackupService": "ledgerwell.domain.backup",
    "ReconciliationService": "ledgerwell.domain.reconciliation",
}

__all__ = list(_SERVICES)


# Services import the database layer, which imports domain entities; resolve
# them lazily so importing an entity never pulls in a service.
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
