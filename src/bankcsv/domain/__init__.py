"""Domain layer for bankcsv application.

Services are resolved lazily because the parsing utilities import the
error types from this package.
"""

_SERVICES = {
    "AccountService": "bankcsv.domain.account",
    "CSVImportService": "bankcsv.domain.csv_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
