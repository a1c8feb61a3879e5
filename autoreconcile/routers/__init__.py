"""API routers package."""

from autoreconcile.routers import ledger, reconciliation, statements

__all__ = [
    "ledger",
    "reconciliation",
    "statements",
]
