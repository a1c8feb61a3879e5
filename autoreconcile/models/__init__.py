"""Domain models package."""

from autoreconcile.models.ledger import AccountClass, LedgerRecord
from autoreconcile.models.reconciliation import ReconciliationOutcome, ReconciliationStatus
from autoreconcile.models.statement import BankCode, StatementRecord

__all__ = [
    "AccountClass",
    "BankCode",
    "LedgerRecord",
    "ReconciliationOutcome",
    "ReconciliationStatus",
    "StatementRecord",
]
