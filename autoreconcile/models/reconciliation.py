"""Reconciliation outcome models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from autoreconcile.models.ledger import AccountClass, LedgerRecord
from autoreconcile.models.statement import StatementRecord


class ReconciliationStatus(str, Enum):
    """Terminal classification of a reconciliation outcome."""

    MATCHED = "matched"
    VARIANCE = "variance"
    UNMATCHED_LEDGER = "unmatched_ledger"
    UNMATCHED_STATEMENT = "unmatched_statement"


@dataclass(frozen=True)
class ReconciliationOutcome:
    """One row of the reconciliation report.

    ``ledger_record`` is set for every status except UNMATCHED_STATEMENT and
    ``statement_record`` for every status except UNMATCHED_LEDGER.
    """

    id: str
    status: ReconciliationStatus
    variance_amount: Decimal
    detected_bank_name: str
    detected_branch: str
    account_class: AccountClass
    ledger_record: LedgerRecord | None = None
    statement_record: StatementRecord | None = None
    detected_account_number: str = ""
