"""In-memory reconciliation session state."""

from __future__ import annotations

from collections.abc import Sequence

from autoreconcile.logger import get_logger, log_timing
from autoreconcile.models import LedgerRecord, ReconciliationOutcome, StatementRecord
from autoreconcile.services.reconciliation import reconcile
from autoreconcile.services.statement_batch import StatementBatchResult

logger = get_logger(__name__)


class SessionNotReadyError(Exception):
    """Raised when reconciliation is requested before both inputs are loaded."""

    pass


class ReconciliationSession:
    """Ledger and statements buffered until a reconciliation run.

    Statements accumulate across upload batches until cleared. The engine
    receives snapshots of both collections and keeps no state of its own.
    Any change to either input discards the previous results.
    """

    def __init__(self) -> None:
        self.ledger_records: list[LedgerRecord] = []
        self.statements: list[StatementRecord] = []
        self.error: str | None = None
        self.results: list[ReconciliationOutcome] | None = None

    def load_ledger(self, records: Sequence[LedgerRecord]) -> None:
        self.ledger_records = list(records)
        self.error = None
        self.results = None
        logger.info("Ledger loaded", record_count=len(self.ledger_records))

    def clear_ledger(self) -> None:
        self.ledger_records = []
        self.results = None

    def add_statements(self, batch: StatementBatchResult) -> None:
        """Append a batch's successes and record its error banner."""
        self.statements.extend(batch.statements)
        self.error = batch.error_message()
        self.results = None
        logger.info(
            "Statements added",
            added=len(batch.statements),
            failed=len(batch.errors),
            total=len(self.statements),
        )

    def remove_statement(self, index: int) -> StatementRecord:
        if not 0 <= index < len(self.statements):
            raise IndexError(f"Statement index {index} out of range")
        self.results = None
        return self.statements.pop(index)

    def clear_statements(self) -> None:
        self.statements = []
        self.results = None

    def run(self) -> list[ReconciliationOutcome]:
        """Reconcile the loaded ledger against the accumulated statements."""
        if not self.ledger_records or not self.statements:
            raise SessionNotReadyError("Upload both the ledger file and at least one bank statement")

        with log_timing(
            "reconcile",
            logger=logger,
            ledger_count=len(self.ledger_records),
            statement_count=len(self.statements),
        ) as timing:
            self.results = reconcile(tuple(self.ledger_records), tuple(self.statements))
            timing["outcome_count"] = len(self.results)
        return self.results

    def reset(self) -> None:
        self.ledger_records = []
        self.statements = []
        self.results = None
        self.error = None
