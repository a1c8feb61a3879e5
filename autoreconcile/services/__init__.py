"""Services package."""

from autoreconcile.services.extraction import ExtractionError, StatementExtractor
from autoreconcile.services.ledger_import import LedgerImportError, parse_ledger_file
from autoreconcile.services.reconciliation import reconcile
from autoreconcile.services.reporting import (
    ReconciliationSummary,
    StatusFilter,
    filter_outcomes,
    status_label,
    summarize,
)
from autoreconcile.services.session import ReconciliationSession, SessionNotReadyError
from autoreconcile.services.statement_batch import (
    StatementBatchError,
    StatementBatchResult,
    StatementDocument,
    extract_statement_batch,
)

__all__ = [
    "ExtractionError",
    "LedgerImportError",
    "ReconciliationSession",
    "ReconciliationSummary",
    "SessionNotReadyError",
    "StatementBatchError",
    "StatementBatchResult",
    "StatementDocument",
    "StatementExtractor",
    "StatusFilter",
    "extract_statement_batch",
    "filter_outcomes",
    "parse_ledger_file",
    "reconcile",
    "status_label",
    "summarize",
]
