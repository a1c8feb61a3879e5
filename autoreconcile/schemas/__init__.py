"""Pydantic schemas package."""

from autoreconcile.schemas.base import BaseResponse, ListResponse
from autoreconcile.schemas.ledger import (
    LedgerRecordListResponse,
    LedgerRecordResponse,
    LedgerUploadResponse,
)
from autoreconcile.schemas.reconciliation import (
    ReconciliationOutcomeListResponse,
    ReconciliationOutcomeResponse,
    ReconciliationRunResponse,
    ReconciliationSummaryResponse,
)
from autoreconcile.schemas.statements import (
    StatementRecordListResponse,
    StatementRecordResponse,
    StatementUploadError,
    StatementUploadResponse,
)

__all__ = [
    "BaseResponse",
    "LedgerRecordListResponse",
    "LedgerRecordResponse",
    "LedgerUploadResponse",
    "ListResponse",
    "ReconciliationOutcomeListResponse",
    "ReconciliationOutcomeResponse",
    "ReconciliationRunResponse",
    "ReconciliationSummaryResponse",
    "StatementRecordListResponse",
    "StatementRecordResponse",
    "StatementUploadError",
    "StatementUploadResponse",
]
