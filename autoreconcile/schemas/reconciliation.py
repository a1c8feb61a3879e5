"""Pydantic schemas for reconciliation API."""

from decimal import Decimal

from pydantic import computed_field

from autoreconcile.models import AccountClass, ReconciliationStatus
from autoreconcile.schemas.base import BaseResponse, ListResponse
from autoreconcile.schemas.ledger import LedgerRecordResponse
from autoreconcile.schemas.statements import StatementRecordResponse
from autoreconcile.services.reporting import status_label


class ReconciliationOutcomeResponse(BaseResponse):
    """One reconciliation report row."""

    id: str
    status: ReconciliationStatus
    variance_amount: Decimal
    detected_bank_name: str
    detected_branch: str
    detected_account_number: str
    account_class: AccountClass
    ledger_record: LedgerRecordResponse | None = None
    statement_record: StatementRecordResponse | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_label(self) -> str:
        return status_label(self.status)


ReconciliationOutcomeListResponse = ListResponse[ReconciliationOutcomeResponse]


class ReconciliationSummaryResponse(BaseResponse):
    """Outcome counts of the last run."""

    total: int
    matched: int
    variance: int
    unmatched: int
    unmatched_ledger: int
    unmatched_statement: int
    net_variance: Decimal


class ReconciliationRunResponse(BaseResponse):
    """Response for a reconciliation run."""

    summary: ReconciliationSummaryResponse
    items: list[ReconciliationOutcomeResponse]
