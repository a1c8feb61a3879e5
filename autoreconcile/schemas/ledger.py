"""Pydantic schemas for ledger API."""

from decimal import Decimal

from autoreconcile.models import AccountClass
from autoreconcile.schemas.base import BaseResponse, ListResponse


class LedgerRecordResponse(BaseResponse):
    """Ledger record as returned by the API."""

    id: str
    branch_code: str
    narrative: str
    balance: Decimal
    account_class: AccountClass


LedgerRecordListResponse = ListResponse[LedgerRecordResponse]


class LedgerUploadResponse(BaseResponse):
    """Result of a ledger upload."""

    filename: str
    record_count: int
    items: list[LedgerRecordResponse]
