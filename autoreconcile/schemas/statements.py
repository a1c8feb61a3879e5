"""Pydantic schemas for statement upload API."""

from decimal import Decimal

from autoreconcile.schemas.base import BaseResponse, ListResponse


class StatementRecordResponse(BaseResponse):
    """Extracted statement summary."""

    source_name: str
    account_number: str
    bank_name: str | None
    ending_balance: Decimal
    statement_date: str


StatementRecordListResponse = ListResponse[StatementRecordResponse]


class StatementUploadError(BaseResponse):
    """A file of the batch that failed extraction."""

    source_name: str
    message: str


class StatementUploadResponse(BaseResponse):
    """Result of one statement upload batch."""

    added: list[StatementRecordResponse]
    errors: list[StatementUploadError]
    error_message: str | None
    total_statements: int
