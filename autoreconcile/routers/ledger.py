"""Ledger upload API router."""

from fastapi import APIRouter, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from autoreconcile.config import settings
from autoreconcile.deps import CurrentSession
from autoreconcile.logger import get_logger
from autoreconcile.schemas import LedgerRecordListResponse, LedgerRecordResponse, LedgerUploadResponse
from autoreconcile.services.ledger_import import LedgerImportError, parse_ledger_file
from autoreconcile.utils import raise_bad_request, raise_too_large

router = APIRouter(prefix="/ledger", tags=["ledger"])
logger = get_logger(__name__)


@router.post("", response_model=LedgerUploadResponse)
async def upload_ledger(session: CurrentSession, file: UploadFile = File(...)) -> LedgerUploadResponse:
    """Import the ledger export, replacing any previously loaded ledger."""
    filename = file.filename or "ledger.xlsx"
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise_too_large(f"File exceeds {settings.max_upload_bytes // (1024 * 1024)}MB limit")

    try:
        records = await run_in_threadpool(parse_ledger_file, content, filename)
    except LedgerImportError as exc:
        logger.warning("Ledger import failed", filename=filename, error=str(exc))
        session.error = str(exc)
        raise_bad_request(str(exc), cause=exc)

    session.load_ledger(records)
    return LedgerUploadResponse(
        filename=filename,
        record_count=len(records),
        items=[LedgerRecordResponse.model_validate(record) for record in records],
    )


@router.get("", response_model=LedgerRecordListResponse)
async def list_ledger(session: CurrentSession) -> LedgerRecordListResponse:
    items = [LedgerRecordResponse.model_validate(record) for record in session.ledger_records]
    return LedgerRecordListResponse(items=items, total=len(items))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_ledger(session: CurrentSession) -> None:
    session.clear_ledger()
