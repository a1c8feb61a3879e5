"""Statement upload API router."""

from fastapi import APIRouter, File, UploadFile, status

from autoreconcile.config import settings
from autoreconcile.deps import CurrentSession, Extractor
from autoreconcile.logger import get_logger
from autoreconcile.schemas import (
    StatementRecordListResponse,
    StatementRecordResponse,
    StatementUploadError,
    StatementUploadResponse,
)
from autoreconcile.services.statement_batch import StatementDocument, extract_statement_batch
from autoreconcile.utils import raise_bad_request, raise_not_found

router = APIRouter(prefix="/statements", tags=["statements"])
logger = get_logger(__name__)

OVERSIZED_FILE_MESSAGE = "File exceeds upload size limit"


@router.post("", response_model=StatementUploadResponse)
async def upload_statements(
    session: CurrentSession,
    extractor: Extractor,
    files: list[UploadFile] = File(...),
) -> StatementUploadResponse:
    """Extract a batch of statements and append the successes to the session.

    Oversized files are reported as batch errors like any other failed file.
    """
    if not files:
        raise_bad_request("No statement files uploaded")

    documents: list[StatementDocument] = []
    for upload in files:
        content = await upload.read()
        documents.append(
            StatementDocument(
                filename=upload.filename or "statement",
                content=content,
                mime_type=upload.content_type,
                rejection=OVERSIZED_FILE_MESSAGE if len(content) > settings.max_upload_bytes else None,
            )
        )

    batch = await extract_statement_batch(documents, extractor)
    session.add_statements(batch)

    return StatementUploadResponse(
        added=[StatementRecordResponse.model_validate(statement) for statement in batch.statements],
        errors=[StatementUploadError.model_validate(error) for error in batch.errors],
        error_message=batch.error_message(),
        total_statements=len(session.statements),
    )


@router.get("", response_model=StatementRecordListResponse)
async def list_statements(session: CurrentSession) -> StatementRecordListResponse:
    items = [StatementRecordResponse.model_validate(statement) for statement in session.statements]
    return StatementRecordListResponse(items=items, total=len(items))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_statements(session: CurrentSession) -> None:
    session.clear_statements()


@router.delete("/{index}", response_model=StatementRecordResponse)
async def remove_statement(index: int, session: CurrentSession) -> StatementRecordResponse:
    try:
        removed = session.remove_statement(index)
    except IndexError as exc:
        raise_not_found("Statement", cause=exc)
    return StatementRecordResponse.model_validate(removed)
