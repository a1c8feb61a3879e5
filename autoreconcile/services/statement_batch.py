"""Concurrent extraction of a batch of uploaded statement documents."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from autoreconcile.config import settings
from autoreconcile.logger import get_logger, log_exception
from autoreconcile.models import StatementRecord
from autoreconcile.services.extraction import ExtractionError, StatementExtractor

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatementDocument:
    """An uploaded statement file awaiting extraction.

    A ``rejection`` reason marks a file refused before extraction; it is
    reported as a batch error in its upload position.
    """

    filename: str
    content: bytes
    mime_type: str | None = None
    rejection: str | None = None


@dataclass(frozen=True)
class StatementBatchError:
    """A document that could not be extracted."""

    source_name: str
    message: str


@dataclass
class StatementBatchResult:
    """Successes and failures of one upload batch."""

    statements: list[StatementRecord] = field(default_factory=list)
    errors: list[StatementBatchError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_message(self) -> str | None:
        """Aggregate banner naming each failing file and its cause."""
        if not self.errors:
            return None
        details = ", ".join(f"{error.source_name}: {error.message}" for error in self.errors)
        return f"{len(self.errors)} file(s) failed: {details}"


async def extract_statement_batch(
    documents: Sequence[StatementDocument],
    extractor: StatementExtractor,
    *,
    concurrency: int | None = None,
) -> StatementBatchResult:
    """Extract every document concurrently; one failure never aborts the others.

    Statements and errors both keep the order of ``documents``.
    """
    semaphore = asyncio.Semaphore(concurrency or settings.extraction_concurrency)

    async def _extract(document: StatementDocument) -> StatementRecord | StatementBatchError:
        if document.rejection:
            logger.warning("Statement file rejected", source_name=document.filename, reason=document.rejection)
            return StatementBatchError(document.filename, document.rejection)
        async with semaphore:
            try:
                return await extractor.extract_statement(
                    document.content,
                    document.filename,
                    document.mime_type,
                )
            except ExtractionError as exc:
                log_exception(
                    logger,
                    exc,
                    "Statement extraction failed",
                    include_traceback=False,
                    source_name=document.filename,
                )
                return StatementBatchError(document.filename, str(exc))
            except Exception as exc:
                log_exception(logger, exc, "Unexpected statement extraction failure", source_name=document.filename)
                return StatementBatchError(document.filename, "Unable to read statement file")

    outcomes = await asyncio.gather(*(_extract(document) for document in documents))

    result = StatementBatchResult()
    for outcome in outcomes:
        if isinstance(outcome, StatementBatchError):
            result.errors.append(outcome)
        else:
            result.statements.append(outcome)

    logger.info(
        "Statement batch processed",
        document_count=len(documents),
        extracted=len(result.statements),
        failed=len(result.errors),
    )
    return result
