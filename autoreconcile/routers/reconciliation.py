"""Reconciliation API router."""

from fastapi import APIRouter, Query

from autoreconcile.deps import CurrentSession
from autoreconcile.schemas import (
    ReconciliationOutcomeListResponse,
    ReconciliationOutcomeResponse,
    ReconciliationRunResponse,
    ReconciliationSummaryResponse,
)
from autoreconcile.services.reporting import StatusFilter, filter_outcomes, summarize
from autoreconcile.services.session import SessionNotReadyError
from autoreconcile.utils import raise_bad_request, raise_not_found

router = APIRouter(prefix="/reconciliation", tags=["reconciliation"])


@router.post("/run", response_model=ReconciliationRunResponse)
async def run_reconciliation(session: CurrentSession) -> ReconciliationRunResponse:
    try:
        outcomes = session.run()
    except SessionNotReadyError as exc:
        session.error = str(exc)
        raise_bad_request(str(exc), cause=exc)

    return ReconciliationRunResponse(
        summary=ReconciliationSummaryResponse.model_validate(summarize(outcomes)),
        items=[ReconciliationOutcomeResponse.model_validate(outcome) for outcome in outcomes],
    )


@router.get("/results", response_model=ReconciliationOutcomeListResponse)
async def list_results(
    session: CurrentSession,
    status: StatusFilter = Query(default=StatusFilter.ALL),
    q: str = Query(default="", max_length=200),
) -> ReconciliationOutcomeListResponse:
    if session.results is None:
        raise_not_found("Reconciliation results")

    filtered = filter_outcomes(session.results, status, q)
    return ReconciliationOutcomeListResponse(
        items=[ReconciliationOutcomeResponse.model_validate(outcome) for outcome in filtered],
        total=len(filtered),
    )


@router.get("/summary", response_model=ReconciliationSummaryResponse)
async def get_summary(session: CurrentSession) -> ReconciliationSummaryResponse:
    if session.results is None:
        raise_not_found("Reconciliation results")
    return ReconciliationSummaryResponse.model_validate(summarize(session.results))


@router.post("/reset", status_code=204)
async def reset_session(session: CurrentSession) -> None:
    session.reset()
