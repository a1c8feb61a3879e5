"""Common FastAPI dependencies for consistent type annotations.

Usage:
    from autoreconcile.deps import CurrentSession, Extractor

    async def my_endpoint(session: CurrentSession, extractor: Extractor):
        ...
"""

from typing import Annotated

from fastapi import Depends, Request

from autoreconcile.services.extraction import StatementExtractor
from autoreconcile.services.session import ReconciliationSession


def get_session(request: Request) -> ReconciliationSession:
    """Return the reconciliation session owned by the running application."""
    return request.app.state.session


def get_extractor() -> StatementExtractor:
    return StatementExtractor()


CurrentSession = Annotated[ReconciliationSession, Depends(get_session)]
Extractor = Annotated[StatementExtractor, Depends(get_extractor)]

__all__ = ["CurrentSession", "Extractor", "get_extractor", "get_session"]
