"""HTTP error helpers for the routers.

Each helper raises ``HTTPException`` chained to the domain error that caused
it, so the original traceback stays attached for the server logs.
"""

from typing import NoReturn

from fastapi import HTTPException, status


def _raise_http(status_code: int, detail: str, cause: Exception | None) -> NoReturn:
    raise HTTPException(status_code=status_code, detail=detail) from cause


def raise_not_found(resource_name: str, *, cause: Exception | None = None) -> NoReturn:
    _raise_http(status.HTTP_404_NOT_FOUND, f"{resource_name} not found", cause)


def raise_bad_request(detail: str, *, cause: Exception | None = None) -> NoReturn:
    """400 for uploads that cannot be read and runs requested too early."""
    _raise_http(status.HTTP_400_BAD_REQUEST, detail, cause)


def raise_too_large(detail: str, *, cause: Exception | None = None) -> NoReturn:
    _raise_http(status.HTTP_413_CONTENT_TOO_LARGE, detail, cause)
