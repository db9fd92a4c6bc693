"""Helpers for constructing ``{"error": ...}`` JSON responses.

Keeping response construction in one module avoids duplicated boilerplate in
each exception handler and middleware.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi.responses import JSONResponse

from catalog_favorites.schemas.error import ErrorResponse

__all__ = [
    "build_error_response",
    "error_json_response",
]


def build_error_response(message: str) -> ErrorResponse:
    return ErrorResponse(error=message)


def error_json_response(
    *,
    status_code: int,
    message: str,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Render ``message`` as the standard error body with ``status_code``."""

    return JSONResponse(
        status_code=status_code,
        content=build_error_response(message).model_dump(mode="json"),
        headers=dict(headers) if headers else None,
    )
