"""Result envelopes returned to REST-style callers.

Success: ``{"status": "success", "payload": ..., **extra}``
Error:   ``{"status": "error", "message": ...}``
"""

from __future__ import annotations

from typing import Any

from storefront.domain.exceptions import EntityNotFoundError, ValidationError


def success(payload: Any, **extra: Any) -> dict[str, Any]:
    return {"status": "success", "payload": payload, **extra}


def error(message: str) -> dict[str, Any]:
    return {"status": "error", "message": message}


def http_status_for(exc: Exception) -> int:
    """Pick the HTTP status an adapter should answer with for *exc*.

    Store failures and anything unexpected are internal errors.
    """
    if isinstance(exc, EntityNotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 400
    return 500
