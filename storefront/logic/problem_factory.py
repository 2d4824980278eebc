"""Centralised construction of problem+json payloads.

Route modules never assemble problem dicts themselves; they raise a
StorefrontError and the exception handler calls into this module.
"""

from __future__ import annotations

from typing import Dict
import logging

from storefront.logic.errors import StorefrontError


logger = logging.getLogger(__name__)


def problem_from_error(exc: StorefrontError) -> Dict[str, object]:
    """Return the RFC7807 body for a domain error."""
    problem = {
        "title": exc.title,
        "status": int(exc.status),
        "detail": exc.detail,
        "message": exc.detail,
        "code": exc.code,
    }
    logger.info("error_handler.handle", extra={"code": exc.code, "status": exc.status})
    return problem


def problem_internal() -> Dict[str, object]:
    return {"title": "Internal Server Error", "status": 500, "code": "INTERNAL_ERROR"}


__all__ = ["problem_from_error", "problem_internal"]
