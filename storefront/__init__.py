"""Storefront REST service with account data export.

Exposes the FastAPI application factory. Business logic lives in
`storefront/logic/` and route handlers in `storefront/routes/`.
"""

from __future__ import annotations

from storefront.main import create_app

__all__ = ["create_app"]
