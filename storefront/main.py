from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from storefront.config import get_config
from storefront.db.base import connection, get_engine
from storefront.db.migrations_runner import apply_migrations
from storefront.db.seed import seed_database
from storefront.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_storefront_error,
    handle_unexpected_error,
)
from storefront.http.request_id import RequestIdMiddleware
from storefront.logging_setup import configure_logging
from storefront.logic.errors import StorefrontError
from storefront.routes import api_router

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def bootstrap_database() -> None:
    """Apply pending migrations and seed an empty database.

    Runs synchronously inside create_app() so the in-memory SQLite database
    exists before the first request, with or without a lifespan.
    """
    engine = get_engine()
    try:
        applied = apply_migrations(engine)
    except SQLAlchemyError:
        logger.error("Failed to apply migrations at startup", exc_info=True)
        raise
    if applied:
        logger.info("startup_migrations_applied count=%s", len(applied))
    if _flag("SEED_DATABASE", "1"):
        seed_database(engine)


def create_app(enable_test_routes: bool | None = None) -> FastAPI:
    configure_logging()
    cfg = get_config()
    app = FastAPI(title=f"{cfg.application.name} REST API")

    app.add_exception_handler(StorefrontError, handle_storefront_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=["X-Request-Id"],
    )

    if _flag("AUTO_APPLY_MIGRATIONS", "1"):
        bootstrap_database()
    else:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")

    app.include_router(api_router)

    if enable_test_routes is None:
        enable_test_routes = _flag("ENABLE_TEST_ROUTES", "0")
    if enable_test_routes:
        from storefront.routes.test_support import router as test_support_router

        app.include_router(test_support_router)
        logger.info("test_support_routes_enabled")

    @app.get("/health", include_in_schema=False)
    def health() -> dict:
        try:
            with connection() as conn:
                conn.execute(sql_text("SELECT 1"))
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": type(e).__name__}

    return app


# Intentionally do not instantiate the app at import time; run with
# `uvicorn --factory storefront.main:create_app`.
