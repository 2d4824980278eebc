"""APIRouter registration for the storefront REST API."""

from __future__ import annotations

from fastapi import APIRouter

from storefront.routes.auth import router as auth_router
from storefront.routes.basket import router as basket_router
from storefront.routes.captcha import router as captcha_router
from storefront.routes.data_export import router as data_export_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(captcha_router)
api_router.include_router(basket_router)
api_router.include_router(data_export_router)

__all__ = ["api_router"]
