"""Image CAPTCHA endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from storefront.guards.session import SessionDep
from storefront.logic.captcha import issue_captcha
from storefront.models.auth import ImageCaptcha


router = APIRouter()


@router.get(
    "/rest/image-captcha",
    summary="Issue an image CAPTCHA for the current session",
    operation_id="getImageCaptcha",
    tags=["Captcha"],
    response_model=ImageCaptcha,
)
def image_captcha(session: SessionDep) -> ImageCaptcha:
    return issue_captcha(session)


__all__ = ["router"]
