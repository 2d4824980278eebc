"""Login and session introspection endpoints."""

from __future__ import annotations

from fastapi import APIRouter
import logging

from storefront.guards.session import OptionalSessionDep, SessionDep
from storefront.logic.errors import AuthenticationFailed
from storefront.logic.repository_baskets import get_basket_id_for_user
from storefront.logic.repository_users import get_user_by_email
from storefront.logic.security import issue_token, revoke_token, verify_password
from storefront.models.auth import Authentication, LoginRequest, LoginResponse


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/rest/user/login",
    summary="Log in with e-mail and password",
    operation_id="login",
    tags=["Authentication"],
    response_model=LoginResponse,
)
def login(body: LoginRequest) -> LoginResponse:
    record = get_user_by_email(body.email.strip())
    if record is None or not verify_password(body.password, record.password_hash):
        # Same failure for unknown e-mail and wrong password
        logger.info("auth.login.failed")
        raise AuthenticationFailed()
    profile = record.profile()
    token = issue_token(profile)
    logger.info("auth.login.success", extra={"user_id": profile.id})
    return LoginResponse(
        authentication=Authentication(
            token=token,
            bid=get_basket_id_for_user(profile.id),
            umail=profile.email,
        )
    )


@router.get(
    "/rest/user/whoami",
    summary="Return the user bound to the bearer token",
    operation_id="whoami",
    tags=["Authentication"],
)
def whoami(session: OptionalSessionDep) -> dict:
    if session is None:
        return {"user": {}}
    user = session.user
    return {"user": {"id": user.id, "email": user.email, "username": user.username}}


@router.post(
    "/rest/user/logout",
    summary="Revoke the bearer token",
    operation_id="logout",
    tags=["Authentication"],
    status_code=204,
)
def logout(session: SessionDep) -> None:
    revoke_token(session.token)
    logger.info("auth.logout", extra={"user_id": session.user.id})


__all__ = ["router"]
