"""Password hashing and bearer-token sessions.

Passwords are hashed with Argon2 through passlib. Bearer tokens are signed
JWTs; a token is only honoured while it is also registered in the in-memory
authenticated-session map, so logging out (or resetting state) revokes it
even before `exp`.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from storefront.config import get_config
from storefront.logic import inmemory_state
from storefront.logic.errors import Unauthorized
from storefront.models.user import UserProfile

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_ISSUER = "storefront"

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__memory_cost=19456,
    argon2__time_cost=2,
    argon2__parallelism=1,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password)
    except (ValueError, TypeError):
        # Malformed stored hash counts as a failed login, not a server error
        logger.warning("password_hash_unreadable", exc_info=True)
        return False


@dataclass(frozen=True)
class Session:
    token: str
    user: UserProfile


def issue_token(user: UserProfile) -> str:
    """Sign a token for `user` and register it as an active session."""
    cfg = get_config().auth
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "iss": JWT_ISSUER,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=cfg.token_ttl_minutes)).timestamp()),
        "jti": str(uuid.uuid4()),
    }
    token = jwt.encode(claims, cfg.jwt_secret, algorithm=JWT_ALGORITHM)
    inmemory_state.AUTHENTICATED_USERS[token] = user
    logger.info("auth.session.issued", extra={"user_id": user.id})
    return token


def resolve_token(token: str | None) -> Session:
    """Return the session bound to `token` or raise Unauthorized."""
    if not token:
        raise Unauthorized()
    try:
        claims = jwt.decode(
            token,
            get_config().auth.jwt_secret,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
        )
    except InvalidTokenError as e:
        logger.info("auth.token.rejected reason=%s", type(e).__name__)
        raise Unauthorized() from e
    user = inmemory_state.AUTHENTICATED_USERS.get(token)
    if user is None or str(user.id) != str(claims.get("sub")):
        logger.info("auth.token.unknown_session")
        raise Unauthorized()
    return Session(token=token, user=user)


def revoke_token(token: str) -> None:
    inmemory_state.AUTHENTICATED_USERS.pop(token, None)
    inmemory_state.CHALLENGES.discard(token)


__all__ = [
    "Session",
    "hash_password",
    "verify_password",
    "issue_token",
    "resolve_token",
    "revoke_token",
]
