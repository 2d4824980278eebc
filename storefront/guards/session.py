"""Bearer-session guard dependencies.

`require_session` rejects the request with 401 when no valid bearer token is
present; `optional_session` returns None instead, for routes such as whoami
that answer anonymous callers too.
"""

from __future__ import annotations

from typing import Annotated, Optional
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.logic.errors import Unauthorized
from storefront.logic.security import Session, resolve_token


logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def require_session(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
) -> Session:
    if credentials is None or (credentials.scheme or "").lower() != "bearer":
        logger.info("session.guard.missing_bearer")
        raise Unauthorized()
    return resolve_token(credentials.credentials)


def optional_session(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
) -> Optional[Session]:
    if credentials is None:
        return None
    try:
        return resolve_token(credentials.credentials)
    except Unauthorized:
        return None


SessionDep = Annotated[Session, Depends(require_session)]
OptionalSessionDep = Annotated[Optional[Session], Depends(optional_session)]

__all__ = ["require_session", "optional_session", "SessionDep", "OptionalSessionDep"]
