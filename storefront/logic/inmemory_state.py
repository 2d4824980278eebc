"""Central in-memory state holders.

Single source of truth for process-local state shared by routes: the
authenticated-session map and the CAPTCHA challenge store. Everything else
lives in the database.
"""

from __future__ import annotations

from typing import Dict

from storefront.config import get_config
from storefront.logic.challenge import ChallengeStore
from storefront.models.user import UserProfile

# Bearer token -> profile of the user it was issued to
AUTHENTICATED_USERS: Dict[str, UserProfile] = {}

# Session token -> pending CAPTCHA challenge
CHALLENGES = ChallengeStore(ttl_seconds=get_config().captcha.ttl_seconds)


def reset_state() -> None:
    """Drop all sessions and pending challenges."""
    AUTHENTICATED_USERS.clear()
    CHALLENGES.clear()


__all__ = ["AUTHENTICATED_USERS", "CHALLENGES", "reset_state"]
