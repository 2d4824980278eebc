"""Account models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class UserProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    username: str = ""
    role: str = "customer"
    created_at: str = ""


class UserRecord(UserProfile):
    """Profile plus the stored password hash (never leaves the auth layer)."""

    password_hash: str

    def profile(self) -> UserProfile:
        return UserProfile(**self.model_dump(exclude={"password_hash"}))


__all__ = ["UserProfile", "UserRecord"]
