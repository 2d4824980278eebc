"""User account data access helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from storefront.db.base import connection
from storefront.models.user import UserProfile, UserRecord

_USER_COLUMNS = "id, email, username, role, created_at, password_hash"


def _record(row) -> UserRecord:  # type: ignore[no-untyped-def]
    m = row._mapping
    return UserRecord(
        id=int(m["id"]),
        email=str(m["email"]),
        username=str(m["username"] or ""),
        role=str(m["role"]),
        created_at=str(m["created_at"]),
        password_hash=str(m["password_hash"]),
    )


def get_user_by_email(email: str) -> Optional[UserRecord]:
    with connection() as conn:
        row = conn.execute(
            sql_text(f"SELECT {_USER_COLUMNS} FROM users WHERE email = :email"),
            {"email": email},
        ).fetchone()
    return _record(row) if row else None


def get_user_by_id(user_id: int) -> Optional[UserProfile]:
    with connection() as conn:
        row = conn.execute(
            sql_text(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :id"),
            {"id": int(user_id)},
        ).fetchone()
    return _record(row).profile() if row else None


def insert_user(
    conn: Connection,
    *,
    email: str,
    password_hash: str,
    username: str = "",
    role: str = "customer",
    user_id: int | None = None,
) -> int:
    params = {
        "email": email,
        "username": username,
        "password_hash": password_hash,
        "role": role,
        "created_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
    }
    if user_id is not None:
        params["id"] = int(user_id)
        conn.execute(
            sql_text(
                "INSERT INTO users (id, email, username, password_hash, role, created_at) "
                "VALUES (:id, :email, :username, :password_hash, :role, :created_at)"
            ),
            params,
        )
        return int(user_id)
    result = conn.execute(
        sql_text(
            "INSERT INTO users (email, username, password_hash, role, created_at) "
            "VALUES (:email, :username, :password_hash, :role, :created_at)"
        ),
        params,
    )
    return int(result.lastrowid)


__all__ = ["get_user_by_email", "get_user_by_id", "insert_user"]
