"""Product review data access helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from storefront.db.base import connection


def insert_review(conn: Connection, *, product_id: int, author: str, message: str) -> int:
    result = conn.execute(
        sql_text(
            "INSERT INTO reviews (product_id, author, message, likes_count, created_at) "
            "VALUES (:pid, :author, :message, 0, :created_at)"
        ),
        {
            "pid": int(product_id),
            "author": author,
            "message": message,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    return int(result.lastrowid)


def add_like(conn: Connection, review_id: int, liked_by: str) -> bool:
    """Record a like; returns False when `liked_by` already liked the review."""
    exists = conn.execute(
        sql_text("SELECT 1 FROM review_likes WHERE review_id = :rid AND liked_by = :who"),
        {"rid": int(review_id), "who": liked_by},
    ).fetchone()
    if exists:
        return False
    conn.execute(
        sql_text("INSERT INTO review_likes (review_id, liked_by) VALUES (:rid, :who)"),
        {"rid": int(review_id), "who": liked_by},
    )
    conn.execute(
        sql_text("UPDATE reviews SET likes_count = likes_count + 1 WHERE id = :rid"),
        {"rid": int(review_id)},
    )
    return True


def list_reviews_by_author(author: str) -> List[Dict[str, Any]]:
    """Return reviews written by `author` in creation order with their likers.

    `liked_by` is always a list, empty for reviews nobody liked.
    """
    with connection() as conn:
        reviews = conn.execute(
            sql_text(
                """
                SELECT id, product_id, author, message, likes_count
                FROM reviews
                WHERE author = :author
                ORDER BY id ASC
                """
            ),
            {"author": author},
        ).mappings().all()
        likes = conn.execute(
            sql_text(
                """
                SELECT rl.review_id, rl.liked_by
                FROM review_likes rl
                JOIN reviews r ON r.id = rl.review_id
                WHERE r.author = :author
                ORDER BY rl.id ASC
                """
            ),
            {"author": author},
        ).fetchall()

    likers: Dict[int, List[str]] = {}
    for review_id, liked_by in likes:
        likers.setdefault(int(review_id), []).append(str(liked_by))

    result: List[Dict[str, Any]] = []
    for r in reviews:
        row = dict(r)
        row["liked_by"] = likers.get(int(r["id"]), [])
        result.append(row)
    return result


__all__ = ["insert_review", "add_like", "list_reviews_by_author"]
