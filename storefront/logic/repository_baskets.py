"""Basket data access helpers.

Functions taking a `conn` run inside the caller's transaction; checkout
depends on that to read, order and empty a basket atomically.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from storefront.db.base import connection


def get_basket_owner(conn: Connection, basket_id: int) -> Optional[int]:
    row = conn.execute(
        sql_text("SELECT user_id FROM baskets WHERE id = :bid"),
        {"bid": int(basket_id)},
    ).fetchone()
    return int(row[0]) if row else None


def get_basket_id_for_user(user_id: int) -> Optional[int]:
    with connection() as conn:
        row = conn.execute(
            sql_text("SELECT id FROM baskets WHERE user_id = :uid ORDER BY id ASC LIMIT 1"),
            {"uid": int(user_id)},
        ).fetchone()
    return int(row[0]) if row else None


def list_basket_items(conn: Connection, basket_id: int) -> List[Dict]:
    """Return basket items joined with the current catalog entry, in insertion order."""
    rows = conn.execute(
        sql_text(
            """
            SELECT bi.id AS item_id,
                   bi.quantity AS quantity,
                   p.id AS product_id,
                   p.name AS name,
                   p.price AS price
            FROM basket_items bi
            JOIN products p ON p.id = bi.product_id
            WHERE bi.basket_id = :bid
            ORDER BY bi.id ASC
            """
        ),
        {"bid": int(basket_id)},
    ).mappings().all()
    return [dict(r) for r in rows]


def add_basket_item(conn: Connection, basket_id: int, product_id: int, quantity: int) -> None:
    conn.execute(
        sql_text(
            "INSERT INTO basket_items (basket_id, product_id, quantity) VALUES (:bid, :pid, :qty)"
        ),
        {"bid": int(basket_id), "pid": int(product_id), "qty": int(quantity)},
    )


def clear_basket(conn: Connection, basket_id: int) -> int:
    result = conn.execute(
        sql_text("DELETE FROM basket_items WHERE basket_id = :bid"),
        {"bid": int(basket_id)},
    )
    return int(result.rowcount or 0)


__all__ = [
    "get_basket_owner",
    "get_basket_id_for_user",
    "list_basket_items",
    "add_basket_item",
    "clear_basket",
]
