"""Order data access helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection

from storefront.db.base import connection


def insert_order(
    conn: Connection,
    *,
    order_id: str,
    user_id: int,
    total_price: str,
    bonus: int,
    eta: str,
    lines: Iterable[Dict[str, Any]],
) -> int:
    """Insert an order and its lines; returns the order's row id.

    Each line dict carries product_id, product_name, unit_price, quantity,
    line_total and bonus. Amounts are passed as decimal strings.
    """
    result = conn.execute(
        sql_text(
            "INSERT INTO orders (order_id, user_id, total_price, bonus, eta, created_at) "
            "VALUES (:order_id, :user_id, :total_price, :bonus, :eta, :created_at)"
        ),
        {
            "order_id": order_id,
            "user_id": int(user_id),
            "total_price": total_price,
            "bonus": int(bonus),
            "eta": eta,
            "created_at": datetime.now(timezone.utc).isoformat(),
        },
    )
    order_pk = int(result.lastrowid)
    for line in lines:
        conn.execute(
            sql_text(
                "INSERT INTO order_lines "
                "(order_pk, product_id, product_name, unit_price, quantity, line_total, bonus) "
                "VALUES (:order_pk, :product_id, :product_name, :unit_price, :quantity, :line_total, :bonus)"
            ),
            {"order_pk": order_pk, **line},
        )
    return order_pk


def list_orders_for_user(user_id: int) -> List[Dict[str, Any]]:
    """Return the user's orders in creation order, each with a `lines` list.

    Lines keep insertion order and carry the name/price captured at checkout.
    Both queries run under one locked connection, so an order is never seen
    without all of its lines.
    """
    with connection() as conn:
        orders = conn.execute(
            sql_text(
                """
                SELECT id, order_id, total_price, bonus, eta
                FROM orders
                WHERE user_id = :uid
                ORDER BY id ASC
                """
            ),
            {"uid": int(user_id)},
        ).mappings().all()
        lines = conn.execute(
            sql_text(
                """
                SELECT ol.order_pk, ol.product_id, ol.product_name, ol.unit_price,
                       ol.quantity, ol.line_total, ol.bonus
                FROM order_lines ol
                JOIN orders o ON o.id = ol.order_pk
                WHERE o.user_id = :uid
                ORDER BY ol.order_pk ASC, ol.id ASC
                """
            ),
            {"uid": int(user_id)},
        ).mappings().all()

    by_order: Dict[int, List[Dict[str, Any]]] = {}
    for ln in lines:
        by_order.setdefault(int(ln["order_pk"]), []).append(dict(ln))

    result: List[Dict[str, Any]] = []
    for o in orders:
        row = dict(o)
        row["lines"] = by_order.get(int(o["id"]), [])
        result.append(row)
    return result


__all__ = ["insert_order", "list_orders_for_user"]
