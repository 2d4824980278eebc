"""Product catalog data access helpers."""

from __future__ import annotations

from sqlalchemy import text as sql_text
from sqlalchemy.engine import Connection


def upsert_product(conn: Connection, *, product_id: int, name: str, price: str, description: str = "") -> None:
    exists = conn.execute(sql_text("SELECT 1 FROM products WHERE id = :id"), {"id": int(product_id)}).fetchone()
    params = {"id": int(product_id), "name": name, "price": price, "description": description}
    if exists:
        conn.execute(
            sql_text("UPDATE products SET name = :name, price = :price, description = :description WHERE id = :id"),
            params,
        )
    else:
        conn.execute(
            sql_text("INSERT INTO products (id, name, description, price) VALUES (:id, :name, :description, :price)"),
            params,
        )


__all__ = ["upsert_product"]
