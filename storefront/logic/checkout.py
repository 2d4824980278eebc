"""Basket checkout.

Turns a basket into an order inside one transaction. Product name and price
are copied onto each order line at this point, so later catalog edits never
change what an order (or a data export) reports.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List

from storefront.db.base import transaction
from storefront.logic import repository_baskets, repository_orders
from storefront.logic.errors import BasketAccessDenied, BasketEmpty, NotFound
from storefront.logic.events import ORDER_PLACED, publish
from storefront.models.money import to_money
from storefront.models.user import UserProfile

logger = logging.getLogger(__name__)


def make_order_id(email: str) -> str:
    """`<first 4 hex of the email digest>-<16 random hex>`."""
    prefix = hashlib.sha256(email.encode("utf-8")).hexdigest()[:4]
    return f"{prefix}-{secrets.token_hex(8)}"


def line_bonus(price: Decimal, quantity: int) -> int:
    """Bonus points: price / 10 rounded half-up, times quantity."""
    return int((price / Decimal(10)).quantize(Decimal(1), rounding=ROUND_HALF_UP)) * int(quantity)


def build_lines(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    lines: List[Dict[str, Any]] = []
    for item in items:
        price = to_money(item["price"])
        quantity = int(item["quantity"])
        lines.append(
            {
                "product_id": int(item["product_id"]),
                "product_name": str(item["name"]),
                "unit_price": str(price),
                "quantity": quantity,
                "line_total": str(to_money(price * quantity)),
                "bonus": line_bonus(price, quantity),
            }
        )
    return lines


def place_order(basket_id: int, user: UserProfile) -> str:
    """Check out `basket_id` for `user` and return the new order id."""
    with transaction() as conn:
        owner = repository_baskets.get_basket_owner(conn, basket_id)
        if owner is None:
            raise NotFound(f"Basket {basket_id} not found.")
        if owner != user.id:
            logger.info("checkout.basket_access_denied", extra={"basket_id": basket_id, "user_id": user.id})
            raise BasketAccessDenied()
        items = repository_baskets.list_basket_items(conn, basket_id)
        if not items:
            raise BasketEmpty()

        lines = build_lines(items)
        total = to_money(sum((Decimal(ln["line_total"]) for ln in lines), Decimal("0")))
        bonus = sum(ln["bonus"] for ln in lines)
        order_id = make_order_id(user.email)
        eta = str(1 + secrets.randbelow(5))

        repository_orders.insert_order(
            conn,
            order_id=order_id,
            user_id=user.id,
            total_price=str(total),
            bonus=bonus,
            eta=eta,
            lines=lines,
        )
        repository_baskets.clear_basket(conn, basket_id)

    publish(ORDER_PLACED, {"order_id": order_id, "user_id": user.id, "total_price": str(total), "bonus": bonus})
    return order_id


__all__ = ["make_order_id", "line_bonus", "build_lines", "place_order"]
