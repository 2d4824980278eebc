"""User data aggregation for exports.

Collects a user's profile, orders and reviews into one ExportSnapshot. Reads
are independent and lock-free, so a snapshot is a best-effort point-in-time
view. Any data-source failure aborts the whole aggregation: callers get
AggregationFailed, never a partially filled snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from storefront.logic import repository_orders, repository_reviews, repository_users
from storefront.logic.errors import AggregationFailed, NotFound
from storefront.models.export import ExportSnapshot
from storefront.models.order import Order, OrderLine
from storefront.models.review import Review
from storefront.models.user import UserProfile

logger = logging.getLogger(__name__)


def _order_from_row(row: Dict[str, Any]) -> Order:
    return Order(
        order_id=str(row["order_id"]),
        total_price=row["total_price"],
        bonus=int(row.get("bonus") or 0),
        eta=str(row.get("eta") or ""),
        products=[
            OrderLine(
                quantity=int(ln["quantity"]),
                id=int(ln["product_id"]),
                name=str(ln["product_name"]),
                price=ln["unit_price"],
                total=ln["line_total"],
                bonus=int(ln.get("bonus") or 0),
            )
            for ln in row.get("lines", [])
        ],
    )


def _review_from_row(row: Dict[str, Any]) -> Review:
    return Review(
        message=str(row["message"]),
        author=str(row["author"]),
        product_id=int(row["product_id"]),
        likes_count=int(row.get("likes_count") or 0),
        liked_by=list(row.get("liked_by") or []),
    )


class UserDataAggregator:
    def __init__(
        self,
        get_user: Callable[[int], Optional[UserProfile]] = repository_users.get_user_by_id,
        list_orders: Callable[[int], List[Dict[str, Any]]] = repository_orders.list_orders_for_user,
        list_reviews: Callable[[str], List[Dict[str, Any]]] = repository_reviews.list_reviews_by_author,
    ) -> None:
        self._get_user = get_user
        self._list_orders = list_orders
        self._list_reviews = list_reviews

    def aggregate(self, user_id: int) -> ExportSnapshot:
        try:
            profile = self._get_user(user_id)
            if profile is None:
                raise NotFound(f"User {user_id} not found.")
            orders = [_order_from_row(r) for r in self._list_orders(profile.id)]
            reviews = [_review_from_row(r) for r in self._list_reviews(profile.email)]
        except SQLAlchemyError as e:
            logger.error("aggregate.read_failed user_id=%s", user_id, exc_info=True)
            raise AggregationFailed() from e
        except PydanticValidationError as e:
            # Stored rows violate a snapshot invariant (e.g. totals disagree)
            logger.error("aggregate.inconsistent_data user_id=%s errors=%s", user_id, e.error_count())
            raise AggregationFailed() from e

        logger.info(
            "aggregate.done",
            extra={"user_id": profile.id, "orders": len(orders), "reviews": len(reviews)},
        )
        return ExportSnapshot(
            username=profile.username,
            email=profile.email,
            orders=orders,
            reviews=reviews,
        )


__all__ = ["UserDataAggregator"]
