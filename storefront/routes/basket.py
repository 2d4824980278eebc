"""Basket view and checkout endpoints."""

from __future__ import annotations

from fastapi import APIRouter
import logging

from storefront.db.base import connection
from storefront.guards.session import SessionDep
from storefront.logic import repository_baskets
from storefront.logic.checkout import place_order
from storefront.logic.errors import BasketAccessDenied, NotFound
from storefront.models.money import money_json, to_money


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get(
    "/rest/basket/{basket_id}",
    summary="Show a basket with its products",
    operation_id="getBasket",
    tags=["Basket"],
)
def get_basket(basket_id: int, session: SessionDep) -> dict:
    with connection() as conn:
        owner = repository_baskets.get_basket_owner(conn, basket_id)
        if owner is None:
            raise NotFound(f"Basket {basket_id} not found.")
        if owner != session.user.id:
            raise BasketAccessDenied()
        items = repository_baskets.list_basket_items(conn, basket_id)
    products = [
        {
            "id": int(i["product_id"]),
            "name": str(i["name"]),
            "price": money_json(to_money(i["price"])),
            "quantity": int(i["quantity"]),
        }
        for i in items
    ]
    return {"data": {"id": basket_id, "UserId": owner, "Products": products}}


@router.post(
    "/rest/basket/{basket_id}/checkout",
    summary="Place an order for the basket's contents",
    operation_id="checkoutBasket",
    tags=["Basket"],
)
def checkout(basket_id: int, session: SessionDep) -> dict:
    order_id = place_order(basket_id, session.user)
    logger.info("checkout.success", extra={"basket_id": basket_id, "user_id": session.user.id})
    return {"orderConfirmation": order_id}


__all__ = ["router"]
