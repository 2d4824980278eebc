"""Order snapshot models as exported to the customer."""

from __future__ import annotations

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from storefront.models.money import money_json, to_money


class OrderLine(BaseModel):
    """One purchased product, with name and price copied at checkout time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    quantity: int = Field(gt=0)
    id: int
    name: str
    price: Decimal = Field(ge=0)
    total: Decimal
    bonus: int = Field(default=0, ge=0)

    @field_validator("price", "total", mode="before")
    @classmethod
    def _money(cls, v: object) -> Decimal:
        return to_money(v)

    @model_validator(mode="after")
    def _total_matches_quantity_times_price(self) -> "OrderLine":
        if self.total != to_money(self.price * self.quantity):
            raise ValueError(f"line total {self.total} != {self.quantity} x {self.price}")
        return self

    @field_serializer("price", "total", when_used="json")
    def _money_out(self, v: Decimal) -> float:
        return money_json(v)


class Order(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_id: str = Field(alias="orderId")
    total_price: Decimal = Field(alias="totalPrice")
    products: List[OrderLine] = Field(default_factory=list)
    bonus: int = Field(default=0, ge=0)
    eta: str = ""

    @field_validator("total_price", mode="before")
    @classmethod
    def _money(cls, v: object) -> Decimal:
        return to_money(v)

    @model_validator(mode="after")
    def _total_is_sum_of_lines(self) -> "Order":
        expected = to_money(sum((line.total for line in self.products), Decimal("0")))
        if self.total_price != expected:
            raise ValueError(f"order total {self.total_price} != sum of lines {expected}")
        return self

    @field_serializer("total_price", when_used="json")
    def _money_out(self, v: Decimal) -> float:
        return money_json(v)


__all__ = ["OrderLine", "Order"]
