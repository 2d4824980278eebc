"""Functional tests for ExportFormatter."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest

from storefront.logic.aggregator import UserDataAggregator
from storefront.logic.checkout import place_order
from storefront.logic.errors import UnsupportedFormat
from storefront.logic.export_formatter import CONFIRMATION, FORMAT_JSON, ExportFormatter
from storefront.logic.repository_users import get_user_by_id
from storefront.models.export import ExportSnapshot
from storefront.models.order import Order, OrderLine
from storefront.models.review import Review


def _snapshot() -> ExportSnapshot:
    line = OrderLine(quantity=2, id=4, name="Raspberry Juice (1000ml)", price="4.99", total="9.98", bonus=0)
    order = Order(order_id="5267-f9cd5882f54c75a3", total_price="9.98", products=[line], bonus=0, eta="2")
    review = Review(message="Fresh out of a replicator.", author="jim@juice-sh.op", product_id=22)
    return ExportSnapshot(username="", email="jim@juice-sh.op", orders=[order], reviews=[review])


def test_json_payload_uses_exported_key_names() -> None:
    payload = ExportFormatter().format(_snapshot(), FORMAT_JSON)

    assert payload.format_code == "1"
    assert payload.media_type == "application/json"
    assert payload.confirmation == CONFIRMATION
    data = json.loads(payload.content)
    assert set(data) == {"username", "email", "orders", "reviews"}
    order = data["orders"][0]
    assert set(order) == {"orderId", "totalPrice", "products", "bonus", "eta"}
    assert order["totalPrice"] == 9.98
    assert order["products"][0] == {
        "quantity": 2,
        "id": 4,
        "name": "Raspberry Juice (1000ml)",
        "price": 4.99,
        "total": 9.98,
        "bonus": 0,
    }
    assert data["reviews"][0] == {
        "message": "Fresh out of a replicator.",
        "author": "jim@juice-sh.op",
        "productId": 22,
        "likesCount": 0,
        "likedBy": [],
    }


def test_json_payload_is_pretty_printed() -> None:
    content = ExportFormatter().format(_snapshot(), "1").content
    assert content.startswith("{\n  \"username\"")


def test_parse_returns_equal_snapshot() -> None:
    formatter = ExportFormatter()
    snapshot = _snapshot()

    parsed = formatter.parse(formatter.format(snapshot, FORMAT_JSON))

    assert parsed == snapshot
    assert parsed.orders[0].total_price == Decimal("9.98")


def test_seeded_users_survive_format_and_parse() -> None:
    amy = get_user_by_id(5)
    assert amy is not None
    place_order(4, amy)
    aggregator = UserDataAggregator()
    formatter = ExportFormatter()

    for user_id in range(1, 6):
        snapshot = aggregator.aggregate(user_id)
        assert formatter.parse(formatter.format(snapshot, FORMAT_JSON)) == snapshot


def test_parse_accepts_raw_content() -> None:
    formatter = ExportFormatter()
    empty = ExportSnapshot(username="bkimminich", email="bjoern.kimminich@gmail.com")

    content = formatter.format(empty, FORMAT_JSON).content

    assert json.loads(content) == {
        "username": "bkimminich",
        "email": "bjoern.kimminich@gmail.com",
        "orders": [],
        "reviews": [],
    }
    assert formatter.parse(content, FORMAT_JSON) == empty


def test_non_ascii_text_is_kept_verbatim() -> None:
    snapshot = ExportSnapshot(
        username="björn",
        email="bjoern.kimminich@gmail.com",
        reviews=[Review(message="Schön grün 🍏", author="bjoern.kimminich@gmail.com", product_id=22)],
    )
    content = ExportFormatter().format(snapshot, FORMAT_JSON).content

    assert "Schön grün 🍏" in content
    assert ExportFormatter().parse(content) == snapshot


@pytest.mark.parametrize("code", ["2", "0", "", "json", "csv"])
def test_unsupported_codes_are_rejected(code: str) -> None:
    formatter = ExportFormatter()
    with pytest.raises(UnsupportedFormat) as exc:
        formatter.format(_snapshot(), code)
    assert exc.value.status == 400
    with pytest.raises(UnsupportedFormat):
        formatter.ensure_supported(code)
