"""Order queries and seller statistics."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from conftest import make_product, make_user
from shop.core.errors import NotFoundError
from shop.models.user import UserRole
from shop.services import checkout, orders


def test_stats_from_items():
    items = [
        SimpleNamespace(order_id=1, product_name="A", quantity=3, price=Decimal("10")),
        SimpleNamespace(order_id=2, product_name="A", quantity=2, price=Decimal("10")),
        SimpleNamespace(order_id=2, product_name="B", quantity=1, price=Decimal("5")),
    ]

    stats = orders.compute_seller_stats(items)

    assert stats["total_revenue"] == Decimal("55")
    assert stats["total_orders"] == 2
    assert stats["total_units"] == 6
    assert stats["product_sales"] == {"A": 5, "B": 1}


def test_stats_without_sales():
    assert orders.compute_seller_stats([]) == {
        "total_revenue": Decimal("0"),
        "total_orders": 0,
        "total_units": 0,
        "product_sales": {},
    }


def test_seller_stats_only_count_own_items(db, customer, seller):
    other_seller = make_user(db, username="other", role=UserRole.SELLER)
    a = make_product(db, seller, name="A", price="10.00")
    b = make_product(db, seller, name="B", price="5.00")
    c = make_product(db, other_seller, name="C", price="99.00")
    checkout.purchase_single(db, customer.id, a.id, 3)
    checkout.purchase_single(db, customer.id, a.id, 2)
    checkout.purchase_single(db, customer.id, b.id, 1)
    checkout.purchase_single(db, customer.id, c.id, 1)

    stats = orders.get_seller_stats(db, seller.id)

    assert stats["total_revenue"] == Decimal("55.00")
    assert stats["total_orders"] == 3
    assert stats["total_units"] == 6
    assert stats["product_sales"] == {"A": 5, "B": 1}


def test_seller_stats_unknown_seller(db):
    with pytest.raises(NotFoundError, match="Seller not found"):
        orders.get_seller_stats(db, 77)


def test_orders_by_seller_rows(db, customer, seller):
    product = make_product(db, seller, name="Lamp", price="12.50")
    order = checkout.purchase_single(db, customer.id, product.id, 2)

    rows = orders.get_orders_by_seller(db, seller.id)

    assert len(rows) == 1
    row = rows[0]
    assert row["order_id"] == order.id
    assert row["product_name"] == "Lamp"
    assert row["buyer_id"] == customer.id
    assert row["buyer_name"] == "customer"
    assert row["price"] == Decimal("12.50")


def test_order_for_user_checks_owner(db, customer, seller):
    intruder = make_user(db, username="intruder")
    product = make_product(db, seller)
    order = checkout.purchase_single(db, customer.id, product.id, 1)

    assert orders.get_order_for_user(db, order.id, customer.id).id == order.id
    with pytest.raises(NotFoundError, match="Order not found"):
        orders.get_order_for_user(db, order.id, intruder.id)


def test_orders_by_user(db, customer, seller):
    product = make_product(db, seller)
    first = checkout.purchase_single(db, customer.id, product.id, 1)
    second = checkout.purchase_single(db, customer.id, product.id, 1)

    assert {o.id for o in orders.get_orders_by_user(db, customer.id)} == {first.id, second.id}
