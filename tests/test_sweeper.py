"""Order lifecycle sweeper: SHIPPED -> RECEIVED after the dwell time."""

import time
from datetime import timedelta

from conftest import make_product
from shop.core.clock import utcnow
from shop.models.order import Order, OrderItem, OrderStatus
from shop.services.sweeper import OrderSweeper, receive_shipped_orders


def _shipped_order(db, user, product, shipped_ago):
    shipped_at = utcnow() - shipped_ago
    order = Order(user_id=user.id, status=OrderStatus.SHIPPED, created_at=shipped_at, shipped_at=shipped_at)
    order.items.append(OrderItem(product_id=product.id, seller_id=product.seller_id, quantity=1, price=product.price))
    db.add(order)
    db.commit()
    return order


def test_old_order_is_received_recent_one_untouched(db, customer, seller):
    product = make_product(db, seller)
    old = _shipped_order(db, customer, product, timedelta(minutes=11))
    recent = _shipped_order(db, customer, product, timedelta(minutes=1))
    now = utcnow()

    assert receive_shipped_orders(db, now=now) == 1

    db.refresh(old)
    db.refresh(recent)
    assert old.status == OrderStatus.RECEIVED
    assert old.received_at == now
    assert recent.status == OrderStatus.SHIPPED
    assert recent.received_at is None


def test_second_pass_does_not_touch_received_orders(db, customer, seller):
    product = make_product(db, seller)
    order = _shipped_order(db, customer, product, timedelta(hours=1))
    first = utcnow()

    assert receive_shipped_orders(db, now=first) == 1
    assert receive_shipped_orders(db, now=first + timedelta(minutes=5)) == 0

    db.refresh(order)
    assert order.received_at == first


def test_custom_dwell(db, customer, seller):
    product = make_product(db, seller)
    _shipped_order(db, customer, product, timedelta(minutes=3))

    assert receive_shipped_orders(db, dwell=timedelta(minutes=10)) == 0
    assert receive_shipped_orders(db, dwell=timedelta(minutes=2)) == 1


class TestOrderSweeper:
    def test_run_once(self, session_factory, db, customer, seller):
        product = make_product(db, seller)
        order = _shipped_order(db, customer, product, timedelta(minutes=30))

        sweeper = OrderSweeper(session_factory, interval=60)
        assert sweeper.run_once() == 1

        db.refresh(order)
        assert order.status == OrderStatus.RECEIVED

    def test_overlapping_run_is_skipped(self, session_factory, db, customer, seller):
        product = make_product(db, seller)
        order = _shipped_order(db, customer, product, timedelta(minutes=30))
        sweeper = OrderSweeper(session_factory, interval=60)

        with sweeper._run_lock:
            assert sweeper.run_once() == 0

        db.refresh(order)
        assert order.status == OrderStatus.SHIPPED

    def test_background_thread_start_stop(self, session_factory, db, customer, seller):
        product = make_product(db, seller)
        order = _shipped_order(db, customer, product, timedelta(minutes=30))
        sweeper = OrderSweeper(session_factory, interval=0.05)

        sweeper.start()
        try:
            assert sweeper.running
            deadline = time.monotonic() + 5
            while time.monotonic() < deadline:
                db.refresh(order)
                if order.status == OrderStatus.RECEIVED:
                    break
                time.sleep(0.05)
        finally:
            sweeper.stop()

        assert not sweeper.running
        assert order.status == OrderStatus.RECEIVED

    def test_failed_run_does_not_kill_thread(self):
        calls = []

        def broken_factory():
            calls.append(1)
            raise RuntimeError("db unavailable")

        sweeper = OrderSweeper(broken_factory, interval=0.01)
        sweeper.start()
        try:
            deadline = time.monotonic() + 5
            while len(calls) < 3 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert sweeper.running
        finally:
            sweeper.stop()
        assert len(calls) >= 3
