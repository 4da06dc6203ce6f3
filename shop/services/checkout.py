# shop/services/checkout.py
# Оформление заказа: перенос позиций (корзины или разовой покупки) в Order
# со списанием остатков. Всё выполняется одной транзакцией.
import logging
from collections import defaultdict
from typing import NamedTuple

from sqlalchemy.orm import Session

from shop.core.clock import utcnow
from shop.core.errors import InvalidRequestError
from shop.models.order import Order, OrderItem, OrderStatus
from shop.services import stock
from shop.services.accounts import require_user
from shop.services.cart import delete_checked_out, list_lines
from shop.services.notifications import Notifier

logger = logging.getLogger(__name__)


class ManifestLine(NamedTuple):
    product_id: int
    quantity: int
    cart_item_id: int | None = None


def _apply_manifest(db: Session, user_id: int, manifest: list[ManifestLine], from_cart: bool) -> Order:
    user = require_user(db, user_id)
    products = stock.lock_products(db, (line.product_id for line in manifest))

    # Сначала проверяем весь манифест, затем списываем
    demand: dict[int, int] = defaultdict(int)
    for line in manifest:
        demand[line.product_id] += line.quantity
    for product_id, quantity in demand.items():
        stock.check_available(products[product_id], quantity)
    for product_id, quantity in demand.items():
        stock.decrement(db, products[product_id], quantity)

    now = utcnow()
    order = Order(user=user, status=OrderStatus.SHIPPED, created_at=now, shipped_at=now)
    for line in manifest:
        product = products[line.product_id]
        order.items.append(
            OrderItem(
                product=product,
                seller_id=product.seller_id,
                quantity=line.quantity,
                price=product.price,
            )
        )
    db.add(order)

    if from_cart:
        delete_checked_out(db, [(line.cart_item_id, line.quantity) for line in manifest])

    db.flush()
    return order


def _place(db: Session, user_id: int, manifest: list[ManifestLine], from_cart: bool, notifier: Notifier | None) -> Order:
    try:
        order = _apply_manifest(db, user_id, manifest, from_cart)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Order {order.id} placed by user {user_id} with {len(order.items)} item(s)")

    if notifier is not None:
        try:
            notifier.order_placed(order)
        except Exception as e:
            logger.error(f"Failed to send confirmation for order {order.id}: {e}", exc_info=True)
    return order


def checkout_cart(db: Session, user_id: int, notifier: Notifier | None = None) -> Order:
    """Оформляет все строки корзины пользователя и удаляет их из корзины."""
    require_user(db, user_id)
    try:
        # Строки корзины блокируются до конца транзакции оформления
        lines = list_lines(db, user_id, lock=True)
        if not lines:
            raise InvalidRequestError("Cart is empty")
    except Exception:
        db.rollback()
        raise
    manifest = [ManifestLine(line.product_id, line.quantity, line.id) for line in lines]
    return _place(db, user_id, manifest, from_cart=True, notifier=notifier)


def purchase_single(
    db: Session,
    user_id: int,
    product_id: int,
    quantity: int = 1,
    notifier: Notifier | None = None,
) -> Order:
    """Покупка одного товара в обход корзины."""
    if quantity is None or quantity <= 0:
        raise InvalidRequestError("Quantity must be positive")
    return _place(db, user_id, [ManifestLine(product_id, quantity)], from_cart=False, notifier=notifier)
