# shop/services/orders.py
# Чтение заказов покупателя и продавца, статистика продаж продавца.
from collections import defaultdict
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from shop.core.errors import NotFoundError
from shop.models.order import Order, OrderItem
from shop.models.user import User
from shop.services.accounts import require_user


def get_orders_by_user(db: Session, user_id: int) -> list[Order]:
    require_user(db, user_id)
    stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
    return list(db.scalars(stmt))


def get_order_for_user(db: Session, order_id: int, user_id: int) -> Order:
    require_user(db, user_id)
    order = db.get(Order, order_id)
    if order is None or order.user_id != user_id:
        raise NotFoundError("Order not found")
    return order


def _seller_items(db: Session, seller_id: int):
    require_user(db, seller_id, "Seller not found")
    stmt = (
        select(OrderItem, Order, User)
        .join(Order, OrderItem.order_id == Order.id)
        .join(User, Order.user_id == User.id)
        .where(OrderItem.seller_id == seller_id)
        .order_by(Order.created_at.desc(), OrderItem.id)
    )
    return db.execute(stmt).all()


def get_orders_by_seller(db: Session, seller_id: int) -> list[dict]:
    """Позиции заказов с товарами продавца вместе с данными заказа и покупателя."""
    rows = []
    for item, order, buyer in _seller_items(db, seller_id):
        rows.append({
            "order_id": order.id,
            "order_status": order.status,
            "order_created_at": order.created_at,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": item.quantity,
            "price": item.price,
            "buyer_id": buyer.id,
            "buyer_name": buyer.username,
        })
    return rows


def compute_seller_stats(items: list[OrderItem]) -> dict:
    total_revenue = sum((Decimal(item.price) * item.quantity for item in items), Decimal("0"))
    product_sales: dict[str, int] = defaultdict(int)
    for item in items:
        product_sales[item.product_name] += item.quantity
    return {
        "total_revenue": total_revenue,
        "total_orders": len({item.order_id for item in items}),
        "total_units": sum(item.quantity for item in items),
        "product_sales": dict(product_sales),
    }


def get_seller_stats(db: Session, seller_id: int) -> dict:
    return compute_seller_stats([item for item, _, _ in _seller_items(db, seller_id)])
