# shop/services/stock.py
# Остатки товаров: блокировка строк, проверка и атомарное списание.
import logging
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shop.core.errors import InsufficientStockError, NotFoundError
from shop.models.product import Product

logger = logging.getLogger(__name__)


def lock_products(db: Session, product_ids: Iterable[int]) -> dict[int, Product]:
    """
    Загружает товары с блокировкой строк (SELECT ... FOR UPDATE).

    Блокируем всегда по возрастанию id, чтобы две параллельные покупки
    не захватили одни и те же строки в разном порядке.
    """
    ids = sorted(set(product_ids))
    if not ids:
        return {}
    stmt = (
        select(Product)
        .where(Product.id.in_(ids))
        .order_by(Product.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    products = {p.id: p for p in db.scalars(stmt)}
    if len(products) != len(ids):
        raise NotFoundError("Product not found")
    return products


def check_available(product: Product, quantity: int) -> None:
    if product.stock_quantity is None:
        return
    remaining = product.stock_quantity - quantity
    if remaining < 0:
        logger.info(
            f"Insufficient stock for product {product.id}: "
            f"requested {quantity}, available {product.stock_quantity}"
        )
        raise InsufficientStockError()


def decrement(db: Session, product: Product, quantity: int) -> None:
    """
    Списывает quantity с остатка одним условным UPDATE.

    Условие stock_quantity >= quantity повторно проверяется базой, поэтому
    конкурентная транзакция, успевшая списать раньше, даёт rowcount == 0.
    """
    if product.stock_quantity is None:
        return
    result = db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InsufficientStockError()
    db.refresh(product, attribute_names=["stock_quantity"])
