# shop/services/products.py
# Каталог: CRUD товаров продавца.
import logging

from sqlalchemy import delete, exists, select
from sqlalchemy.orm import Session

from shop.core.errors import ConflictError, InvalidRequestError
from shop.models.cart import CartItem
from shop.models.order import OrderItem
from shop.models.product import Product
from shop.models.user import User, UserRole
from shop.services.accounts import require_user

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "price", "image_url", "stock_quantity")


def _require_seller(db: Session, seller_id: int) -> User:
    seller = require_user(db, seller_id, "Seller not found")
    if seller.role != UserRole.SELLER:
        raise InvalidRequestError("Account is not a seller")
    return seller


def get_all_products(db: Session) -> list[Product]:
    return list(db.scalars(select(Product).order_by(Product.id)))


def get_products_by_seller(db: Session, seller_id: int) -> list[Product]:
    _require_seller(db, seller_id)
    return list(db.scalars(select(Product).where(Product.seller_id == seller_id).order_by(Product.id)))


def get_product(db: Session, product_id: int) -> Product | None:
    return db.get(Product, product_id)


def create_product(db: Session, seller_id: int, **fields) -> Product:
    seller = _require_seller(db, seller_id)
    product = Product(seller=seller, **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS})
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info(f"Seller {seller_id} created product {product.id}")
    return product


def update_product(db: Session, product_id: int, **fields) -> Product | None:
    product = db.get(Product, product_id)
    if product is None:
        return None
    for name in EDITABLE_FIELDS:
        if name not in fields:
            continue
        # name и price обязательны, null для них игнорируем
        if fields[name] is None and name in ("name", "price"):
            continue
        setattr(product, name, fields[name])
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product_id: int) -> bool:
    product = db.get(Product, product_id)
    if product is None:
        return False
    if db.scalar(select(exists().where(OrderItem.product_id == product_id))):
        raise ConflictError("Product has order history and cannot be deleted")
    db.execute(delete(CartItem).where(CartItem.product_id == product_id))
    db.delete(product)
    db.commit()
    logger.info(f"Product {product_id} deleted")
    return True
