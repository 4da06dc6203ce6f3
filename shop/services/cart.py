# shop/services/cart.py
# Корзина: строки (user, product, quantity), слияние количеств при добавлении.
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shop.core.errors import ConflictError, InvalidRequestError, NotFoundError
from shop.models.cart import CartItem
from shop.models.product import Product
from shop.services.accounts import require_user

logger = logging.getLogger(__name__)


def list_lines(db: Session, user_id: int, lock: bool = False) -> list[CartItem]:
    stmt = select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.id)
    if lock:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    return list(db.scalars(stmt))


def get_cart(db: Session, user_id: int) -> list[CartItem]:
    require_user(db, user_id)
    return list_lines(db, user_id)


def _merge_quantity(db: Session, user_id: int, product_id: int, quantity: int) -> bool:
    # quantity = quantity + :q выполняется базой, без чтения-изменения-записи в Python
    result = db.execute(
        update(CartItem)
        .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .values(quantity=CartItem.quantity + quantity)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def add_to_cart(db: Session, user_id: int, product_id: int, quantity: int = 1) -> CartItem:
    """
    Добавляет товар в корзину.

    Если строка для (user, product) уже есть, её количество увеличивается на
    quantity, иначе создаётся новая строка. Параллельная вставка той же пары
    упирается в уникальный индекс и повторяется как слияние.
    """
    if quantity is None or quantity <= 0:
        raise InvalidRequestError("Quantity must be positive")
    require_user(db, user_id)
    if db.get(Product, product_id) is None:
        raise NotFoundError("Product not found")

    if not _merge_quantity(db, user_id, product_id, quantity):
        db.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.debug(f"Concurrent insert of cart line ({user_id}, {product_id}), merging")
            if not _merge_quantity(db, user_id, product_id, quantity):
                raise
            db.commit()
    else:
        db.commit()

    stmt = (
        select(CartItem)
        .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .execution_options(populate_existing=True)
    )
    return db.scalars(stmt).one()


def remove_from_cart(db: Session, cart_item_id: int) -> None:
    # TODO: сверять владельца строки с userId из пути, когда будет решено, кто вправе удалять
    db.execute(delete(CartItem).where(CartItem.id == cart_item_id))
    db.commit()


def delete_checked_out(db: Session, lines: list[tuple[int, int]]) -> None:
    """
    Удаляет ровно те строки (id, quantity), что попали в заказ, без commit.

    Если строку за это время удалили или к ней добавили количество,
    оформление прерывается: иначе товар пропал бы из корзины, не попав в заказ.
    Строки, добавленные после чтения корзины, остаются на месте.
    """
    for cart_item_id, quantity in lines:
        result = db.execute(
            delete(CartItem)
            .where(CartItem.id == cart_item_id, CartItem.quantity == quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info(f"Cart line {cart_item_id} changed during checkout")
            raise ConflictError("Cart changed during checkout, please retry")


def delete_lines(db: Session, user_id: int) -> int:
    """Удаляет все строки корзины в текущей транзакции, без commit."""
    result = db.execute(
        delete(CartItem)
        .where(CartItem.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def clear_cart(db: Session, user_id: int) -> None:
    require_user(db, user_id)
    removed = delete_lines(db, user_id)
    db.commit()
    logger.debug(f"Cleared {removed} cart line(s) for user {user_id}")
