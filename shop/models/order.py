# shop/models/order.py
# Модели Order и OrderItem. Заказ владеет позициями; позиция ссылается на заказ
# только внешним ключом. Цена и продавец в позиции — снимок на момент покупки.
from sqlalchemy import Column, Integer, ForeignKey, Numeric, DateTime, Enum, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from shop.core.clock import utcnow
from shop.db.base import Base


class OrderStatus(str, enum.Enum):
    SHIPPED = "SHIPPED"
    RECEIVED = "RECEIVED"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.SHIPPED, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    shipped_at = Column(DateTime, nullable=True, index=True)
    received_at = Column(DateTime, nullable=True)

    user = relationship("User")
    items = relationship(
        "OrderItem",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
        lazy="selectin",
    )


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    product = relationship("Product", lazy="selectin")

    @property
    def product_name(self) -> str | None:
        return self.product.name if self.product is not None else None
