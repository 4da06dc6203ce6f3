# shop/api/schemas.py
# Pydantic-схемы запросов и ответов. Наружу ключи в camelCase (userId, stockQuantity).
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from shop.models.order import OrderStatus
from shop.models.user import UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# --- Пользователи -----------------------------------------------------------

class RegisterRequest(CamelModel):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1)
    email: str | None = None
    role: UserRole | None = None


class LoginRequest(CamelModel):
    username: str
    password: str


class UserResponse(CamelModel):
    id: int
    username: str
    email: str | None = None
    role: UserRole


# --- Товары -----------------------------------------------------------------

class ProductRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    price: float = Field(ge=0)
    image_url: str | None = None
    stock_quantity: int | None = Field(default=None, ge=0)
    seller_id: int


class ProductUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    image_url: str | None = None
    stock_quantity: int | None = Field(default=None, ge=0)


class ProductResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    price: float
    image_url: str | None = None
    stock_quantity: int | None = None
    seller_id: int


class PurchaseRequest(CamelModel):
    user_id: int | None = None
    quantity: int | None = None


# --- Корзина ----------------------------------------------------------------

class AddToCartRequest(CamelModel):
    user_id: int | None = None
    product_id: int | None = None
    quantity: int | None = None


class CartItemResponse(CamelModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    product: ProductResponse


# --- Заказы -----------------------------------------------------------------

class OrderItemResponse(CamelModel):
    id: int
    product_id: int
    product_name: str | None = None
    seller_id: int
    quantity: int
    price: float


class OrderResponse(CamelModel):
    id: int
    user_id: int
    status: OrderStatus
    created_at: datetime
    shipped_at: datetime | None = None
    received_at: datetime | None = None
    items: list[OrderItemResponse]


class SellerOrderItemResponse(CamelModel):
    order_id: int
    order_status: OrderStatus
    order_created_at: datetime
    product_id: int
    product_name: str | None = None
    quantity: int
    price: float
    buyer_id: int
    buyer_name: str


class SellerStatsResponse(CamelModel):
    total_revenue: float
    total_orders: int
    total_units: int
    product_sales: dict[str, int]
