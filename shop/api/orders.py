# shop/api/orders.py
# Роуты чтения заказов покупателя и продавца.
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import get_db
from shop.api.schemas import OrderResponse, SellerOrderItemResponse, SellerStatsResponse
from shop.services import orders

router = APIRouter()


@router.get("/user/{user_id}", response_model=list[OrderResponse])
def list_user_orders(user_id: int, db: Session = Depends(get_db)):
    return [OrderResponse.model_validate(o) for o in orders.get_orders_by_user(db, user_id)]


@router.get("/{order_id}/user/{user_id}", response_model=OrderResponse)
def get_order_detail(order_id: int, user_id: int, db: Session = Depends(get_db)):
    return OrderResponse.model_validate(orders.get_order_for_user(db, order_id, user_id))


@router.get("/seller/{seller_id}", response_model=list[SellerOrderItemResponse])
def list_seller_orders(seller_id: int, db: Session = Depends(get_db)):
    return [SellerOrderItemResponse.model_validate(row) for row in orders.get_orders_by_seller(db, seller_id)]


@router.get("/seller/{seller_id}/stats", response_model=SellerStatsResponse)
def seller_stats(seller_id: int, db: Session = Depends(get_db)):
    return SellerStatsResponse.model_validate(orders.get_seller_stats(db, seller_id))
