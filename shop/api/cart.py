# shop/api/cart.py
# Роуты корзины. Доменные ошибки превращаются в 400 обработчиком из shop.main.
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shop.api.deps import get_db, get_notifier
from shop.api.schemas import AddToCartRequest, CartItemResponse
from shop.core.errors import InvalidRequestError
from shop.services import cart as cart_service
from shop.services import checkout
from shop.services.notifications import Notifier

router = APIRouter()


@router.get("/{user_id}", response_model=list[CartItemResponse])
def get_cart(user_id: int, db: Session = Depends(get_db)):
    return [CartItemResponse.model_validate(line) for line in cart_service.get_cart(db, user_id)]


@router.post("/add", response_model=CartItemResponse)
def add_to_cart(body: AddToCartRequest, db: Session = Depends(get_db)):
    if body.user_id is None:
        raise InvalidRequestError("User not found")
    if body.product_id is None:
        raise InvalidRequestError("Product not found")
    quantity = body.quantity if body.quantity is not None else 1
    line = cart_service.add_to_cart(db, body.user_id, body.product_id, quantity)
    return CartItemResponse.model_validate(line)


@router.delete("/{user_id}/item/{cart_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_cart(user_id: int, cart_item_id: int, db: Session = Depends(get_db)):
    cart_service.remove_from_cart(db, cart_item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{user_id}/clear", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(user_id: int, db: Session = Depends(get_db)):
    cart_service.clear_cart(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/checkout", status_code=status.HTTP_204_NO_CONTENT)
def checkout_cart(user_id: int, db: Session = Depends(get_db), notifier: Notifier = Depends(get_notifier)):
    checkout.checkout_cart(db, user_id, notifier=notifier)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
