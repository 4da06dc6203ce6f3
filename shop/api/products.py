# shop/api/products.py
# Роуты каталога. Поиск по id отдаёт 404, прочие ошибки — 400 с текстом.
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from shop.api.deps import get_db, get_notifier
from shop.api.schemas import OrderResponse, ProductRequest, ProductResponse, ProductUpdate, PurchaseRequest
from shop.core.errors import InvalidRequestError
from shop.services import checkout, products
from shop.services.notifications import Notifier

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")


@router.get("", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    return [ProductResponse.model_validate(p) for p in products.get_all_products(db)]


@router.get("/seller/{seller_id}", response_model=list[ProductResponse])
def list_seller_products(seller_id: int, db: Session = Depends(get_db)):
    return [ProductResponse.model_validate(p) for p in products.get_products_by_seller(db, seller_id)]


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = products.get_product(db, product_id)
    if product is None:
        raise _not_found()
    return ProductResponse.model_validate(product)


@router.post("", response_model=ProductResponse)
def create_product(body: ProductRequest, db: Session = Depends(get_db)):
    fields = body.model_dump(exclude={"seller_id"})
    product = products.create_product(db, body.seller_id, **fields)
    return ProductResponse.model_validate(product)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, body: ProductUpdate, db: Session = Depends(get_db)):
    product = products.update_product(db, product_id, **body.model_dump(exclude_unset=True))
    if product is None:
        raise _not_found()
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    if not products.delete_product(db, product_id):
        raise _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{product_id}/purchase", response_model=OrderResponse)
def purchase_product(
    product_id: int,
    body: PurchaseRequest,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
):
    if body.user_id is None:
        raise InvalidRequestError("User not found")
    quantity = body.quantity if body.quantity is not None else 1
    order = checkout.purchase_single(db, body.user_id, product_id, quantity, notifier=notifier)
    return OrderResponse.model_validate(order)
