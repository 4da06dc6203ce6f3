# shop/api/auth.py
# Роуты регистрации и входа.
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from shop.api.deps import get_db
from shop.api.schemas import LoginRequest, RegisterRequest, UserResponse
from shop.services import accounts

router = APIRouter()


@router.post("/register", response_model=UserResponse)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    Регистрация пользователя: username + password.
    По умолчанию роль = CUSTOMER.
    """
    user = accounts.register(db, body.username, body.password, email=body.email, role=body.role)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = accounts.login(db, body.username, body.password)
    if user is None:
        return PlainTextResponse("Invalid username or password", status_code=401)
    return UserResponse.model_validate(user)
