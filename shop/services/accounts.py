# shop/services/accounts.py
# Регистрация и вход пользователей.
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shop.core.errors import DuplicateError, NotFoundError
from shop.core.security import verify_password
from shop.models.user import User, UserRole

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def require_user(db: Session, user_id: int, message: str = "User not found") -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(message)
    return user


def _find_duplicate(db: Session, username: str, email: str | None) -> str | None:
    if db.scalar(select(User).where(User.username == username)) is not None:
        return "Username already exists"
    if email is not None and db.scalar(select(User).where(User.email == email)) is not None:
        return "Email already exists"
    return None


def register(
    db: Session,
    username: str,
    password: str,
    email: str | None = None,
    role: UserRole | None = None,
) -> User:
    duplicate = _find_duplicate(db, username, email)
    if duplicate is not None:
        raise DuplicateError(duplicate)
    user = User(username=username, password=password, email=email, role=role or UserRole.CUSTOMER)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Параллельная регистрация успела занять username или email
        db.rollback()
        raise DuplicateError(_find_duplicate(db, username, email) or "Username already exists")
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.role.value})")
    return user


def login(db: Session, username: str, password: str) -> User | None:
    user = db.scalar(select(User).where(User.username == username))
    if user is None or not verify_password(password, user.password):
        return None
    return user
