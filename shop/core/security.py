# shop/core/security.py
# Зависимость сессии БД и проверка пароля.
# Пароли хранятся и сравниваются открытым текстом: так устроен существующий
# контракт входа, хеширование сюда не входит.
from shop.db.session import SessionLocal


def verify_password(plain_password: str, stored_password: str | None) -> bool:
    """Проверяем пароль при логине."""
    return stored_password is not None and plain_password == stored_password


def get_db():
    """Зависимость для получения сессии БД в эндпоинтах."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
