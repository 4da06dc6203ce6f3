# shop/models/user.py
# Модель пользователя: username, password (legacy, открытым текстом), email, role.
from sqlalchemy import Column, Integer, String, DateTime, Enum
import enum

from shop.core.clock import utcnow
from shop.db.base import Base


class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    SELLER = "SELLER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.CUSTOMER)
    created_at = Column(DateTime, default=utcnow)
