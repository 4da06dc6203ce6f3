# shop/db/session.py
# Инициализация SQLAlchemy engine и фабрики сессий.
# Поддерживает как Postgres, так и SQLite (для тестов/локального использования).

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from shop.core.config import settings


def make_engine(url: str) -> Engine:
    # Для sqlite требуется connect_args; для Postgres — пустой dict
    connect_args = {"check_same_thread": False, "timeout": 30} if url.startswith("sqlite") else {}
    # pool_pre_ping полезен для долгоживущих соединений с Postgres
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=bind)


DATABASE_URL = settings.DATABASE_URL

engine = make_engine(DATABASE_URL)

SessionLocal = make_session_factory(engine)
