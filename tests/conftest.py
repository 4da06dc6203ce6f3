import os

# Настройки читаются при импорте shop.core.config, поэтому задаём их до импорта пакета
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SWEEPER_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from shop.core.security import get_db
from shop.db.base import Base
from shop.db.session import make_engine, make_session_factory
from shop.main import create_app
from shop.models.product import Product
from shop.models.user import User, UserRole


class RecordingNotifier:
    def __init__(self):
        self.orders = []

    def order_placed(self, order):
        self.orders.append(order)


@pytest.fixture()
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def client(engine, session_factory, notifier):
    app = create_app(bind=engine, session_factory=session_factory, run_sweeper=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.notifier = notifier
    return TestClient(app)


def make_user(db, username="alice", role=UserRole.CUSTOMER, email=None, password="secret"):
    user = User(username=username, password=password, email=email, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, seller, name="Widget", price="10.00", stock=None):
    product = Product(seller_id=seller.id, name=name, price=Decimal(price), stock_quantity=stock)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture()
def seller(db):
    return make_user(db, username="seller", role=UserRole.SELLER, email="seller@example.com")


@pytest.fixture()
def customer(db):
    return make_user(db, username="customer", email="customer@example.com")
