"""Registration and login."""

import pytest

from conftest import make_user
from shop.core.errors import DuplicateError
from shop.models.user import User, UserRole
from shop.services import accounts


def test_register_defaults_to_customer(db):
    user = accounts.register(db, "neo", "pw")
    assert user.role == UserRole.CUSTOMER
    assert accounts.login(db, "neo", "pw").id == user.id
    assert accounts.login(db, "neo", "wrong") is None


def _skip_first_check(monkeypatch):
    find_duplicate = accounts._find_duplicate
    calls = []

    def first_check_misses(*args):
        # Пока шла проверка, та же учётка была создана параллельным запросом
        calls.append(args)
        if len(calls) == 1:
            return None
        return find_duplicate(*args)

    monkeypatch.setattr(accounts, "_find_duplicate", first_check_misses)


def test_username_taken_during_registration(monkeypatch, db):
    make_user(db, username="neo")
    _skip_first_check(monkeypatch)

    with pytest.raises(DuplicateError, match="Username already exists"):
        accounts.register(db, "neo", "pw")

    assert db.query(User).filter(User.username == "neo").count() == 1


def test_email_taken_during_registration(monkeypatch, db):
    make_user(db, username="neo", email="neo@x.io")
    _skip_first_check(monkeypatch)

    with pytest.raises(DuplicateError, match="Email already exists"):
        accounts.register(db, "trinity", "pw", email="neo@x.io")

    assert db.query(User).count() == 1
