# shop/api/deps.py
# Общие зависимости роутеров.
from fastapi import Request

from shop.core.security import get_db
from shop.services.notifications import Notifier, build_notifier

__all__ = ["get_db", "get_notifier"]


def get_notifier(request: Request) -> Notifier:
    notifier = getattr(request.app.state, "notifier", None)
    if notifier is None:
        notifier = request.app.state.notifier = build_notifier()
    return notifier
