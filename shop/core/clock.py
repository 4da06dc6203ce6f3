# shop/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Текущее время UTC без tzinfo, в том виде, в каком оно хранится в БД."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
