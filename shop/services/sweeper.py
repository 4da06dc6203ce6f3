# shop/services/sweeper.py
# Фоновый перевод заказов SHIPPED -> RECEIVED после фиксированного времени ожидания.
import logging
import threading
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session, sessionmaker

from shop.core.clock import utcnow
from shop.models.order import Order, OrderStatus

logger = logging.getLogger(__name__)

DEFAULT_DWELL = timedelta(minutes=10)


def receive_shipped_orders(db: Session, now: datetime | None = None, dwell: timedelta = DEFAULT_DWELL) -> int:
    """
    Переводит в RECEIVED все заказы, отгруженные не позже now - dwell.

    Строки захватываются через FOR UPDATE SKIP LOCKED, а сам UPDATE ещё раз
    проверяет status = SHIPPED, поэтому параллельные проходы не переводят
    один заказ дважды. Возвращает число переведённых заказов.
    """
    now = now or utcnow()
    cutoff = now - dwell
    claim = (
        select(Order.id)
        .where(Order.status == OrderStatus.SHIPPED, Order.shipped_at <= cutoff)
        .with_for_update(skip_locked=True)
    )
    ids = list(db.scalars(claim))
    if not ids:
        db.commit()
        return 0
    result = db.execute(
        update(Order)
        .where(Order.id.in_(ids), Order.status == OrderStatus.SHIPPED)
        .values(status=OrderStatus.RECEIVED, received_at=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


class OrderSweeper:
    """Периодическая задача со своим жизненным циклом (start/stop)."""

    def __init__(self, session_factory: sessionmaker, interval: float = 60.0, dwell: timedelta = DEFAULT_DWELL):
        self.session_factory = session_factory
        self.interval = interval
        self.dwell = dwell
        self._run_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="order-sweeper", daemon=True)
        self._thread.start()
        logger.info(f"Order sweeper started (every {self.interval}s, dwell {self.dwell})")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Order sweeper stopped")

    def run_once(self, now: datetime | None = None) -> int:
        """Один проход. Если предыдущий ещё идёт, проход пропускается."""
        if not self._run_lock.acquire(blocking=False):
            logger.debug("Previous sweep still running, skipping")
            return 0
        try:
            with self.session_factory() as db:
                try:
                    count = receive_shipped_orders(db, now=now, dwell=self.dwell)
                except Exception:
                    db.rollback()
                    raise
            if count:
                logger.info(f"Marked {count} order(s) as received")
            return count
        finally:
            self._run_lock.release()

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Order sweep failed: {e}", exc_info=True)
            self._stop.wait(self.interval)
