# shop/main.py
# Точка входа FastAPI. Создание таблиц и запуск фонового sweeper'а выполняются
# в lifespan с обработкой ошибок.

import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from shop.core.config import settings
from shop.core.errors import ShopError
from shop.db.base import Base
from shop.db.session import SessionLocal, engine
from shop.services.notifications import build_notifier
from shop.services.sweeper import OrderSweeper

# Импорт моделей, чтобы SQLAlchemy видел их определения
import shop.models.user
import shop.models.product
import shop.models.cart
import shop.models.order

# Настройка логирования
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


def try_create_tables(bind: Engine, retries: int = 5, delay: int = 2) -> bool:
    """
    Пытаемся создать таблицы с повторными попытками.
    Если БД недоступна, логируем ошибку и пробуем снова.

    Args:
        bind: Engine, в котором создаются таблицы
        retries: Количество попыток подключения
        delay: Задержка между попытками в секундах

    Returns:
        True если таблицы созданы/существуют, False если все попытки исчерпаны
    """
    for attempt in range(1, retries + 1):
        try:
            logger.info(f"Creating tables ({attempt}/{retries})...")
            Base.metadata.create_all(bind=bind)
            logger.info("Database tables created (or already exist).")
            return True
        except Exception as e:
            logger.warning(f"Attempt {attempt}/{retries} failed to create tables: {e}")
            if attempt < retries:
                logger.info(f"Waiting {delay}s before retry...")
                time.sleep(delay)
    logger.error(f"Could not create tables after {retries} retries.")
    return False


def create_app(
    bind: Engine = engine,
    session_factory: sessionmaker = SessionLocal,
    run_sweeper: bool = settings.SWEEPER_ENABLED,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Управление жизненным циклом приложения.
        Запускается при старте и завершении приложения.
        """
        logger.info("Shop API starting up...")
        if not try_create_tables(bind, retries=5, delay=2):
            # В production без таблиц стартовать нельзя, в разработке продолжаем
            if settings.ENVIRONMENT in ("production", "prod"):
                raise RuntimeError("Cannot start application: database tables creation failed")

        sweeper = None
        if run_sweeper:
            sweeper = OrderSweeper(
                session_factory,
                interval=settings.SWEEP_INTERVAL_SECONDS,
                dwell=timedelta(minutes=settings.ORDER_RECEIVE_AFTER_MINUTES),
            )
            sweeper.start()
        app.state.sweeper = sweeper

        yield

        logger.info("Shop API shutting down...")
        if sweeper is not None:
            sweeper.stop()
        bind.dispose()
        logger.info("Database connection closed")

    app = FastAPI(
        title="Shop API",
        description="Users, catalog, cart and checkout",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.notifier = build_notifier(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Подключаем роутеры
    from shop.api import auth, cart, orders, products

    prefix = settings.API_PREFIX.rstrip("/")
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(products.router, prefix=f"{prefix}/products", tags=["products"])
    app.include_router(cart.router, prefix=f"{prefix}/cart", tags=["cart"])
    app.include_router(orders.router, prefix=f"{prefix}/orders", tags=["orders"])

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy", "version": "1.0.0"}

    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        # Клиенту уходит только текст сообщения
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Глобальный обработчик ошибок."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": "Internal server error",
                "detail": str(exc) if settings.ENVIRONMENT == "development" else "An error occurred",
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shop.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )
