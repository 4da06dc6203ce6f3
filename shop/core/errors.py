# shop/core/errors.py
# Доменные ошибки магазина. Сообщение исключения уходит клиенту как есть,
# поэтому тексты держим стабильными.


class ShopError(Exception):
    """Базовая ошибка предметной области (HTTP 400 с текстом сообщения)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(ShopError):
    pass


class InsufficientStockError(ShopError):
    def __init__(self, message: str = "Insufficient stock"):
        super().__init__(message)


class InvalidRequestError(ShopError):
    pass


class DuplicateError(ShopError):
    pass


class ConflictError(ShopError):
    pass
