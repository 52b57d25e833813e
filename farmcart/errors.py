class FarmCartError(Exception):
    """Базовая ошибка пакета"""


class Unauthenticated(FarmCartError):
    """Операция требует авторизованной сессии"""

    def __init__(self, message: str = "Please log in to add items to your cart"):
        super().__init__(message)


class StoreError(FarmCartError):
    """Файл хранилища повреждён или не читается"""
