# farmcart/ftypes.py
# Maybe и Either для поиска строк корзины и оформления заказа без исключений

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
L = TypeVar("L")
R = TypeVar("R")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """
    Результат поиска: товар в каталоге, строка корзины по (productId, unitsDisplay),
    заказ по id. Maybe.first(...) заменяет next(..., None) + проверку на None.
    """

    value: Optional[T] = None

    @staticmethod
    def some(value: T) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def nothing() -> "Maybe[T]":
        return Maybe(None)

    @staticmethod
    def from_optional(value: Optional[T]) -> "Maybe[T]":
        return Maybe(value)

    @staticmethod
    def first(items: Iterable[T], predicate: Callable[[T], bool]) -> "Maybe[T]":
        """Первый элемент, удовлетворяющий предикату (поиск в кортежах корзины/каталога)"""
        return Maybe(next((x for x in items if predicate(x)), None))

    def is_some(self) -> bool:
        return self.value is not None

    def is_none(self) -> bool:
        return self.value is None

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        return Maybe(fn(self.value)) if self.is_some() else Maybe.nothing()

    def bind(self, fn: Callable[[T], "Maybe[U]"]) -> "Maybe[U]":
        return fn(self.value) if self.is_some() else Maybe.nothing()

    def to_either(self, message: str) -> "Either[dict, T]":
        """Nothing превращается в ошибку вида {"error": message}"""
        return Either.right(self.value) if self.is_some() else Either.fail(message)

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default

    def __repr__(self) -> str:
        return f"Some({self.value!r})" if self.is_some() else "Nothing"


@dataclass(frozen=True)
class Either(Generic[L, R]):
    """
    Исход операции заказа: Right(Order) или Left({"error": "..."}).
    Текст ошибки показывается пользователю как есть (st.error, state["error"]).
    """

    is_left: bool
    value: Union[L, R]

    @staticmethod
    def left(value: L) -> "Either[L, R]":
        return Either(True, value)

    @staticmethod
    def right(value: R) -> "Either[L, R]":
        return Either(False, value)

    @staticmethod
    def fail(message: str) -> "Either[dict, R]":
        return Either(True, {"error": message})

    @property
    def is_right(self) -> bool:
        return not self.is_left

    @property
    def error(self) -> Optional[str]:
        """Текст ошибки для Left({"error": ...}), иначе None"""
        if self.is_right:
            return None
        return self.value.get("error") if isinstance(self.value, dict) else str(self.value)

    def map(self, fn: Callable[[R], U]) -> "Either[L, U]":
        return self if self.is_left else Either.right(fn(self.value))  # type: ignore[return-value]

    def bind(self, fn: Callable[[R], "Either[L, U]"]) -> "Either[L, U]":
        return self if self.is_left else fn(self.value)  # type: ignore[return-value]

    def fold(self, on_left: Callable[[L], U], on_right: Callable[[R], U]) -> U:
        return on_left(self.value) if self.is_left else on_right(self.value)  # type: ignore[arg-type]

    def get_or_else(self, default: U) -> R | U:
        return default if self.is_left else self.value  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f"Left({self.value!r})" if self.is_left else f"Right({self.value!r})"
