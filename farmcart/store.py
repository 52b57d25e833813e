"""
Хранилище документов (внешний коллаборатор корзины и заказов).

Документ корзины: {"items": [CartLine...]} под ключом user id в коллекции "carts".
Последняя запись побеждает - слияния конкурентных правок нет.
"""

import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from .domain import Cart, CartLine, Order, Product, product_from_document, to_decimal
from .errors import StoreError

logger = logging.getLogger(__name__)

CARTS = "carts"
ORDERS = "orders"


class DocumentStore(ABC):
    """Минимальный интерфейс документной БД"""

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[dict]:
        ...

    @abstractmethod
    def set(self, collection: str, key: str, doc: dict) -> None:
        ...

    @abstractmethod
    def all(self, collection: str) -> List[dict]:
        ...

    def add(self, collection: str, doc: dict) -> str:
        key = str(doc.get("id") or uuid.uuid4())
        self.set(collection, key, {**doc, "id": key})
        return key


class MemoryStore(DocumentStore):
    def __init__(self):
        self._data: Dict[str, Dict[str, dict]] = {}

    def get(self, collection: str, key: str) -> Optional[dict]:
        doc = self._data.get(collection, {}).get(key)
        return json.loads(json.dumps(doc)) if doc is not None else None

    def set(self, collection: str, key: str, doc: dict) -> None:
        # копия через JSON: хранится ровно то, что ушло бы в БД
        self._data.setdefault(collection, {})[key] = json.loads(json.dumps(doc))

    def all(self, collection: str) -> List[dict]:
        return [json.loads(json.dumps(d)) for d in self._data.get(collection, {}).values()]


class JsonFileStore(DocumentStore):
    """Одна коллекция - один JSON-файл {key: doc} в data_dir"""

    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, collection: str) -> str:
        return os.path.join(self.data_dir, f"{collection}.json")

    def _read(self, collection: str) -> Dict[str, dict]:
        path = self._path(collection)
        if not os.path.exists(path):
            return {}
        logger.debug("Reading %s", path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Corrupted store file {path}: {e}") from e

    def _write(self, collection: str, data: Dict[str, dict]) -> None:
        path = self._path(collection)
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError):
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.debug("Wrote %s (%d docs)", path, len(data))

    def get(self, collection: str, key: str) -> Optional[dict]:
        return self._read(collection).get(key)

    def set(self, collection: str, key: str, doc: dict) -> None:
        data = self._read(collection)
        data[key] = doc
        self._write(collection, data)

    def all(self, collection: str) -> List[dict]:
        return list(self._read(collection).values())


# ============ Сериализация ============


def _num(d: Decimal) -> str:
    return format(to_decimal(d).normalize(), "f")


def line_to_document(line: CartLine) -> dict:
    return {
        "productId": line.product_id,
        "unitsDisplay": line.units_display,
        "quantity": _num(line.quantity),
        "unitPrice": _num(line.unit_price),
        "totalPrice": _num(line.total_price),
        "step": _num(line.step),
        "name": line.name,
        "image": line.image,
    }


def line_from_document(doc: dict) -> CartLine:
    quantity = to_decimal(doc.get("quantity"))
    unit_price = to_decimal(doc.get("unitPrice"))
    return CartLine(
        product_id=str(doc.get("productId", doc.get("id", ""))),
        units_display=str(doc.get("unitsDisplay", "")),
        quantity=quantity,
        unit_price=unit_price,
        # totalPrice в документе - лишь кэш для отображения
        total_price=unit_price * quantity,
        step=to_decimal(doc.get("step"), default="1"),
        name=str(doc.get("name") or ""),
        image=doc.get("image") or None,
    )


def cart_to_document(cart: Cart) -> dict:
    return {"items": [line_to_document(l) for l in cart.items]}


def cart_from_document(user_id: str, doc: Optional[dict]) -> Cart:
    """Отсутствующий документ - пустая корзина; строки с qty <= 0 отбрасываются"""
    items = tuple(
        line
        for line in map(line_from_document, (doc or {}).get("items") or [])
        if line.quantity > 0
    )
    return Cart(user_id=user_id, items=items)


def order_to_document(order: Order) -> dict:
    return {
        "id": order.id,
        "customerId": order.customer_id,
        "items": [line_to_document(l) for l in order.items],
        "total": _num(order.total),
        "status": order.status,
        "createdAt": order.created_at,
    }


def order_from_document(doc: dict) -> Order:
    return Order(
        id=str(doc.get("id", "")),
        customer_id=str(doc.get("customerId", "")),
        items=tuple(map(line_from_document, doc.get("items") or [])),
        total=to_decimal(doc.get("total")),
        status=str(doc.get("status", "Placed")),
        created_at=str(doc.get("createdAt", "")),
    )


# ============ Операции коллаборатора ============


def save_cart(store: DocumentStore, cart: Cart) -> None:
    store.set(CARTS, cart.user_id, cart_to_document(cart))
    logger.info("Saved cart for %s (%d lines)", cart.user_id, len(cart.items))


def load_cart(store: DocumentStore, user_id: str) -> Cart:
    return cart_from_document(user_id, store.get(CARTS, user_id))


def save_order(store: DocumentStore, order: Order) -> None:
    store.set(ORDERS, order.id, order_to_document(order))
    logger.info("Saved order %s [%s]", order.id, order.status)


def load_orders(store: DocumentStore) -> Tuple[Order, ...]:
    return tuple(map(order_from_document, store.all(ORDERS)))


def load_catalog(path: str) -> Tuple[Product, ...]:
    """Загружает seed.json ({"products": [...]}) в кортеж иммутабельных товаров"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    products = tuple(map(product_from_document, data.get("products", [])))
    logger.info("Loaded %d products from %s", len(products), path)
    return products
