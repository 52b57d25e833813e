import asyncio
import logging
from typing import Optional

from .domain import Cart, Order, Session
from .ftypes import Either
from .store import DocumentStore, load_cart, save_cart, save_order
from .transforms import checkout, clear_cart

logger = logging.getLogger(__name__)


# ============ Асинхронная работа с хранилищем ============


async def save_cart_async(store: DocumentStore, cart: Cart) -> Cart:
    await asyncio.to_thread(save_cart, store, cart)
    return cart


async def load_cart_async(store: DocumentStore, user_id: str) -> Cart:
    return await asyncio.to_thread(load_cart, store, user_id)


async def persist_order_async(store: DocumentStore, order: Order, cart: Cart) -> Order:
    """
    Сначала заказ, затем очищенная корзина.
    Если заказ не записан, корзина в хранилище остаётся прежней.
    """
    await asyncio.to_thread(save_order, store, order)
    await save_cart_async(store, clear_cart(cart))
    logger.info("Order %s placed by %s", order.id, order.customer_id)
    return order


async def place_order_async(
    store: DocumentStore, cart: Cart, session: Optional[Session], ts: str
) -> Either:
    """Left - корзина и хранилище не тронуты"""
    result = checkout(cart, session, ts)
    if result.is_left:
        logger.warning("Checkout rejected for %s: %s", cart.user_id, result.error)
        return result

    await persist_order_async(store, result.value, cart)
    return result


# ============ Синхронные обёртки для UI ============


def run_load_cart(store: DocumentStore, user_id: str) -> Cart:
    return asyncio.run(load_cart_async(store, user_id))


def run_persist_order(store: DocumentStore, order: Order, cart: Cart) -> Order:
    return asyncio.run(persist_order_async(store, order, cart))


def run_place_order(
    store: DocumentStore, cart: Cart, session: Optional[Session], ts: str
) -> Either:
    return asyncio.run(place_order_async(store, cart, session, ts))
