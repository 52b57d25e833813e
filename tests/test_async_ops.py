import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from decimal import Decimal

import pytest
from farmcart.async_ops import (
    load_cart_async,
    place_order_async,
    run_load_cart,
    run_place_order,
    save_cart_async,
)
from farmcart.domain import Cart, Product, Session
from farmcart.store import JsonFileStore, MemoryStore, load_cart, load_orders, save_cart
from farmcart.transforms import add_to_cart


@pytest.fixture
def session():
    return Session(user_id="u1")


@pytest.fixture
def cart(session):
    tomato = Product(id="p1", name="Tomato", base_price=Decimal("40"), base_unit="1kg")
    return add_to_cart(Cart(user_id="u1"), tomato, 1, session)


@pytest.mark.asyncio
async def test_save_and_load_async(tmp_path, cart):
    store = JsonFileStore(str(tmp_path))
    await save_cart_async(store, cart)

    loaded = await load_cart_async(store, "u1")
    assert loaded == cart


@pytest.mark.asyncio
async def test_place_order_saves_order_and_clears_cart(tmp_path, cart, session):
    store = JsonFileStore(str(tmp_path))
    save_cart(store, cart)

    result = await place_order_async(store, cart, session, "2025-11-25T12:00:00")

    assert result.is_right
    assert load_cart(store, "u1").items == ()
    (order,) = load_orders(store)
    assert order.total == 40
    assert order.created_at == "2025-11-25T12:00:00"


@pytest.mark.asyncio
async def test_rejected_order_leaves_store_untouched(cart):
    store = MemoryStore()
    save_cart(store, cart)

    result = await place_order_async(store, cart, Session(), "2025-11-25")

    assert result.is_left
    assert load_cart(store, "u1") == cart
    assert load_orders(store) == ()


def test_sync_wrappers(cart, session):
    store = MemoryStore()
    assert run_place_order(store, cart, session, "2025-11-25").is_right
    assert run_load_cart(store, "u1").items == ()
