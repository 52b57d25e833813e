import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from decimal import Decimal

import pytest
from farmcart.domain import Cart, Product, Session
from farmcart.frp import (
    EventBus,
    apply_events,
    create_cart_event_bus,
    create_event,
    initial_state,
)


@pytest.fixture
def tomato():
    return Product(id="p1", name="Tomato", base_price=Decimal("40"), base_unit="1kg")


@pytest.fixture
def state():
    return initial_state(Session(user_id="u1"))


def test_eventbus_immutability():
    bus1 = EventBus()
    bus2 = bus1.subscribe("TEST", lambda e, s: s)

    assert bus1.subscribers == ()
    assert len(bus2.subscribers) == 1


def test_add_to_cart_event(state, tomato):
    bus = create_cart_event_bus()
    new_state = bus.publish(create_event("ADD_TO_CART", {"product": tomato, "qty": 0.25}), state)

    assert new_state["cart"].items[0].units_display == "250g"
    assert new_state["error"] is None
    assert new_state["last_event"] == "ADD_TO_CART"
    assert state["cart"].items == ()


def test_unauthenticated_add_records_error(tomato):
    bus = create_cart_event_bus()
    state = initial_state()
    new_state = bus.publish(create_event("ADD_TO_CART", {"product": tomato, "qty": 1}), state)

    assert new_state["cart"] == state["cart"]
    assert "log in" in new_state["error"]


def test_step_and_remove_events(state, tomato):
    bus = create_cart_event_bus()
    events = (
        create_event("ADD_TO_CART", {"product": tomato, "qty": 0.25}),
        create_event("STEP_QTY", {"product_id": "p1", "units": "250g", "direction": 1}),
        create_event("STEP_QTY", {"product_id": "p1", "units": "250g", "direction": 1}),
    )
    stepped = apply_events(bus, events, state)
    assert stepped["cart"].items[0].quantity == Decimal("0.75")

    removed = bus.publish(
        create_event("REMOVE", {"product_id": "p1", "units": "250g"}), stepped
    )
    assert removed["cart"].items == ()


def test_update_qty_event(state, tomato):
    bus = create_cart_event_bus()
    events = (
        create_event("ADD_TO_CART", {"product": tomato, "qty": 1}),
        create_event("UPDATE_QTY", {"product_id": "p1", "units": "1kg", "qty": 3}),
    )
    final = apply_events(bus, events, state)
    assert final["cart"].items[0].total_price == 120


def test_cart_loaded_replaces_cart(state):
    bus = create_cart_event_bus()
    loaded = Cart(user_id="u1", items=())
    new_state = bus.publish(create_event("CART_LOADED", {"cart": loaded}), state)
    assert new_state["cart"] is loaded


def test_checkout_event_clears_cart(state, tomato):
    bus = create_cart_event_bus()
    events = (
        create_event("ADD_TO_CART", {"product": tomato, "qty": 0.5}),
        create_event("CHECKOUT", {}),
    )
    final = apply_events(bus, events, state)

    assert final["cart"].items == ()
    assert final["last_order"].total == 20
    assert final["last_order"].status == "Placed"


def test_checkout_event_on_empty_cart_records_error(state):
    bus = create_cart_event_bus()
    final = bus.publish(create_event("CHECKOUT", {}), state)

    assert final["error"] == "Cart is empty"
    assert final["last_order"] is None
