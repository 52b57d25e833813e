import uuid
from dataclasses import dataclass
from datetime import datetime
from functools import reduce
from typing import Callable, Optional, Tuple

from .domain import Cart, Event, Session
from .errors import Unauthenticated
from .transforms import add_to_cart, checkout, remove_line, step_line, update_quantity


@dataclass(frozen=True)
class EventBus:
    """
    Иммутабельная шина событий корзины.
    Заменяет живые подписки на документы: состояние меняется только
    через публикацию события, обработчики - чистые функции (Event, State) -> State.
    """

    subscribers: Tuple[Tuple[str, Callable], ...] = ()

    def subscribe(
        self, event_name: str, handler: Callable[[Event, dict], dict]
    ) -> "EventBus":
        return EventBus(subscribers=self.subscribers + ((event_name, handler),))

    def publish(self, event: Event, state: dict) -> dict:
        handlers = tuple(h for name, h in self.subscribers if name == event.name)
        return reduce(lambda s, h: h(event, s), handlers, state)


def create_event(name: str, payload: dict) -> Event:
    return Event(
        id=str(uuid.uuid4()),
        ts=datetime.now().isoformat(),
        name=name,
        payload=payload,
    )


# ============ Обработчики ============


def _ok(state: dict, event: Event, cart: Cart) -> dict:
    return {**state, "cart": cart, "error": None, "last_event": event.name}


def _fail(state: dict, event: Event, message: str) -> dict:
    return {**state, "error": message, "last_event": event.name}


def handle_cart_loaded(event: Event, state: dict) -> dict:
    """Корзина, подтянутая из хранилища (pull вместо live-подписки)"""
    return _ok(state, event, event.payload["cart"])


def handle_add_to_cart(event: Event, state: dict) -> dict:
    p = event.payload
    try:
        cart = add_to_cart(state["cart"], p["product"], p["qty"], state.get("session"))
    except Unauthenticated as e:
        return _fail(state, event, str(e))
    return _ok(state, event, cart)


def handle_update_qty(event: Event, state: dict) -> dict:
    p = event.payload
    cart = update_quantity(state["cart"], p["product_id"], p["units"], p["qty"])
    return _ok(state, event, cart)


def handle_step_qty(event: Event, state: dict) -> dict:
    p = event.payload
    cart = step_line(state["cart"], p["product_id"], p["units"], p["direction"])
    return _ok(state, event, cart)


def handle_remove(event: Event, state: dict) -> dict:
    p = event.payload
    return _ok(state, event, remove_line(state["cart"], p["product_id"], p["units"]))


def handle_checkout(event: Event, state: dict) -> dict:
    """Успешный заказ кладётся в state["last_order"], корзина очищается"""
    result = checkout(state["cart"], state.get("session"), event.ts)
    if result.is_left:
        return _fail(state, event, result.error)

    order = result.value
    cleared = Cart(user_id=state["cart"].user_id, items=())
    return {**_ok(state, event, cleared), "last_order": order}


def create_cart_event_bus() -> EventBus:
    bus = EventBus()
    bus = bus.subscribe("CART_LOADED", handle_cart_loaded)
    bus = bus.subscribe("ADD_TO_CART", handle_add_to_cart)
    bus = bus.subscribe("UPDATE_QTY", handle_update_qty)
    bus = bus.subscribe("STEP_QTY", handle_step_qty)
    bus = bus.subscribe("REMOVE", handle_remove)
    bus = bus.subscribe("CHECKOUT", handle_checkout)
    return bus


def initial_state(session: Optional[Session] = None) -> dict:
    session = session or Session()
    return {
        "session": session,
        "cart": Cart(user_id=session.user_id or "", items=()),
        "last_order": None,
        "error": None,
        "last_event": None,
    }


def apply_events(bus: EventBus, events: Tuple[Event, ...], state: dict) -> dict:
    return reduce(lambda s, e: bus.publish(e, s), events, state)
