import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Tuple

from .async_ops import run_load_cart, run_persist_order
from .domain import Cart, NormalizedUnit, Order, Product, QuantityOption, Session
from .errors import StoreError
from .formatting import format_available
from .frp import EventBus, create_cart_event_bus, create_event, initial_state
from .ftypes import Either, Maybe
from .lazy import iter_orders_for
from .pricing import PriceQuote, derive_price
from .quantity import default_quantity, exceeds_availability, quantity_options
from .store import DocumentStore, load_orders, save_cart, save_order
from .transforms import advance_status
from .units import normalize_unit

logger = logging.getLogger(__name__)


# ============ Фильтры каталога (замыкания) ============


def by_name(text: str) -> Callable[[Product], bool]:
    needle = (text or "").strip().lower()
    return lambda p: needle in p.name.lower()


def by_badge(badge: str) -> Callable[[Product], bool]:
    return lambda p: badge in p.badges


def in_stock() -> Callable[[Product], bool]:
    return lambda p: p.available_quantity is None or p.available_quantity > 0


@dataclass(frozen=True)
class ProductView:
    """Всё, что нужно карточке товара"""

    product: Product
    unit: NormalizedUnit
    quote: PriceQuote
    options: Tuple[QuantityOption, ...]
    default_qty: Decimal
    available_label: str

    def price_for(self, qty) -> Decimal:
        return self.quote.price_for(qty)

    def can_add(self, qty) -> bool:
        available = self.product.available_quantity
        if available is not None and available <= 0:
            return False
        return not exceeds_availability(qty, available)


class CatalogService:
    """Фасад для работы с каталогом"""

    def __init__(self, products: Tuple[Product, ...]):
        self.products = products

    def find(self, product_id: str) -> Maybe[Product]:
        return Maybe.first(self.products, lambda p: p.id == product_id)

    def filter_products(self, *predicates: Callable[[Product], bool]) -> Tuple[Product, ...]:
        return tuple(p for p in self.products if all(f(p) for f in predicates))

    def view(self, product: Product) -> ProductView:
        unit = normalize_unit(product.base_unit)
        return ProductView(
            product=product,
            unit=unit,
            quote=derive_price(product.base_price, unit),
            options=quantity_options(unit),
            default_qty=default_quantity(unit),
            available_label=format_available(product.available_quantity, unit.type),
        )


class CartService:
    """
    Корзина одной сессии: изменения идут через шину событий,
    после каждого изменения документ корзины сохраняется в хранилище.
    """

    def __init__(
        self,
        store: DocumentStore,
        session: Session,
        bus: Optional[EventBus] = None,
    ):
        self.store = store
        self.session = session
        self.bus = bus or create_cart_event_bus()
        self.state = initial_state(session)

    @property
    def cart(self) -> Cart:
        return self.state["cart"]

    @property
    def error(self) -> Optional[str]:
        return self.state["error"]

    def refresh(self) -> Cart:
        """Явное обновление из хранилища вместо live-подписки"""
        if not self.session.is_authenticated:
            return self.cart
        cart = run_load_cart(self.store, self.session.user_id)
        self.state = self.bus.publish(create_event("CART_LOADED", {"cart": cart}), self.state)
        return self.cart

    def _dispatch(self, name: str, payload: dict) -> Cart:
        before = self.cart
        self.state = self.bus.publish(create_event(name, payload), self.state)
        if self.error:
            logger.warning("%s rejected: %s", name, self.error)
        elif self.cart != before:
            save_cart(self.store, self.cart)
        return self.cart

    def add(self, product: Product, qty) -> Cart:
        logger.info("Add %s x %s for %s", product.id, qty, self.session.user_id)
        return self._dispatch("ADD_TO_CART", {"product": product, "qty": qty})

    def set_quantity(self, product_id: str, units: str, qty) -> Cart:
        return self._dispatch(
            "UPDATE_QTY", {"product_id": product_id, "units": units, "qty": qty}
        )

    def increment(self, product_id: str, units: str) -> Cart:
        return self._dispatch(
            "STEP_QTY", {"product_id": product_id, "units": units, "direction": 1}
        )

    def decrement(self, product_id: str, units: str) -> Cart:
        return self._dispatch(
            "STEP_QTY", {"product_id": product_id, "units": units, "direction": -1}
        )

    def remove(self, product_id: str, units: str) -> Cart:
        return self._dispatch("REMOVE", {"product_id": product_id, "units": units})

    def checkout(self) -> Either[dict, Order]:
        """
        Right(Order) - заказ сохранён, корзина очищена и сохранена.
        Если хранилище не приняло заказ, состояние сессии откатывается
        и возвращается Left: корзина остаётся и в памяти, и в хранилище.
        """
        before = self.state
        cart = self.cart
        self.state = self.bus.publish(create_event("CHECKOUT", {}), self.state)
        if self.error:
            logger.warning("Checkout failed for %s: %s", self.session.user_id, self.error)
            return Either.fail(self.error)

        order = self.state["last_order"]
        try:
            run_persist_order(self.store, order, cart)
        except (OSError, StoreError) as e:
            logger.exception("Could not save order %s for %s", order.id, self.session.user_id)
            self.state = before
            return Either.fail(f"Could not place the order: {e}")
        return Either.right(order)


class OrderService:
    """Фасад для работы с заказами"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def orders_for(self, customer_id: str) -> Tuple[Order, ...]:
        """Заказы покупателя, новые сверху"""
        mine = iter_orders_for(load_orders(self.store), customer_id)
        return tuple(sorted(mine, key=lambda o: o.created_at, reverse=True))

    def advance(self, order_id: str) -> Either[dict, Order]:
        result = (
            Maybe.first(load_orders(self.store), lambda o: o.id == order_id)
            .to_either(f"Order '{order_id}' not found")
            .bind(advance_status)
        )
        if result.is_right:
            save_order(self.store, result.value)
        return result
