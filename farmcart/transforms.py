import uuid
from decimal import Decimal
from functools import reduce
from typing import Optional, Tuple

from .domain import ORDER_STATUSES, Cart, CartLine, Order, Product, Session, to_decimal
from .errors import Unauthenticated
from .formatting import units_display
from .ftypes import Either, Maybe
from .pricing import derive_price
from .quantity import decrement, increment, step_for
from .units import normalize_unit


# ============ Операции корзины (чистые функции) ============


def _with_quantity(line: CartLine, qty: Decimal) -> CartLine:
    return CartLine(
        product_id=line.product_id,
        units_display=line.units_display,
        quantity=qty,
        unit_price=line.unit_price,
        total_price=line.unit_price * qty,
        step=line.step,
        name=line.name,
        image=line.image,
    )


def _replace_items(cart: Cart, items: Tuple[CartLine, ...]) -> Cart:
    return Cart(user_id=cart.user_id, items=items)


def find_line(cart: Cart, product_id: str, units: str) -> Maybe[CartLine]:
    """Поиск строки по точному ключу (productId, unitsDisplay)"""
    key = (product_id, units)
    return Maybe.first(cart.items, lambda l: l.key == key)


def add_to_cart(
    cart: Cart, product: Product, qty, session: Optional[Session]
) -> Cart:
    """
    Возвращает новую корзину с добавленной фасовкой товара.
    Повторное добавление той же фасовки увеличивает количество существующей строки.
    Цена за единицу фиксируется в момент первого добавления.
    """
    if session is None or not session.is_authenticated:
        raise Unauthenticated()

    qty = to_decimal(qty)
    if qty <= 0:
        return cart

    unit = normalize_unit(product.base_unit)
    units = units_display(qty, unit.type)

    existing = find_line(cart, product.id, units)
    if existing.is_some():
        updated = tuple(
            _with_quantity(l, l.quantity + qty) if l.key == (product.id, units) else l
            for l in cart.items
        )
        return _replace_items(cart, updated)

    unit_price = derive_price(product.base_price, unit).price_per_unit
    line = CartLine(
        product_id=product.id,
        units_display=units,
        quantity=qty,
        unit_price=unit_price,
        total_price=unit_price * qty,
        step=step_for(unit),
        name=product.name,
        image=product.image,
    )
    return _replace_items(cart, cart.items + (line,))


def update_quantity(cart: Cart, product_id: str, units: str, qty) -> Cart:
    """
    Устанавливает количество строки как есть (без повторного ограничения шагом).
    Нет строки - корзина без изменений; qty <= 0 - строка удаляется.
    """
    qty = to_decimal(qty)
    if find_line(cart, product_id, units).is_none():
        return cart
    if qty <= 0:
        return remove_line(cart, product_id, units)

    key = (product_id, units)
    return _replace_items(
        cart,
        tuple(_with_quantity(l, qty) if l.key == key else l for l in cart.items),
    )


def remove_line(cart: Cart, product_id: str, units: str) -> Cart:
    key = (product_id, units)
    return _replace_items(cart, tuple(filter(lambda l: l.key != key, cart.items)))


def step_line(cart: Cart, product_id: str, units: str, direction: int) -> Cart:
    """Кнопки +/-: direction > 0 увеличивает на шаг, иначе уменьшает не ниже шага"""

    def next_qty(line: CartLine) -> Decimal:
        if direction > 0:
            return increment(line.quantity, line.step)
        return decrement(line.quantity, line.step)

    return (
        find_line(cart, product_id, units)
        .map(lambda line: update_quantity(cart, product_id, units, next_qty(line)))
        .get_or_else(cart)
    )


def clear_cart(cart: Cart) -> Cart:
    return _replace_items(cart, ())


def cart_subtotal(cart: Cart) -> Decimal:
    return reduce(lambda acc, l: acc + l.total_price, cart.items, Decimal("0"))


# ============ Оформление заказа ============


def checkout(cart: Cart, session: Optional[Session], ts: str) -> Either[dict, Order]:
    """
    Корзина -> Either[error, Order]
    Left - нет сессии или корзина пуста; Right - заказ в статусе "Placed".
    Очистка корзины и сохранение заказа - ответственность вызывающей стороны.
    """
    if session is None or not session.is_authenticated:
        return Either.fail("Please log in to place an order")
    if not cart.items:
        return Either.fail("Cart is empty")

    order = Order(
        id=str(uuid.uuid4()),
        customer_id=session.user_id,
        items=cart.items,
        total=cart_subtotal(cart),
        status=ORDER_STATUSES[0],
        created_at=str(ts),
    )
    return Either.right(order)


def advance_status(order: Order) -> Either[dict, Order]:
    """Placed -> Confirmed -> Packed -> Shipped -> Delivered"""
    if order.status not in ORDER_STATUSES:
        return Either.fail(f"Unknown order status '{order.status}'")

    idx = ORDER_STATUSES.index(order.status)
    if idx == len(ORDER_STATUSES) - 1:
        return Either.fail(f"Order {order.id} is already delivered")

    return Either.right(
        Order(
            id=order.id,
            customer_id=order.customer_id,
            items=order.items,
            total=order.total,
            status=ORDER_STATUSES[idx + 1],
            created_at=order.created_at,
        )
    )
