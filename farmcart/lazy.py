from typing import Iterable, Iterator

from .domain import Order


## ленивый генератор заказов одного покупателя
def iter_orders_for(orders: Iterable[Order], customer_id: str) -> Iterator[Order]:
    for order in orders:
        if order.customer_id == customer_id:
            yield order


## заказы в заданном статусе ("Placed", "Shipped", ...)
def iter_orders_by_status(orders: Iterable[Order], status: str) -> Iterator[Order]:
    for order in orders:
        if order.status == status:
            yield order
