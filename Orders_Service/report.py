from decimal import Decimal
from functools import reduce
from typing import Dict, List, Tuple

from farmcart.domain import ORDER_STATUSES, Order
from farmcart.lazy import iter_orders_by_status


# ============ Отчёты по заказам ============


def order_total(order: Order) -> Decimal:
    """Сумма строк заказа (totalPrice каждой строки)"""
    return reduce(lambda acc, l: acc + l.total_price, order.items, Decimal("0"))


def orders_summary(orders: Tuple[Order, ...]) -> dict:
    """Сводка: количество по статусам, сумма и средний чек"""
    by_status = {s: sum(1 for _ in iter_orders_by_status(orders, s)) for s in ORDER_STATUSES}
    total = reduce(lambda acc, o: acc + order_total(o), orders, Decimal("0"))

    return {
        "total_orders": len(orders),
        "by_status": by_status,
        "total_spent": total,
        "average_order_value": total / len(orders) if orders else Decimal("0"),
    }


def status_progress(order: Order) -> List[dict]:
    """
    Шаги трекера статуса заказа.
    done - шаг пройден, current - текущий статус.
    """
    idx = ORDER_STATUSES.index(order.status) if order.status in ORDER_STATUSES else -1
    return [
        {"status": s, "done": i < idx, "current": i == idx}
        for i, s in enumerate(ORDER_STATUSES)
    ]


# ============ Отчёты по товарам ============


def top_products(orders: Tuple[Order, ...], k: int = 5) -> List[dict]:
    """Топ-K товаров по выручке; количество суммируется по всем фасовкам"""

    def accumulate(acc: Dict[str, dict], order: Order) -> Dict[str, dict]:
        def add_line(inner: Dict[str, dict], line) -> Dict[str, dict]:
            row = inner.get(
                line.product_id,
                {"product_id": line.product_id, "name": line.name,
                 "quantity": Decimal("0"), "revenue": Decimal("0")},
            )
            return {
                **inner,
                line.product_id: {
                    **row,
                    "quantity": row["quantity"] + line.quantity,
                    "revenue": row["revenue"] + line.total_price,
                },
            }

        return reduce(add_line, order.items, acc)

    rows = reduce(accumulate, orders, {})
    return sorted(rows.values(), key=lambda r: r["revenue"], reverse=True)[:k]
