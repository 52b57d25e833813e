from decimal import Decimal
from typing import Optional, Tuple

from .domain import DOZEN, KG, NormalizedUnit, QuantityOption, to_decimal

KG_OPTIONS = (
    QuantityOption("250g", Decimal("0.25")),
    QuantityOption("500g", Decimal("0.5")),
    QuantityOption("1kg", Decimal("1")),
)
PIECE_OPTIONS = tuple(QuantityOption(f"{n} pc", Decimal(n)) for n in (1, 2, 3))
DOZEN_OPTIONS = tuple(QuantityOption(f"{n} dozen", Decimal(n)) for n in (1, 2, 3))


def quantity_options(unit: NormalizedUnit) -> Tuple[QuantityOption, ...]:
    """Допустимые фасовки по возрастанию value"""
    if unit.type == KG:
        return KG_OPTIONS
    if unit.type == DOZEN:
        return DOZEN_OPTIONS
    return PIECE_OPTIONS


def default_quantity(unit: NormalizedUnit) -> Decimal:
    return quantity_options(unit)[0].value


def step_for(unit: NormalizedUnit) -> Decimal:
    """Шаг кнопок +/-: минимальная фасовка для веса, 1 для штук"""
    return KG_OPTIONS[0].value if unit.type == KG else Decimal("1")


def increment(qty, step) -> Decimal:
    return to_decimal(qty) + to_decimal(step)


def decrement(qty, step) -> Decimal:
    """Не опускается ниже одного шага"""
    step = to_decimal(step)
    return max(to_decimal(qty) - step, step)


def exceeds_availability(qty, available: Optional[Decimal]) -> bool:
    """Проверка остатка выполняется вызывающей стороной перед add_to_cart"""
    if available is None:
        return False
    return to_decimal(qty) > to_decimal(available)
