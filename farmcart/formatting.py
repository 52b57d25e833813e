from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from .domain import DOZEN, KG, to_decimal
from .pricing import PriceQuote

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$"}
_CENT = Decimal("0.01")


def plain(value) -> str:
    """Decimal без хвостовых нулей и экспоненты: 250.00 -> '250', 1.20 -> '1.2'"""
    d = to_decimal(value).normalize()
    return format(d, "f")


def units_display(qty, unit_type: str) -> str:
    """Подпись фасовки, которая отличает варианты товара в корзине"""
    q = to_decimal(qty)
    if unit_type == KG:
        return f"{plain(q * 1000)}g" if q < 1 else f"{plain(q)}kg"
    if unit_type == DOZEN:
        return f"{plain(q)} dozen"
    return f"{plain(q)} pc"


def format_quantity(quantity, units: str) -> str:
    """Количество строки корзины; граммы от 1000 переводятся в кг"""
    q = to_decimal(quantity)
    if "dozen" in units:
        return f"{plain(q)} dozen"
    if "g" in units:
        grams = q * 1000
        if grams >= 1000:
            return f"{plain(grams / 1000)}kg"
        return f"{plain(grams)}g"
    return f"{plain(q)} pc"


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(amount, currency: str = "INR") -> str:
    """Всегда два знака после запятой; для INR - группировка лакх/крор"""
    value = to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    units, cents = f"{abs(value):.2f}".split(".")

    code = (currency or "INR").upper()
    if code == "INR":
        grouped = _group_indian(units)
    else:
        grouped = f"{int(units):,}"

    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    return f"{sign}{symbol}{grouped}.{cents}"


def format_unit_price(quote: PriceQuote, currency: str = "INR") -> str:
    return f"{format_currency(quote.price_per_unit, currency)}/{quote.unit_label}"


def format_available(available: Optional[Decimal], unit_type: str) -> str:
    """Бейдж остатка на карточке товара"""
    if available is None:
        return "N/A"
    a = to_decimal(available)
    if a <= 0:
        return "Sold Out"
    if unit_type == KG:
        if a >= 1:
            return f"{a:.1f}kg"
        return f"{a * 1000:.0f}g"
    suffix = "dozen" if unit_type == DOZEN else "pc"
    return f"{a:.0f} {suffix}"
