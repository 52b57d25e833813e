from dataclasses import dataclass
from decimal import Decimal

from .domain import DOZEN, KG, PIECE, NormalizedUnit, to_decimal

UNIT_LABELS = {KG: "kg", PIECE: "pc", DOZEN: "dozen"}


@dataclass(frozen=True)
class PriceQuote:
    """Цена за каноническую единицу (кг, штуку или дюжину)"""

    price_per_unit: Decimal
    unit_label: str

    def price_for(self, qty) -> Decimal:
        # округление только при выводе
        return self.price_per_unit * to_decimal(qty)


def derive_price(base_price, unit: NormalizedUnit) -> PriceQuote:
    """
    basePrice задан за одну базовую единицу товара.
    Для штук и дюжин это уже цена за единицу; для веса - пересчёт в цену за кг.
    """
    price = to_decimal(base_price)
    if unit.type != KG:
        return PriceQuote(price_per_unit=price, unit_label=UNIT_LABELS[unit.type])

    amount = unit.base_amount or Decimal("1")
    if amount <= 0:
        amount = Decimal("1")
    return PriceQuote(price_per_unit=price / amount, unit_label=UNIT_LABELS[KG])
