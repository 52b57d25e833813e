from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

KG = "kg"
PIECE = "piece"
DOZEN = "dozen"
UNIT_TYPES = (KG, PIECE, DOZEN)

ORDER_STATUSES = ("Placed", "Confirmed", "Packed", "Shipped", "Delivered")


def to_decimal(value, default: str = "0") -> Decimal:
    """Приводит int/float/str/Decimal к Decimal через str (0.25 -> Decimal('0.25'))"""
    if value is None or value == "":
        return Decimal(default)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal(default)
    # NaN и Infinity ломают деление и quantize дальше по цепочке
    return result if result.is_finite() else Decimal(default)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    base_price: Decimal
    base_unit: Optional[str] = None
    available_quantity: Optional[Decimal] = None  # None = без ограничения
    image: Optional[str] = None
    farmer_id: Optional[str] = None
    badges: Tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizedUnit:
    type: str  # "kg" | "piece" | "dozen"
    base_amount: Optional[Decimal]  # доля канонической единицы; None для штук


@dataclass(frozen=True)
class QuantityOption:
    label: str
    value: Decimal


@dataclass(frozen=True)
class CartLine:
    product_id: str
    units_display: str
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal
    step: Decimal
    name: str = ""
    image: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.product_id, self.units_display)


@dataclass(frozen=True)
class Cart:
    user_id: str
    items: Tuple[CartLine, ...] = ()


@dataclass(frozen=True)
class Session:
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


@dataclass(frozen=True)
class Order:
    id: str
    customer_id: str
    items: Tuple[CartLine, ...]
    total: Decimal
    status: str
    created_at: str


@dataclass(frozen=True)
class Event:
    id: str
    ts: str
    name: str
    payload: dict


def product_from_document(doc: dict) -> Product:
    """
    Единственное место, где применяются значения по умолчанию
    для необязательных полей документа товара.
    """
    price = doc.get("basePrice", doc.get("price"))
    available = doc.get("availableQuantity", doc.get("stock"))
    return Product(
        id=str(doc.get("id", "")),
        name=str(doc.get("name") or ""),
        base_price=to_decimal(price),
        base_unit=doc.get("baseUnit") or None,
        available_quantity=None if available is None else to_decimal(available),
        image=doc.get("image") or None,
        farmer_id=doc.get("farmerId") or None,
        badges=tuple(doc.get("badges") or ()),
    )
