import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from decimal import Decimal

from farmcart.domain import KG, NormalizedUnit
from farmcart.pricing import derive_price
from farmcart.units import normalize_unit


def test_price_per_kg_from_gram_base_unit():
    """₹100 за 250g -> ₹400/кг, 500g стоят ₹200"""
    quote = derive_price(100, normalize_unit("250g"))
    assert quote.price_per_unit == 400
    assert quote.price_for(0.5) == 200
    assert quote.unit_label == "kg"


def test_price_per_kg_from_kg_base_unit():
    quote = derive_price(40, normalize_unit("1kg"))
    assert quote.price_per_unit == 40
    assert quote.price_for(0.25) == 10


def test_piece_price_is_base_price():
    quote = derive_price(45, normalize_unit("piece"))
    assert quote.price_per_unit == 45
    assert quote.price_for(3) == 135
    assert quote.unit_label == "pc"


def test_dozen_price_is_base_price():
    quote = derive_price("96", normalize_unit("dozen"))
    assert quote.price_per_unit == 96
    assert quote.unit_label == "dozen"


def test_zero_or_missing_scale_is_treated_as_one():
    assert derive_price(70, NormalizedUnit(type=KG, base_amount=None)).price_per_unit == 70
    assert derive_price(70, NormalizedUnit(type=KG, base_amount=Decimal("0"))).price_per_unit == 70


def test_no_rounding_before_display():
    quote = derive_price(10, normalize_unit("3kg"))
    # 10 / 3 не округляется до копеек
    assert quote.price_per_unit != Decimal("3.33")
    assert quote.price_for(3).quantize(Decimal("0.01")) == Decimal("10.00")
