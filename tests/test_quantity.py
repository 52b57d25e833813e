import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from decimal import Decimal

import pytest
from farmcart.quantity import (
    decrement,
    default_quantity,
    exceeds_availability,
    increment,
    quantity_options,
    step_for,
)
from farmcart.units import normalize_unit


def test_kg_ladder():
    options = quantity_options(normalize_unit("1kg"))
    assert [o.label for o in options] == ["250g", "500g", "1kg"]
    assert [o.value for o in options] == [Decimal("0.25"), Decimal("0.5"), Decimal("1")]


def test_piece_and_dozen_ladders():
    assert [o.label for o in quantity_options(normalize_unit("piece"))] == ["1 pc", "2 pc", "3 pc"]
    assert [o.value for o in quantity_options(normalize_unit("dozen"))] == [1, 2, 3]


@pytest.mark.parametrize("raw", ["250g", "piece", "dozen", ""])
def test_options_strictly_increasing(raw):
    values = [o.value for o in quantity_options(normalize_unit(raw))]
    assert all(a < b for a, b in zip(values, values[1:]))


def test_default_is_first_option():
    assert default_quantity(normalize_unit("500g")) == Decimal("0.25")
    assert default_quantity(normalize_unit("piece")) == 1


def test_steps():
    assert step_for(normalize_unit("1kg")) == Decimal("0.25")
    assert step_for(normalize_unit("piece")) == 1
    assert step_for(normalize_unit("dozen")) == 1


def test_increment_and_decrement_clamp():
    assert increment(Decimal("0.25"), Decimal("0.25")) == Decimal("0.5")
    assert decrement(Decimal("1"), Decimal("0.25")) == Decimal("0.75")
    assert decrement(Decimal("0.25"), Decimal("0.25")) == Decimal("0.25")
    assert decrement(1, 1) == 1


def test_exceeds_availability():
    assert not exceeds_availability(Decimal("0.5"), None)
    assert exceeds_availability(Decimal("0.5"), Decimal("0.4"))
    assert not exceeds_availability("0.25", "0.4")
    assert not exceeds_availability(1, 1)
