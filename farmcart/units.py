"""
Разбор свободного описания единицы товара ("250g", "1kg", "piece", "dozen").

Функция никогда не бросает исключений: нераспознанное описание
сворачивается к {kg, 1} - данные вводят фермеры, и витрина не должна падать.
"""

import re
from decimal import Decimal
from functools import lru_cache
from typing import Optional

from .domain import DOZEN, KG, PIECE, NormalizedUnit

DEFAULT_UNIT = NormalizedUnit(type=KG, base_amount=Decimal("1"))

_PIECE_RE = re.compile(r"(?<![a-z])(pieces?|pcs?)(?![a-z])")
_DOZEN_RE = re.compile(r"(?<![a-z])dozens?(?![a-z])")
_GRAMS_RE = re.compile(r"(?<![\d.])(\d+)\s*g")
_KG_RE = re.compile(r"(?<![\d.])(?:(\d+(?:\.\d+)?)\s*)?kg")


def normalize_unit(raw_unit: Optional[str]) -> NormalizedUnit:
    """Описание единицы -> NormalizedUnit (регистр и пробелы не важны)"""
    if raw_unit is None:
        return DEFAULT_UNIT
    return _normalize(str(raw_unit).strip().lower())


@lru_cache(maxsize=512)
def _normalize(s: str) -> NormalizedUnit:
    if not s:
        return DEFAULT_UNIT

    if _DOZEN_RE.search(s):
        return NormalizedUnit(type=DOZEN, base_amount=None)
    if _PIECE_RE.search(s):
        return NormalizedUnit(type=PIECE, base_amount=None)

    grams = _GRAMS_RE.search(s)
    if grams:
        return _kg_unit(Decimal(grams.group(1)) / 1000)

    kg = _KG_RE.search(s)
    if kg:
        # "kg" без числа - ровно один килограмм
        return _kg_unit(Decimal(kg.group(1)) if kg.group(1) else Decimal("1"))

    if "g" in s:
        return NormalizedUnit(type=KG, base_amount=Decimal("0.001"))

    return NormalizedUnit(type=PIECE, base_amount=None) if s == "piece" else DEFAULT_UNIT


def _kg_unit(amount: Decimal) -> NormalizedUnit:
    # "0g" / "0kg" не дают нулевой доли
    if amount <= 0:
        return DEFAULT_UNIT
    return NormalizedUnit(type=KG, base_amount=amount)


def clear_cache() -> None:
    _normalize.cache_clear()
