# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/utils/money.py

Helpers de montos: todo se maneja como Decimal cuantizado a centavos.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_money(value: Number | None) -> Decimal:
    """
    Convierte a Decimal con 2 decimales (ROUND_HALF_UP).

    Los float pasan por str() para no arrastrar error binario:
        to_money(0.1) == Decimal("0.10")
    """
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


__all__ = ["CENT", "ZERO", "to_money"]
# Fin del archivo backend/waterbilling/shared/utils/money.py
