# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/utils/dates.py

Helpers de fechas para periodos de facturación.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Suma meses a una fecha de inicio de mes (día 1)."""
    index = value.month - 1 + months
    return date(value.year + index // 12, index % 12 + 1, 1)


def today_in(timezone: str) -> date:
    """Fecha actual en la zona horaria operativa (p. ej. Africa/Nairobi)."""
    return datetime.now(ZoneInfo(timezone)).date()


__all__ = ["first_of_month", "add_months", "today_in"]
# Fin del archivo backend/waterbilling/shared/utils/dates.py
