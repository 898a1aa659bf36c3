# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/enums.py

Enums del módulo de multas.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class FineStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    WAIVED = "waived"

    __db_enum_name__ = "fine_status_enum"


class FineTypeCode(StrEnum):
    """Catálogo de tipos de multa."""

    LATE_PAYMENT = "late_payment"
    RECONNECTION = "reconnection"
    METER_TAMPERING = "meter_tampering"
    OTHER = "other"

    __db_enum_name__ = "fine_type_code_enum"


__all__ = ["FineStatus", "FineTypeCode"]
# Fin del archivo backend/waterbilling/modules/fines/enums.py
