# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/enums.py

Enums del módulo de facturación.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class BillStatus(StrEnum):
    """Estado de la factura mensual."""

    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"

    __db_enum_name__ = "bill_status_enum"


# Facturas con saldo por cobrar
UNPAID_BILL_STATUSES = (
    BillStatus.PENDING,
    BillStatus.PARTIALLY_PAID,
    BillStatus.OVERDUE,
)


__all__ = ["BillStatus", "UNPAID_BILL_STATUSES"]
# Fin del archivo backend/waterbilling/modules/billing/enums.py
