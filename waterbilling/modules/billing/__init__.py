# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/__init__.py

Facturación mensual: modelo Bill, repositorio y generador de ciclo.
"""

from .enums import BillStatus, UNPAID_BILL_STATUSES
from .models import Bill
from .repository import BillRepository

__all__ = ["BillStatus", "UNPAID_BILL_STATUSES", "Bill", "BillRepository"]
