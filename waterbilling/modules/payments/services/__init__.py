# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/services/__init__.py

Servicios del módulo de pagos.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from .allocation_engine import (
    ADVANCE_EPSILON,
    AllocationEngine,
    AllocationLine,
    AllocationResult,
    allocation_order,
)
from .payment_processor import PaymentOutcome, PaymentProcessor
from .payment_queue import PaymentEventQueue, process_payment_event

__all__ = [
    "ADVANCE_EPSILON",
    "AllocationEngine",
    "AllocationLine",
    "AllocationResult",
    "allocation_order",
    "PaymentOutcome",
    "PaymentProcessor",
    "PaymentEventQueue",
    "process_payment_event",
]

# Fin del archivo backend/waterbilling/modules/payments/services/__init__.py
