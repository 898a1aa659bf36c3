# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/repositories/__init__.py

Repositorios del módulo de pagos.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from .payment_repository import PaymentRepository
from .allocation_repository import PaymentAllocationRepository
from .attempt_log_repository import PaymentAttemptLogRepository

__all__ = [
    "PaymentRepository",
    "PaymentAllocationRepository",
    "PaymentAttemptLogRepository",
]

# Fin del archivo backend/waterbilling/modules/payments/repositories/__init__.py
