# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/__init__.py

Pagos: registro idempotente, asignación por prioridad y bitácora de intentos.
"""

from .enums import AllocationTarget, PaymentAttemptOutcome, PaymentStatus, ReferenceType
from .models import Payment, PaymentAllocation, PaymentAttemptLog

__all__ = [
    "AllocationTarget",
    "PaymentAttemptOutcome",
    "PaymentStatus",
    "ReferenceType",
    "Payment",
    "PaymentAllocation",
    "PaymentAttemptLog",
]
