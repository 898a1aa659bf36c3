# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/enums.py

Enums del módulo de pagos.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class PaymentStatus(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"

    __db_enum_name__ = "payment_status_enum"


class AllocationTarget(StrEnum):
    """Destino de una porción del pago."""

    BILL = "bill"
    FINE = "fine"
    CONTRIBUTION = "contribution"
    ADVANCE = "advance"

    __db_enum_name__ = "allocation_target_enum"


class ReferenceType(StrEnum):
    """Pista opcional del pagador sobre qué obligación cubrir primero."""

    BILL = "bill"
    FINE = "fine"
    CONTRIBUTION = "contribution"
    GENERAL = "general"

    __db_enum_name__ = "payment_reference_type_enum"


class PaymentAttemptOutcome(StrEnum):
    """Resultado de procesar un evento de pago entrante."""

    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    CUSTOMER_NOT_FOUND = "customer_not_found"
    REJECTED_STATUS = "rejected_status"
    ERROR = "error"

    __db_enum_name__ = "payment_attempt_outcome_enum"


# Estados del evento entrante que indican fallo o reverso del banco
FAILURE_EVENT_STATUSES = frozenset(
    {"failed", "failure", "reversed", "reversal", "cancelled", "canceled"}
)


__all__ = [
    "PaymentStatus",
    "AllocationTarget",
    "ReferenceType",
    "PaymentAttemptOutcome",
    "FAILURE_EVENT_STATUSES",
]
# Fin del archivo backend/waterbilling/modules/payments/enums.py
