# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/schemas.py

Esquemas Pydantic del módulo de pagos:
- PaymentEvent: evento entrante de la red de pagos (callback del banco)
- PaymentAck: respuesta inmediata del webhook
- CustomerValidationResponse: consulta previa al pago

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import FAILURE_EVENT_STATUSES, ReferenceType


class PaymentEvent(BaseModel):
    """
    Evento de pago confirmado por el banco.

    El banco envía el número de cuenta como `member_number`; también se
    aceptan `account_number` y `account_identifier`.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
        frozen=True,
    )

    transaction_id: str = Field(min_length=1, max_length=100)
    account_identifier: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("account_identifier", "member_number", "account_number"),
    )
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    payment_method: str = Field(default="bank", min_length=1, max_length=32)
    status: Optional[str] = Field(default=None, max_length=32)
    timestamp: Optional[datetime] = None
    reference_type: Optional[ReferenceType] = None
    narrative: Optional[str] = Field(default=None, max_length=500)
    customer_name: Optional[str] = Field(default=None, max_length=200)

    @field_validator("reference_type", mode="before")
    @classmethod
    def _normalize_reference_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @property
    def is_failure(self) -> bool:
        """True si el banco reporta fallo o reverso explícito."""
        return bool(self.status) and self.status.lower() in FAILURE_EVENT_STATUSES


class PaymentAck(BaseModel):
    accepted: bool
    transaction_id: Optional[str] = None
    reason: Optional[str] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class BalanceBreakdownOut(BaseModel):
    bills: Decimal
    fines: Decimal
    contributions: Decimal


class CustomerValidationResponse(BaseModel):
    exists: bool
    active: bool
    account_identifier: str
    customer_name: Optional[str] = None
    outstanding_balance: Decimal
    breakdown: BalanceBreakdownOut


__all__ = [
    "PaymentEvent",
    "PaymentAck",
    "BalanceBreakdownOut",
    "CustomerValidationResponse",
]
# Fin del archivo backend/waterbilling/modules/payments/schemas.py
