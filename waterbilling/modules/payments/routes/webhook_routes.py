# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/routes/webhook_routes.py

Webhook de confirmación de pagos del banco.

Endpoint:
- POST /payments/webhook

El handler solo valida y encola; la asignación corre en los workers de
PaymentEventQueue. Respuestas:
    202 {"accepted": true}
    400 {"accepted": false, "reason": "validation_error", ...}
    503 {"accepted": false, "reason": "queue_unavailable"}

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from waterbilling.modules.payments.schemas import PaymentAck
from waterbilling.modules.payments.services.payment_queue import (
    PaymentEventQueue,
    process_payment_event,
)
from waterbilling.shared.http_utils.dependencies import get_payment_queue
from .security import WebhookCaller

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments:webhook"])


@router.post("/webhook", response_model=PaymentAck, status_code=status.HTTP_202_ACCEPTED)
async def payment_webhook(
    request: Request,
    _caller: WebhookCaller,
    queue: PaymentEventQueue = Depends(get_payment_queue),
) -> JSONResponse:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    if not isinstance(payload, dict):
        ack = PaymentAck(accepted=False, reason="invalid_json")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=ack.model_dump(mode="json"))

    ack = process_payment_event(payload, queue)

    if ack.accepted:
        code = status.HTTP_202_ACCEPTED
    elif ack.reason == "validation_error":
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_503_SERVICE_UNAVAILABLE

    logger.info(
        "[payments.webhook] tx=%s accepted=%s reason=%s",
        ack.transaction_id, ack.accepted, ack.reason,
    )
    return JSONResponse(status_code=code, content=ack.model_dump(mode="json"))


__all__ = ["router"]
# Fin del archivo backend/waterbilling/modules/payments/routes/webhook_routes.py
