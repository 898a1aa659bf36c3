# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/routes/validation_routes.py

Validación de cuenta previa al pago (consulta del banco).

Endpoint:
- GET /payments/validate/{account_identifier}

Cuenta inexistente -> exists=false con saldos en cero (200).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.customers.balance_service import CustomerBalanceService
from waterbilling.modules.payments.schemas import CustomerValidationResponse
from waterbilling.shared.http_utils.dependencies import get_session
from .security import WebhookCaller

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments:validation"])


@router.get("/validate/{account_identifier}", response_model=CustomerValidationResponse)
async def validate_customer(
    account_identifier: str,
    _caller: WebhookCaller,
    session: AsyncSession = Depends(get_session),
) -> CustomerValidationResponse:
    service = CustomerBalanceService()
    try:
        validation = await service.validate_customer(session, account_identifier)
    except SQLAlchemyError as e:
        logger.error("[payments.validate] store error account=%s error=%s", account_identifier, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Balance lookup unavailable",
        ) from e

    logger.info(
        "[payments.validate] account=%s exists=%s active=%s",
        account_identifier, validation.exists, validation.active,
    )
    return CustomerValidationResponse.model_validate(validation.as_dict())


__all__ = ["router"]
# Fin del archivo backend/waterbilling/modules/payments/routes/validation_routes.py
