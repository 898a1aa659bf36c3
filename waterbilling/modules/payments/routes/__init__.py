# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/routes/__init__.py

Router agregado del módulo de pagos (prefijo /payments).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from fastapi import APIRouter

from .validation_routes import router as validation_router
from .webhook_routes import router as webhook_router

router = APIRouter(prefix="/payments")
router.include_router(webhook_router)
router.include_router(validation_router)

__all__ = ["router"]

# Fin del archivo backend/waterbilling/modules/payments/routes/__init__.py
