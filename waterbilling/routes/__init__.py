# -*- coding: utf-8 -*-
"""
backend/waterbilling/routes/__init__.py

Ensamblador principal de ruteadores.

- /health
- /payments/webhook, /payments/validate/{account}
- /admin/jobs/*

Autor: WaterBilling
Fecha: 2026-10-16
"""

from fastapi import APIRouter

from waterbilling.modules.jobs.routes import router as jobs_admin_router
from waterbilling.modules.payments.routes import router as payments_router
from .health_routes import router as health_router

router = APIRouter()

router.include_router(health_router)
router.include_router(payments_router)
router.include_router(jobs_admin_router)

__all__ = ["router"]

# Fin del archivo backend/waterbilling/routes/__init__.py
