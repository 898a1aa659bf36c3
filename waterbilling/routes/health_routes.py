# -*- coding: utf-8 -*-
"""
backend/waterbilling/routes/health_routes.py

Endpoint básico de health check.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from waterbilling.shared.database.database import check_database_health

router = APIRouter()


@router.get(
    "/health",
    summary="Health check del backend",
    description="Estado básico del servicio con verificación de conectividad a la base de datos.",
)
async def health_check(request: Request) -> dict:
    settings = request.app.state.settings
    engine = getattr(request.app.state, "engine", None)
    queue = getattr(request.app.state, "payment_queue", None)

    db_ok = engine is not None and await check_database_health(engine, timeout_s=2.0)

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {"reachable": db_ok},
        "payment_queue": {
            "running": bool(queue and queue.running),
            "pending": queue.pending if queue else 0,
        },
        "service": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
    }

# Fin del archivo backend/waterbilling/routes/health_routes.py
