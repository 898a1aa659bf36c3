# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/http_utils/dependencies.py

Dependencias FastAPI comunes.

Los componentes de larga vida (session factory, orquestador de jobs, cola
de pagos) se construyen una vez en el lifespan y viven en app.state; las
rutas los reciben por Depends, nunca por import de un singleton.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from typing import Any, AsyncGenerator

from fastapi import HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.config.settings_base import BaseAppSettings


def _state_attr(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"{name} not initialized",
        )
    return value


def get_app_settings(request: Request) -> BaseAppSettings:
    return _state_attr(request, "settings")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Sesión por request (solo lectura salvo que la ruta haga commit)."""
    factory = _state_attr(request, "session_factory")
    async with factory() as session:
        yield session


def get_payment_queue(request: Request):
    return _state_attr(request, "payment_queue")


def get_job_orchestrator(request: Request):
    return _state_attr(request, "job_orchestrator")


def get_job_recorder(request: Request):
    return _state_attr(request, "job_recorder")


__all__ = [
    "get_app_settings",
    "get_session",
    "get_payment_queue",
    "get_job_orchestrator",
    "get_job_recorder",
]
# Fin del archivo backend/waterbilling/shared/http_utils/dependencies.py
