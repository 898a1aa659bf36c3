# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/routes.py

Control administrativo de jobs (header X-Admin-Key).

Endpoints:
- GET  /admin/jobs                     estado de todos los jobs
- GET  /admin/jobs/health              salud del scheduler
- GET  /admin/jobs/runs                auditoría reciente (job_name, limit)
- POST /admin/jobs/{job_name}/start
- POST /admin/jobs/{job_name}/stop
- POST /admin/jobs/{job_name}/run-now  ejecución manual (resumen estructurado)

Job desconocido -> 404.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel

from waterbilling.shared.config.settings_base import BaseAppSettings
from waterbilling.shared.errors import UnknownJobError
from waterbilling.shared.http_utils.dependencies import (
    get_app_settings,
    get_job_orchestrator,
    get_job_recorder,
)
from .orchestrator import JobOrchestrator
from .recorder import JobRunRecorder
from .repository import MAX_RUNS_PAGE

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════════

class JobRunOut(BaseModel):
    id: int
    job_name: str
    status: str
    trigger: str
    details: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None
    duration_ms: int
    executed_at: datetime


class JobRunsResponse(BaseModel):
    runs: List[JobRunOut]
    count: int


class JobStateResponse(BaseModel):
    job_name: str
    state: str
    reason: Optional[str] = None


# ═══════════════════════════════════════════════════════════════════════════════
# AUTH
# ═══════════════════════════════════════════════════════════════════════════════

async def require_admin_key(
    x_admin_key: Annotated[str | None, Header()] = None,
    settings: BaseAppSettings = Depends(get_app_settings),
) -> bool:
    if settings.admin_api_key is None:
        logger.error("[admin.jobs] ADMIN_API_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin key not configured",
        )
    if not x_admin_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin key required")

    expected = settings.admin_api_key.get_secret_value()
    if not secrets.compare_digest(x_admin_key.encode(), expected.encode()):
        logger.warning("[admin.jobs] invalid admin key")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin key")
    return True


router = APIRouter(
    prefix="/admin/jobs",
    tags=["admin:jobs"],
    dependencies=[Depends(require_admin_key)],
)


def _not_found(e: UnknownJobError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# ═══════════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("")
async def jobs_status(
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> Dict[str, Dict[str, Any]]:
    return orchestrator.status()


@router.get("/health")
async def jobs_health(
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> Dict[str, Any]:
    return orchestrator.health()


@router.get("/runs", response_model=JobRunsResponse)
async def job_runs(
    job_name: Optional[str] = Query(default=None, max_length=64),
    limit: int = Query(default=50, ge=1, le=MAX_RUNS_PAGE),
    recorder: JobRunRecorder = Depends(get_job_recorder),
) -> JobRunsResponse:
    runs = await recorder.recent(job_name=job_name, limit=limit)
    items = [
        JobRunOut(
            id=run.id,
            job_name=run.job_name,
            status=str(run.status),
            trigger=str(run.trigger),
            details=run.details,
            error_message=run.error_message,
            duration_ms=run.duration_ms,
            executed_at=run.executed_at,
        )
        for run in runs
    ]
    return JobRunsResponse(runs=items, count=len(items))


@router.post("/{job_name}/start", response_model=JobStateResponse)
async def start_job(
    job_name: str,
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> JobStateResponse:
    try:
        state = orchestrator.start(job_name)
    except UnknownJobError as e:
        raise _not_found(e) from e
    logger.info("[admin.jobs] start job=%s", job_name)
    return JobStateResponse(
        job_name=job_name,
        state=state.value,
        reason=orchestrator.pending_reason(job_name),
    )


@router.post("/{job_name}/stop", response_model=JobStateResponse)
async def stop_job(
    job_name: str,
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> JobStateResponse:
    try:
        state = orchestrator.stop(job_name)
    except UnknownJobError as e:
        raise _not_found(e) from e
    logger.info("[admin.jobs] stop job=%s", job_name)
    return JobStateResponse(
        job_name=job_name,
        state=state.value,
        reason=orchestrator.pending_reason(job_name),
    )


@router.post("/{job_name}/run-now")
async def run_job_now(
    job_name: str,
    orchestrator: JobOrchestrator = Depends(get_job_orchestrator),
) -> Dict[str, Any]:
    try:
        summary = await orchestrator.run_now(job_name)
    except UnknownJobError as e:
        raise _not_found(e) from e
    logger.info("[admin.jobs] run-now job=%s status=%s", job_name, summary.get("status"))
    return summary


__all__ = ["router", "require_admin_key"]
# Fin del archivo backend/waterbilling/modules/jobs/routes.py
