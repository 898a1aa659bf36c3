# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/recorder.py

Registro de ejecuciones de jobs en job_runs.

Uso:
    recorder = JobRunRecorder(session_factory)
    await recorder.record(
        job_name="fine_application",
        status=JobRunStatus.SUCCESS,
        trigger=JobTrigger.SCHEDULED,
        details={"applied": 3},
        duration_ms=120,
    )

El registro es best-effort: si la escritura falla se loguea y el job no
se ve afectado. Usa su propia sesión y transacción.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from waterbilling.shared.database.database import SessionFactory, session_scope
from .enums import JobRunStatus, JobTrigger
from .models import JobRun
from .repository import JobRunRepository

logger = logging.getLogger(__name__)

MAX_DETAIL_ITEMS = 20
MAX_DETAIL_STRING = 500
MAX_DETAIL_DEPTH = 4


def bound_details(value: Any, _depth: int = 0) -> Any:
    """
    Reduce un payload de detalles a algo serializable en JSON y acotado:
    listas a MAX_DETAIL_ITEMS, strings a MAX_DETAIL_STRING, profundidad
    a MAX_DETAIL_DEPTH. Decimal/fecha/enum se convierten a str.
    """
    if _depth > MAX_DETAIL_DEPTH:
        return "..."
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return value[:MAX_DETAIL_STRING]
    if isinstance(value, dict):
        return {
            str(k)[:100]: bound_details(v, _depth + 1)
            for k, v in list(value.items())[:MAX_DETAIL_ITEMS]
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        items = list(value)
        bounded = [bound_details(v, _depth + 1) for v in items[:MAX_DETAIL_ITEMS]]
        if len(items) > MAX_DETAIL_ITEMS:
            bounded.append(f"... {len(items) - MAX_DETAIL_ITEMS} more")
        return bounded
    return str(value)[:MAX_DETAIL_STRING]


class JobRunRecorder:
    """Escribe y consulta la auditoría de ejecuciones."""

    def __init__(self, session_factory: SessionFactory, repo: Optional[JobRunRepository] = None):
        self._session_factory = session_factory
        self.repo = repo or JobRunRepository()

    async def record(
        self,
        *,
        job_name: str,
        status: JobRunStatus,
        trigger: JobTrigger,
        details: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
        duration_ms: int = 0,
        executed_at: Optional[datetime] = None,
    ) -> Optional[int]:
        """
        Returns:
            id del JobRun, o None si no se pudo registrar
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    run = await self.repo.create(
                        session,
                        job_name=job_name,
                        status=status,
                        trigger=trigger,
                        details=bound_details(details or {}),
                        error_message=error_message[:MAX_DETAIL_STRING] if error_message else None,
                        duration_ms=duration_ms,
                        executed_at=executed_at or datetime.now(timezone.utc),
                    )
                    run_id = run.id
        except Exception as e:
            logger.warning("[job_recorder] failed to record job=%s status=%s error=%s", job_name, status, e)
            return None

        logger.debug("[job_recorder] recorded job=%s status=%s run_id=%s", job_name, status, run_id)
        return run_id

    async def recent(self, *, job_name: Optional[str] = None, limit: int = 50) -> Sequence[JobRun]:
        async with session_scope(self._session_factory) as session:
            return await self.repo.list_recent(session, job_name=job_name, limit=limit)


__all__ = ["JobRunRecorder", "bound_details", "MAX_DETAIL_ITEMS", "MAX_DETAIL_STRING"]
# Fin del archivo backend/waterbilling/modules/jobs/recorder.py
