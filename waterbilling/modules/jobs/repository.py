# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/repository.py

Repositorio de la auditoría job_runs.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from .models import JobRun

MAX_RUNS_PAGE = 200


class JobRunRepository(BaseRepository[JobRun]):
    def __init__(self):
        super().__init__(JobRun)

    async def list_recent(
        self,
        session: AsyncSession,
        *,
        job_name: Optional[str] = None,
        limit: int = 50,
    ) -> Sequence[JobRun]:
        """Ejecuciones más recientes primero. `limit` va como parámetro ligado."""
        limit = max(1, min(int(limit), MAX_RUNS_PAGE))
        stmt = select(JobRun)
        if job_name:
            stmt = stmt.where(JobRun.job_name == job_name)
        stmt = stmt.order_by(JobRun.executed_at.desc(), JobRun.id.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_last(self, session: AsyncSession, job_name: str) -> Optional[JobRun]:
        runs = await self.list_recent(session, job_name=job_name, limit=1)
        return runs[0] if runs else None


__all__ = ["JobRunRepository", "MAX_RUNS_PAGE"]
# Fin del archivo backend/waterbilling/modules/jobs/repository.py
