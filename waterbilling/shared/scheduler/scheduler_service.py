# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/scheduler/scheduler_service.py

Servicio de programación de tareas periódicas usando APScheduler.

Se construye una sola vez en el lifespan de la app y se inyecta al
orquestador de jobs (sin instancia global).

Autor: WaterBilling
Fecha: 2026-10-16
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)


def parse_cron_expression(cron_expression: str, timezone: str) -> CronTrigger:
    """
    Convierte una expresión cron de 5 campos en CronTrigger.

    Raises:
        ValueError: si la expresión no tiene 5 campos o algún campo es inválido
    """
    parts = cron_expression.split()
    if len(parts) != 5:
        raise ValueError(f"Expresión cron inválida (requiere 5 campos): {cron_expression!r}")
    minute, hour, day, month, day_of_week = parts
    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=day_of_week,
        timezone=timezone,
    )


class SchedulerService:
    """
    Envoltorio de AsyncIOScheduler.

    - Jobs cron con zona horaria fija
    - coalesce + max_instances=1 por job
    - Registro y eliminación dinámica de jobs
    """

    def __init__(self, timezone: str = "Africa/Nairobi", misfire_grace_sec: int = 300):
        self.timezone = timezone
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": misfire_grace_sec,
            },
            timezone=timezone,
        )
        self._started = False
        logger.info("[scheduler] initialized timezone=%s", timezone)

    def start(self) -> None:
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("[scheduler] started")

    def shutdown(self, wait: bool = True) -> None:
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("[scheduler] stopped")

    def add_cron_job(
        self,
        func: Callable,
        job_id: str,
        cron_expression: str,
        **kwargs: Any,
    ) -> str:
        trigger = parse_cron_expression(cron_expression, self.timezone)
        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.info("[scheduler] job added id=%s cron=%s", job_id, cron_expression)
        return job_id

    def remove_job(self, job_id: str) -> bool:
        """True si se eliminó, False si no existía."""
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug("[scheduler] remove skipped, job not found id=%s", job_id)
            return False
        logger.info("[scheduler] job removed id=%s", job_id)
        return True

    def has_job(self, job_id: str) -> bool:
        return self._scheduler.get_job(job_id) is not None

    def get_jobs(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": getattr(job, "next_run_time", None),
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_job_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        return {
            "id": job.id,
            "name": job.name,
            # next_run_time no existe mientras el scheduler no ha arrancado
            "next_run": getattr(job, "next_run_time", None),
            "trigger": str(job.trigger),
        }

    @property
    def is_running(self) -> bool:
        return self._started and self._scheduler.running


__all__ = ["SchedulerService", "parse_cron_expression"]
# Fin del archivo backend/waterbilling/shared/scheduler/scheduler_service.py
