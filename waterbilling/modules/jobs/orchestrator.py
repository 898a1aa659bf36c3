# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/orchestrator.py

Orquestador de jobs programados.

Se construye una vez en el lifespan y se inyecta (app.state) a todo lo
que dispara jobs. Responsabilidades:

- register / start / stop / start_all / stop_all
- run_now: mismo camino _execute que el disparo programado
- guard "ya en ejecución" por job: la segunda invocación concurrente es
  un no-op con status="skipped" y no escribe JobRun
- cada ejecución escribe exactamente un JobRun (details acotados)
- las excepciones del job se capturan en su frontera: un job que falla
  nunca afecta a los demás ni al proceso

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from waterbilling.observability.prom import observe_job_run
from waterbilling.shared.errors import UnknownJobError
from waterbilling.shared.scheduler.scheduler_service import SchedulerService, parse_cron_expression
from .enums import JobRunStatus, JobState, JobTrigger
from .recorder import JobRunRecorder, bound_details

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Awaitable[Optional[Dict[str, Any]]]]


@dataclass(frozen=True)
class JobDefinition:
    name: str
    cron: str
    func: JobFunc
    description: str = ""


@dataclass
class _JobEntry:
    definition: JobDefinition
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    scheduled: bool = False
    last_status: Optional[str] = None
    last_run_at: Optional[datetime] = None
    last_duration_ms: Optional[int] = None


class JobOrchestrator:
    def __init__(
        self,
        scheduler: SchedulerService,
        recorder: JobRunRecorder,
        timezone: Optional[str] = None,
    ):
        self._scheduler = scheduler
        self._recorder = recorder
        self.timezone = timezone or scheduler.timezone
        self._jobs: Dict[str, _JobEntry] = {}

    # ------------------------------------------------------------------
    # Registro y programación
    # ------------------------------------------------------------------
    @property
    def job_names(self) -> List[str]:
        return list(self._jobs)

    def register(self, definition: JobDefinition) -> JobState:
        """
        Raises:
            ValueError: nombre duplicado o expresión cron inválida
        """
        if definition.name in self._jobs:
            raise ValueError(f"job already registered: {definition.name}")
        parse_cron_expression(definition.cron, self.timezone)
        self._jobs[definition.name] = _JobEntry(definition=definition)
        logger.info("[jobs] registered job=%s cron=%s", definition.name, definition.cron)
        return JobState.REGISTERED

    def start(self, name: str) -> JobState:
        entry = self._get(name)
        if not entry.scheduled:
            self._scheduler.add_cron_job(
                self._run_scheduled,
                job_id=name,
                cron_expression=entry.definition.cron,
                job_name=name,
            )
            entry.scheduled = True
            logger.info("[jobs] scheduled job=%s", name)
        if not self._scheduler.is_running:
            logger.warning("[jobs] job=%s queued but scheduler not running", name)
        return self._state(entry)

    def stop(self, name: str) -> JobState:
        """Quita el job del scheduler; una ejecución en curso termina normalmente."""
        entry = self._get(name)
        if entry.scheduled:
            self._scheduler.remove_job(name)
            entry.scheduled = False
            logger.info("[jobs] unscheduled job=%s", name)
        return self._state(entry)

    def start_all(self) -> Dict[str, str]:
        return {name: self.start(name).value for name in self._jobs}

    def stop_all(self) -> Dict[str, str]:
        return {name: self.stop(name).value for name in self._jobs}

    def shutdown(self, wait: bool = False) -> None:
        for entry in self._jobs.values():
            entry.scheduled = False
        self._scheduler.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Ejecución
    # ------------------------------------------------------------------
    async def run_now(self, name: str) -> Dict[str, Any]:
        """Ejecución manual. Nunca propaga errores del job."""
        return await self._execute(name, JobTrigger.MANUAL)

    async def _run_scheduled(self, job_name: str) -> None:
        await self._execute(job_name, JobTrigger.SCHEDULED)

    async def _execute(self, name: str, trigger: JobTrigger) -> Dict[str, Any]:
        entry = self._get(name)

        if entry.lock.locked():
            logger.warning("[jobs] skip job=%s trigger=%s reason=already_running", name, trigger)
            return {
                "job_name": name,
                "status": "skipped",
                "trigger": trigger.value,
                "reason": "already running",
            }

        async with entry.lock:
            executed_at = datetime.now(dt_timezone.utc)
            started = time.perf_counter()
            error: Optional[str] = None
            details: Dict[str, Any] = {}
            logger.info("[jobs] start job=%s trigger=%s", name, trigger)

            try:
                details = await entry.definition.func() or {}
                status = JobRunStatus.SUCCESS
            except Exception as e:
                status = JobRunStatus.FAILED
                error = f"{type(e).__name__}: {e}"[:500]
                logger.error("[jobs] failed job=%s trigger=%s error=%s", name, trigger, e, exc_info=True)

            duration_ms = int((time.perf_counter() - started) * 1000)
            bounded = bound_details(details)

            await self._recorder.record(
                job_name=name,
                status=status,
                trigger=trigger,
                details=bounded,
                error_message=error,
                duration_ms=duration_ms,
                executed_at=executed_at,
            )
            observe_job_run(name, status.value, duration_ms / 1000.0)

            entry.last_status = status.value
            entry.last_run_at = executed_at
            entry.last_duration_ms = duration_ms

        logger.info("[jobs] done job=%s status=%s duration_ms=%s", name, status, duration_ms)
        summary: Dict[str, Any] = {
            "job_name": name,
            "status": status.value,
            "trigger": trigger.value,
            "duration_ms": duration_ms,
        }
        if error is not None:
            summary["error"] = error
        else:
            summary["details"] = bounded
        return summary

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def is_running(self, name: str) -> bool:
        return self._get(name).lock.locked()

    def status(self) -> Dict[str, Dict[str, Any]]:
        result: Dict[str, Dict[str, Any]] = {}
        for name, entry in self._jobs.items():
            scheduler_job = self._scheduler.get_job_status(name) if entry.scheduled else None
            next_run = scheduler_job.get("next_run") if scheduler_job else None
            result[name] = {
                "running": entry.lock.locked(),
                "scheduled": entry.scheduled,
                "state": self._state(entry).value,
                "reason": self._pending_reason(entry),
                "cron": entry.definition.cron,
                "description": entry.definition.description,
                "next_run": next_run.isoformat() if next_run else None,
                "last_status": entry.last_status,
                "last_run_at": entry.last_run_at.isoformat() if entry.last_run_at else None,
                "last_duration_ms": entry.last_duration_ms,
            }
        return result

    def health(self) -> Dict[str, Any]:
        states = {name: self._state(entry).value for name, entry in self._jobs.items()}
        return {
            "scheduler_running": self._scheduler.is_running,
            "timezone": self.timezone,
            "registered": len(self._jobs),
            "scheduled": sum(1 for e in self._jobs.values() if e.scheduled),
            "running": [name for name, state in states.items() if state == JobState.RUNNING.value],
            "failed_last_run": [
                name for name, e in self._jobs.items() if e.last_status == JobRunStatus.FAILED.value
            ],
        }

    def pending_reason(self, name: str) -> Optional[str]:
        return self._pending_reason(self._get(name))

    def _state(self, entry: _JobEntry) -> JobState:
        if entry.lock.locked():
            return JobState.RUNNING
        if entry.scheduled and self._scheduler.is_running:
            return JobState.SCHEDULED
        return JobState.REGISTERED

    def _pending_reason(self, entry: _JobEntry) -> Optional[str]:
        """Job agregado al scheduler pero sin disparos hasta que éste arranque."""
        if entry.scheduled and not self._scheduler.is_running:
            return "scheduler_not_running"
        return None

    def _get(self, name: str) -> _JobEntry:
        entry = self._jobs.get(name)
        if entry is None:
            raise UnknownJobError(name)
        return entry


__all__ = ["JobDefinition", "JobFunc", "JobOrchestrator"]
# Fin del archivo backend/waterbilling/modules/jobs/orchestrator.py
