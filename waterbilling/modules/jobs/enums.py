# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/enums.py

Enums del orquestador de jobs.

Ciclo por job:
    registered -> scheduled -> running -> (success | failed) -> scheduled

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class JobRunStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"

    __db_enum_name__ = "job_run_status_enum"


class JobTrigger(StrEnum):
    SCHEDULED = "scheduled"
    MANUAL = "manual"

    __db_enum_name__ = "job_trigger_enum"


class JobState(StrEnum):
    """Estado en memoria de un job registrado (no se persiste)."""

    REGISTERED = "registered"
    SCHEDULED = "scheduled"
    RUNNING = "running"


__all__ = ["JobRunStatus", "JobTrigger", "JobState"]
# Fin del archivo backend/waterbilling/modules/jobs/enums.py
