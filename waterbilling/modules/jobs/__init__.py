# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/__init__.py

Orquestación de jobs programados y su auditoría (job_runs).
"""

from .enums import JobRunStatus, JobState, JobTrigger
from .models import JobRun
from .orchestrator import JobDefinition, JobOrchestrator
from .recorder import JobRunRecorder

__all__ = [
    "JobRunStatus",
    "JobState",
    "JobTrigger",
    "JobRun",
    "JobDefinition",
    "JobOrchestrator",
    "JobRunRecorder",
]
