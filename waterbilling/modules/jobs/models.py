# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/models.py

Modelo ORM de auditoría job_runs (append-only).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK, JSONType, str_enum
from .enums import JobRunStatus, JobTrigger


class JobRun(Base):
    """Una fila por ejecución (programada o manual) de un job."""

    __tablename__ = "job_runs"
    __table_args__ = (
        Index("ix_job_runs_job_name_executed_at", "job_name", "executed_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    job_name: Mapped[str] = mapped_column(String(64), nullable=False)

    status: Mapped[JobRunStatus] = mapped_column(str_enum(JobRunStatus), nullable=False)
    trigger: Mapped[JobTrigger] = mapped_column(str_enum(JobTrigger), nullable=False)

    # Solo conteos y resúmenes acotados, nunca volcados de filas
    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    duration_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    executed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<JobRun id={self.id} job={self.job_name} status={self.status} trigger={self.trigger}>"


__all__ = ["JobRun"]
# Fin del archivo backend/waterbilling/modules/jobs/models.py
