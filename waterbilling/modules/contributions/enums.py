# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/enums.py

Enums del módulo de aportes mensuales.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class ContributionStatus(StrEnum):
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"
    OVERDUE = "overdue"

    __db_enum_name__ = "contribution_status_enum"


OPEN_CONTRIBUTION_STATUSES = (
    ContributionStatus.PENDING,
    ContributionStatus.PARTIAL,
    ContributionStatus.OVERDUE,
)


__all__ = ["ContributionStatus", "OPEN_CONTRIBUTION_STATUSES"]
# Fin del archivo backend/waterbilling/modules/contributions/enums.py
