# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/scheduler/__init__.py

Autor: WaterBilling
Fecha: 2026-10-16
"""

from .scheduler_service import SchedulerService, parse_cron_expression

__all__ = ["SchedulerService", "parse_cron_expression"]

# Fin del archivo backend/waterbilling/shared/scheduler/__init__.py
