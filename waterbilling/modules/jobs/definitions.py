# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/jobs/definitions.py

Jobs por defecto del sistema de facturación.

| job                       | cron (default) | acción                                            |
|---------------------------|----------------|---------------------------------------------------|
| monthly_billing           | 0 6 1 * *      | facturas del mes + avisos bill_generated          |
| monthly_contributions     | 0 7 1 * *      | aportes del mes + avisos contribution_reminder    |
| overdue_notifications     | 0 9 * * *      | resumen de vencidos por cliente + overdue_notice  |
| bill_status_updates       | 0 8 * * *      | pending -> overdue para facturas ya vencidas      |
| fine_application          | 0 10 * * *     | multas por pago tardío + avisos fine_applied      |
| notification_log_cleanup  | 0 2 * * *      | borra notification_logs fuera de retención        |

Cada función devuelve un dict de conteos que el orquestador guarda en
job_runs.details.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.billing.services.billing_cycle_service import BillingCycleService
from waterbilling.modules.billing.services.overdue_notice_service import OverdueNoticeService
from waterbilling.modules.contributions.services.contribution_cycle_service import (
    ContributionCycleService,
)
from waterbilling.modules.fines.services.fine_assessor import FineAssessor
from waterbilling.modules.notifications.dispatcher import NotificationDispatcher
from waterbilling.modules.notifications.repository import NotificationLogRepository
from waterbilling.modules.system_settings.service import SystemSettingsService
from waterbilling.shared.config.settings_base import BaseAppSettings
from waterbilling.shared.database.database import SessionFactory
from waterbilling.shared.integrations.notification_templates import NotificationTemplate
from waterbilling.shared.utils.dates import first_of_month, today_in
from .orchestrator import JobDefinition

logger = logging.getLogger(__name__)


@dataclass
class JobContext:
    """Dependencias compartidas por los jobs."""

    session_factory: SessionFactory
    dispatcher: NotificationDispatcher
    timezone: str = "Africa/Nairobi"
    # Inyectable en tests para fijar la fecha de corrida
    today_provider: Optional[Callable[[], date]] = None

    def today(self) -> date:
        if self.today_provider is not None:
            return self.today_provider()
        return today_in(self.timezone)


async def run_monthly_billing(ctx: JobContext) -> Dict[str, Any]:
    result = await BillingCycleService(ctx.session_factory).generate(first_of_month(ctx.today()))
    sent = await ctx.dispatcher.dispatch_notices(result.created, NotificationTemplate.BILL_GENERATED.value)
    return {**result.summary(), "notifications": sent}


async def run_monthly_contributions(ctx: JobContext) -> Dict[str, Any]:
    result = await ContributionCycleService(ctx.session_factory).generate(first_of_month(ctx.today()))
    sent = await ctx.dispatcher.dispatch_notices(
        result.created, NotificationTemplate.CONTRIBUTION_REMINDER.value
    )
    return {**result.summary(), "notifications": sent}


async def run_overdue_notifications(ctx: JobContext) -> Dict[str, Any]:
    today = ctx.today()
    notices = await OverdueNoticeService(ctx.session_factory).collect(today)
    sent = await ctx.dispatcher.dispatch_notices(notices, NotificationTemplate.OVERDUE_NOTICE.value)
    return {"today": today.isoformat(), "customers": len(notices), "notifications": sent}


async def run_bill_status_updates(ctx: JobContext) -> Dict[str, Any]:
    today = ctx.today()
    async with ctx.session_factory() as session:
        async with session.begin():
            updated = await BillRepository().mark_past_due_overdue(session, today)
    logger.info("[bill_status_updates] marked_overdue=%s today=%s", updated, today.isoformat())
    return {"today": today.isoformat(), "marked_overdue": updated}


async def run_fine_application(ctx: JobContext) -> Dict[str, Any]:
    result = await FineAssessor(ctx.session_factory, timezone=ctx.timezone).assess(ctx.today())
    sent = await ctx.dispatcher.dispatch_notices(result.notices, NotificationTemplate.FINE_APPLIED.value)
    return {**result.summary(), "notifications": sent}


async def run_notification_log_cleanup(ctx: JobContext) -> Dict[str, Any]:
    settings_service = SystemSettingsService()
    repo = NotificationLogRepository()
    async with ctx.session_factory() as session:
        async with session.begin():
            maintenance = await settings_service.get_maintenance_settings(session)
            cutoff = datetime.now(timezone.utc) - timedelta(days=maintenance.notification_retention_days)
            deleted = await repo.delete_older_than(session, cutoff)
    logger.info("[notification_cleanup] deleted=%s cutoff=%s", deleted, cutoff.isoformat())
    return {
        "deleted": deleted,
        "retention_days": maintenance.notification_retention_days,
        "cutoff": cutoff.isoformat(),
    }


def build_job_definitions(ctx: JobContext, settings: BaseAppSettings) -> List[JobDefinition]:
    """Crea las definiciones con los cron configurados (CRON_* en el entorno)."""

    def bind(func: Callable[[JobContext], Any]):
        async def _run() -> Dict[str, Any]:
            return await func(ctx)

        _run.__name__ = func.__name__
        return _run

    return [
        JobDefinition(
            name="monthly_billing",
            cron=settings.cron_monthly_billing,
            func=bind(run_monthly_billing),
            description="Genera las facturas del mes y avisa a cada cliente",
        ),
        JobDefinition(
            name="monthly_contributions",
            cron=settings.cron_monthly_contributions,
            func=bind(run_monthly_contributions),
            description="Genera los aportes mensuales obligatorios",
        ),
        JobDefinition(
            name="overdue_notifications",
            cron=settings.cron_overdue_notifications,
            func=bind(run_overdue_notifications),
            description="Avisa a clientes con facturas vencidas",
        ),
        JobDefinition(
            name="bill_status_updates",
            cron=settings.cron_bill_status_updates,
            func=bind(run_bill_status_updates),
            description="Marca como vencidas las facturas pendientes pasada su fecha",
        ),
        JobDefinition(
            name="fine_application",
            cron=settings.cron_fine_application,
            func=bind(run_fine_application),
            description="Aplica multas por pago tardío vencido el periodo de gracia",
        ),
        JobDefinition(
            name="notification_log_cleanup",
            cron=settings.cron_notification_cleanup,
            func=bind(run_notification_log_cleanup),
            description="Purga la bitácora de notificaciones antigua",
        ),
    ]


__all__ = [
    "JobContext",
    "build_job_definitions",
    "run_monthly_billing",
    "run_monthly_contributions",
    "run_overdue_notifications",
    "run_bill_status_updates",
    "run_fine_application",
    "run_notification_log_cleanup",
]
# Fin del archivo backend/waterbilling/modules/jobs/definitions.py
