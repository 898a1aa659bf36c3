# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/services/contribution_cycle_service.py

Generador del aporte mensual: un registro por cliente activo y mes,
con monto y plazo tomados de system_settings. Re-ejecutar el mismo mes
es un no-op para los clientes que ya tienen su aporte.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from waterbilling.modules.contributions.enums import ContributionStatus
from waterbilling.modules.contributions.repository import ContributionRepository
from waterbilling.modules.customers.models import Customer
from waterbilling.modules.customers.repository import CustomerRepository
from waterbilling.modules.system_settings.service import ContributionSettings, SystemSettingsService
from waterbilling.shared.database.database import SessionFactory, session_scope
from waterbilling.shared.utils.dates import first_of_month
from waterbilling.shared.utils.money import to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContributionNotice:
    customer_id: int
    customer_name: str
    phone: Optional[str]
    contribution_month: date
    amount_required: Decimal
    due_date: date

    def template_variables(self) -> Dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "month": f"{self.contribution_month:%B %Y}",
            "amount_required": self.amount_required,
            "due_date": self.due_date.isoformat(),
        }


@dataclass
class ContributionCycleResult:
    contribution_month: date
    eligible: int = 0
    created: List[ContributionNotice] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "contribution_month": self.contribution_month.isoformat(),
            "eligible": self.eligible,
            "created": len(self.created),
            "skipped": self.skipped,
            "failed": self.failed,
        }


class ContributionCycleService:
    def __init__(
        self,
        session_factory: SessionFactory,
        settings_service: Optional[SystemSettingsService] = None,
        customer_repo: Optional[CustomerRepository] = None,
        contribution_repo: Optional[ContributionRepository] = None,
    ):
        self._session_factory = session_factory
        self.settings_service = settings_service or SystemSettingsService()
        self.customer_repo = customer_repo or CustomerRepository()
        self.contribution_repo = contribution_repo or ContributionRepository()

    async def generate(
        self,
        month: date,
        customer_ids: Optional[Iterable[int]] = None,
    ) -> ContributionCycleResult:
        month = first_of_month(month)

        async with session_scope(self._session_factory) as session:
            contribution_settings = await self.settings_service.get_contribution_settings(session)
            customers = await self.customer_repo.list_active(session, customer_ids)

        result = ContributionCycleResult(contribution_month=month, eligible=len(customers))

        for customer in customers:
            try:
                notice = await self._generate_for_customer(customer, month, contribution_settings)
            except Exception as e:
                result.failed += 1
                logger.error(
                    "[contribution_cycle] failed customer_id=%s month=%s error=%s",
                    customer.id, month, e, exc_info=True,
                )
                continue

            if notice is None:
                result.skipped += 1
            else:
                result.created.append(notice)

        logger.info("[contribution_cycle] done %s", result.summary())
        return result

    async def _generate_for_customer(
        self,
        customer: Customer,
        month: date,
        contribution_settings: ContributionSettings,
    ) -> Optional[ContributionNotice]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    if await self.contribution_repo.get_for_month(session, customer.id, month):
                        logger.debug("[contribution_cycle] skip existing customer_id=%s", customer.id)
                        return None

                    contribution = await self.contribution_repo.create(
                        session,
                        customer_id=customer.id,
                        contribution_month=month,
                        amount_required=to_money(contribution_settings.amount),
                        amount_paid=to_money(0),
                        status=ContributionStatus.PENDING,
                        due_date=month + timedelta(days=contribution_settings.due_days),
                    )
        except IntegrityError:
            logger.debug("[contribution_cycle] duplicate on commit customer_id=%s", customer.id)
            return None

        return ContributionNotice(
            customer_id=customer.id,
            customer_name=customer.name,
            phone=customer.phone,
            contribution_month=contribution.contribution_month,
            amount_required=contribution.amount_required,
            due_date=contribution.due_date,
        )


__all__ = ["ContributionNotice", "ContributionCycleResult", "ContributionCycleService"]
# Fin del archivo backend/waterbilling/modules/contributions/services/contribution_cycle_service.py
