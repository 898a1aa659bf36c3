# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/services/fine_assessor.py

Asesor de multas por pago tardío.

Regla de elegibilidad (periodo de gracia completamente vencido):
    status in {pending, overdue, partially_paid}
    AND cliente activo
    AND due_date + grace_days < hoy

Ejemplo: due_date = D, grace_days = G
    - día D + G      -> NO elegible
    - día D + G + 1  -> elegible

Monto:
    fine = total_amount * rate / 100   (tipo porcentual)
    fine = amount                      (tipo fijo)
Multas por debajo de fine_minimum_amount no se aplican.

Cada factura se procesa en su propia transacción; un fallo en una factura
se cuenta y se registra sin abortar el lote.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from waterbilling.modules.billing.enums import UNPAID_BILL_STATUSES
from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.customers.balance_service import CustomerBalanceService
from waterbilling.modules.customers.repository import CustomerRepository
from waterbilling.modules.fines.enums import FineStatus, FineTypeCode
from waterbilling.modules.fines.repository import FineRepository, FineTypeRepository
from waterbilling.modules.system_settings.service import FineSettings, SystemSettingsService
from waterbilling.shared.database.database import SessionFactory, session_scope
from waterbilling.shared.errors import FineTypeNotConfiguredError
from waterbilling.shared.utils.dates import today_in
from waterbilling.shared.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FineRule:
    """Snapshot de la configuración del tipo de multa usada en la corrida."""

    code: FineTypeCode
    name: str
    amount: Decimal
    is_percentage: bool

    def compute(self, bill_total: Decimal) -> Decimal:
        if self.is_percentage:
            return to_money(bill_total * self.amount / Decimal(100))
        return to_money(self.amount)


@dataclass(frozen=True)
class AppliedFine:
    customer_id: int
    bill_id: int
    bill_number: str
    amount: Decimal
    reason: str


@dataclass(frozen=True)
class FineNotice:
    customer_id: int
    customer_name: str
    phone: Optional[str]
    fine_total: Decimal
    reason: str
    outstanding_balance: Decimal

    def template_variables(self) -> Dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "fine_amount": self.fine_total,
            "reason": self.reason,
            "outstanding_balance": self.outstanding_balance,
        }


@dataclass
class FineAssessmentResult:
    assessed_on: date
    grace_days: int
    eligible: int = 0
    applied: List[AppliedFine] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0
    notices: List[FineNotice] = field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        return {
            "assessed_on": self.assessed_on.isoformat(),
            "grace_days": self.grace_days,
            "eligible": self.eligible,
            "applied": len(self.applied),
            "skipped": self.skipped,
            "failed": self.failed,
        }


def fine_cutoff(today: date, grace_days: int) -> date:
    """Las facturas con due_date estrictamente anterior a este día son elegibles."""
    return today - timedelta(days=grace_days)


class FineAssessor:
    """Aplica la multa por pago tardío una sola vez por factura."""

    def __init__(
        self,
        session_factory: SessionFactory,
        timezone: str = "Africa/Nairobi",
        settings_service: Optional[SystemSettingsService] = None,
        bill_repo: Optional[BillRepository] = None,
        fine_repo: Optional[FineRepository] = None,
        fine_type_repo: Optional[FineTypeRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
        balance_service: Optional[CustomerBalanceService] = None,
    ):
        self._session_factory = session_factory
        self._timezone = timezone
        self.settings_service = settings_service or SystemSettingsService()
        self.bill_repo = bill_repo or BillRepository()
        self.fine_repo = fine_repo or FineRepository()
        self.fine_type_repo = fine_type_repo or FineTypeRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.balance_service = balance_service or CustomerBalanceService()

    async def assess(self, today: Optional[date] = None) -> FineAssessmentResult:
        """
        Evalúa las facturas vencidas y aplica multas.

        Raises:
            FineTypeNotConfiguredError: no hay tipo late_payment activo
            SettingValidationError: ajustes de multas inválidos
        """
        today = today or today_in(self._timezone)

        async with session_scope(self._session_factory) as session:
            fine_settings = await self.settings_service.get_fine_settings(session)
            fine_type = await self.fine_type_repo.get_active_by_code(session, FineTypeCode.LATE_PAYMENT)
            if fine_type is None:
                raise FineTypeNotConfiguredError(FineTypeCode.LATE_PAYMENT.value)
            rule = FineRule(
                code=fine_type.code,
                name=fine_type.name,
                amount=fine_type.amount,
                is_percentage=fine_type.is_percentage,
            )
            candidate_ids = [
                bill.id
                for bill in await self.bill_repo.list_fine_candidates(
                    session,
                    due_before=fine_cutoff(today, fine_settings.grace_days),
                    limit=fine_settings.batch_limit,
                    fine_type=rule.code,
                )
            ]

        result = FineAssessmentResult(
            assessed_on=today,
            grace_days=fine_settings.grace_days,
            eligible=len(candidate_ids),
        )

        for bill_id in candidate_ids:
            try:
                applied = await self._assess_bill(bill_id, rule, fine_settings, today)
            except Exception as e:
                result.failed += 1
                logger.error("[fine_assessor] failed bill_id=%s error=%s", bill_id, e, exc_info=True)
                continue

            if applied is None:
                result.skipped += 1
            else:
                result.applied.append(applied)

        result.notices = await self._build_notices(result.applied)
        logger.info("[fine_assessor] done %s", result.summary())
        return result

    async def _assess_bill(
        self,
        bill_id: int,
        rule: FineRule,
        fine_settings: FineSettings,
        today: date,
    ) -> Optional[AppliedFine]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    bill = await self.bill_repo.get_for_update(session, bill_id)
                    if bill is None or bill.status not in UNPAID_BILL_STATUSES:
                        return None

                    if await self.fine_repo.exists_for_bill(session, bill.id, rule.code):
                        logger.debug("[fine_assessor] skip existing fine bill_id=%s", bill.id)
                        return None

                    amount = rule.compute(bill.total_amount)
                    if amount < fine_settings.minimum_amount:
                        logger.debug(
                            "[fine_assessor] skip below minimum bill_id=%s amount=%s min=%s",
                            bill.id, amount, fine_settings.minimum_amount,
                        )
                        return None

                    reason = (
                        f"{rule.name}: bill {bill.bill_number} unpaid "
                        f"{fine_settings.grace_days} days after due date {bill.due_date.isoformat()}"
                    )
                    await self.fine_repo.create(
                        session,
                        customer_id=bill.customer_id,
                        bill_id=bill.id,
                        fine_type=rule.code,
                        amount=amount,
                        amount_paid=ZERO,
                        reason=reason,
                        applied_date=today,
                        status=FineStatus.PENDING,
                    )
                    await self.bill_repo.mark_overdue_if_pending(session, bill)
                    applied = AppliedFine(
                        customer_id=bill.customer_id,
                        bill_id=bill.id,
                        bill_number=bill.bill_number,
                        amount=amount,
                        reason=reason,
                    )
        except IntegrityError:
            logger.debug("[fine_assessor] duplicate on commit bill_id=%s", bill_id)
            return None

        return applied

    async def _build_notices(self, applied: List[AppliedFine]) -> List[FineNotice]:
        """Un aviso por cliente afectado, con el saldo ya actualizado."""
        if not applied:
            return []

        by_customer: Dict[int, List[AppliedFine]] = {}
        for item in applied:
            by_customer.setdefault(item.customer_id, []).append(item)

        notices: List[FineNotice] = []
        async with session_scope(self._session_factory) as session:
            customers = {
                c.id: c for c in await self.customer_repo.list_active(session, by_customer.keys())
            }
            for customer_id, fines in by_customer.items():
                customer = customers.get(customer_id)
                if customer is None:
                    continue
                breakdown = await self.balance_service.get_breakdown(session, customer_id)
                notices.append(FineNotice(
                    customer_id=customer_id,
                    customer_name=customer.name,
                    phone=customer.phone,
                    fine_total=to_money(sum((f.amount for f in fines), ZERO)),
                    reason="; ".join(f.reason for f in fines),
                    outstanding_balance=breakdown.total,
                ))
        return notices


__all__ = [
    "AppliedFine",
    "FineAssessmentResult",
    "FineAssessor",
    "FineNotice",
    "FineRule",
    "fine_cutoff",
]
# Fin del archivo backend/waterbilling/modules/fines/services/fine_assessor.py
