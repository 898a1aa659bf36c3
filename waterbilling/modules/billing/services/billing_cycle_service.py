# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/services/billing_cycle_service.py

Generador del ciclo de facturación mensual.

Para un mes objetivo crea exactamente una factura por cliente activo que
aún no la tenga:
- previous_balance = saldo pendiente de sus facturas no pagadas
- current_charges  = tarifa plana según tipo de cliente
- total_amount     = previous_balance + current_charges
- due_date         = inicio del mes + payment_due_days

Cada factura se inserta en su propia transacción: una caída a mitad de
lote no corrompe las ya insertadas y re-ejecutar el lote es un no-op
para los clientes ya facturados.

El generador NO envía mensajes: devuelve un BillNotice por factura creada
para que el job los despache al Notifier.

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
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.customers.models import Customer
from waterbilling.modules.customers.repository import CustomerRepository
from waterbilling.modules.system_settings.service import BillingSettings, SystemSettingsService
from waterbilling.shared.database.database import SessionFactory, session_scope
from waterbilling.shared.utils.dates import first_of_month
from waterbilling.shared.utils.money import to_money

logger = logging.getLogger(__name__)

MAX_BILL_NUMBER_SUFFIX = 99


def format_bill_number(customer_id: int, billing_period: date, suffix: int) -> str:
    """BILL-YYYYMM-CCCC-NN, p. ej. BILL-202610-0007-01."""
    return f"BILL-{billing_period:%Y%m}-{customer_id:04d}-{suffix:02d}"


@dataclass(frozen=True)
class BillNotice:
    """Datos para notificar una factura recién generada."""

    customer_id: int
    customer_name: str
    phone: Optional[str]
    bill_number: str
    billing_period: date
    previous_balance: Decimal
    current_charges: Decimal
    total_amount: Decimal
    due_date: date

    def template_variables(self) -> Dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "bill_number": self.bill_number,
            "period": f"{self.billing_period:%B %Y}",
            "previous_balance": self.previous_balance,
            "current_charges": self.current_charges,
            "total_amount": self.total_amount,
            "due_date": self.due_date.isoformat(),
        }


@dataclass
class BillingCycleResult:
    billing_period: date
    eligible: int = 0
    created: List[BillNotice] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "billing_period": self.billing_period.isoformat(),
            "eligible": self.eligible,
            "created": len(self.created),
            "skipped": self.skipped,
            "failed": self.failed,
        }


class BillingCycleService:
    """Genera las facturas de un periodo."""

    def __init__(
        self,
        session_factory: SessionFactory,
        settings_service: Optional[SystemSettingsService] = None,
        customer_repo: Optional[CustomerRepository] = None,
        bill_repo: Optional[BillRepository] = None,
    ):
        self._session_factory = session_factory
        self.settings_service = settings_service or SystemSettingsService()
        self.customer_repo = customer_repo or CustomerRepository()
        self.bill_repo = bill_repo or BillRepository()

    async def generate(
        self,
        billing_month: date,
        customer_ids: Optional[Iterable[int]] = None,
    ) -> BillingCycleResult:
        """
        Genera las facturas de `billing_month`.

        Raises:
            SettingValidationError / SQLAlchemyError: si no se pueden leer
            los ajustes o los clientes (no se crea ninguna factura).
        """
        period = first_of_month(billing_month)

        async with session_scope(self._session_factory) as session:
            billing_settings = await self.settings_service.get_billing_settings(session)
            customers = await self.customer_repo.list_active(session, customer_ids)

        result = BillingCycleResult(billing_period=period, eligible=len(customers))
        logger.info(
            "[billing_cycle] start period=%s eligible=%s due_days=%s",
            period, result.eligible, billing_settings.payment_due_days,
        )

        for customer in customers:
            try:
                notice = await self._generate_for_customer(customer, period, billing_settings)
            except Exception as e:
                result.failed += 1
                logger.error(
                    "[billing_cycle] failed customer_id=%s period=%s error=%s",
                    customer.id, period, e, exc_info=True,
                )
                continue

            if notice is None:
                result.skipped += 1
            else:
                result.created.append(notice)

        logger.info("[billing_cycle] done %s", result.summary())
        return result

    async def _generate_for_customer(
        self,
        customer: Customer,
        period: date,
        billing_settings: BillingSettings,
    ) -> Optional[BillNotice]:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    existing = await self.bill_repo.get_for_period(session, customer.id, period)
                    if existing is not None:
                        logger.debug(
                            "[billing_cycle] skip existing customer_id=%s bill=%s",
                            customer.id, existing.bill_number,
                        )
                        return None

                    previous_balance = await self.bill_repo.sum_unpaid_balance(session, customer.id)
                    current_charges = to_money(billing_settings.flat_rate_for(customer.customer_type))
                    bill = await self.bill_repo.create(
                        session,
                        customer_id=customer.id,
                        bill_number=await self._next_bill_number(session, customer.id, period),
                        billing_period=period,
                        previous_balance=previous_balance,
                        current_charges=current_charges,
                        total_amount=to_money(previous_balance + current_charges),
                        amount_paid=to_money(0),
                        due_date=period + timedelta(days=billing_settings.payment_due_days),
                        status=BillStatus.PENDING,
                    )
        except IntegrityError:
            # Otra corrida insertó la misma factura entre el check y el commit
            logger.debug("[billing_cycle] duplicate on commit customer_id=%s period=%s", customer.id, period)
            return None

        return BillNotice(
            customer_id=customer.id,
            customer_name=customer.name,
            phone=customer.phone,
            bill_number=bill.bill_number,
            billing_period=bill.billing_period,
            previous_balance=bill.previous_balance,
            current_charges=bill.current_charges,
            total_amount=bill.total_amount,
            due_date=bill.due_date,
        )

    async def _next_bill_number(self, session: AsyncSession, customer_id: int, period: date) -> str:
        for suffix in range(1, MAX_BILL_NUMBER_SUFFIX + 1):
            candidate = format_bill_number(customer_id, period, suffix)
            if not await self.bill_repo.bill_number_exists(session, candidate):
                return candidate
        raise RuntimeError(f"no free bill number for customer {customer_id} period {period}")


__all__ = [
    "BillNotice",
    "BillingCycleResult",
    "BillingCycleService",
    "format_bill_number",
]
# Fin del archivo backend/waterbilling/modules/billing/services/billing_cycle_service.py
