# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/repository.py

Repositorio de facturas.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import exists, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.customers.models import Customer
from waterbilling.modules.fines.enums import FineTypeCode
from waterbilling.modules.fines.models import Fine
from waterbilling.shared.database.repository import BaseRepository
from waterbilling.shared.utils.money import to_money
from .enums import UNPAID_BILL_STATUSES, BillStatus
from .models import Bill


class BillRepository(BaseRepository[Bill]):
    def __init__(self):
        super().__init__(Bill)

    async def get_for_period(
        self,
        session: AsyncSession,
        customer_id: int,
        billing_period: date,
    ) -> Optional[Bill]:
        stmt = select(Bill).where(
            Bill.customer_id == customer_id,
            Bill.billing_period == billing_period,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_for_update(self, session: AsyncSession, bill_id: int) -> Optional[Bill]:
        stmt = select(Bill).where(Bill.id == bill_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalars().first()

    async def bill_number_exists(self, session: AsyncSession, bill_number: str) -> bool:
        stmt = select(Bill.id).where(Bill.bill_number == bill_number)
        return (await session.execute(stmt)).first() is not None

    async def sum_unpaid_balance(self, session: AsyncSession, customer_id: int) -> Decimal:
        """Saldo pendiente (total - pagado) de las facturas no pagadas del cliente."""
        stmt = select(
            func.coalesce(func.sum(Bill.total_amount - Bill.amount_paid), 0)
        ).where(
            Bill.customer_id == customer_id,
            Bill.status.in_(UNPAID_BILL_STATUSES),
        )
        return to_money((await session.execute(stmt)).scalar_one())

    async def list_unpaid_for_update(
        self,
        session: AsyncSession,
        customer_id: int,
    ) -> Sequence[Bill]:
        """Facturas con saldo, la de vencimiento más antiguo primero (bloqueadas)."""
        stmt = (
            select(Bill)
            .where(
                Bill.customer_id == customer_id,
                Bill.status.in_(UNPAID_BILL_STATUSES),
            )
            .order_by(Bill.due_date, Bill.id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_fine_candidates(
        self,
        session: AsyncSession,
        *,
        due_before: date,
        limit: int,
        fine_type: FineTypeCode = FineTypeCode.LATE_PAYMENT,
    ) -> Sequence[Bill]:
        """
        Facturas elegibles para multa: con saldo, cliente activo,
        due_date < due_before (due_before = hoy - días de gracia) y sin
        multa previa de ese tipo. El filtro va antes del LIMIT para que las
        ya multadas no ocupen el lote.
        """
        already_fined = exists(
            select(Fine.id).where(Fine.bill_id == Bill.id, Fine.fine_type == fine_type)
        )
        stmt = (
            select(Bill)
            .join(Customer, Customer.id == Bill.customer_id)
            .where(
                Bill.status.in_(UNPAID_BILL_STATUSES),
                Customer.is_active.is_(True),
                Bill.due_date < due_before,
                ~already_fined,
            )
            .order_by(Bill.due_date, Bill.id)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_overdue_with_customer(
        self,
        session: AsyncSession,
        *,
        today: date,
    ) -> Sequence[tuple[Bill, Customer]]:
        """Facturas vencidas con saldo de clientes activos, agrupables por cliente."""
        stmt = (
            select(Bill, Customer)
            .join(Customer, Customer.id == Bill.customer_id)
            .where(
                Bill.status.in_(UNPAID_BILL_STATUSES),
                Customer.is_active.is_(True),
                Bill.due_date < today,
            )
            .order_by(Customer.id, Bill.due_date)
        )
        result = await session.execute(stmt)
        return [(bill, customer) for bill, customer in result.all()]

    async def mark_past_due_overdue(self, session: AsyncSession, today: date) -> int:
        """pending -> overdue para facturas con due_date < today (un solo UPDATE)."""
        stmt = (
            update(Bill)
            .where(Bill.status == BillStatus.PENDING, Bill.due_date < today)
            .values(status=BillStatus.OVERDUE)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def mark_overdue_if_pending(self, session: AsyncSession, bill: Bill) -> bool:
        if bill.status == BillStatus.PENDING:
            bill.status = BillStatus.OVERDUE
            await session.flush()
            return True
        return False


__all__ = ["BillRepository"]
# Fin del archivo backend/waterbilling/modules/billing/repository.py
