# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/repositories/allocation_repository.py

Repositorio para la tabla payment_allocations.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from waterbilling.shared.utils.money import to_money
from waterbilling.modules.payments.enums import AllocationTarget
from waterbilling.modules.payments.models import PaymentAllocation


class PaymentAllocationRepository(BaseRepository[PaymentAllocation]):
    def __init__(self) -> None:
        super().__init__(PaymentAllocation)

    async def list_by_payment(
        self,
        session: AsyncSession,
        payment_id: int,
    ) -> Sequence[PaymentAllocation]:
        stmt = (
            select(PaymentAllocation)
            .where(PaymentAllocation.payment_id == payment_id)
            .order_by(PaymentAllocation.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def sum_by_payment(self, session: AsyncSession, payment_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(PaymentAllocation.amount), 0)).where(
            PaymentAllocation.payment_id == payment_id
        )
        return to_money((await session.execute(stmt)).scalar_one())

    async def sum_for_target(
        self,
        session: AsyncSession,
        target_type: AllocationTarget,
        target_id: int,
    ) -> Decimal:
        stmt = select(func.coalesce(func.sum(PaymentAllocation.amount), 0)).where(
            PaymentAllocation.target_type == target_type,
            PaymentAllocation.target_id == target_id,
        )
        return to_money((await session.execute(stmt)).scalar_one())

# Fin del archivo backend/waterbilling/modules/payments/repositories/allocation_repository.py
