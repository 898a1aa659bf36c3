# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/repository.py

Repositorios de multas y tipos de multa.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from waterbilling.shared.utils.money import to_money
from .enums import FineStatus, FineTypeCode
from .models import Fine, FineType


class FineTypeRepository(BaseRepository[FineType]):
    def __init__(self):
        super().__init__(FineType)

    async def get_active_by_code(
        self,
        session: AsyncSession,
        code: FineTypeCode,
    ) -> Optional[FineType]:
        stmt = select(FineType).where(FineType.code == code, FineType.is_active.is_(True))
        result = await session.execute(stmt)
        return result.scalars().first()


class FineRepository(BaseRepository[Fine]):
    def __init__(self):
        super().__init__(Fine)

    async def exists_for_bill(
        self,
        session: AsyncSession,
        bill_id: int,
        fine_type: FineTypeCode,
    ) -> bool:
        stmt = select(Fine.id).where(Fine.bill_id == bill_id, Fine.fine_type == fine_type)
        return (await session.execute(stmt)).first() is not None

    async def list_pending_for_update(
        self,
        session: AsyncSession,
        customer_id: int,
    ) -> Sequence[Fine]:
        """Multas pendientes, la más antigua primero (bloqueadas)."""
        stmt = (
            select(Fine)
            .where(Fine.customer_id == customer_id, Fine.status == FineStatus.PENDING)
            .order_by(Fine.applied_date, Fine.id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def sum_outstanding(self, session: AsyncSession, customer_id: int) -> Decimal:
        stmt = select(
            func.coalesce(func.sum(Fine.amount - Fine.amount_paid), 0)
        ).where(Fine.customer_id == customer_id, Fine.status == FineStatus.PENDING)
        return to_money((await session.execute(stmt)).scalar_one())


__all__ = ["FineTypeRepository", "FineRepository"]
# Fin del archivo backend/waterbilling/modules/fines/repository.py
