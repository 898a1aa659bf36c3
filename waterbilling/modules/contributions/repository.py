# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/repository.py

Repositorio de aportes mensuales.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from waterbilling.shared.utils.money import to_money
from .enums import OPEN_CONTRIBUTION_STATUSES
from .models import Contribution


class ContributionRepository(BaseRepository[Contribution]):
    def __init__(self):
        super().__init__(Contribution)

    async def get_for_month(
        self,
        session: AsyncSession,
        customer_id: int,
        month: date,
    ) -> Optional[Contribution]:
        stmt = select(Contribution).where(
            Contribution.customer_id == customer_id,
            Contribution.contribution_month == month,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_open_for_update(
        self,
        session: AsyncSession,
        customer_id: int,
    ) -> Sequence[Contribution]:
        """Aportes con saldo, el mes más antiguo primero (bloqueados)."""
        stmt = (
            select(Contribution)
            .where(
                Contribution.customer_id == customer_id,
                Contribution.status.in_(OPEN_CONTRIBUTION_STATUSES),
            )
            .order_by(Contribution.contribution_month, Contribution.id)
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def sum_outstanding(self, session: AsyncSession, customer_id: int) -> Decimal:
        stmt = select(
            func.coalesce(func.sum(Contribution.amount_required - Contribution.amount_paid), 0)
        ).where(
            Contribution.customer_id == customer_id,
            Contribution.status.in_(OPEN_CONTRIBUTION_STATUSES),
        )
        return to_money((await session.execute(stmt)).scalar_one())


__all__ = ["ContributionRepository"]
# Fin del archivo backend/waterbilling/modules/contributions/repository.py
