# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/customers/repository.py

Repositorio de clientes (solo lectura para el núcleo).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from .models import Customer


class CustomerRepository(BaseRepository[Customer]):
    def __init__(self):
        super().__init__(Customer)

    async def get_by_account_number(
        self,
        session: AsyncSession,
        account_number: str,
    ) -> Optional[Customer]:
        stmt = select(Customer).where(Customer.account_number == account_number)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_active(
        self,
        session: AsyncSession,
        customer_ids: Optional[Iterable[int]] = None,
    ) -> Sequence[Customer]:
        """Clientes activos, opcionalmente filtrados por id, en orden estable."""
        stmt = select(Customer).where(Customer.is_active.is_(True))
        if customer_ids is not None:
            stmt = stmt.where(Customer.id.in_(list(customer_ids)))
        stmt = stmt.order_by(Customer.id)
        result = await session.execute(stmt)
        return result.scalars().all()


__all__ = ["CustomerRepository"]
# Fin del archivo backend/waterbilling/modules/customers/repository.py
