# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payments.

Responsabilidades:
- Idempotencia por external_transaction_id
- Conteo por cliente (consultas de auditoría y tests)

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from waterbilling.modules.payments.models import Payment


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self) -> None:
        super().__init__(Payment)

    # -----------------------------------------------------------
    # Idempotencia: no procesar dos veces la misma transacción
    # -----------------------------------------------------------
    async def get_by_external_id(
        self,
        session: AsyncSession,
        external_transaction_id: str,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(
            Payment.external_transaction_id == external_transaction_id
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_by_customer(
        self,
        session: AsyncSession,
        customer_id: int,
    ) -> Sequence[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.customer_id == customer_id)
            .order_by(Payment.payment_date.asc(), Payment.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_external_id(
        self,
        session: AsyncSession,
        external_transaction_id: str,
    ) -> int:
        stmt = select(func.count(Payment.id)).where(
            Payment.external_transaction_id == external_transaction_id
        )
        return int((await session.execute(stmt)).scalar_one())

# Fin del archivo backend/waterbilling/modules/payments/repositories/payment_repository.py
