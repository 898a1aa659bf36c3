# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/repositories/attempt_log_repository.py

Repositorio para la bitácora payment_attempt_logs.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from waterbilling.modules.payments.models import PaymentAttemptLog


class PaymentAttemptLogRepository(BaseRepository[PaymentAttemptLog]):
    def __init__(self) -> None:
        super().__init__(PaymentAttemptLog)

    async def list_by_transaction(
        self,
        session: AsyncSession,
        transaction_id: str,
    ) -> Sequence[PaymentAttemptLog]:
        stmt = (
            select(PaymentAttemptLog)
            .where(PaymentAttemptLog.transaction_id == transaction_id)
            .order_by(PaymentAttemptLog.id.asc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

# Fin del archivo backend/waterbilling/modules/payments/repositories/attempt_log_repository.py
