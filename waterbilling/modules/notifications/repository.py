# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/notifications/repository.py

Repositorio de notification_logs.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.shared.database.repository import BaseRepository
from .models import NotificationLog


class NotificationLogRepository(BaseRepository[NotificationLog]):
    def __init__(self):
        super().__init__(NotificationLog)

    async def delete_older_than(self, session: AsyncSession, cutoff: datetime) -> int:
        stmt = delete(NotificationLog).where(NotificationLog.created_at < cutoff)
        result = await session.execute(stmt)
        return result.rowcount or 0


__all__ = ["NotificationLogRepository"]
# Fin del archivo backend/waterbilling/modules/notifications/repository.py
