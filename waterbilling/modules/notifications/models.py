# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/notifications/models.py

Modelo ORM para notification_logs (un registro por intento de envío).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK


class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    customer_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, index=True)
    recipient: Mapped[str] = mapped_column(String(32), nullable=False)
    template_type: Mapped[str] = mapped_column(String(40), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    message_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )


__all__ = ["NotificationLog"]
# Fin del archivo backend/waterbilling/modules/notifications/models.py
