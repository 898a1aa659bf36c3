# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/system_settings/models.py

Modelo ORM para la tabla system_settings (clave/valor en texto).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base


class SystemSetting(Base):
    """Ajuste operativo; el valor se interpreta según su SettingDefinition."""

    __tablename__ = "system_settings"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, default="general")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


__all__ = ["SystemSetting"]
# Fin del archivo backend/waterbilling/modules/system_settings/models.py
