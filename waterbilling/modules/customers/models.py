# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/customers/models.py

Modelo ORM para la tabla customers.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK, str_enum
from .enums import CustomerType


class Customer(Base):
    """Cliente del servicio de agua (miembro)."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    account_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        unique=True,
        index=True,
        doc="Número de cuenta / miembro usado por el banco para identificar al cliente.",
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    customer_type: Mapped[CustomerType] = mapped_column(
        str_enum(CustomerType),
        nullable=False,
        default=CustomerType.NORMAL,
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Customer id={self.id} account={self.account_number} type={self.customer_type}>"


__all__ = ["Customer"]
# Fin del archivo backend/waterbilling/modules/customers/models.py
