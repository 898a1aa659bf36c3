# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/models.py

Modelos ORM para fine_types (configuración) y fines.

Invariante: a lo sumo una multa por (bill_id, fine_type).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK, Money, str_enum
from .enums import FineStatus, FineTypeCode


class FineType(Base):
    """Configuración de un tipo de multa: monto fijo o porcentaje del total."""

    __tablename__ = "fine_types"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    code: Mapped[FineTypeCode] = mapped_column(str_enum(FineTypeCode), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Money,
        nullable=False,
        doc="Monto fijo, o tasa en % cuando is_percentage es verdadero.",
    )
    is_percentage: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Fine(Base):
    """Multa aplicada a un cliente (opcionalmente ligada a una factura)."""

    __tablename__ = "fines"
    __table_args__ = (
        UniqueConstraint("bill_id", "fine_type", name="uq_fines_bill_type"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    customer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    bill_id: Mapped[Optional[int]] = mapped_column(
        BigInteger,
        ForeignKey("bills.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    fine_type: Mapped[FineTypeCode] = mapped_column(str_enum(FineTypeCode), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    applied_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[FineStatus] = mapped_column(
        str_enum(FineStatus),
        nullable=False,
        default=FineStatus.PENDING,
        index=True,
    )

    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @property
    def outstanding(self) -> Decimal:
        return self.amount - self.amount_paid


__all__ = ["FineType", "Fine"]
# Fin del archivo backend/waterbilling/modules/fines/models.py
