# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/models.py

Modelo ORM para la tabla bills.

Invariantes:
- total_amount == previous_balance + current_charges al crear la factura
- una factura por cliente y periodo (UNIQUE customer_id + billing_period)
- saldo pendiente = total_amount - amount_paid

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK, Money, str_enum
from .enums import BillStatus


class Bill(Base):
    """Factura mensual de un cliente."""

    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint("customer_id", "billing_period", name="uq_bills_customer_period"),
        Index("ix_bills_status_due_date", "status", "due_date"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    customer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    bill_number: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)

    billing_period: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        doc="Primer día del mes facturado.",
    )

    previous_balance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    current_charges: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))

    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[BillStatus] = mapped_column(
        str_enum(BillStatus),
        nullable=False,
        default=BillStatus.PENDING,
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
        return self.total_amount - self.amount_paid

    def __repr__(self) -> str:
        return (
            f"<Bill id={self.id} number={self.bill_number} "
            f"total={self.total_amount} paid={self.amount_paid} status={self.status}>"
        )


__all__ = ["Bill"]
# Fin del archivo backend/waterbilling/modules/billing/models.py
