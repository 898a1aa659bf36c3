# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/contributions/models.py

Modelo ORM para la tabla contributions.

Invariantes:
- amount_paid <= amount_required
- status == completed  <=>  amount_paid >= amount_required
- un aporte por cliente y mes

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from waterbilling.shared.database.base import Base, BigIntPK, Money, str_enum
from .enums import ContributionStatus


class Contribution(Base):
    """Aporte mensual obligatorio de un cliente."""

    __tablename__ = "contributions"
    __table_args__ = (
        UniqueConstraint("customer_id", "contribution_month", name="uq_contributions_customer_month"),
        CheckConstraint("amount_paid <= amount_required", name="paid_le_required"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    customer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    contribution_month: Mapped[date] = mapped_column(Date, nullable=False)
    amount_required: Mapped[Decimal] = mapped_column(Money, nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))

    status: Mapped[ContributionStatus] = mapped_column(
        str_enum(ContributionStatus),
        nullable=False,
        default=ContributionStatus.PENDING,
        index=True,
    )

    due_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    @property
    def outstanding(self) -> Decimal:
        return self.amount_required - self.amount_paid


__all__ = ["Contribution"]
# Fin del archivo backend/waterbilling/modules/contributions/models.py
