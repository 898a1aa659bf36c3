# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/models.py

Modelos ORM de pagos:
- payments: un registro por transacción externa (external_transaction_id único)
- payment_allocations: desglose del pago por obligación cubierta
- payment_attempt_logs: bitácora de cada evento entrante, incluso los que
  nunca producen un Payment (rechazados, cliente inexistente, duplicados)

Invariante: sum(payment_allocations.amount) == payments.amount

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from waterbilling.shared.database.base import Base, BigIntPK, Money, str_enum
from .enums import AllocationTarget, PaymentAttemptOutcome, PaymentStatus, ReferenceType


class Payment(Base):
    """Pago confirmado por la red de pagos externa."""

    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    customer_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Idempotencia: el banco puede reintentar el callback
    external_transaction_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
    )

    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    method: Mapped[str] = mapped_column(String(32), nullable=False, default="bank")

    status: Mapped[PaymentStatus] = mapped_column(
        str_enum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.COMPLETED,
    )

    reference_type: Mapped[Optional[ReferenceType]] = mapped_column(
        str_enum(ReferenceType),
        nullable=True,
    )
    narrative: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    allocations: Mapped[List["PaymentAllocation"]] = relationship(
        back_populates="payment",
        lazy="selectin",
        order_by="PaymentAllocation.id",
    )

    def __repr__(self) -> str:
        return (
            f"<Payment id={self.id} tx={self.external_transaction_id} "
            f"amount={self.amount} status={self.status}>"
        )


class PaymentAllocation(Base):
    """Porción de un pago aplicada a una obligación (o a crédito anticipado)."""

    __tablename__ = "payment_allocations"
    __table_args__ = (
        Index("ix_payment_allocations_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    payment_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("payments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    target_type: Mapped[AllocationTarget] = mapped_column(
        str_enum(AllocationTarget),
        nullable=False,
    )

    # NULL solo para target_type = advance
    target_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    payment: Mapped["Payment"] = relationship(back_populates="allocations")


class PaymentAttemptLog(Base):
    """Bitácora durable de eventos de pago entrantes."""

    __tablename__ = "payment_attempt_logs"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)

    transaction_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    account_identifier: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    method: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    outcome: Mapped[PaymentAttemptOutcome] = mapped_column(
        str_enum(PaymentAttemptOutcome),
        nullable=False,
        index=True,
    )
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    payment_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


__all__ = ["Payment", "PaymentAllocation", "PaymentAttemptLog"]
# Fin del archivo backend/waterbilling/modules/payments/models.py
