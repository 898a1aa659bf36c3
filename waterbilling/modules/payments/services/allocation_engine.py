# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/services/allocation_engine.py

Motor de asignación de pagos.

Distribuye el monto de un Payment sobre las obligaciones pendientes del
cliente en orden estricto de prioridad:

    1. Facturas      (due_date más antiguo primero)
    2. Multas        (applied_date más antiguo primero)
    3. Aportes       (contribution_month más antiguo primero)
    4. Crédito anticipado (remanente > ADVANCE_EPSILON, sin target_id)

Un `reference_type` del pagador adelanta esa categoría al frente; el resto
conserva el orden por defecto para el sobrante.

Transiciones:
    factura: cubierta -> paid (+ paid_at); parcial -> partially_paid
    multa:   cubierta -> paid (+ paid_at)
    aporte:  amount_paid >= amount_required -> completed; si no -> partial

Invariante: sum(allocations.amount) == payment.amount

El motor NO abre transacciones: trabaja dentro de la sesión del llamador
(PaymentProcessor), que es quien hace commit o rollback completo.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.contributions.enums import ContributionStatus
from waterbilling.modules.contributions.repository import ContributionRepository
from waterbilling.modules.fines.enums import FineStatus
from waterbilling.modules.fines.repository import FineRepository
from waterbilling.modules.payments.enums import AllocationTarget, ReferenceType
from waterbilling.modules.payments.models import Payment, PaymentAllocation
from waterbilling.modules.payments.repositories import PaymentAllocationRepository
from waterbilling.shared.errors import WaterBillingError
from waterbilling.shared.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)

# Remanentes menores se descartan como ruido de redondeo
ADVANCE_EPSILON = Decimal("0.001")

DEFAULT_ALLOCATION_ORDER: Tuple[AllocationTarget, ...] = (
    AllocationTarget.BILL,
    AllocationTarget.FINE,
    AllocationTarget.CONTRIBUTION,
)

_REFERENCE_TO_TARGET = {
    ReferenceType.BILL: AllocationTarget.BILL,
    ReferenceType.FINE: AllocationTarget.FINE,
    ReferenceType.CONTRIBUTION: AllocationTarget.CONTRIBUTION,
}


class AllocationInvariantError(WaterBillingError):
    """La suma de asignaciones no coincide con el monto del pago."""

    pass


def allocation_order(reference_type: Optional[ReferenceType] = None) -> Tuple[AllocationTarget, ...]:
    """
    Orden de categorías para un pago.

    Ejemplo: reference_type=contribution -> contribution, bill, fine
    """
    preferred = _REFERENCE_TO_TARGET.get(reference_type) if reference_type else None
    if preferred is None:
        return DEFAULT_ALLOCATION_ORDER
    return (preferred,) + tuple(t for t in DEFAULT_ALLOCATION_ORDER if t != preferred)


@dataclass(frozen=True)
class AllocationLine:
    target_type: AllocationTarget
    target_id: Optional[int]
    amount: Decimal


@dataclass
class AllocationResult:
    payment_id: int
    payment_amount: Decimal
    lines: List[AllocationLine] = field(default_factory=list)

    @property
    def total_allocated(self) -> Decimal:
        return to_money(sum((line.amount for line in self.lines), ZERO))

    @property
    def advance(self) -> Decimal:
        return self.totals_by_target().get(AllocationTarget.ADVANCE, ZERO)

    def totals_by_target(self) -> Dict[AllocationTarget, Decimal]:
        totals: Dict[AllocationTarget, Decimal] = defaultdict(lambda: ZERO)
        for line in self.lines:
            totals[line.target_type] = to_money(totals[line.target_type] + line.amount)
        return dict(totals)

    def summary(self) -> Dict[str, Any]:
        totals = self.totals_by_target()
        return {
            "payment_id": self.payment_id,
            "amount": str(self.payment_amount),
            "bills": str(totals.get(AllocationTarget.BILL, ZERO)),
            "fines": str(totals.get(AllocationTarget.FINE, ZERO)),
            "contributions": str(totals.get(AllocationTarget.CONTRIBUTION, ZERO)),
            "advance": str(totals.get(AllocationTarget.ADVANCE, ZERO)),
            "allocations": len(self.lines),
        }


class AllocationEngine:
    def __init__(
        self,
        bill_repo: Optional[BillRepository] = None,
        fine_repo: Optional[FineRepository] = None,
        contribution_repo: Optional[ContributionRepository] = None,
        allocation_repo: Optional[PaymentAllocationRepository] = None,
        advance_epsilon: Decimal = ADVANCE_EPSILON,
    ):
        self.bill_repo = bill_repo or BillRepository()
        self.fine_repo = fine_repo or FineRepository()
        self.contribution_repo = contribution_repo or ContributionRepository()
        self.allocation_repo = allocation_repo or PaymentAllocationRepository()
        self.advance_epsilon = advance_epsilon

    async def allocate(
        self,
        session: AsyncSession,
        payment: Payment,
        reference_type: Optional[ReferenceType] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AllocationResult:
        """
        Asigna `payment.amount` y persiste las filas payment_allocations.

        Las obligaciones se leen con FOR UPDATE; el llamador debe tener
        abierta la transacción y serializar por cliente.
        """
        now = now or datetime.now(timezone.utc)
        amount = to_money(payment.amount)
        result = AllocationResult(payment_id=payment.id, payment_amount=amount)

        remaining = amount
        for target in allocation_order(reference_type):
            if remaining <= ZERO:
                break
            if target == AllocationTarget.BILL:
                remaining = await self._apply_to_bills(session, payment, remaining, result, now)
            elif target == AllocationTarget.FINE:
                remaining = await self._apply_to_fines(session, payment, remaining, result, now)
            else:
                remaining = await self._apply_to_contributions(session, payment, remaining, result)

        if remaining > self.advance_epsilon:
            result.lines.append(AllocationLine(AllocationTarget.ADVANCE, None, remaining))
            logger.info(
                "[allocation] advance credit payment_id=%s customer_id=%s amount=%s",
                payment.id, payment.customer_id, remaining,
            )

        if result.total_allocated != amount:
            raise AllocationInvariantError(
                f"allocated {result.total_allocated} != payment {amount} (payment_id={payment.id})"
            )

        await self.allocation_repo.add_many(
            session,
            (
                PaymentAllocation(
                    payment_id=payment.id,
                    target_type=line.target_type,
                    target_id=line.target_id,
                    amount=line.amount,
                )
                for line in result.lines
            ),
        )

        logger.info(
            "[allocation] done payment_id=%s customer_id=%s lines=%s",
            payment.id, payment.customer_id, len(result.lines),
        )
        return result

    # ------------------------------------------------------------------
    # Categorías
    # ------------------------------------------------------------------
    async def _apply_to_bills(
        self,
        session: AsyncSession,
        payment: Payment,
        remaining: Decimal,
        result: AllocationResult,
        now: datetime,
    ) -> Decimal:
        for bill in await self.bill_repo.list_unpaid_for_update(session, payment.customer_id):
            if remaining <= ZERO:
                break
            outstanding = to_money(bill.outstanding)
            if outstanding <= ZERO:
                continue

            applied = min(remaining, outstanding)
            bill.amount_paid = to_money(bill.amount_paid + applied)
            if bill.amount_paid >= bill.total_amount:
                bill.status = BillStatus.PAID
                bill.paid_at = now
            else:
                bill.status = BillStatus.PARTIALLY_PAID

            remaining = to_money(remaining - applied)
            result.lines.append(AllocationLine(AllocationTarget.BILL, bill.id, applied))
            logger.debug(
                "[allocation] bill_id=%s applied=%s status=%s", bill.id, applied, bill.status
            )
        return remaining

    async def _apply_to_fines(
        self,
        session: AsyncSession,
        payment: Payment,
        remaining: Decimal,
        result: AllocationResult,
        now: datetime,
    ) -> Decimal:
        for fine in await self.fine_repo.list_pending_for_update(session, payment.customer_id):
            if remaining <= ZERO:
                break
            outstanding = to_money(fine.outstanding)
            if outstanding <= ZERO:
                continue

            applied = min(remaining, outstanding)
            fine.amount_paid = to_money(fine.amount_paid + applied)
            if fine.amount_paid >= fine.amount:
                fine.status = FineStatus.PAID
                fine.paid_at = now

            remaining = to_money(remaining - applied)
            result.lines.append(AllocationLine(AllocationTarget.FINE, fine.id, applied))
            logger.debug(
                "[allocation] fine_id=%s applied=%s status=%s", fine.id, applied, fine.status
            )
        return remaining

    async def _apply_to_contributions(
        self,
        session: AsyncSession,
        payment: Payment,
        remaining: Decimal,
        result: AllocationResult,
    ) -> Decimal:
        for contribution in await self.contribution_repo.list_open_for_update(
            session, payment.customer_id
        ):
            if remaining <= ZERO:
                break
            outstanding = to_money(contribution.outstanding)
            if outstanding <= ZERO:
                continue

            applied = min(remaining, outstanding)
            contribution.amount_paid = to_money(contribution.amount_paid + applied)
            if contribution.amount_paid >= contribution.amount_required:
                contribution.status = ContributionStatus.COMPLETED
            else:
                contribution.status = ContributionStatus.PARTIAL

            remaining = to_money(remaining - applied)
            result.lines.append(
                AllocationLine(AllocationTarget.CONTRIBUTION, contribution.id, applied)
            )
            logger.debug(
                "[allocation] contribution_id=%s applied=%s status=%s",
                contribution.id, applied, contribution.status,
            )
        return remaining


__all__ = [
    "ADVANCE_EPSILON",
    "DEFAULT_ALLOCATION_ORDER",
    "AllocationInvariantError",
    "AllocationLine",
    "AllocationResult",
    "AllocationEngine",
    "allocation_order",
]
# Fin del archivo backend/waterbilling/modules/payments/services/allocation_engine.py
