# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/services/payment_processor.py

Procesamiento de un evento de pago confirmado.

Flujo:
1. Estado de fallo/reverso en el evento -> bitácora rejected_status, sin Payment.
2. Cliente por número de cuenta; inexistente -> bitácora customer_not_found.
3. Bajo el lock del cliente y en UNA transacción:
   - duplicado por external_transaction_id -> no-op (duplicate)
   - crea Payment(completed) + AllocationEngine.allocate
   - commit; un unique-violation en commit también es duplicado
   Cualquier otro fallo hace rollback completo (sin Payment ni asignaciones)
   y el evento puede reprocesarse de forma segura.
4. Tras el commit: bitácora processed + un aviso payment_received.
   Un fallo de notificación nunca toca lo ya escrito.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from waterbilling.modules.customers.balance_service import CustomerBalanceService
from waterbilling.modules.customers.models import Customer
from waterbilling.modules.customers.repository import CustomerRepository
from waterbilling.modules.notifications.dispatcher import NotificationDispatcher
from waterbilling.modules.payments.enums import PaymentAttemptOutcome, PaymentStatus
from waterbilling.modules.payments.repositories import (
    PaymentAttemptLogRepository,
    PaymentRepository,
)
from waterbilling.modules.payments.schemas import PaymentEvent
from waterbilling.observability.prom import observe_allocation, observe_payment_event
from waterbilling.shared.database.database import SessionFactory, session_scope
from waterbilling.shared.errors import TransientStoreError
from waterbilling.shared.integrations.notification_templates import NotificationTemplate
from waterbilling.shared.utils.keyed_locks import KeyedLockRegistry
from waterbilling.shared.utils.money import to_money
from .allocation_engine import AllocationEngine, AllocationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentOutcome:
    status: PaymentAttemptOutcome
    transaction_id: str
    customer_id: Optional[int] = None
    payment_id: Optional[int] = None
    allocation: Optional[AllocationResult] = None
    reason: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "status": self.status.value,
            "transaction_id": self.transaction_id,
            "customer_id": self.customer_id,
            "payment_id": self.payment_id,
        }
        if self.allocation is not None:
            data["allocation"] = self.allocation.summary()
        if self.reason:
            data["reason"] = self.reason
        return data


class PaymentProcessor:
    """Registra y asigna pagos, serializando por cliente."""

    def __init__(
        self,
        session_factory: SessionFactory,
        dispatcher: Optional[NotificationDispatcher] = None,
        locks: Optional[KeyedLockRegistry] = None,
        engine: Optional[AllocationEngine] = None,
        payment_repo: Optional[PaymentRepository] = None,
        attempt_repo: Optional[PaymentAttemptLogRepository] = None,
        customer_repo: Optional[CustomerRepository] = None,
        balance_service: Optional[CustomerBalanceService] = None,
    ):
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self.locks = locks or KeyedLockRegistry("payment_locks")
        self.engine = engine or AllocationEngine()
        self.payment_repo = payment_repo or PaymentRepository()
        self.attempt_repo = attempt_repo or PaymentAttemptLogRepository()
        self.customer_repo = customer_repo or CustomerRepository()
        self.balance_service = balance_service or CustomerBalanceService()

    async def process(self, event: PaymentEvent) -> PaymentOutcome:
        """
        Procesa un evento ya validado.

        Raises:
            TransientStoreError: fallo de base de datos durante la asignación
                (la transacción se revierte y el intento queda registrado)
        """
        logger.info(
            "[payments] processing tx=%s account=%s amount=%s",
            event.transaction_id, event.account_identifier, event.amount,
        )

        if event.is_failure:
            outcome = PaymentOutcome(
                status=PaymentAttemptOutcome.REJECTED_STATUS,
                transaction_id=event.transaction_id,
                reason=f"payment status reported as {event.status}",
            )
            logger.info("[payments] rejected tx=%s status=%s", event.transaction_id, event.status)
            return await self._finish(event, outcome)

        async with session_scope(self._session_factory) as session:
            customer = await self.customer_repo.get_by_account_number(
                session, event.account_identifier
            )

        if customer is None:
            outcome = PaymentOutcome(
                status=PaymentAttemptOutcome.CUSTOMER_NOT_FOUND,
                transaction_id=event.transaction_id,
                reason=f"customer not found: {event.account_identifier}",
            )
            logger.warning(
                "[payments] customer not found tx=%s account=%s",
                event.transaction_id, event.account_identifier,
            )
            return await self._finish(event, outcome)

        if not customer.is_active:
            logger.warning(
                "[payments] payment for inactive customer tx=%s customer_id=%s",
                event.transaction_id, customer.id,
            )

        async with self.locks.hold(customer.id):
            try:
                outcome = await self._record_and_allocate(event, customer)
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"[:500]
                await self._finish(
                    event,
                    PaymentOutcome(
                        status=PaymentAttemptOutcome.ERROR,
                        transaction_id=event.transaction_id,
                        customer_id=customer.id,
                        reason=reason,
                    ),
                )
                logger.error(
                    "[payments] allocation failed tx=%s customer_id=%s error=%s",
                    event.transaction_id, customer.id, e, exc_info=True,
                )
                if isinstance(e, SQLAlchemyError):
                    raise TransientStoreError(reason) from e
                raise

        outcome = await self._finish(event, outcome)
        if outcome.status == PaymentAttemptOutcome.PROCESSED:
            await self._notify(customer, event, outcome)
        return outcome

    async def _record_and_allocate(self, event: PaymentEvent, customer: Customer) -> PaymentOutcome:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    existing = await self.payment_repo.get_by_external_id(session, event.transaction_id)
                    if existing is not None:
                        logger.debug(
                            "[payments] duplicate tx=%s payment_id=%s",
                            event.transaction_id, existing.id,
                        )
                        return PaymentOutcome(
                            status=PaymentAttemptOutcome.DUPLICATE,
                            transaction_id=event.transaction_id,
                            customer_id=customer.id,
                            payment_id=existing.id,
                        )

                    payment = await self.payment_repo.create(
                        session,
                        customer_id=customer.id,
                        external_transaction_id=event.transaction_id,
                        amount=to_money(event.amount),
                        method=event.payment_method,
                        status=PaymentStatus.COMPLETED,
                        reference_type=event.reference_type,
                        narrative=event.narrative,
                        payment_date=event.timestamp or datetime.now(timezone.utc),
                    )
                    allocation = await self.engine.allocate(session, payment, event.reference_type)
                    payment_id = payment.id
        except IntegrityError:
            # Otro proceso insertó la misma transacción entre el check y el commit
            async with session_scope(self._session_factory) as session:
                existing = await self.payment_repo.get_by_external_id(session, event.transaction_id)
            if existing is None:
                raise
            logger.debug("[payments] duplicate on commit tx=%s", event.transaction_id)
            return PaymentOutcome(
                status=PaymentAttemptOutcome.DUPLICATE,
                transaction_id=event.transaction_id,
                customer_id=customer.id,
                payment_id=existing.id,
            )

        for target, amount in allocation.totals_by_target().items():
            observe_allocation(target.value, amount)

        return PaymentOutcome(
            status=PaymentAttemptOutcome.PROCESSED,
            transaction_id=event.transaction_id,
            customer_id=customer.id,
            payment_id=payment_id,
            allocation=allocation,
        )

    async def _finish(self, event: PaymentEvent, outcome: PaymentOutcome) -> PaymentOutcome:
        observe_payment_event(outcome.status.value)
        await self._log_attempt(event, outcome)
        return outcome

    async def _log_attempt(self, event: PaymentEvent, outcome: PaymentOutcome) -> None:
        """Bitácora en sesión propia; si falla solo se registra en logs."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self.attempt_repo.create(
                        session,
                        transaction_id=event.transaction_id,
                        account_identifier=event.account_identifier,
                        amount=to_money(event.amount),
                        method=event.payment_method,
                        outcome=outcome.status,
                        reason=outcome.reason,
                        customer_id=outcome.customer_id,
                        payment_id=outcome.payment_id,
                    )
        except Exception as e:
            logger.error(
                "[payments] attempt log write failed tx=%s outcome=%s error=%s",
                event.transaction_id, outcome.status, e,
            )

    async def _notify(self, customer: Customer, event: PaymentEvent, outcome: PaymentOutcome) -> None:
        if self._dispatcher is None:
            return
        try:
            async with session_scope(self._session_factory) as session:
                breakdown = await self.balance_service.get_breakdown(session, customer.id)
        except Exception as e:
            logger.warning(
                "[payments] balance lookup for notice failed customer_id=%s error=%s",
                customer.id, e,
            )
            return

        await self._dispatcher.dispatch(
            customer_id=customer.id,
            recipient=customer.phone,
            template_type=NotificationTemplate.PAYMENT_RECEIVED.value,
            variables={
                "customer_name": customer.name,
                "amount": Decimal(event.amount),
                "transaction_id": event.transaction_id,
                "outstanding_balance": breakdown.total,
            },
        )


__all__ = ["PaymentOutcome", "PaymentProcessor"]
# Fin del archivo backend/waterbilling/modules/payments/services/payment_processor.py
