# -*- coding: utf-8 -*-
"""
Tests del procesamiento de eventos de pago.

Cubre:
- Idempotencia por transaction_id (reintentos del banco)
- Serialización por cliente (pagos concurrentes)
- Bitácora de intentos: processed / duplicate / customer_not_found / rejected_status / error
- Aviso payment_received tras el commit; un fallo del aviso no revierte el pago
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.models import Bill
from waterbilling.modules.payments.enums import AllocationTarget, PaymentAttemptOutcome
from waterbilling.modules.payments.models import Payment, PaymentAllocation, PaymentAttemptLog
from waterbilling.modules.payments.repositories import PaymentAttemptLogRepository
from waterbilling.modules.payments.schemas import PaymentEvent
from waterbilling.modules.payments.services.allocation_engine import AllocationEngine
from waterbilling.modules.payments.services.payment_processor import PaymentProcessor
from waterbilling.shared.integrations.notifier import NotificationResult


def _event(account: str, amount: str = "300.00", tx: str = "TX-100", **extra) -> PaymentEvent:
    return PaymentEvent.model_validate({
        "transaction_id": tx,
        "member_number": account,
        "amount": amount,
        **extra,
    })


async def _count(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(model.id)))).scalar_one()


async def _attempts(session_factory, tx: str):
    async with session_factory() as session:
        return await PaymentAttemptLogRepository().list_by_transaction(session, tx)


@pytest.mark.asyncio
async def test_processes_and_allocates(session_factory, make_customer, make_bill):
    customer = await make_customer()
    bill = await make_bill(customer, total="300.00")

    outcome = await PaymentProcessor(session_factory).process(_event(customer.account_number))

    assert outcome.status == PaymentAttemptOutcome.PROCESSED
    assert outcome.customer_id == customer.id
    assert outcome.payment_id is not None
    assert outcome.allocation.totals_by_target() == {AllocationTarget.BILL: Decimal("300.00")}
    assert outcome.as_dict()["allocation"]["bills"] == "300.00"

    async with session_factory() as session:
        refreshed = await session.get(Bill, bill.id)
    assert refreshed.status == BillStatus.PAID

    attempts = await _attempts(session_factory, "TX-100")
    assert [a.outcome for a in attempts] == [PaymentAttemptOutcome.PROCESSED]


@pytest.mark.asyncio
async def test_duplicate_transaction_is_noop(session_factory, make_customer, make_bill):
    customer = await make_customer()
    await make_bill(customer, total="300.00")
    processor = PaymentProcessor(session_factory)

    first = await processor.process(_event(customer.account_number, "200.00"))
    second = await processor.process(_event(customer.account_number, "200.00"))

    assert first.status == PaymentAttemptOutcome.PROCESSED
    assert second.status == PaymentAttemptOutcome.DUPLICATE
    assert second.payment_id == first.payment_id
    assert await _count(session_factory, Payment) == 1
    assert await _count(session_factory, PaymentAllocation) == 1

    attempts = await _attempts(session_factory, "TX-100")
    assert {a.outcome for a in attempts} == {
        PaymentAttemptOutcome.PROCESSED,
        PaymentAttemptOutcome.DUPLICATE,
    }


@pytest.mark.asyncio
async def test_concurrent_duplicates_create_single_payment(session_factory, make_customer, make_bill):
    customer = await make_customer()
    await make_bill(customer, total="300.00")
    processor = PaymentProcessor(session_factory)
    event = _event(customer.account_number, "300.00")

    outcomes = await asyncio.gather(processor.process(event), processor.process(event))

    statuses = sorted(o.status.value for o in outcomes)
    assert statuses == ["duplicate", "processed"]
    assert await _count(session_factory, Payment) == 1


@pytest.mark.asyncio
async def test_concurrent_payments_same_customer_serialize(session_factory, make_customer, make_bill):
    """Dos pagos de 200 contra una factura de 300: 300 a la factura y 100 de anticipo."""
    customer = await make_customer()
    bill = await make_bill(customer, total="300.00")
    processor = PaymentProcessor(session_factory)

    outcomes = await asyncio.gather(
        processor.process(_event(customer.account_number, "200.00", tx="TX-A")),
        processor.process(_event(customer.account_number, "200.00", tx="TX-B")),
    )

    assert all(o.status == PaymentAttemptOutcome.PROCESSED for o in outcomes)

    async with session_factory() as session:
        refreshed = await session.get(Bill, bill.id)
        rows = (await session.execute(select(PaymentAllocation))).scalars().all()

    assert refreshed.amount_paid == Decimal("300.00")
    assert refreshed.status == BillStatus.PAID
    by_target = {}
    for row in rows:
        by_target[row.target_type] = by_target.get(row.target_type, Decimal("0")) + row.amount
    assert by_target[AllocationTarget.BILL] == Decimal("300.00")
    assert by_target[AllocationTarget.ADVANCE] == Decimal("100.00")
    assert sum(by_target.values()) == Decimal("400.00")


@pytest.mark.asyncio
async def test_unknown_customer_logged(session_factory):
    outcome = await PaymentProcessor(session_factory).process(_event("NOPE-1", tx="TX-404"))

    assert outcome.status == PaymentAttemptOutcome.CUSTOMER_NOT_FOUND
    assert outcome.payment_id is None
    assert await _count(session_factory, Payment) == 0

    attempts = await _attempts(session_factory, "TX-404")
    assert len(attempts) == 1
    assert attempts[0].outcome == PaymentAttemptOutcome.CUSTOMER_NOT_FOUND
    assert "NOPE-1" in attempts[0].reason


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["failed", "REVERSED", "cancelled"])
async def test_failure_status_creates_no_payment(session_factory, make_customer, make_bill, status):
    customer = await make_customer()
    await make_bill(customer)

    outcome = await PaymentProcessor(session_factory).process(
        _event(customer.account_number, tx="TX-REV", status=status)
    )

    assert outcome.status == PaymentAttemptOutcome.REJECTED_STATUS
    assert await _count(session_factory, Payment) == 0
    attempts = await _attempts(session_factory, "TX-REV")
    assert attempts[0].outcome == PaymentAttemptOutcome.REJECTED_STATUS


@pytest.mark.asyncio
async def test_inactive_customer_payment_is_recorded(session_factory, make_customer):
    customer = await make_customer(is_active=False)

    outcome = await PaymentProcessor(session_factory).process(_event(customer.account_number, "50.00"))

    assert outcome.status == PaymentAttemptOutcome.PROCESSED
    assert outcome.allocation.advance == Decimal("50.00")


@pytest.mark.asyncio
async def test_allocation_failure_rolls_back(session_factory, make_customer, make_bill):
    customer = await make_customer()
    bill = await make_bill(customer, total="300.00")
    engine = AllocationEngine()
    engine.allocate = AsyncMock(side_effect=RuntimeError("boom"))
    processor = PaymentProcessor(session_factory, engine=engine)

    with pytest.raises(RuntimeError):
        await processor.process(_event(customer.account_number, tx="TX-ERR"))

    assert await _count(session_factory, Payment) == 0
    async with session_factory() as session:
        refreshed = await session.get(Bill, bill.id)
    assert refreshed.amount_paid == Decimal("0.00")

    attempts = await _attempts(session_factory, "TX-ERR")
    assert attempts[0].outcome == PaymentAttemptOutcome.ERROR
    assert "boom" in attempts[0].reason

    # El evento puede reprocesarse de forma segura
    retry = await PaymentProcessor(session_factory).process(_event(customer.account_number, tx="TX-ERR"))
    assert retry.status == PaymentAttemptOutcome.PROCESSED


@pytest.mark.asyncio
async def test_sends_payment_received_notice(session_factory, make_customer, make_bill):
    customer = await make_customer(name="Achieng", phone="+254711111111")
    await make_bill(customer, total="300.00")
    dispatcher = AsyncMock()
    dispatcher.dispatch.return_value = NotificationResult(success=True, message_id="m-1")

    await PaymentProcessor(session_factory, dispatcher=dispatcher).process(
        _event(customer.account_number, "100.00")
    )

    dispatcher.dispatch.assert_awaited_once()
    kwargs = dispatcher.dispatch.await_args.kwargs
    assert kwargs["recipient"] == "+254711111111"
    assert kwargs["template_type"] == "payment_received"
    assert kwargs["variables"]["outstanding_balance"] == Decimal("200.00")
    assert kwargs["variables"]["transaction_id"] == "TX-100"


@pytest.mark.asyncio
async def test_notifier_failure_does_not_undo_payment(session_factory, make_customer):
    customer = await make_customer()
    dispatcher = AsyncMock()
    dispatcher.dispatch.return_value = NotificationResult(success=False, error="down")

    outcome = await PaymentProcessor(session_factory, dispatcher=dispatcher).process(
        _event(customer.account_number, "80.00")
    )

    assert outcome.status == PaymentAttemptOutcome.PROCESSED
    assert await _count(session_factory, Payment) == 1


@pytest.mark.asyncio
async def test_duplicate_does_not_notify(session_factory, make_customer):
    customer = await make_customer()
    dispatcher = AsyncMock()
    dispatcher.dispatch.return_value = NotificationResult(success=True)
    processor = PaymentProcessor(session_factory, dispatcher=dispatcher)

    await processor.process(_event(customer.account_number, "80.00"))
    await processor.process(_event(customer.account_number, "80.00"))

    assert dispatcher.dispatch.await_count == 1


@pytest.mark.asyncio
async def test_attempt_rows_exist_for_each_event(session_factory, make_customer):
    customer = await make_customer()
    processor = PaymentProcessor(session_factory)

    await processor.process(_event(customer.account_number, "10.00", tx="TX-1"))
    await processor.process(_event("missing", "10.00", tx="TX-2"))

    assert await _count(session_factory, PaymentAttemptLog) == 2
