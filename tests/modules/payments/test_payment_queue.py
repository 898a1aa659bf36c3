# -*- coding: utf-8 -*-
"""
Tests de la cola de intake de pagos (validar, encolar, workers).
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from waterbilling.modules.payments.enums import PaymentAttemptOutcome
from waterbilling.modules.payments.schemas import PaymentEvent
from waterbilling.modules.payments.services.payment_queue import (
    PaymentEventQueue,
    process_payment_event,
)

PAYLOAD = {"transaction_id": "TX-Q1", "member_number": "ACC0001", "amount": "100.00"}


def _processor():
    processor = Mock()
    processor.process = AsyncMock(
        return_value=Mock(status=PaymentAttemptOutcome.PROCESSED)
    )
    return processor


def _event(tx: str = "TX-Q1") -> PaymentEvent:
    return PaymentEvent.model_validate({**PAYLOAD, "transaction_id": tx})


def test_rejects_zero_workers():
    with pytest.raises(ValueError):
        PaymentEventQueue(_processor(), workers=0)


@pytest.mark.asyncio
async def test_submit_and_join_processes_events():
    processor = _processor()
    queue = PaymentEventQueue(processor, workers=2)
    await queue.start()
    try:
        assert queue.running
        assert queue.submit(_event("TX-1"))
        assert queue.submit(_event("TX-2"))
        await queue.join()
    finally:
        await queue.stop(timeout=1)

    assert processor.process.await_count == 2
    assert not queue.running


@pytest.mark.asyncio
async def test_submit_before_start_is_rejected():
    queue = PaymentEventQueue(_processor())
    assert queue.submit(_event()) is False


@pytest.mark.asyncio
async def test_submit_after_stop_is_rejected():
    queue = PaymentEventQueue(_processor())
    await queue.start()
    await queue.stop(timeout=1)

    assert queue.submit(_event()) is False


@pytest.mark.asyncio
async def test_full_queue_rejects():
    blocker = asyncio.Event()
    processor = Mock()

    async def _slow(event):
        await blocker.wait()

    processor.process = AsyncMock(side_effect=_slow)
    queue = PaymentEventQueue(processor, workers=1, maxsize=1)
    await queue.start()
    try:
        assert queue.submit(_event("TX-1"))
        await asyncio.sleep(0.05)  # el worker toma TX-1
        assert queue.submit(_event("TX-2"))
        assert queue.submit(_event("TX-3")) is False
    finally:
        blocker.set()
        await queue.stop(timeout=1)


@pytest.mark.asyncio
async def test_worker_survives_processor_errors():
    processor = Mock()
    processor.process = AsyncMock(side_effect=[RuntimeError("db down"), Mock(status="processed")])
    queue = PaymentEventQueue(processor, workers=1)
    await queue.start()
    try:
        queue.submit(_event("TX-1"))
        queue.submit(_event("TX-2"))
        await queue.join()
    finally:
        await queue.stop(timeout=1)

    assert processor.process.await_count == 2


# ==================== process_payment_event ====================

@pytest.mark.asyncio
async def test_process_payment_event_accepts():
    queue = PaymentEventQueue(_processor())
    await queue.start()
    try:
        ack = process_payment_event(PAYLOAD, queue)
        await queue.join()
    finally:
        await queue.stop(timeout=1)

    assert ack.accepted is True
    assert ack.transaction_id == "TX-Q1"


def test_process_payment_event_validation_error():
    queue = Mock()
    ack = process_payment_event({"transaction_id": "TX-BAD", "amount": "-1"}, queue)

    assert ack.accepted is False
    assert ack.reason == "validation_error"
    assert ack.transaction_id == "TX-BAD"
    assert ack.errors
    queue.submit.assert_not_called()


def test_process_payment_event_without_queue():
    ack = process_payment_event(PAYLOAD, None)

    assert ack.accepted is False
    assert ack.reason == "queue_unavailable"


def test_process_payment_event_queue_full():
    queue = Mock()
    queue.submit.return_value = False

    ack = process_payment_event(PAYLOAD, queue)

    assert ack.reason == "queue_unavailable"
