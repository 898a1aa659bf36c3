# -*- coding: utf-8 -*-
"""
Tests del despachador de notificaciones.

El despachador nunca propaga errores del canal: timeout, excepción o
destinatario faltante terminan en un NotificationResult fallido y una
fila en notification_logs.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from waterbilling.modules.notifications.dispatcher import NotificationDispatcher
from waterbilling.modules.notifications.models import NotificationLog
from waterbilling.shared.integrations.notifier import ConsoleNotifier, NotificationResult

VARIABLES = {
    "customer_name": "Njeri",
    "amount": "100.00",
    "transaction_id": "TX-1",
    "outstanding_balance": "0.00",
}


@dataclass
class _Notice:
    customer_id: int
    phone: Optional[str]

    def template_variables(self):
        return VARIABLES


async def _logs(session_factory):
    async with session_factory() as session:
        return (await session.execute(select(NotificationLog).order_by(NotificationLog.id))).scalars().all()


@pytest.mark.asyncio
async def test_successful_dispatch_is_logged(session_factory):
    dispatcher = NotificationDispatcher(ConsoleNotifier(), session_factory=session_factory)

    result = await dispatcher.dispatch(
        customer_id=1,
        recipient="+254700000001",
        template_type="payment_received",
        variables=VARIABLES,
    )

    assert result.success
    assert result.message_id.startswith("console-")
    logs = await _logs(session_factory)
    assert len(logs) == 1
    assert logs[0].success is True
    assert logs[0].template_type == "payment_received"


@pytest.mark.asyncio
async def test_missing_recipient_fails_without_calling_notifier(session_factory):
    notifier = AsyncMock()
    dispatcher = NotificationDispatcher(notifier, session_factory=session_factory)

    result = await dispatcher.dispatch(
        customer_id=1, recipient=None, template_type="payment_received", variables=VARIABLES,
    )

    assert not result.success
    assert result.error == "missing recipient"
    notifier.send.assert_not_called()
    logs = await _logs(session_factory)
    assert logs[0].success is False


@pytest.mark.asyncio
async def test_notifier_exception_is_contained(session_factory):
    notifier = AsyncMock()
    notifier.send.side_effect = ConnectionError("gateway down")
    dispatcher = NotificationDispatcher(notifier, session_factory=session_factory)

    result = await dispatcher.dispatch(
        customer_id=2, recipient="+2547", template_type="bill_generated", variables={},
    )

    assert not result.success
    assert "ConnectionError" in result.error


@pytest.mark.asyncio
async def test_notifier_timeout_is_contained():
    async def _hang(*args, **kwargs):
        await asyncio.sleep(5)
        return NotificationResult(success=True)

    notifier = AsyncMock()
    notifier.send.side_effect = _hang
    dispatcher = NotificationDispatcher(notifier, timeout_sec=0.05)

    result = await dispatcher.dispatch(
        customer_id=3, recipient="+2547", template_type="bill_generated", variables={},
    )

    assert not result.success
    assert "timeout" in result.error


@pytest.mark.asyncio
async def test_dispatch_notices_counts():
    notifier = AsyncMock()
    notifier.send.return_value = NotificationResult(success=True, message_id="m")
    dispatcher = NotificationDispatcher(notifier)

    counts = await dispatcher.dispatch_notices(
        [_Notice(1, "+2547001"), _Notice(2, None), _Notice(3, "+2547003")],
        "payment_received",
    )

    assert counts == {"sent": 2, "failed": 1}
    assert notifier.send.await_count == 2


@pytest.mark.asyncio
async def test_log_write_failure_does_not_raise():
    def _broken_factory():
        raise RuntimeError("no db")

    dispatcher = NotificationDispatcher(ConsoleNotifier(), session_factory=_broken_factory)

    result = await dispatcher.dispatch(
        customer_id=1, recipient="+2547", template_type="payment_received", variables=VARIABLES,
    )

    assert result.success
