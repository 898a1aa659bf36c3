# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/services/payment_queue.py

Cola de intake de eventos de pago.

El webhook solo valida y encola; N workers consumen la cola y llaman a
PaymentProcessor.process. Eventos de clientes distintos avanzan en
paralelo; los del mismo cliente se serializan en el processor.

- submit(event) -> False si la cola está llena o detenida
- join() espera a que se procese todo lo encolado (tests)
- stop() drena con timeout y cancela los workers (shutdown)

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from waterbilling.modules.payments.schemas import PaymentAck, PaymentEvent
from .payment_processor import PaymentProcessor

logger = logging.getLogger(__name__)


class PaymentEventQueue:
    def __init__(
        self,
        processor: PaymentProcessor,
        workers: int = 4,
        maxsize: int = 1000,
    ):
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self._processor = processor
        self._worker_count = workers
        self._queue: asyncio.Queue[PaymentEvent] = asyncio.Queue(maxsize=maxsize)
        self._tasks: List[asyncio.Task] = []
        self._accepting = False

    @property
    def running(self) -> bool:
        return self._accepting and any(not t.done() for t in self._tasks)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self) -> None:
        if self._tasks:
            return
        self._accepting = True
        self._tasks = [
            asyncio.create_task(self._worker(i), name=f"payment-worker-{i}")
            for i in range(self._worker_count)
        ]
        logger.info("[payment_queue] started workers=%s", self._worker_count)

    def submit(self, event: PaymentEvent) -> bool:
        if not self._accepting:
            logger.warning("[payment_queue] rejected tx=%s reason=stopped", event.transaction_id)
            return False
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("[payment_queue] rejected tx=%s reason=queue_full", event.transaction_id)
            return False
        logger.debug("[payment_queue] enqueued tx=%s pending=%s", event.transaction_id, self.pending)
        return True

    async def join(self) -> None:
        await self._queue.join()

    async def stop(self, timeout: float = 30.0) -> None:
        """Deja de aceptar eventos, drena lo pendiente y cancela los workers."""
        self._accepting = False
        if not self._tasks:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("[payment_queue] drain timeout pending=%s", self.pending)

        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("[payment_queue] stopped")

    async def _worker(self, index: int) -> None:
        while True:
            event = await self._queue.get()
            try:
                outcome = await self._processor.process(event)
                logger.info(
                    "[payment_queue] worker=%s tx=%s outcome=%s",
                    index, event.transaction_id, outcome.status,
                )
            except Exception as e:
                # El processor ya registró el intento; el worker sigue vivo
                logger.error(
                    "[payment_queue] worker=%s tx=%s error=%s",
                    index, event.transaction_id, e,
                )
            finally:
                self._queue.task_done()


def process_payment_event(
    payload: Mapping[str, Any],
    queue: Optional[PaymentEventQueue],
) -> PaymentAck:
    """
    Valida el payload y lo encola. No espera la asignación.

    accepted=False con reason:
        validation_error  -> payload inválido, nada se escribió
        queue_unavailable -> cola llena o detenida
    """
    try:
        event = PaymentEvent.model_validate(dict(payload))
    except ValidationError as e:
        raw_tx = payload.get("transaction_id")
        logger.warning("[payments] invalid event tx=%s errors=%s", raw_tx, e.error_count())
        return PaymentAck(
            accepted=False,
            transaction_id=raw_tx if isinstance(raw_tx, str) else None,
            reason="validation_error",
            errors=e.errors(include_url=False, include_context=False, include_input=False),
        )

    if queue is None or not queue.submit(event):
        return PaymentAck(
            accepted=False,
            transaction_id=event.transaction_id,
            reason="queue_unavailable",
        )

    return PaymentAck(accepted=True, transaction_id=event.transaction_id)


__all__ = ["PaymentEventQueue", "process_payment_event"]
# Fin del archivo backend/waterbilling/modules/payments/services/payment_queue.py
