# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/notifications/dispatcher.py

Despachador de notificaciones.

- Envuelve cada envío con timeout acotado (asyncio.timeout).
- Convierte cualquier excepción del notifier en un NotificationResult
  fallido: nunca propaga errores al flujo financiero que lo invoca.
- Registra cada intento en notification_logs usando su propia sesión
  (si la bitácora falla, solo se loguea).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from waterbilling.modules.notifications.repository import NotificationLogRepository
from waterbilling.observability.prom import observe_notification
from waterbilling.shared.database.database import SessionFactory
from waterbilling.shared.integrations.notifier import NotificationResult, Notifier

logger = logging.getLogger(__name__)


class Notice(Protocol):
    """Payload que producen generadores y asesor de multas."""

    customer_id: int
    phone: Optional[str]

    def template_variables(self) -> Dict[str, Any]: ...


class NotificationDispatcher:
    def __init__(
        self,
        notifier: Notifier,
        session_factory: Optional[SessionFactory] = None,
        timeout_sec: float = 10.0,
        log_repo: Optional[NotificationLogRepository] = None,
    ):
        self._notifier = notifier
        self._session_factory = session_factory
        self._timeout = timeout_sec
        self.log_repo = log_repo or NotificationLogRepository()

    async def dispatch(
        self,
        *,
        customer_id: Optional[int],
        recipient: Optional[str],
        template_type: str,
        variables: Mapping[str, Any],
    ) -> NotificationResult:
        if not recipient:
            result = NotificationResult(success=False, error="missing recipient")
        else:
            try:
                async with asyncio.timeout(self._timeout):
                    result = await self._notifier.send(recipient, template_type, variables)
            except TimeoutError:
                result = NotificationResult(success=False, error=f"timeout after {self._timeout}s")
            except Exception as e:
                logger.warning(
                    "[notifications] send failed customer_id=%s template=%s error=%s",
                    customer_id, template_type, e, exc_info=True,
                )
                result = NotificationResult(success=False, error=f"{type(e).__name__}: {e}")

        if not result.success:
            logger.warning(
                "[notifications] not delivered customer_id=%s template=%s error=%s",
                customer_id, template_type, result.error,
            )

        observe_notification(template_type, result.success)
        await self._record(customer_id, recipient or "", template_type, result)
        return result

    async def dispatch_notices(self, notices: Iterable[Notice], template_type: str) -> Dict[str, int]:
        """Envía un aviso por payload. Devuelve conteos sent/failed."""
        sent = failed = 0
        for notice in notices:
            result = await self.dispatch(
                customer_id=notice.customer_id,
                recipient=notice.phone,
                template_type=template_type,
                variables=notice.template_variables(),
            )
            if result.success:
                sent += 1
            else:
                failed += 1
        return {"sent": sent, "failed": failed}

    async def _record(
        self,
        customer_id: Optional[int],
        recipient: str,
        template_type: str,
        result: NotificationResult,
    ) -> None:
        if self._session_factory is None:
            return
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await self.log_repo.create(
                        session,
                        customer_id=customer_id,
                        recipient=recipient[:32],
                        template_type=template_type,
                        success=result.success,
                        message_id=result.message_id,
                        error=result.error[:500] if result.error else None,
                    )
        except Exception as e:
            logger.warning("[notifications] log write failed template=%s error=%s", template_type, e)


__all__ = ["Notice", "NotificationDispatcher"]
# Fin del archivo backend/waterbilling/modules/notifications/dispatcher.py
