# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/integrations/notifier.py

Factory unificado para el canal de notificaciones.
Soporta dos modos:
- console: stub que solo loguea (desarrollo/tests)
- sms: envío via SMS gateway HTTP (ver sms_gateway_notifier.py)

Contrato: send(recipient, template_type, variables) -> NotificationResult.
El núcleo nunca depende de que el envío tenga éxito.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol
from uuid import uuid4

from .notification_templates import render_message

if TYPE_CHECKING:
    from waterbilling.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


class Notifier(Protocol):
    """Protocolo para implementaciones del canal de notificaciones."""

    async def send(
        self,
        recipient: str,
        template_type: str,
        variables: Mapping[str, Any],
    ) -> NotificationResult: ...


class ConsoleNotifier:
    """Implementación que no envía mensajes; solo hace logging (modo console)."""

    async def send(
        self,
        recipient: str,
        template_type: str,
        variables: Mapping[str, Any],
    ) -> NotificationResult:
        text = render_message(template_type, variables)
        message_id = f"console-{uuid4().hex[:12]}"
        logger.info("[CONSOLE SMS] %s → %s | %s", template_type, recipient, text)
        return NotificationResult(success=True, message_id=message_id)


def build_notifier(settings: BaseAppSettings) -> Notifier:
    """
    Crea el notifier apropiado según settings.

    Raises:
        ValueError: si NOTIFIER_MODE=sms pero falta configuración
    """
    mode = (settings.notifier_mode or "console").strip().lower()
    logger.info("[Notifier] mode=%r", mode)

    if mode == "sms":
        from waterbilling.shared.integrations.sms_gateway_notifier import SmsGatewayNotifier
        return SmsGatewayNotifier.from_settings(settings)

    return ConsoleNotifier()


__all__ = ["NotificationResult", "Notifier", "ConsoleNotifier", "build_notifier"]
# Fin del archivo backend/waterbilling/shared/integrations/notifier.py
