# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/integrations/sms_gateway_notifier.py

Envío de SMS usando un gateway HTTP (JSON + Bearer token).

Request:
    POST {SMS_API_URL}
    {"to": "+2547...", "from": "NYANJIGI", "message": "..."}
Respuesta esperada: 2xx con {"message_id": "..."} (opcional).

Notas:
- Cada envío tiene timeout acotado (httpx.Timeout).
- Los errores HTTP o de red se devuelven como NotificationResult fallido;
  nunca se propagan al llamador.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

import httpx

from waterbilling.shared.errors import NotificationTemplateError
from .notification_templates import render_message
from .notifier import NotificationResult

if TYPE_CHECKING:
    from waterbilling.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)


def _mask_phone(phone: str) -> str:
    return f"{phone[:4]}***{phone[-2:]}" if len(phone) > 6 else "***"


class SmsGatewayNotifier:
    """Envío de SMS via API HTTP."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender_id: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_url:
            raise ValueError("SMS_API_URL es requerido")
        if not api_key:
            raise ValueError("SMS_API_KEY es requerido")

        self.api_url = api_url
        self.api_key = api_key
        self.sender_id = sender_id
        self.timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: BaseAppSettings) -> "SmsGatewayNotifier":
        api_key = settings.sms_api_key.get_secret_value().strip() if settings.sms_api_key else ""
        logger.info(
            "[SmsGateway] config: url=%s sender=%s timeout=%ss",
            settings.sms_api_url, settings.sms_sender_id, settings.notifier_timeout_sec,
        )
        return cls(
            api_url=(settings.sms_api_url or "").strip(),
            api_key=api_key,
            sender_id=settings.sms_sender_id,
            timeout=settings.notifier_timeout_sec,
        )

    async def send(
        self,
        recipient: str,
        template_type: str,
        variables: Mapping[str, Any],
    ) -> NotificationResult:
        try:
            message = render_message(template_type, variables)
        except NotificationTemplateError as e:
            logger.error("[SmsGateway] template error: %s", e)
            return NotificationResult(success=False, error=str(e))

        payload = {"to": recipient, "from": self.sender_id, "message": message}
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(
                "[SmsGateway] network error to=%s template=%s error=%s",
                _mask_phone(recipient), template_type, e,
            )
            return NotificationResult(success=False, error=f"{type(e).__name__}: {e}")

        if response.is_success:
            message_id = None
            if "application/json" in response.headers.get("Content-Type", ""):
                message_id = response.json().get("message_id")
            logger.info("[SmsGateway] sent ok to=%s message_id=%s", _mask_phone(recipient), message_id)
            return NotificationResult(success=True, message_id=message_id or "accepted")

        logger.warning(
            "[SmsGateway] rejected to=%s status=%s body=%s",
            _mask_phone(recipient), response.status_code, response.text[:200],
        )
        return NotificationResult(success=False, error=f"HTTP {response.status_code}")


__all__ = ["SmsGatewayNotifier"]
# Fin del archivo backend/waterbilling/shared/integrations/sms_gateway_notifier.py
