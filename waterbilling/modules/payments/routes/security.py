# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/payments/routes/security.py

Autenticación del webhook del banco:
- Header X-Webhook-Token comparado en tiempo constante contra
  PAYMENT_WEBHOOK_SECRET
- Allow-list opcional de IPs (PAYMENT_WEBHOOK_ALLOWED_IPS)

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from waterbilling.shared.config.settings_base import BaseAppSettings
from waterbilling.shared.http_utils.dependencies import get_app_settings
from waterbilling.shared.http_utils.request_meta import get_client_ip, ip_allowed

logger = logging.getLogger(__name__)


async def require_webhook_caller(
    request: Request,
    x_webhook_token: Annotated[str | None, Header()] = None,
    settings: BaseAppSettings = Depends(get_app_settings),
) -> bool:
    """
    Raises:
        HTTPException 503: secreto no configurado en el backend
        HTTPException 401: header ausente
        HTTPException 403: token inválido o IP fuera de la allow-list
    """
    client_ip = get_client_ip(request, settings.trust_proxy_headers)

    if not ip_allowed(client_ip, settings.webhook_allowed_ips):
        logger.warning("[payments.webhook] ip not allowed ip=%s", client_ip)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Caller not allowed")

    if settings.payment_webhook_secret is None:
        logger.error("[payments.webhook] PAYMENT_WEBHOOK_SECRET not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook secret not configured",
        )

    if not x_webhook_token:
        logger.warning("[payments.webhook] missing token ip=%s", client_ip)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Webhook token required")

    expected = settings.payment_webhook_secret.get_secret_value()
    if not secrets.compare_digest(x_webhook_token.encode(), expected.encode()):
        logger.warning("[payments.webhook] invalid token ip=%s", client_ip)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid webhook token")

    return True


WebhookCaller = Annotated[bool, Depends(require_webhook_caller)]


__all__ = ["require_webhook_caller", "WebhookCaller"]
# Fin del archivo backend/waterbilling/modules/payments/routes/security.py
