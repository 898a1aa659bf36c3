# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/http_utils/request_meta.py

Helpers para extraer la IP del cliente de manera segura detrás de
proxies (Railway, nginx, etc.).

Autor: WaterBilling
Fecha: 2026-10-16
"""
from __future__ import annotations

import ipaddress
import logging
from typing import Iterable

from starlette.requests import Request

logger = logging.getLogger(__name__)


def get_client_ip(request: Request, trust_proxy_headers: bool = False) -> str:
    """
    Extrae la IP real del cliente.

    Si trust_proxy_headers:
        1. X-Forwarded-For (primer IP, cliente original)
        2. X-Real-IP (patrón nginx)
        3. request.client.host (fallback)

    Si no (default):
        Solo usa request.client.host (IP directa del socket)

    Returns:
        IP del cliente como string, o "unknown" si no se puede determinar
    """
    if trust_proxy_headers:
        xff = request.headers.get("x-forwarded-for")
        if xff:
            # X-Forwarded-For: "client, proxy1, proxy2"
            return xff.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def ip_allowed(client_ip: str, allowed: Iterable[str]) -> bool:
    """
    True si la IP está en la lista (acepta IPs sueltas o redes CIDR).
    Una lista vacía no restringe.
    """
    entries = [a for a in allowed if a]
    if not entries:
        return True
    try:
        ip = ipaddress.ip_address(client_ip)
    except ValueError:
        logger.warning("[request_meta] unparseable client ip=%s", client_ip)
        return False

    for entry in entries:
        try:
            if ip in ipaddress.ip_network(entry, strict=False):
                return True
        except ValueError:
            logger.warning("[request_meta] invalid allow-list entry=%s", entry)
    return False


__all__ = ["get_client_ip", "ip_allowed"]
# Fin del archivo backend/waterbilling/shared/http_utils/request_meta.py
