# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/http_utils/__init__.py

Autor: WaterBilling
Fecha: 2026-10-16
"""

from .request_meta import get_client_ip, ip_allowed

__all__ = ["get_client_ip", "ip_allowed"]

# Fin del archivo backend/waterbilling/shared/http_utils/__init__.py
