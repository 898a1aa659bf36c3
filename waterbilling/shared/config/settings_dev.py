# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/settings_dev.py

Overrides para entorno de DESARROLLO (dev) usando Pydantic v2.
Hereda de BaseAppSettings y ajusta únicamente valores específicos
del ambiente local de desarrollo.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Literal

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    """Configuración para entorno de desarrollo."""

    python_env: Literal["development", "test", "production"] = "development"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    log_format: Literal["json", "pretty", "plain"] = "plain"

    # SMS reales no hacen falta en local
    notifier_mode: Literal["console", "sms"] = "console"


__all__ = ["DevSettings"]
# Fin del archivo backend/waterbilling/shared/config/settings_dev.py
