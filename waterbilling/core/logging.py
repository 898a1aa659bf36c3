# -*- coding: utf-8 -*-
"""
backend/waterbilling/core/logging.py

Fachada del módulo `waterbilling.shared.config.logging_config` para
mantener un punto de entrada único bajo `waterbilling.core`.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from waterbilling.shared.config.logging_config import setup_logging
from waterbilling.shared.config.settings_base import BaseAppSettings


def setup_logging_from_settings(settings: BaseAppSettings) -> None:
    """Configura logging con el nivel y formato declarados en settings."""
    setup_logging(level=settings.log_level, fmt=settings.log_format)


__all__ = ["setup_logging", "setup_logging_from_settings"]
# Fin del archivo backend/waterbilling/core/logging.py
