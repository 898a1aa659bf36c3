# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/__init__.py

Punto único de acceso a la configuración:
    from waterbilling.shared.config import get_settings
"""

from .config_loader import get_settings
from .logging_config import setup_logging
from .settings_base import BaseAppSettings

__all__ = ["get_settings", "setup_logging", "BaseAppSettings"]
# Fin del archivo backend/waterbilling/shared/config/__init__.py
