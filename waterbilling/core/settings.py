# -*- coding: utf-8 -*-
"""
backend/waterbilling/core/settings.py

Fachada de configuración para WaterBilling.
Reexpone la carga de settings basada en Pydantic v2 definida en
`waterbilling.shared.config`.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import cast

from waterbilling.shared.config.config_loader import get_settings as _get_settings
from waterbilling.shared.config.settings_base import BaseAppSettings


def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración global de la aplicación.

    Returns:
        BaseAppSettings: instancia de configuración (según PYTHON_ENV).
    """
    settings = _get_settings()
    return cast(BaseAppSettings, settings)

# Fin del archivo backend/waterbilling/core/settings.py
