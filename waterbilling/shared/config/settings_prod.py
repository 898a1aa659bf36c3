# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/settings_prod.py

Overrides para entorno de PRODUCCIÓN usando Pydantic v2.
Forza lectura solo desde variables de entorno / secret stores
y activa logging estable (INFO en JSON).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Literal

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class ProdSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "production"

    # Usa el mismo tipo Literal que BaseAppSettings para override correcto
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "pretty", "plain"] = "json"

    model_config = SettingsConfigDict(
        env_file=None,  # No leemos .env en producción
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["ProdSettings"]
# Fin del archivo backend/waterbilling/shared/config/settings_prod.py
