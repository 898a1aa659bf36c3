# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Busca ser determinista: logging moderado, SQLite en memoria,
scheduler apagado y secretos dummy.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Literal, Optional

from pydantic import SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class EnvTestingSettings(BaseAppSettings):
    python_env: Literal["development", "test", "production"] = "test"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "pretty", "plain"] = "pretty"

    db_url: Optional[str] = "sqlite+aiosqlite:///:memory:"

    # Los tests arrancan jobs a mano
    scheduler_enabled: bool = False

    payment_queue_workers: int = 2
    payment_webhook_secret: Optional[SecretStr] = SecretStr("test-webhook-secret")
    admin_api_key: Optional[SecretStr] = SecretStr("test-admin-key")
    notifier_mode: Literal["console", "sms"] = "console"
    notifier_timeout_sec: float = 1.0

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo backend/waterbilling/shared/config/settings_testing.py
