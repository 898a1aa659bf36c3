# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/settings_base.py

Base de configuración (Pydantic v2) para WaterBilling.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Literal, Optional

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="WaterBilling", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="water_billing", validation_alias="DB_NAME")
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=5, validation_alias="DB_MAX_OVERFLOW")
    db_pool_recycle: int = Field(default=1800, validation_alias="DB_POOL_RECYCLE")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        URL de conexión completa para SQLAlchemy async.
        Prioriza DB_URL si existe (acepta sqlite+aiosqlite para pruebas locales),
        si no la construye desde componentes individuales para asyncpg.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("postgres://") or url.startswith("postgresql://"):
                url = (
                    url.replace("postgres://", "postgresql+asyncpg://", 1)
                       .replace("postgresql://", "postgresql+asyncpg://", 1)
                )
            return url

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # Scheduler de jobs
    # =========================
    scheduler_enabled: bool = Field(default=True, validation_alias="SCHEDULER_ENABLED")
    scheduler_timezone: str = Field(default="Africa/Nairobi", validation_alias="SCHEDULER_TIMEZONE")
    scheduler_misfire_grace_sec: int = Field(default=300, validation_alias="SCHEDULER_MISFIRE_GRACE_SEC")

    cron_monthly_billing: str = Field(default="0 6 1 * *", validation_alias="CRON_MONTHLY_BILLING")
    cron_monthly_contributions: str = Field(default="0 7 1 * *", validation_alias="CRON_MONTHLY_CONTRIBUTIONS")
    cron_overdue_notifications: str = Field(default="0 9 * * *", validation_alias="CRON_OVERDUE_NOTIFICATIONS")
    cron_fine_application: str = Field(default="0 10 * * *", validation_alias="CRON_FINE_APPLICATION")
    cron_bill_status_updates: str = Field(default="0 8 * * *", validation_alias="CRON_BILL_STATUS_UPDATES")
    cron_notification_cleanup: str = Field(default="0 2 * * *", validation_alias="CRON_NOTIFICATION_CLEANUP")

    # =========================
    # Pagos entrantes (webhook del banco)
    # =========================
    payment_queue_workers: int = Field(default=4, ge=1, le=64, validation_alias="PAYMENT_QUEUE_WORKERS")
    payment_queue_maxsize: int = Field(default=1000, ge=1, validation_alias="PAYMENT_QUEUE_MAXSIZE")
    payment_webhook_secret: Optional[SecretStr] = Field(default=None, validation_alias="PAYMENT_WEBHOOK_SECRET")
    # CSV de IPs permitidas; vacío = sin restricción por IP
    payment_webhook_allowed_ips: str = Field(default="", validation_alias="PAYMENT_WEBHOOK_ALLOWED_IPS")
    # Solo detrás de un proxy confiable (Railway, nginx)
    trust_proxy_headers: bool = Field(default=False, validation_alias="TRUST_PROXY_HEADERS")

    # =========================
    # Administración
    # =========================
    admin_api_key: Optional[SecretStr] = Field(default=None, validation_alias="ADMIN_API_KEY")

    # =========================
    # Notificaciones (SMS)
    # =========================
    notifier_mode: Literal["console", "sms"] = Field(default="console", validation_alias="NOTIFIER_MODE")
    notifier_timeout_sec: float = Field(default=10.0, gt=0, validation_alias="NOTIFIER_TIMEOUT_SEC")
    sms_api_url: Optional[str] = Field(default=None, validation_alias="SMS_API_URL")
    sms_api_key: Optional[SecretStr] = Field(default=None, validation_alias="SMS_API_KEY")
    sms_sender_id: str = Field(default="NYANJIGI", validation_alias="SMS_SENDER_ID")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="plain", validation_alias="LOG_FORMAT")
    http_metrics_enabled: bool = Field(default=True, validation_alias="HTTP_METRICS_ENABLED")

    @field_validator("scheduler_timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"SCHEDULER_TIMEZONE inválida: {value!r}") from e
        return value

    @property
    def webhook_allowed_ips(self) -> list[str]:
        return [ip.strip() for ip in self.payment_webhook_allowed_ips.split(",") if ip.strip()]

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    def _security_checks(self) -> None:
        """
        Validaciones de coherencia para entornos productivos.

        Raises:
            ValueError: si faltan secretos obligatorios
        """
        if not self.is_prod:
            return
        if self.payment_webhook_secret is None or not self.payment_webhook_secret.get_secret_value():
            raise ValueError("PAYMENT_WEBHOOK_SECRET es obligatorio en producción")
        if self.admin_api_key is None or not self.admin_api_key.get_secret_value():
            raise ValueError("ADMIN_API_KEY es obligatorio en producción")
        if self.notifier_mode == "sms" and not self.sms_api_url:
            raise ValueError("SMS_API_URL es obligatorio con NOTIFIER_MODE=sms")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo backend/waterbilling/shared/config/settings_base.py
