# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/config/logging_config.py

Configuración centralizada de logging para WaterBilling.
Soporta formato plain (desarrollo) y json (producción).

Autor: WaterBilling
Fecha: 2026-10-16
"""

import logging.config
from typing import Literal

# Loggers ruidosos de terceros que bajamos a WARNING
_QUIET_LOGGERS = ("apscheduler", "httpx", "httpcore", "aiosqlite")


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    use_json = fmt == "json"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else "default",
            "stream": "ext://sys.stdout",
        }
    }

    formatters = {
        "default": {
            "format": "%(asctime)s %(levelname)s [%(name)s]: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        },
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {name: {"level": "WARNING"} for name in _QUIET_LOGGERS},
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo backend/waterbilling/shared/config/logging_config.py
