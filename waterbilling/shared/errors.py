# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/errors.py

Errores de dominio de WaterBilling.

Objetivo:
- Definir excepciones semánticas que servicios, jobs y el motor de
  asignación de pagos pueden lanzar.
- Permitir que los ruteadores traduzcan estas excepciones a respuestas
  HTTP sin acoplar los servicios a FastAPI.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations


class WaterBillingError(Exception):
    """Error base del dominio."""

    pass


class NotFoundError(WaterBillingError):
    """
    La entidad referenciada (cliente, factura, multa, aporte) no existe.
    Se omite la entidad; no es fatal para el lote.
    """

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class DuplicateIdempotentError(WaterBillingError):
    """
    Se detectó procesamiento previo (factura del periodo, multa de la factura,
    pago por transaction_id). Se resuelve como no-op.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"already processed: {key}")


class PaymentValidationError(WaterBillingError):
    """Evento de pago entrante mal formado; se rechaza antes de escribir."""

    def __init__(self, message: str = "Invalid payment event", errors: list | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class TransientStoreError(WaterBillingError):
    """Fallo de lectura/escritura en la base de datos."""

    pass


class NotifierError(WaterBillingError):
    """Fallo del canal de notificaciones. Nunca es fatal para la operación."""

    pass


class NotificationTemplateError(NotifierError):
    """Plantilla desconocida o variables faltantes."""

    pass


class SettingValidationError(WaterBillingError, ValueError):
    """Un valor de system_settings no cumple con su tipo o rango."""

    def __init__(self, key: str, raw: object, reason: str) -> None:
        self.key = key
        self.raw = raw
        super().__init__(f"setting {key}={raw!r}: {reason}")


class FineTypeNotConfiguredError(WaterBillingError):
    """No existe un tipo de multa activo para el código solicitado."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"fine type not configured: {code}")


class UnknownJobError(WaterBillingError, KeyError):
    """Nombre de job no registrado en el orquestador."""

    def __init__(self, job_name: str) -> None:
        self.job_name = job_name
        super().__init__(job_name)

    def __str__(self) -> str:
        return f"unknown job: {self.job_name}"


__all__ = [
    "WaterBillingError",
    "NotFoundError",
    "DuplicateIdempotentError",
    "PaymentValidationError",
    "TransientStoreError",
    "NotifierError",
    "NotificationTemplateError",
    "SettingValidationError",
    "FineTypeNotConfiguredError",
    "UnknownJobError",
]
# Fin del archivo backend/waterbilling/shared/errors.py
