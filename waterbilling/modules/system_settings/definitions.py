# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/system_settings/definitions.py

Catálogo tipado de ajustes conocidos.

Cada miembro de SystemSettingKey lleva su SettingDefinition: tipo
(SettingKind), default y rango permitido. La validación es una sola
función genérica sobre la definición (ver validation.py).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, StrEnum
from typing import Optional, Union

SettingValue = Union[int, Decimal, bool, str]


class SettingKind(StrEnum):
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    STRING = "string"


@dataclass(frozen=True)
class SettingDefinition:
    key: str
    kind: SettingKind
    default: SettingValue
    category: str
    minimum: Optional[Union[int, Decimal]] = None
    maximum: Optional[Union[int, Decimal]] = None
    description: str = ""


class SystemSettingKey(Enum):
    """Ajustes que leen los generadores, el asesor de multas y el mantenimiento."""

    PAYMENT_DUE_DAYS = SettingDefinition(
        "payment_due_days", SettingKind.INTEGER, 5, "billing", 0, 90,
        "Días entre el inicio del periodo y el vencimiento de la factura",
    )
    FLAT_RATE_NORMAL = SettingDefinition(
        "flat_rate_normal", SettingKind.DECIMAL, Decimal("300.00"), "billing",
        Decimal("0"), Decimal("1000000"), "Tarifa plana mensual de clientes normales",
    )
    FLAT_RATE_INSTITUTION = SettingDefinition(
        "flat_rate_institution", SettingKind.DECIMAL, Decimal("1000.00"), "billing",
        Decimal("0"), Decimal("1000000"), "Tarifa plana mensual de instituciones",
    )
    CONTRIBUTION_AMOUNT = SettingDefinition(
        "contribution_amount", SettingKind.DECIMAL, Decimal("100.00"), "contributions",
        Decimal("0"), Decimal("1000000"), "Aporte mensual requerido por cliente",
    )
    CONTRIBUTION_DUE_DAYS = SettingDefinition(
        "contribution_due_days", SettingKind.INTEGER, 30, "contributions", 0, 90,
        "Días para pagar el aporte mensual",
    )
    LATE_FINE_GRACE_DAYS = SettingDefinition(
        "late_fine_grace_days", SettingKind.INTEGER, 5, "fines", 0, 60,
        "Días de gracia tras el vencimiento antes de multar",
    )
    FINE_MINIMUM_AMOUNT = SettingDefinition(
        "fine_minimum_amount", SettingKind.DECIMAL, Decimal("1.00"), "fines",
        Decimal("0"), Decimal("100000"), "Multas por debajo de este monto no se aplican",
    )
    FINE_BATCH_LIMIT = SettingDefinition(
        "fine_batch_limit", SettingKind.INTEGER, 100, "fines", 1, 1000,
        "Máximo de facturas evaluadas por corrida del asesor de multas",
    )
    NOTIFICATION_RETENTION_DAYS = SettingDefinition(
        "notification_retention_days", SettingKind.INTEGER, 180, "maintenance", 7, 3650,
        "Antigüedad máxima de notification_logs",
    )

    @property
    def definition(self) -> SettingDefinition:
        return self.value

    @classmethod
    def from_key(cls, key: str) -> "SystemSettingKey":
        for member in cls:
            if member.value.key == key:
                return member
        raise KeyError(key)


__all__ = ["SettingKind", "SettingDefinition", "SettingValue", "SystemSettingKey"]
# Fin del archivo backend/waterbilling/modules/system_settings/definitions.py
