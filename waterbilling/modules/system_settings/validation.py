# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/system_settings/validation.py

Validador genérico de ajustes: interpreta el texto almacenado según el
SettingKind de la definición y verifica el rango.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from waterbilling.shared.errors import SettingValidationError
from waterbilling.shared.utils.money import to_money
from .definitions import SettingDefinition, SettingKind, SettingValue

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


def _coerce(definition: SettingDefinition, raw: object) -> SettingValue:
    kind = definition.kind
    text = str(raw).strip()

    if kind is SettingKind.INTEGER:
        if isinstance(raw, bool):
            raise ValueError("expected integer, got boolean")
        try:
            return int(text)
        except ValueError:
            raise ValueError("expected integer") from None

    if kind is SettingKind.DECIMAL:
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError("expected decimal") from None
        if not value.is_finite():
            raise ValueError("expected finite decimal")
        return to_money(value)

    if kind is SettingKind.BOOLEAN:
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError("expected boolean")

    return text


def parse_setting(definition: SettingDefinition, raw: object) -> SettingValue:
    """
    Convierte `raw` al tipo declarado y valida el rango.

    Raises:
        SettingValidationError: tipo o rango inválido
    """
    try:
        value = _coerce(definition, raw)
    except ValueError as e:
        raise SettingValidationError(definition.key, raw, str(e)) from e

    if definition.kind in (SettingKind.INTEGER, SettingKind.DECIMAL):
        if definition.minimum is not None and value < definition.minimum:
            raise SettingValidationError(definition.key, raw, f"below minimum {definition.minimum}")
        if definition.maximum is not None and value > definition.maximum:
            raise SettingValidationError(definition.key, raw, f"above maximum {definition.maximum}")

    if definition.kind is SettingKind.STRING and not value:
        raise SettingValidationError(definition.key, raw, "empty string")

    return value


def format_setting(definition: SettingDefinition, value: SettingValue) -> str:
    """Serializa un valor ya validado al texto que se guarda en system_settings."""
    parsed = parse_setting(definition, value)
    if definition.kind is SettingKind.BOOLEAN:
        return "true" if parsed else "false"
    return str(parsed)


__all__ = ["parse_setting", "format_setting"]
# Fin del archivo backend/waterbilling/modules/system_settings/validation.py
