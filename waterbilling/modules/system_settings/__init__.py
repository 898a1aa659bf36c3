# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/system_settings/__init__.py

Ajustes operativos guardados en base de datos (tarifas, plazos, multas).
"""

from .definitions import SettingDefinition, SettingKind, SystemSettingKey
from .models import SystemSetting
from .service import (
    BillingSettings,
    ContributionSettings,
    FineSettings,
    MaintenanceSettings,
    SystemSettingsService,
)
from .validation import format_setting, parse_setting

__all__ = [
    "SettingDefinition",
    "SettingKind",
    "SystemSettingKey",
    "SystemSetting",
    "BillingSettings",
    "ContributionSettings",
    "FineSettings",
    "MaintenanceSettings",
    "SystemSettingsService",
    "format_setting",
    "parse_setting",
]
