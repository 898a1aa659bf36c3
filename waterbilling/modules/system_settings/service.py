# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/system_settings/service.py

Lectura tipada de system_settings para generadores, asesor de multas
y mantenimiento.

- Filas ausentes usan el default de la definición.
- Filas mal formadas lanzan SettingValidationError: el proceso que las
  pidió aborta antes de escribir nada.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.customers.enums import CustomerType
from .definitions import SettingValue, SystemSettingKey
from .models import SystemSetting
from .validation import format_setting, parse_setting

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillingSettings:
    payment_due_days: int
    flat_rate_normal: Decimal
    flat_rate_institution: Decimal

    def flat_rate_for(self, customer_type: CustomerType) -> Decimal:
        if customer_type == CustomerType.INSTITUTION:
            return self.flat_rate_institution
        return self.flat_rate_normal


@dataclass(frozen=True)
class ContributionSettings:
    amount: Decimal
    due_days: int


@dataclass(frozen=True)
class FineSettings:
    grace_days: int
    minimum_amount: Decimal
    batch_limit: int


@dataclass(frozen=True)
class MaintenanceSettings:
    notification_retention_days: int


class SystemSettingsService:
    """Acceso tipado a system_settings."""

    async def _load(
        self,
        session: AsyncSession,
        keys: Iterable[SystemSettingKey],
    ) -> Dict[SystemSettingKey, SettingValue]:
        keys = list(keys)
        stmt = select(SystemSetting).where(
            SystemSetting.key.in_([k.definition.key for k in keys])
        )
        rows = {row.key: row.value for row in (await session.execute(stmt)).scalars()}

        values: Dict[SystemSettingKey, SettingValue] = {}
        for member in keys:
            definition = member.definition
            raw = rows.get(definition.key)
            if raw is None:
                values[member] = definition.default
            else:
                values[member] = parse_setting(definition, raw)
        return values

    async def get(self, session: AsyncSession, key: SystemSettingKey) -> SettingValue:
        return (await self._load(session, [key]))[key]

    async def get_billing_settings(self, session: AsyncSession) -> BillingSettings:
        v = await self._load(session, [
            SystemSettingKey.PAYMENT_DUE_DAYS,
            SystemSettingKey.FLAT_RATE_NORMAL,
            SystemSettingKey.FLAT_RATE_INSTITUTION,
        ])
        return BillingSettings(
            payment_due_days=v[SystemSettingKey.PAYMENT_DUE_DAYS],
            flat_rate_normal=v[SystemSettingKey.FLAT_RATE_NORMAL],
            flat_rate_institution=v[SystemSettingKey.FLAT_RATE_INSTITUTION],
        )

    async def get_contribution_settings(self, session: AsyncSession) -> ContributionSettings:
        v = await self._load(session, [
            SystemSettingKey.CONTRIBUTION_AMOUNT,
            SystemSettingKey.CONTRIBUTION_DUE_DAYS,
        ])
        return ContributionSettings(
            amount=v[SystemSettingKey.CONTRIBUTION_AMOUNT],
            due_days=v[SystemSettingKey.CONTRIBUTION_DUE_DAYS],
        )

    async def get_fine_settings(self, session: AsyncSession) -> FineSettings:
        v = await self._load(session, [
            SystemSettingKey.LATE_FINE_GRACE_DAYS,
            SystemSettingKey.FINE_MINIMUM_AMOUNT,
            SystemSettingKey.FINE_BATCH_LIMIT,
        ])
        return FineSettings(
            grace_days=v[SystemSettingKey.LATE_FINE_GRACE_DAYS],
            minimum_amount=v[SystemSettingKey.FINE_MINIMUM_AMOUNT],
            batch_limit=v[SystemSettingKey.FINE_BATCH_LIMIT],
        )

    async def get_maintenance_settings(self, session: AsyncSession) -> MaintenanceSettings:
        retention = await self.get(session, SystemSettingKey.NOTIFICATION_RETENTION_DAYS)
        return MaintenanceSettings(notification_retention_days=retention)

    async def set_values(
        self,
        session: AsyncSession,
        values: Mapping[SystemSettingKey, SettingValue],
    ) -> None:
        """Valida y guarda valores (usado por seeds y pruebas; sin commit)."""
        for member, value in values.items():
            definition = member.definition
            text = format_setting(definition, value)
            row = await session.get(SystemSetting, definition.key)
            if row is None:
                session.add(SystemSetting(
                    key=definition.key,
                    value=text,
                    category=definition.category,
                    description=definition.description,
                ))
            else:
                row.value = text
        await session.flush()

    async def seed_defaults(self, session: AsyncSession) -> int:
        """Inserta los defaults que falten. Devuelve cuántos se crearon."""
        existing = set((await session.execute(select(SystemSetting.key))).scalars())
        missing = {
            member: member.definition.default
            for member in SystemSettingKey
            if member.definition.key not in existing
        }
        if missing:
            await self.set_values(session, missing)
            logger.info("[system_settings] seeded count=%s", len(missing))
        return len(missing)


__all__ = [
    "BillingSettings",
    "ContributionSettings",
    "FineSettings",
    "MaintenanceSettings",
    "SystemSettingsService",
]
# Fin del archivo backend/waterbilling/modules/system_settings/service.py
