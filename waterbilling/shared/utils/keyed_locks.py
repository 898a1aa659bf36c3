# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/utils/keyed_locks.py

Registry de asyncio.Lock por clave (p. ej. customer_id).

Serializa operaciones sobre la misma clave y deja correr en paralelo
las de claves distintas. Los locks se crean bajo demanda y se liberan
del registry cuando nadie los usa (contador de referencias).

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("lock", "refs")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.refs = 0


class KeyedLockRegistry:
    """Locks asyncio por clave, con limpieza automática."""

    def __init__(self, name: str = "keyed"):
        self._name = name
        self._entries: Dict[Hashable, _Entry] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Adquiere el lock de `key` durante el bloque.

        Uso:
            async with registry.hold(customer_id):
                ...
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = _Entry()
        entry.refs += 1

        if entry.lock.locked():
            logger.debug("[%s] waiting key=%s", self._name, key)
        try:
            async with entry.lock:
                yield
        finally:
            entry.refs -= 1
            if entry.refs == 0:
                self._entries.pop(key, None)

    def is_locked(self, key: Hashable) -> bool:
        entry = self._entries.get(key)
        return bool(entry and entry.lock.locked())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["KeyedLockRegistry"]
# Fin del archivo backend/waterbilling/shared/utils/keyed_locks.py
