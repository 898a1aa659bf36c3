# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from typing import Any, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para CRUD común."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # CRUD básico
    # -------------------------------------------------------------
    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def list(self, session: AsyncSession) -> Sequence[T]:
        result = await session.execute(select(self.model))
        return result.scalars().all()

    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

    async def add_many(self, session: AsyncSession, objs: Iterable[T]) -> List[T]:
        """Agrega varias filas con un solo flush (p. ej. asignaciones de un pago)."""
        items = list(objs)
        session.add_all(items)
        await session.flush()
        return items

    async def delete(self, session: AsyncSession, obj: T) -> None:
        await session.delete(obj)
        await session.flush()

# Fin del archivo backend/waterbilling/shared/database/repository.py
