# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/database/database.py

SQLAlchemy asyncio (asyncpg en producción, aiosqlite en pruebas locales).

Provee:
- create_engine_from_settings(): engine async configurado desde settings
- build_session_factory(): async_sessionmaker sin expire_on_commit
- session_scope(): context manager reutilizable en jobs/scripts/tests
- create_schema(): crea las tablas (dev/test; en prod se usan migraciones)
- check_database_health()

Notas:
- No se crea ningún engine al importar el módulo: el lifespan de la app
  construye uno y lo inyecta (app.state) a quien lo necesite.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from waterbilling.shared.config.settings_base import BaseAppSettings
from waterbilling.shared.database.base import Base

logger = logging.getLogger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


def create_engine_from_settings(settings: BaseAppSettings) -> AsyncEngine:
    """
    Crea el engine async a partir de settings.

    - PostgreSQL: pool de SQLAlchemy con pre_ping y recycle.
    - SQLite (aiosqlite) en archivo: NullPool; cada sesión abre su propia conexión.
    - SQLite en memoria: StaticPool (una sola conexión compartida).
    """
    url = settings.database_url
    is_sqlite = url.startswith("sqlite")

    logger.info(
        "[DB] engine url_scheme=%s echo=%s",
        url.split(":", 1)[0],
        settings.db_echo_sql,
    )

    if is_sqlite and ":memory:" in url:
        return create_async_engine(
            url,
            echo=settings.db_echo_sql,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if is_sqlite:
        return create_async_engine(url, echo=settings.db_echo_sql, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=settings.db_echo_sql,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> SessionFactory:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """
    Abre una sesión; el commit queda a cargo de quien usa el scope.
    Si al salir queda una transacción abierta se hace rollback.
    """
    async with factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


async def create_schema(engine: AsyncEngine) -> None:
    """Crea todas las tablas registradas en Base.metadata."""
    # Importa modelos para poblar Base.metadata
    import waterbilling.modules.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("[DB] schema listo tables=%s", len(Base.metadata.tables))


async def check_database_health(engine: AsyncEngine, timeout_s: float = 3.0) -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("[DB] health check failed: %s", e)
        return False


__all__ = [
    "SessionFactory",
    "create_engine_from_settings",
    "build_session_factory",
    "session_scope",
    "create_schema",
    "check_database_health",
]
# Fin del archivo backend/waterbilling/shared/database/database.py
