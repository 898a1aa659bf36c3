# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/database/__init__.py

Acceso a base de datos: Base declarativa, engine/sesiones y repositorio base.
"""

from .base import Base, BigIntPK, JSONType, Money, str_enum
from .database import (
    SessionFactory,
    build_session_factory,
    check_database_health,
    create_engine_from_settings,
    create_schema,
    session_scope,
)
from .repository import BaseRepository

__all__ = [
    "Base",
    "BigIntPK",
    "JSONType",
    "Money",
    "str_enum",
    "SessionFactory",
    "build_session_factory",
    "check_database_health",
    "create_engine_from_settings",
    "create_schema",
    "session_scope",
    "BaseRepository",
]
