# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/database/base.py

Base declarativa y convención de nombres para modelos ORM.

Este módulo proporciona:
- Base: clase base declarativa de SQLAlchemy
- NAMING_CONVENTION: convención de nombres para constraints
- str_enum: helper genérico para mapear enums Python a columnas de texto
- JSONType: JSON portable (JSONB en PostgreSQL)
- Money: tipo NUMERIC(12, 2) para montos
- BigIntPK: BIGINT portable para claves primarias

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from sqlalchemy import JSON, BigInteger, Integer, MetaData, Numeric
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# ===== NAMING CONVENTION =====
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# ===== BASE DECLARATIVA =====
class Base(DeclarativeBase):
    """
    Base declarativa para todos los modelos ORM de WaterBilling.
    Incluye convención de nombres para constraints.
    """
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ===== TIPOS PORTABLES =====
JSONType = JSON().with_variant(JSONB(), "postgresql")

# PK BIGINT; en SQLite debe ser INTEGER para que sea alias de rowid (autoincrement)
BigIntPK = BigInteger().with_variant(Integer(), "sqlite")

# Montos en moneda local con 2 decimales
Money = Numeric(12, 2, asdecimal=True)


def str_enum(enum_cls: Type[Enum], name: str | None = None) -> SQLEnum:
    """
    Devuelve un tipo Enum de SQLAlchemy almacenado como VARCHAR + CHECK.

    Uso típico:

        class Bill(Base):
            status: Mapped[BillStatus] = mapped_column(
                str_enum(BillStatus), nullable=False,
            )

    - native_enum=False: el mismo esquema funciona en PostgreSQL y SQLite.
    - Persiste el `.value` del enum, no el nombre del miembro.
    """
    enum_name = name or getattr(enum_cls, "__db_enum_name__", enum_cls.__name__.lower())

    return SQLEnum(
        enum_cls,
        name=enum_name,
        native_enum=False,
        create_constraint=True,
        length=32,
        values_callable=lambda e: [x.value for x in e],
        validate_strings=True,
    )


__all__ = ["Base", "NAMING_CONVENTION", "BigIntPK", "JSONType", "Money", "str_enum"]

# Fin del archivo backend/waterbilling/shared/database/base.py
