# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/customers/enums.py

Enums del módulo de clientes.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from enum import StrEnum


class CustomerType(StrEnum):
    """Tipo de cliente; determina la tarifa plana mensual."""

    NORMAL = "normal"
    INSTITUTION = "institution"

    __db_enum_name__ = "customer_type_enum"


__all__ = ["CustomerType"]
# Fin del archivo backend/waterbilling/modules/customers/enums.py
