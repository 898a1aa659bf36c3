# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/customers/__init__.py

Clientes (solo lectura para el núcleo: los crea un flujo externo).
"""

from .enums import CustomerType
from .models import Customer
from .repository import CustomerRepository

__all__ = ["CustomerType", "Customer", "CustomerRepository"]
