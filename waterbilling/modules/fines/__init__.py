# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/fines/__init__.py

Multas: tipos configurables y multas aplicadas.
"""

from .enums import FineStatus, FineTypeCode
from .models import Fine, FineType
from .repository import FineRepository, FineTypeRepository

__all__ = ["FineStatus", "FineTypeCode", "Fine", "FineType", "FineRepository", "FineTypeRepository"]
