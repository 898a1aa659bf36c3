# -*- coding: utf-8 -*-
"""
backend/waterbilling/__init__.py

Paquete raíz del backend de facturación de agua (WaterBilling).

Autor: WaterBilling
Fecha: 2026-10-16
"""

__version__ = "0.1.0"
