# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/__init__.py

Infraestructura compartida: configuración, base de datos, scheduler,
integraciones externas y utilidades.
"""
