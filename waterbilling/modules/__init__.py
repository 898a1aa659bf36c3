# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/__init__.py

Módulos de dominio: clientes, ajustes del sistema, facturación, aportes,
multas, pagos, notificaciones y jobs.
"""
