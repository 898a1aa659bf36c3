# -*- coding: utf-8 -*-
"""
backend/waterbilling/core/__init__.py

Fachadas estables de configuración y logging.
"""
