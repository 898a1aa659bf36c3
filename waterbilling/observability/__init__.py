# -*- coding: utf-8 -*-
"""
backend/waterbilling/observability/__init__.py
"""
