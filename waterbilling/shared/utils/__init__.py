# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/utils/__init__.py
"""

from .keyed_locks import KeyedLockRegistry
from .money import ZERO, to_money
from .dates import add_months, first_of_month, today_in

__all__ = ["KeyedLockRegistry", "ZERO", "to_money", "add_months", "first_of_month", "today_in"]
