# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/notifications/__init__.py

Despacho de notificaciones a clientes y bitácora de envíos.
"""

from .dispatcher import NotificationDispatcher
from .models import NotificationLog
from .repository import NotificationLogRepository

__all__ = ["NotificationDispatcher", "NotificationLog", "NotificationLogRepository"]
