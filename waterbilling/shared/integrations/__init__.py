# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/integrations/__init__.py

Integraciones externas: canal de notificaciones (consola / SMS gateway).
"""

from .notification_templates import NotificationTemplate, render_message
from .notifier import ConsoleNotifier, Notifier, NotificationResult, build_notifier

__all__ = [
    "NotificationTemplate",
    "render_message",
    "ConsoleNotifier",
    "Notifier",
    "NotificationResult",
    "build_notifier",
]
