# -*- coding: utf-8 -*-
"""
backend/waterbilling/shared/integrations/notification_templates.py

Plantillas de mensajes SMS por tipo de notificación.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from typing import Any, Mapping

from waterbilling.shared.errors import NotificationTemplateError


class NotificationTemplate(StrEnum):
    BILL_GENERATED = "bill_generated"
    CONTRIBUTION_REMINDER = "contribution_reminder"
    FINE_APPLIED = "fine_applied"
    PAYMENT_RECEIVED = "payment_received"
    OVERDUE_NOTICE = "overdue_notice"


_TEMPLATES: dict[NotificationTemplate, str] = {
    NotificationTemplate.BILL_GENERATED: (
        "Dear {customer_name}, your water bill {bill_number} for {period} is ready. "
        "Previous balance: KES {previous_balance}. Current charges: KES {current_charges}. "
        "Total due: KES {total_amount} by {due_date}."
    ),
    NotificationTemplate.CONTRIBUTION_REMINDER: (
        "Dear {customer_name}, your monthly contribution of KES {amount_required} "
        "for {month} is due by {due_date}."
    ),
    NotificationTemplate.FINE_APPLIED: (
        "Dear {customer_name}, a fine of KES {fine_amount} has been applied. "
        "Reason: {reason}. Outstanding balance: KES {outstanding_balance}."
    ),
    NotificationTemplate.PAYMENT_RECEIVED: (
        "Dear {customer_name}, we received KES {amount} (ref {transaction_id}). "
        "Outstanding balance: KES {outstanding_balance}. Thank you."
    ),
    NotificationTemplate.OVERDUE_NOTICE: (
        "Dear {customer_name}, you have {bills_count} overdue bill(s) totalling "
        "KES {total_outstanding}, oldest due {oldest_due_date}. Please pay to avoid fines."
    ),
}


def _fmt(value: Any) -> str:
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    return str(value)


def render_message(template_type: str, variables: Mapping[str, Any]) -> str:
    """
    Renderiza el texto del mensaje.

    Raises:
        NotificationTemplateError: plantilla desconocida o variable faltante
    """
    try:
        template = _TEMPLATES[NotificationTemplate(template_type)]
    except ValueError:
        raise NotificationTemplateError(f"unknown template: {template_type}") from None

    try:
        return template.format(**{k: _fmt(v) for k, v in variables.items()})
    except KeyError as e:
        raise NotificationTemplateError(f"missing variable {e.args[0]!r} for {template_type}") from None


__all__ = ["NotificationTemplate", "render_message"]
# Fin del archivo backend/waterbilling/shared/integrations/notification_templates.py
