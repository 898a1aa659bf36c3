# -*- coding: utf-8 -*-
"""
Tests de las plantillas SMS.
"""

from decimal import Decimal

import pytest

from waterbilling.shared.errors import NotificationTemplateError
from waterbilling.shared.integrations.notification_templates import (
    NotificationTemplate,
    render_message,
)


def test_render_bill_generated_formats_money():
    text = render_message(NotificationTemplate.BILL_GENERATED, {
        "customer_name": "Mwangi",
        "bill_number": "BILL-202610-0001-01",
        "period": "October 2026",
        "previous_balance": Decimal("0"),
        "current_charges": Decimal("1000"),
        "total_amount": Decimal("1000"),
        "due_date": "2026-10-06",
    })

    assert "Mwangi" in text
    assert "KES 1,000.00" in text
    assert "by 2026-10-06" in text


def test_every_template_renders_with_its_variables():
    samples = {
        NotificationTemplate.CONTRIBUTION_REMINDER: {
            "customer_name": "A", "amount_required": Decimal("100"), "month": "October 2026",
            "due_date": "2026-10-31",
        },
        NotificationTemplate.FINE_APPLIED: {
            "customer_name": "A", "fine_amount": Decimal("30"), "reason": "late",
            "outstanding_balance": Decimal("330"),
        },
        NotificationTemplate.PAYMENT_RECEIVED: {
            "customer_name": "A", "amount": Decimal("100"), "transaction_id": "TX",
            "outstanding_balance": Decimal("0"),
        },
        NotificationTemplate.OVERDUE_NOTICE: {
            "customer_name": "A", "bills_count": 2, "total_outstanding": Decimal("600"),
            "oldest_due_date": "2026-09-06",
        },
    }
    for template, variables in samples.items():
        assert render_message(template.value, variables)


def test_unknown_template_raises():
    with pytest.raises(NotificationTemplateError):
        render_message("welcome_email", {})


def test_missing_variable_raises():
    with pytest.raises(NotificationTemplateError) as exc:
        render_message("payment_received", {"customer_name": "A"})
    assert "missing variable" in str(exc.value)
