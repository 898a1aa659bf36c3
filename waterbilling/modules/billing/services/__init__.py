# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/services/__init__.py
"""

from .billing_cycle_service import BillNotice, BillingCycleResult, BillingCycleService, format_bill_number
from .overdue_notice_service import OverdueNotice, OverdueNoticeService

__all__ = [
    "BillNotice",
    "BillingCycleResult",
    "BillingCycleService",
    "format_bill_number",
    "OverdueNotice",
    "OverdueNoticeService",
]
