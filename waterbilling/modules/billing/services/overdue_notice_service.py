# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/billing/services/overdue_notice_service.py

Recolecta, por cliente, el resumen de facturas vencidas con saldo para el
recordatorio diario. Solo lectura: no cambia estados.

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from waterbilling.modules.billing.repository import BillRepository
from waterbilling.shared.database.database import SessionFactory, session_scope
from waterbilling.shared.utils.money import ZERO, to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverdueNotice:
    customer_id: int
    customer_name: str
    phone: Optional[str]
    bills_count: int
    total_outstanding: Decimal
    oldest_due_date: date

    def template_variables(self) -> Dict[str, Any]:
        return {
            "customer_name": self.customer_name,
            "bills_count": self.bills_count,
            "total_outstanding": self.total_outstanding,
            "oldest_due_date": self.oldest_due_date.isoformat(),
        }


class OverdueNoticeService:
    def __init__(self, session_factory: SessionFactory, bill_repo: Optional[BillRepository] = None):
        self._session_factory = session_factory
        self.bill_repo = bill_repo or BillRepository()

    async def collect(self, today: date) -> List[OverdueNotice]:
        async with session_scope(self._session_factory) as session:
            rows = await self.bill_repo.list_overdue_with_customer(session, today=today)

        grouped: Dict[int, Dict[str, Any]] = {}
        for bill, customer in rows:
            entry = grouped.setdefault(customer.id, {
                "customer": customer,
                "count": 0,
                "total": ZERO,
                "oldest": bill.due_date,
            })
            entry["count"] += 1
            entry["total"] += bill.total_amount - bill.amount_paid
            entry["oldest"] = min(entry["oldest"], bill.due_date)

        notices = [
            OverdueNotice(
                customer_id=customer_id,
                customer_name=entry["customer"].name,
                phone=entry["customer"].phone,
                bills_count=entry["count"],
                total_outstanding=to_money(entry["total"]),
                oldest_due_date=entry["oldest"],
            )
            for customer_id, entry in grouped.items()
        ]
        logger.info("[overdue_notices] today=%s customers=%s", today, len(notices))
        return notices


__all__ = ["OverdueNotice", "OverdueNoticeService"]
# Fin del archivo backend/waterbilling/modules/billing/services/overdue_notice_service.py
