# -*- coding: utf-8 -*-
"""
backend/waterbilling/modules/customers/balance_service.py

Consulta de saldo del cliente para validación previa al pago (banco) y
para los avisos de multa/pago.

validate_customer(account) -> {exists, active, outstanding_balance,
breakdown{bills, fines, contributions}}

Autor: WaterBilling
Fecha: 2026-10-16
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.contributions.repository import ContributionRepository
from waterbilling.modules.fines.repository import FineRepository
from waterbilling.shared.utils.money import ZERO, to_money
from .models import Customer
from .repository import CustomerRepository


@dataclass(frozen=True)
class BalanceBreakdown:
    bills: Decimal = ZERO
    fines: Decimal = ZERO
    contributions: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return to_money(self.bills + self.fines + self.contributions)


@dataclass(frozen=True)
class CustomerValidation:
    exists: bool
    active: bool
    account_identifier: str
    customer_name: Optional[str]
    breakdown: BalanceBreakdown

    @property
    def outstanding_balance(self) -> Decimal:
        return self.breakdown.total

    def as_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "active": self.active,
            "account_identifier": self.account_identifier,
            "customer_name": self.customer_name,
            "outstanding_balance": self.outstanding_balance,
            "breakdown": {
                "bills": self.breakdown.bills,
                "fines": self.breakdown.fines,
                "contributions": self.breakdown.contributions,
            },
        }


class CustomerBalanceService:
    def __init__(
        self,
        customer_repo: Optional[CustomerRepository] = None,
        bill_repo: Optional[BillRepository] = None,
        fine_repo: Optional[FineRepository] = None,
        contribution_repo: Optional[ContributionRepository] = None,
    ):
        self.customer_repo = customer_repo or CustomerRepository()
        self.bill_repo = bill_repo or BillRepository()
        self.fine_repo = fine_repo or FineRepository()
        self.contribution_repo = contribution_repo or ContributionRepository()

    async def get_breakdown(self, session: AsyncSession, customer_id: int) -> BalanceBreakdown:
        return BalanceBreakdown(
            bills=await self.bill_repo.sum_unpaid_balance(session, customer_id),
            fines=await self.fine_repo.sum_outstanding(session, customer_id),
            contributions=await self.contribution_repo.sum_outstanding(session, customer_id),
        )

    async def validate_customer(
        self,
        session: AsyncSession,
        account_identifier: str,
    ) -> CustomerValidation:
        customer: Optional[Customer] = await self.customer_repo.get_by_account_number(
            session, account_identifier.strip()
        )
        if customer is None:
            return CustomerValidation(
                exists=False,
                active=False,
                account_identifier=account_identifier,
                customer_name=None,
                breakdown=BalanceBreakdown(),
            )

        return CustomerValidation(
            exists=True,
            active=customer.is_active,
            account_identifier=customer.account_number,
            customer_name=customer.name,
            breakdown=await self.get_breakdown(session, customer.id),
        )


__all__ = ["BalanceBreakdown", "CustomerValidation", "CustomerBalanceService"]
# Fin del archivo backend/waterbilling/modules/customers/balance_service.py
