# -*- coding: utf-8 -*-
"""
Tests del generador de facturación mensual.

Cubre:
- Una factura por cliente activo y periodo (re-ejecutar es no-op)
- Arrastre de saldo pendiente como previous_balance
- Tarifa por tipo de cliente y due_date según payment_due_days
- Formato del número de factura
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.models import Bill
from waterbilling.modules.billing.repository import BillRepository
from waterbilling.modules.billing.services.billing_cycle_service import (
    BillingCycleService,
    format_bill_number,
)
from waterbilling.modules.customers.enums import CustomerType

OCTOBER = date(2026, 10, 1)
NOVEMBER = date(2026, 11, 1)


def test_format_bill_number():
    assert format_bill_number(7, OCTOBER, 1) == "BILL-202610-0007-01"
    assert format_bill_number(12345, OCTOBER, 12) == "BILL-202610-12345-12"


@pytest.mark.asyncio
async def test_generates_one_bill_per_active_customer(session_factory, seeded_settings, make_customer):
    normal = await make_customer()
    institution = await make_customer(customer_type=CustomerType.INSTITUTION)
    await make_customer(is_active=False)

    result = await BillingCycleService(session_factory).generate(OCTOBER)

    assert result.eligible == 2
    assert len(result.created) == 2
    assert result.failed == 0

    by_customer = {n.customer_id: n for n in result.created}
    assert by_customer[normal.id].total_amount == Decimal("300.00")
    assert by_customer[institution.id].total_amount == Decimal("1000.00")
    assert by_customer[normal.id].due_date == date(2026, 10, 6)
    assert by_customer[normal.id].bill_number == format_bill_number(normal.id, OCTOBER, 1)


@pytest.mark.asyncio
async def test_rerun_same_period_is_noop(session_factory, seeded_settings, make_customer):
    await make_customer()
    await make_customer()
    service = BillingCycleService(session_factory)

    first = await service.generate(OCTOBER)
    second = await service.generate(date(2026, 10, 17))

    assert len(first.created) == 2
    assert second.created == []
    assert second.skipped == 2

    async with session_factory() as session:
        count = (await session.execute(select(func.count(Bill.id)))).scalar_one()
    assert count == 2


@pytest.mark.asyncio
async def test_unpaid_balance_carries_forward(session_factory, seeded_settings, make_customer):
    """Mes 1 genera X; sin pagos, mes 2 trae previous_balance X y total X + tarifa."""
    customer = await make_customer()
    service = BillingCycleService(session_factory)

    await service.generate(OCTOBER)
    result = await service.generate(NOVEMBER)

    notice = result.created[0]
    assert notice.previous_balance == Decimal("300.00")
    assert notice.current_charges == Decimal("300.00")
    assert notice.total_amount == Decimal("600.00")

    async with session_factory() as session:
        bill = await BillRepository().get_for_period(session, customer.id, NOVEMBER)
    assert bill.total_amount == bill.previous_balance + bill.current_charges
    assert bill.status == BillStatus.PENDING


@pytest.mark.asyncio
async def test_partial_payment_reduces_carry_forward(
    session_factory, seeded_settings, make_customer, make_bill,
):
    customer = await make_customer()
    await make_bill(customer, total="300.00", paid="120.00", status=BillStatus.PARTIALLY_PAID)

    result = await BillingCycleService(session_factory).generate(OCTOBER)

    assert result.created[0].previous_balance == Decimal("180.00")
    assert result.created[0].total_amount == Decimal("480.00")


@pytest.mark.asyncio
async def test_paid_bills_do_not_carry(session_factory, seeded_settings, make_customer, make_bill):
    customer = await make_customer()
    await make_bill(customer, total="300.00", paid="300.00", status=BillStatus.PAID)

    result = await BillingCycleService(session_factory).generate(OCTOBER)

    assert result.created[0].previous_balance == Decimal("0.00")


@pytest.mark.asyncio
async def test_restrict_to_customer_ids(session_factory, seeded_settings, make_customer):
    first = await make_customer()
    await make_customer()

    result = await BillingCycleService(session_factory).generate(OCTOBER, customer_ids=[first.id])

    assert result.eligible == 1
    assert [n.customer_id for n in result.created] == [first.id]


@pytest.mark.asyncio
async def test_notice_template_variables(session_factory, seeded_settings, make_customer):
    await make_customer(name="Wanjiru")

    result = await BillingCycleService(session_factory).generate(OCTOBER)
    variables = result.created[0].template_variables()

    assert variables["customer_name"] == "Wanjiru"
    assert variables["period"] == "October 2026"
    assert variables["due_date"] == "2026-10-06"
