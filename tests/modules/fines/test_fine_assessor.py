# -*- coding: utf-8 -*-
"""
Tests del asesor de multas por pago tardío.

Cubre:
- Límite del periodo de gracia (D+G no elegible, D+G+1 elegible)
- Una sola multa por factura aunque el job corra varias veces
- Monto porcentual / fijo y mínimo configurable
- Tipo de multa no configurado -> FineTypeNotConfiguredError
- Avisos por cliente con saldo actualizado
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.models import Bill
from waterbilling.modules.fines.enums import FineStatus, FineTypeCode
from waterbilling.modules.fines.models import Fine
from waterbilling.modules.fines.services.fine_assessor import FineAssessor, FineRule, fine_cutoff
from waterbilling.modules.system_settings.definitions import SystemSettingKey
from waterbilling.shared.errors import FineTypeNotConfiguredError

DUE = date(2026, 9, 6)
GRACE = 5


async def _count_fines(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(Fine.id)))).scalar_one()


def test_fine_cutoff():
    assert fine_cutoff(date(2026, 9, 12), 5) == date(2026, 9, 7)


def test_fine_rule_compute():
    percentage = FineRule(FineTypeCode.LATE_PAYMENT, "Late", Decimal("10.00"), True)
    fixed = FineRule(FineTypeCode.LATE_PAYMENT, "Late", Decimal("50.00"), False)

    assert percentage.compute(Decimal("300.00")) == Decimal("30.00")
    assert percentage.compute(Decimal("333.33")) == Decimal("33.33")
    assert fixed.compute(Decimal("300.00")) == Decimal("50.00")


@pytest.mark.asyncio
async def test_grace_boundary_day_is_not_eligible(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type()
    customer = await make_customer()
    await make_bill(customer, due_date=DUE)

    result = await FineAssessor(session_factory).assess(DUE + timedelta(days=GRACE))

    assert result.eligible == 0
    assert result.applied == []
    assert await _count_fines(session_factory) == 0


@pytest.mark.asyncio
async def test_day_after_grace_is_eligible(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type(amount="10.00", is_percentage=True)
    customer = await make_customer()
    bill = await make_bill(customer, total="300.00", due_date=DUE)

    result = await FineAssessor(session_factory).assess(DUE + timedelta(days=GRACE + 1))

    assert len(result.applied) == 1
    applied = result.applied[0]
    assert applied.bill_id == bill.id
    assert applied.amount == Decimal("30.00")

    async with session_factory() as session:
        fine = (await session.execute(select(Fine))).scalars().one()
        refreshed = await session.get(Bill, bill.id)
    assert fine.status == FineStatus.PENDING
    assert fine.fine_type == FineTypeCode.LATE_PAYMENT
    assert fine.applied_date == DUE + timedelta(days=GRACE + 1)
    assert bill.bill_number in fine.reason
    assert refreshed.status == BillStatus.OVERDUE


@pytest.mark.asyncio
async def test_repeated_runs_apply_fine_once(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type()
    customer = await make_customer()
    await make_bill(customer, due_date=DUE)
    assessor = FineAssessor(session_factory)

    first = await assessor.assess(date(2026, 9, 20))
    second = await assessor.assess(date(2026, 9, 21))

    assert len(first.applied) == 1
    assert second.eligible == 0
    assert second.applied == []
    assert await _count_fines(session_factory) == 1


@pytest.mark.asyncio
async def test_partially_paid_bill_is_fined(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type(amount="25.00", is_percentage=False)
    customer = await make_customer()
    bill = await make_bill(customer, paid="100.00", due_date=DUE, status=BillStatus.PARTIALLY_PAID)

    result = await FineAssessor(session_factory).assess(date(2026, 9, 30))

    assert [a.amount for a in result.applied] == [Decimal("25.00")]
    async with session_factory() as session:
        refreshed = await session.get(Bill, bill.id)
    # Solo pending pasa a overdue
    assert refreshed.status == BillStatus.PARTIALLY_PAID


@pytest.mark.asyncio
async def test_paid_bills_and_inactive_customers_skipped(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type()
    paid = await make_customer()
    await make_bill(paid, paid="300.00", due_date=DUE, status=BillStatus.PAID)
    inactive = await make_customer(is_active=False)
    await make_bill(inactive, due_date=DUE)

    result = await FineAssessor(session_factory).assess(date(2026, 9, 30))

    assert result.eligible == 0
    assert await _count_fines(session_factory) == 0


@pytest.mark.asyncio
async def test_below_minimum_is_not_applied(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type(amount="1.00", is_percentage=True)
    async with session_factory() as session:
        async with session.begin():
            await seeded_settings.set_values(session, {SystemSettingKey.FINE_MINIMUM_AMOUNT: Decimal("5")})
    customer = await make_customer()
    await make_bill(customer, total="300.00", due_date=DUE)

    result = await FineAssessor(session_factory).assess(date(2026, 9, 30))

    assert result.applied == []
    assert result.skipped == 1


@pytest.mark.asyncio
async def test_missing_fine_type_raises(session_factory, seeded_settings, make_customer, make_bill):
    customer = await make_customer()
    await make_bill(customer, due_date=DUE)

    with pytest.raises(FineTypeNotConfiguredError):
        await FineAssessor(session_factory).assess(date(2026, 9, 30))
    assert await _count_fines(session_factory) == 0


@pytest.mark.asyncio
async def test_inactive_fine_type_raises(session_factory, seeded_settings, make_fine_type):
    await make_fine_type(is_active=False)

    with pytest.raises(FineTypeNotConfiguredError):
        await FineAssessor(session_factory).assess(date(2026, 9, 30))


@pytest.mark.asyncio
async def test_batch_limit_caps_candidates(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type()
    for _ in range(3):
        await make_bill(await make_customer(), due_date=DUE)
    async with session_factory() as session:
        async with session.begin():
            await seeded_settings.set_values(session, {SystemSettingKey.FINE_BATCH_LIMIT: 2})

    result = await FineAssessor(session_factory).assess(date(2026, 9, 30))

    assert result.eligible == 2
    assert len(result.applied) == 2


@pytest.mark.asyncio
async def test_fined_bills_do_not_hold_the_batch(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    """Con límite 2 y 3 facturas vencidas, la tercera se multa en la corrida siguiente."""
    await make_fine_type()
    for _ in range(3):
        await make_bill(await make_customer(), due_date=DUE)
    async with session_factory() as session:
        async with session.begin():
            await seeded_settings.set_values(session, {SystemSettingKey.FINE_BATCH_LIMIT: 2})
    assessor = FineAssessor(session_factory)

    first = await assessor.assess(date(2026, 9, 30))
    second = await assessor.assess(date(2026, 10, 1))
    third = await assessor.assess(date(2026, 10, 2))

    assert len(first.applied) == 2
    assert second.eligible == 1
    assert len(second.applied) == 1
    assert third.eligible == 0
    assert await _count_fines(session_factory) == 3
    async with session_factory() as session:
        fined_bills = (await session.execute(select(func.count(func.distinct(Fine.bill_id))))).scalar_one()
    assert fined_bills == 3


@pytest.mark.asyncio
async def test_notices_group_by_customer_with_balance(
    session_factory, seeded_settings, make_customer, make_bill, make_fine_type,
):
    await make_fine_type(amount="10.00", is_percentage=True)
    customer = await make_customer(name="Kamau")
    await make_bill(customer, total="300.00", period=date(2026, 8, 1), due_date=date(2026, 8, 6))
    await make_bill(customer, total="300.00", period=date(2026, 9, 1), due_date=DUE)

    result = await FineAssessor(session_factory).assess(date(2026, 9, 30))

    assert len(result.notices) == 1
    notice = result.notices[0]
    assert notice.customer_name == "Kamau"
    assert notice.fine_total == Decimal("60.00")
    # 600 en facturas + 60 en multas
    assert notice.outstanding_balance == Decimal("660.00")
