# -*- coding: utf-8 -*-
"""
backend/tests/conftest.py

Config global de tests para WaterBilling.

- PYTHON_ENV=test antes de importar la app (settings deterministas)
- Un archivo SQLite (aiosqlite) por test en tmp_path: cada sesión abre
  su propia conexión, igual que en producción con asyncpg
- Fábricas de clientes, facturas, multas y aportes para armar escenarios
- App FastAPI con ciclo de vida (asgi-lifespan) y cliente httpx

Autor: WaterBilling
Fecha: 2026-10-16
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from waterbilling.modules.billing.enums import BillStatus
from waterbilling.modules.billing.models import Bill
from waterbilling.modules.contributions.enums import ContributionStatus
from waterbilling.modules.contributions.models import Contribution
from waterbilling.modules.customers.enums import CustomerType
from waterbilling.modules.customers.models import Customer
from waterbilling.modules.fines.enums import FineStatus, FineTypeCode
from waterbilling.modules.fines.models import Fine, FineType
from waterbilling.modules.system_settings.service import SystemSettingsService
from waterbilling.shared.config.settings_testing import EnvTestingSettings
from waterbilling.shared.database.database import (
    build_session_factory,
    create_engine_from_settings,
    create_schema,
)

WEBHOOK_SECRET = "test-webhook-secret"
ADMIN_KEY = "test-admin-key"


# -----------------------------------------------------------------------------
# Settings y base de datos
# -----------------------------------------------------------------------------
@pytest.fixture
def test_settings(tmp_path) -> EnvTestingSettings:
    return EnvTestingSettings(db_url=f"sqlite+aiosqlite:///{tmp_path / 'waterbilling.db'}")


@pytest_asyncio.fixture
async def engine(test_settings):
    eng = create_engine_from_settings(test_settings)
    await create_schema(eng)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def seeded_settings(session_factory):
    """system_settings con los defaults (tarifa normal 300, aporte 100, gracia 5)."""
    async with session_factory() as session:
        async with session.begin():
            await SystemSettingsService().seed_defaults(session)
    return SystemSettingsService()


# -----------------------------------------------------------------------------
# Fábricas
# -----------------------------------------------------------------------------
@pytest.fixture
def make_customer(session_factory):
    counter = {"n": 0}

    async def _make(
        *,
        name: Optional[str] = None,
        account_number: Optional[str] = None,
        customer_type: CustomerType = CustomerType.NORMAL,
        phone: Optional[str] = "+254700000001",
        is_active: bool = True,
    ) -> Customer:
        counter["n"] += 1
        n = counter["n"]
        async with session_factory() as session:
            async with session.begin():
                customer = Customer(
                    account_number=account_number or f"ACC{n:04d}",
                    name=name or f"Customer {n}",
                    phone=phone,
                    customer_type=customer_type,
                    is_active=is_active,
                )
                session.add(customer)
        return customer

    return _make


@pytest.fixture
def make_bill(session_factory):
    async def _make(
        customer: Customer,
        *,
        total: str = "300.00",
        paid: str = "0.00",
        period: date = date(2026, 9, 1),
        due_date: Optional[date] = None,
        status: BillStatus = BillStatus.PENDING,
    ) -> Bill:
        async with session_factory() as session:
            async with session.begin():
                bill = Bill(
                    customer_id=customer.id,
                    bill_number=f"BILL-{period:%Y%m}-{customer.id:04d}-01",
                    billing_period=period,
                    previous_balance=Decimal("0.00"),
                    current_charges=Decimal(total),
                    total_amount=Decimal(total),
                    amount_paid=Decimal(paid),
                    due_date=due_date or period + timedelta(days=5),
                    status=status,
                )
                session.add(bill)
        return bill

    return _make


@pytest.fixture
def make_fine_type(session_factory):
    async def _make(
        *,
        amount: str = "10.00",
        is_percentage: bool = True,
        is_active: bool = True,
        code: FineTypeCode = FineTypeCode.LATE_PAYMENT,
    ) -> FineType:
        async with session_factory() as session:
            async with session.begin():
                fine_type = FineType(
                    code=code,
                    name="Late payment",
                    amount=Decimal(amount),
                    is_percentage=is_percentage,
                    is_active=is_active,
                )
                session.add(fine_type)
        return fine_type

    return _make


@pytest.fixture
def make_fine(session_factory):
    async def _make(
        customer: Customer,
        *,
        amount: str = "50.00",
        applied_date: date = date(2026, 9, 20),
        bill_id: Optional[int] = None,
    ) -> Fine:
        async with session_factory() as session:
            async with session.begin():
                fine = Fine(
                    customer_id=customer.id,
                    bill_id=bill_id,
                    fine_type=FineTypeCode.OTHER,
                    amount=Decimal(amount),
                    amount_paid=Decimal("0.00"),
                    reason="test fine",
                    applied_date=applied_date,
                    status=FineStatus.PENDING,
                )
                session.add(fine)
        return fine

    return _make


@pytest.fixture
def make_contribution(session_factory):
    async def _make(
        customer: Customer,
        *,
        required: str = "100.00",
        paid: str = "0.00",
        month: date = date(2026, 9, 1),
        status: ContributionStatus = ContributionStatus.PENDING,
    ) -> Contribution:
        async with session_factory() as session:
            async with session.begin():
                contribution = Contribution(
                    customer_id=customer.id,
                    contribution_month=month,
                    amount_required=Decimal(required),
                    amount_paid=Decimal(paid),
                    status=status,
                    due_date=month + timedelta(days=30),
                )
                session.add(contribution)
        return contribution

    return _make


# -----------------------------------------------------------------------------
# App FastAPI y cliente httpx (con ciclo de vida)
# -----------------------------------------------------------------------------
@pytest.fixture
def app(test_settings):
    from waterbilling.main import create_app

    return create_app(test_settings)


@pytest_asyncio.fixture
async def async_client(app):
    """Cliente httpx con lifespan: engine, cola de pagos y orquestador listos."""
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac


@pytest.fixture
def webhook_headers():
    return {"X-Webhook-Token": WEBHOOK_SECRET}


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}

# Fin del archivo backend/tests/conftest.py
