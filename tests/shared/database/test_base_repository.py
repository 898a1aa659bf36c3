# -*- coding: utf-8 -*-
"""
Tests del repositorio base (CRUD y alta masiva).
"""

import pytest

from waterbilling.modules.customers.enums import CustomerType
from waterbilling.modules.customers.models import Customer
from waterbilling.shared.database.repository import BaseRepository


def _customer(n: int) -> Customer:
    return Customer(
        account_number=f"ACC9{n:03d}",
        name=f"Bulk {n}",
        customer_type=CustomerType.NORMAL,
        is_active=True,
    )


@pytest.mark.asyncio
async def test_add_many_flushes_once_and_assigns_ids(session_factory):
    repo = BaseRepository(Customer)

    async with session_factory() as session:
        async with session.begin():
            added = await repo.add_many(session, (_customer(n) for n in range(3)))
            assert len(added) == 3
            assert all(c.id is not None for c in added)

    async with session_factory() as session:
        assert len(await repo.list(session)) == 3


@pytest.mark.asyncio
async def test_add_many_empty_is_noop(session_factory):
    repo = BaseRepository(Customer)

    async with session_factory() as session:
        async with session.begin():
            assert await repo.add_many(session, []) == []


@pytest.mark.asyncio
async def test_create_get_delete(session_factory):
    repo = BaseRepository(Customer)

    async with session_factory() as session:
        async with session.begin():
            customer = await repo.create(
                session, account_number="ACC9999", name="Solo", customer_type=CustomerType.NORMAL,
            )
            customer_id = customer.id

    async with session_factory() as session:
        async with session.begin():
            found = await repo.get(session, customer_id)
            assert found.name == "Solo"
            await repo.delete(session, found)

    async with session_factory() as session:
        assert await repo.get(session, customer_id) is None
