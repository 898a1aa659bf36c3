# -*- coding: utf-8 -*-
"""
Tests de helpers compartidos: montos, fechas y locks por clave.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from waterbilling.shared.utils.dates import add_months, first_of_month
from waterbilling.shared.utils.keyed_locks import KeyedLockRegistry
from waterbilling.shared.utils.money import ZERO, to_money


def test_to_money():
    assert to_money(None) == ZERO
    assert to_money(0.1) == Decimal("0.10")
    assert to_money("2.005") == Decimal("2.01")
    assert to_money(3) == Decimal("3.00")


def test_month_helpers():
    assert first_of_month(date(2026, 10, 16)) == date(2026, 10, 1)
    assert add_months(date(2026, 12, 1), 1) == date(2027, 1, 1)
    assert add_months(date(2026, 1, 1), -1) == date(2025, 12, 1)


@pytest.mark.asyncio
async def test_keyed_lock_serializes_same_key():
    registry = KeyedLockRegistry("test")
    order = []

    async def worker(tag, delay):
        async with registry.hold("customer-1"):
            order.append(f"{tag}-in")
            await asyncio.sleep(delay)
            order.append(f"{tag}-out")

    await asyncio.gather(worker("a", 0.02), worker("b", 0))

    assert order == ["a-in", "a-out", "b-in", "b-out"]
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_keyed_lock_different_keys_run_in_parallel():
    registry = KeyedLockRegistry("test")
    inside = asyncio.Event()

    async def first():
        async with registry.hold(1):
            await asyncio.wait_for(inside.wait(), timeout=1)

    async def second():
        async with registry.hold(2):
            assert not registry.is_locked(3)
            inside.set()

    await asyncio.gather(first(), second())
