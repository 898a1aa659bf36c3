# -*- coding: utf-8 -*-
"""
Tests del envoltorio de APScheduler.
"""

import pytest
from apscheduler.triggers.cron import CronTrigger

from waterbilling.shared.scheduler.scheduler_service import SchedulerService, parse_cron_expression


async def _noop(**kwargs):
    return None


def test_parse_cron_expression():
    trigger = parse_cron_expression("0 6 1 * *", "Africa/Nairobi")
    assert isinstance(trigger, CronTrigger)
    assert "hour='6'" in str(trigger)


@pytest.mark.parametrize("expr", ["", "0 6 1 *", "0 6 1 * * *", "99 6 1 * *"])
def test_parse_cron_expression_invalid(expr):
    with pytest.raises(ValueError):
        parse_cron_expression(expr, "Africa/Nairobi")


def test_add_and_remove_job_before_start():
    scheduler = SchedulerService()

    scheduler.add_cron_job(_noop, job_id="billing", cron_expression="0 6 1 * *", job_name="billing")

    assert scheduler.has_job("billing")
    status = scheduler.get_job_status("billing")
    assert status["id"] == "billing"
    assert [j["id"] for j in scheduler.get_jobs()] == ["billing"]

    assert scheduler.remove_job("billing") is True
    assert scheduler.remove_job("billing") is False
    assert scheduler.get_job_status("billing") is None


@pytest.mark.asyncio
async def test_start_and_shutdown():
    scheduler = SchedulerService(timezone="UTC")
    scheduler.add_cron_job(_noop, job_id="tick", cron_expression="*/5 * * * *")

    scheduler.start()
    try:
        assert scheduler.is_running
        assert scheduler.get_job_status("tick")["next_run"] is not None
    finally:
        scheduler.shutdown(wait=False)

    assert not scheduler.is_running
