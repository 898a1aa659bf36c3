# -*- coding: utf-8 -*-
"""
Tests del orquestador de jobs.

Cubre:
- register / start / stop y estados (registered, scheduled, running)
- run_now escribe exactamente un JobRun con trigger=manual
- Guard de concurrencia: segunda invocación -> skipped, sin JobRun
- Un job que falla queda auditado y no afecta a los demás
- Nombre desconocido -> UnknownJobError
"""

import asyncio

import pytest

from waterbilling.modules.jobs.enums import JobRunStatus, JobState, JobTrigger
from waterbilling.modules.jobs.orchestrator import JobDefinition, JobOrchestrator
from waterbilling.modules.jobs.recorder import JobRunRecorder
from waterbilling.shared.errors import UnknownJobError
from waterbilling.shared.scheduler.scheduler_service import SchedulerService


@pytest.fixture
def recorder(session_factory):
    return JobRunRecorder(session_factory)


@pytest.fixture
def orchestrator(recorder):
    orch = JobOrchestrator(SchedulerService(timezone="Africa/Nairobi"), recorder)
    yield orch
    orch.shutdown(wait=False)


def _definition(name="demo", func=None, cron="0 6 1 * *"):
    async def _ok():
        return {"created": 3}

    return JobDefinition(name=name, cron=cron, func=func or _ok, description="demo job")


# ==================== REGISTRO ====================

def test_register_and_duplicate(orchestrator):
    assert orchestrator.register(_definition()) == JobState.REGISTERED
    assert orchestrator.job_names == ["demo"]

    with pytest.raises(ValueError):
        orchestrator.register(_definition())


def test_register_rejects_bad_cron(orchestrator):
    with pytest.raises(ValueError):
        orchestrator.register(_definition(cron="every day"))
    assert orchestrator.job_names == []


@pytest.mark.asyncio
async def test_start_stop_transitions(orchestrator):
    orchestrator.register(_definition())
    orchestrator._scheduler.start()

    assert orchestrator.start("demo") == JobState.SCHEDULED
    assert orchestrator.start("demo") == JobState.SCHEDULED
    status = orchestrator.status()["demo"]
    assert status["scheduled"] is True
    assert status["reason"] is None
    assert status["next_run"] is not None

    assert orchestrator.stop("demo") == JobState.REGISTERED
    assert orchestrator.stop("demo") == JobState.REGISTERED
    orchestrator.shutdown(wait=False)


@pytest.mark.asyncio
async def test_start_all_stop_all(orchestrator):
    orchestrator.register(_definition("a"))
    orchestrator.register(_definition("b"))
    orchestrator._scheduler.start()

    assert orchestrator.start_all() == {"a": "scheduled", "b": "scheduled"}
    assert orchestrator.health()["scheduled"] == 2
    assert orchestrator.stop_all() == {"a": "registered", "b": "registered"}
    orchestrator.shutdown(wait=False)


def test_start_without_running_scheduler_reports_reason(orchestrator):
    orchestrator.register(_definition())

    assert orchestrator.start("demo") == JobState.REGISTERED
    assert orchestrator.pending_reason("demo") == "scheduler_not_running"
    status = orchestrator.status()["demo"]
    assert status["scheduled"] is True
    assert status["state"] == "registered"
    assert status["reason"] == "scheduler_not_running"
    assert orchestrator.health()["scheduler_running"] is False

    orchestrator.stop("demo")
    assert orchestrator.pending_reason("demo") is None


def test_unknown_job_raises(orchestrator):
    with pytest.raises(UnknownJobError):
        orchestrator.start("ghost")
    with pytest.raises(UnknownJobError):
        orchestrator.stop("ghost")


@pytest.mark.asyncio
async def test_run_now_unknown_job(orchestrator):
    with pytest.raises(UnknownJobError):
        await orchestrator.run_now("ghost")


# ==================== EJECUCIÓN ====================

@pytest.mark.asyncio
async def test_run_now_records_single_run(orchestrator, recorder):
    orchestrator.register(_definition())

    summary = await orchestrator.run_now("demo")

    assert summary["status"] == "success"
    assert summary["trigger"] == "manual"
    assert summary["details"] == {"created": 3}

    runs = await recorder.recent(job_name="demo")
    assert len(runs) == 1
    assert runs[0].status == JobRunStatus.SUCCESS
    assert runs[0].trigger == JobTrigger.MANUAL
    assert runs[0].details == {"created": 3}
    assert orchestrator.status()["demo"]["last_status"] == "success"


@pytest.mark.asyncio
async def test_scheduled_trigger_path(orchestrator, recorder):
    orchestrator.register(_definition())

    await orchestrator._run_scheduled("demo")

    runs = await recorder.recent(job_name="demo")
    assert [r.trigger for r in runs] == [JobTrigger.SCHEDULED]


@pytest.mark.asyncio
async def test_concurrent_invocation_is_skipped(orchestrator, recorder):
    started = asyncio.Event()
    release = asyncio.Event()

    async def _slow():
        started.set()
        await release.wait()
        return {"ok": True}

    orchestrator.register(_definition(func=_slow))

    first = asyncio.create_task(orchestrator.run_now("demo"))
    await started.wait()
    assert orchestrator.is_running("demo")
    assert orchestrator.status()["demo"]["state"] == JobState.RUNNING.value

    second = await orchestrator.run_now("demo")
    release.set()
    first_summary = await first

    assert second["status"] == "skipped"
    assert first_summary["status"] == "success"
    assert len(await recorder.recent(job_name="demo")) == 1


@pytest.mark.asyncio
async def test_failure_is_recorded_and_isolated(orchestrator, recorder):
    async def _boom():
        raise RuntimeError("settings broken")

    orchestrator.register(_definition("broken", func=_boom))
    orchestrator.register(_definition("healthy"))

    failed = await orchestrator.run_now("broken")
    ok = await orchestrator.run_now("healthy")

    assert failed["status"] == "failed"
    assert "settings broken" in failed["error"]
    assert ok["status"] == "success"

    runs = await recorder.recent(job_name="broken")
    assert runs[0].status == JobRunStatus.FAILED
    assert "RuntimeError" in runs[0].error_message
    assert orchestrator.health()["failed_last_run"] == ["broken"]


@pytest.mark.asyncio
async def test_job_returning_none_records_empty_details(orchestrator, recorder):
    async def _quiet():
        return None

    orchestrator.register(_definition(func=_quiet))
    summary = await orchestrator.run_now("demo")

    assert summary["details"] == {}
    runs = await recorder.recent(job_name="demo")
    assert runs[0].details == {}


@pytest.mark.asyncio
async def test_recorder_failure_does_not_break_job(recorder):
    class _BrokenRecorder(JobRunRecorder):
        async def record(self, **kwargs):
            return None

    orch = JobOrchestrator(SchedulerService(), _BrokenRecorder(recorder._session_factory))
    orch.register(_definition())

    summary = await orch.run_now("demo")

    assert summary["status"] == "success"
