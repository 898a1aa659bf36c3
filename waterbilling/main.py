# -*- coding: utf-8 -*-
"""
backend/waterbilling/main.py

Punto de entrada principal del backend WaterBilling.

Ajustes clave:
- Configuración vía waterbilling.core.settings (pydantic-settings)
- Componentes de larga vida construidos una vez en el lifespan y
  publicados en app.state: engine, session factory, dispatcher de
  notificaciones, cola de pagos y orquestador de jobs
- Scheduler APScheduler con los jobs de facturación, aportes, multas,
  avisos de vencidos y limpieza de bitácora
- Observabilidad Prometheus (/metrics)
- Shutdown ordenado bajo anyio.CancelScope(shield=True)

Autor: WaterBilling
Fecha: 2026-10-16
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# ---------------------------------------------------------------------------
# Cargar .env ANTES de construir settings
# En DEV: override=True para que .env mande sobre variables del entorno
# En PROD: override=False para respetar variables del entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_ENVIRONMENT not in ("production", "test"))

import anyio
import uvicorn
from fastapi import FastAPI

from waterbilling import __version__
from waterbilling.core.logging import setup_logging_from_settings
from waterbilling.core.settings import get_settings
from waterbilling.modules.jobs.definitions import JobContext, build_job_definitions
from waterbilling.modules.jobs.orchestrator import JobOrchestrator
from waterbilling.modules.jobs.recorder import JobRunRecorder
from waterbilling.modules.notifications.dispatcher import NotificationDispatcher
from waterbilling.modules.payments.services.payment_processor import PaymentProcessor
from waterbilling.modules.payments.services.payment_queue import PaymentEventQueue
from waterbilling.modules.system_settings.service import SystemSettingsService
from waterbilling.observability.prom import setup_observability
from waterbilling.shared.config.settings_base import BaseAppSettings
from waterbilling.shared.database.database import (
    build_session_factory,
    create_engine_from_settings,
    create_schema,
)
from waterbilling.shared.integrations.notifier import build_notifier
from waterbilling.shared.scheduler.scheduler_service import SchedulerService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[BaseAppSettings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # ────────── STARTUP ──────────
        setup_logging_from_settings(settings)

        engine = create_engine_from_settings(settings)
        session_factory = build_session_factory(engine)

        if settings.is_dev or settings.is_test:
            await create_schema(engine)

        try:
            async with session_factory() as session:
                async with session.begin():
                    seeded = await SystemSettingsService().seed_defaults(session)
            logger.info("[startup] system settings seeded=%s", seeded)
        except Exception as e:
            logger.warning("[startup] could not seed system settings: %s", e)

        notifier = build_notifier(settings)
        dispatcher = NotificationDispatcher(
            notifier,
            session_factory=session_factory,
            timeout_sec=settings.notifier_timeout_sec,
        )

        processor = PaymentProcessor(session_factory, dispatcher=dispatcher)
        payment_queue = PaymentEventQueue(
            processor,
            workers=settings.payment_queue_workers,
            maxsize=settings.payment_queue_maxsize,
        )
        await payment_queue.start()

        scheduler = SchedulerService(
            timezone=settings.scheduler_timezone,
            misfire_grace_sec=settings.scheduler_misfire_grace_sec,
        )
        recorder = JobRunRecorder(session_factory)
        orchestrator = JobOrchestrator(scheduler, recorder, timezone=settings.scheduler_timezone)
        job_context = JobContext(
            session_factory=session_factory,
            dispatcher=dispatcher,
            timezone=settings.scheduler_timezone,
        )
        for definition in build_job_definitions(job_context, settings):
            orchestrator.register(definition)

        if settings.scheduler_enabled:
            scheduler.start()
            orchestrator.start_all()
            logger.info("[startup] scheduler started jobs=%s", orchestrator.job_names)
        else:
            logger.info("[startup] scheduler disabled; jobs available via run-now")

        app.state.engine = engine
        app.state.session_factory = session_factory
        app.state.dispatcher = dispatcher
        app.state.payment_processor = processor
        app.state.payment_queue = payment_queue
        app.state.job_recorder = recorder
        app.state.job_orchestrator = orchestrator

        logger.info("[startup] %s %s ready env=%s", settings.app_name, __version__, settings.python_env)
        try:
            yield
        finally:
            # ────────── SHUTDOWN ──────────
            logger.info("[shutdown] starting")
            with anyio.CancelScope(shield=True):
                try:
                    orchestrator.shutdown(wait=False)
                except Exception as e:
                    logger.warning("[shutdown] scheduler stop failed: %s", e)

                try:
                    await payment_queue.stop(timeout=30.0)
                except Exception as e:
                    logger.warning("[shutdown] payment queue stop failed: %s", e)

                await engine.dispose()
            logger.info("[shutdown] done")

    app = FastAPI(
        title=settings.app_name,
        description="Facturación mensual, multas y asignación de pagos",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_observability(app, http_metrics=settings.http_metrics_enabled)

    from waterbilling.routes import router as main_router

    app.include_router(main_router)

    @app.get("/")
    async def root():
        return {"service": settings.app_name, "status": "active"}

    return app


app = create_app()


if __name__ == "__main__":
    _settings = get_settings()
    uvicorn.run(
        "waterbilling.main:app",
        host=_settings.app_host,
        port=_settings.app_port,
        reload=_settings.is_dev,
    )

# Fin del archivo backend/waterbilling/main.py
