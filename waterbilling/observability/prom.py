# -*- coding: utf-8 -*-
"""
backend/waterbilling/observability/prom.py

Configuración de observabilidad Prometheus para WaterBilling.

Incluye:
- Middleware HTTP para conteo y latencia por ruta/estado
- Métricas de dominio: jobs, eventos de pago, montos asignados, notificaciones
- Endpoint /metrics compatible con Prometheus (pull model)
- Soporte multiproceso (Prometheus MultiProcess Collector)

Autor: WaterBilling
Fecha: 2026-10-16
"""
from __future__ import annotations

import os
from decimal import Decimal
from time import perf_counter
from typing import Optional

from fastapi import FastAPI
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# ------------------------------------------------------------------ #
# Capa HTTP
# ------------------------------------------------------------------ #
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "Latency per request (s)",
    ["method", "path", "status"],
)

# ------------------------------------------------------------------ #
# Dominio
# ------------------------------------------------------------------ #
JOB_RUNS = Counter(
    "job_runs_total",
    "Scheduled/manual job executions by outcome",
    ["job", "status"],
)
JOB_DURATION = Histogram(
    "job_run_duration_seconds",
    "Job execution duration (s)",
    ["job"],
    buckets=(0.1, 0.5, 1, 5, 15, 60, 300, 900),
)
PAYMENT_EVENTS = Counter(
    "payment_events_total",
    "Inbound payment events by processing outcome",
    ["outcome"],
)
PAYMENT_ALLOCATED = Counter(
    "payment_allocated_amount_total",
    "Amount allocated from payments by target type",
    ["target_type"],
)
NOTIFICATIONS = Counter(
    "notifications_total",
    "Notification attempts by template and result",
    ["template", "result"],
)


def observe_job_run(job: str, status: str, seconds: float) -> None:
    JOB_RUNS.labels(job, status).inc()
    JOB_DURATION.labels(job).observe(seconds)


def observe_payment_event(outcome: str) -> None:
    PAYMENT_EVENTS.labels(outcome).inc()


def observe_allocation(target_type: str, amount: Decimal) -> None:
    PAYMENT_ALLOCATED.labels(target_type).inc(float(amount))


def observe_notification(template: str, success: bool) -> None:
    NOTIFICATIONS.labels(template, "success" if success else "failure").inc()


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para instrumentar peticiones HTTP en FastAPI."""

    async def dispatch(self, request, call_next):
        method = request.method
        start = perf_counter()
        resp = await call_next(request)
        elapsed = perf_counter() - start

        # Plantilla de ruta (se conoce tras el ruteo) para acotar cardinalidad
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)

        status = str(resp.status_code)
        REQUEST_LATENCY.labels(method, path, status).observe(elapsed)
        REQUEST_COUNT.labels(method, path, status).inc()
        return resp


def _build_registry() -> Optional[CollectorRegistry]:
    """Inicializa CollectorRegistry con soporte multiproceso (si aplica)."""
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        return registry
    return None


def mount_metrics(app: FastAPI, path: str = "/metrics") -> None:
    """Registra el endpoint /metrics en la app FastAPI."""
    registry = _build_registry()

    @app.get(path, include_in_schema=False)
    def metrics():
        data = generate_latest(registry) if registry else generate_latest()
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)


def setup_observability(app: FastAPI, http_metrics: bool = True) -> None:
    if http_metrics:
        app.add_middleware(PrometheusMiddleware)
    mount_metrics(app)


__all__ = [
    "observe_job_run",
    "observe_payment_event",
    "observe_allocation",
    "observe_notification",
    "setup_observability",
]
# Fin del archivo backend/waterbilling/observability/prom.py
