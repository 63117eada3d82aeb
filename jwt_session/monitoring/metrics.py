from __future__ import annotations

"""
Lightweight Prometheus metrics for session handling.

Exposes /metrics and provides helpers to update counters without
affecting the request path when the metrics backend misbehaves.
"""

from typing import Callable
from fastapi import FastAPI, Request, Response
from starlette.responses import PlainTextResponse

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


# HTTP request metrics
REQUEST_COUNTER = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration seconds", ["method", "path"]
)

# Session metrics
SESSION_LOADS = Counter(
    "session_loads_total", "Session cookie loads by outcome", ["outcome"]
)
SESSION_WRITES = Counter(
    "session_writes_total", "Session cookie writes", ["kind", "result"]
)


def register(app: FastAPI):
    """Register middleware and /metrics route."""

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable):
        import time

        start = time.time()
        path = request.url.path
        method = request.method
        # Skip /metrics self-instrumentation latency to avoid recursion/noise
        if path == "/metrics":
            return await call_next(request)

        response: Response = await call_next(request)

        try:
            REQUEST_COUNTER.labels(method=method, path=path, status=str(response.status_code)).inc()
            REQUEST_LATENCY.labels(method=method, path=path).observe(max(0.0, time.time() - start))
        except Exception:
            pass
        return response

    @app.get("/metrics")
    async def metrics_endpoint():
        payload = generate_latest()
        return PlainTextResponse(content=payload.decode("utf-8"), media_type=CONTENT_TYPE_LATEST)


def session_loaded(outcome: str):
    try:
        SESSION_LOADS.labels(outcome=outcome).inc()
    except Exception:
        pass


def session_written(kind: str, ok: bool):
    try:
        SESSION_WRITES.labels(kind=kind, result="ok" if ok else "failed").inc()
    except Exception:
        pass
