from __future__ import annotations

import time
from fastapi import APIRouter, Request

from ...schemas import HealthResponse


router = APIRouter(tags=["health"])


@router.get("/healthz", response_model=HealthResponse)
async def healthz(request: Request):
    settings = request.app.state.settings
    return HealthResponse(
        status="ok",
        uptime_seconds=time.time() - request.app.state.started_at,
        cookie_name=settings.cookie_name,
        timeout_minutes=settings.timeout,
        expire_on_close=settings.expire_on_close,
    )
