from __future__ import annotations

import time

from fastapi import APIRouter, Request
from pydantic import BaseModel

from pipwatch import __version__

router = APIRouter()


class HealthResponse(BaseModel):
    version: str
    uptime_seconds: float


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    started_at = float(getattr(request.app.state, "started_at", time.monotonic()))
    return HealthResponse(version=__version__, uptime_seconds=time.monotonic() - started_at)
