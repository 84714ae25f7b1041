from __future__ import annotations

from fastapi import APIRouter

from api.routes import health, monitor, signals, simulation, trades


def get_api_router() -> APIRouter:
    router = APIRouter()

    router.include_router(health.router, tags=["health"])
    router.include_router(signals.router, tags=["signals"])
    router.include_router(trades.router, tags=["trades"])
    router.include_router(simulation.router, tags=["simulation"])
    router.include_router(monitor.router, tags=["monitor"])

    return router
