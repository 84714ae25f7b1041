from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from pipwatch.core.exceptions import UnknownStrategyError

logger = logging.getLogger("pipwatch.api")


class ApiError(Exception):
    """Client-facing error rendered as ``{"error": {"code", "message", ...}}``."""

    def __init__(self, code: str, message: str, status: int = 400, **extra: object) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.extra = extra

    @classmethod
    def unknown_strategy(cls, exc: UnknownStrategyError) -> ApiError:
        return cls("strategy.unknown", "Unknown strategy", strategy=exc.name)

    def body(self) -> dict[str, object]:
        return {"error": {"code": self.code, "message": self.message, **self.extra}}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.info("api_error", extra={"code": exc.code, "path": request.url.path, "status": exc.status})
    return JSONResponse(status_code=exc.status, content=exc.body())
