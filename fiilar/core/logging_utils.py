"""Logging setup and HTTP request tracing."""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from fiilar.core.config import Settings

ROOT_LOGGER = "fiilar"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    if settings.logging.json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(settings.logging.level.upper())
    return logger


class RequestLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, logger: logging.Logger) -> None:
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path == "/health":
            return await call_next(request)
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        self.logger.info("API CALL: %s %s request_id=%s", request.method, path, request_id)
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        self.logger.info(
            "API RESPONSE: %s %s status=%d duration_ms=%.2f request_id=%s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            request_id,
        )
        response.headers.setdefault("X-Request-Id", request_id)
        return response


__all__ = ["configure_logging", "JsonFormatter", "RequestLogMiddleware"]
