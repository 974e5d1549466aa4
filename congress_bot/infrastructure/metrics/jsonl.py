from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")


class MetricsClient:
    """
    Пишет длительность и успешность действий бота одной JSON-строкой
    в логгер ``metrics.actions``.
    """

    def __init__(self):
        self._logger = logging.getLogger("metrics.actions")

    def configure(self, logger: logging.Logger | None = None) -> None:
        if logger:
            self._logger = logger

    def _emit(
        self,
        action: str,
        duration_ms: float,
        success: bool,
        *,
        source: str | None,
        extra: dict | None,
        error: str | None,
    ) -> None:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "duration_ms": round(duration_ms, 3),
            "success": success,
        }
        if source:
            payload["source"] = source
        if error:
            payload["error"] = error
        if extra:
            payload.update(extra)
        self._logger.info(json.dumps(payload, ensure_ascii=False))

    @asynccontextmanager
    async def span_async(self, action: str, *, source: str | None = None, extra: dict | None = None):
        start = time.perf_counter()
        error: str | None = None
        try:
            yield
        except Exception as exc:
            error = type(exc).__name__
            raise
        finally:
            duration = (time.perf_counter() - start) * 1000
            self._emit(action, duration, error is None, source=source, extra=extra, error=error)

    def wrap_async(
        self,
        action: str,
        *,
        source: str | None = None,
        extra_fn: Callable[..., dict | None] | None = None,
    ):
        def decorator(func: Callable[..., Awaitable[T]]):
            async def wrapper(*args, **kwargs):
                extra = extra_fn(*args, **kwargs) if extra_fn else None
                async with self.span_async(action, source=source, extra=extra):
                    return await func(*args, **kwargs)

            return wrapper

        return decorator


metrics = MetricsClient()
