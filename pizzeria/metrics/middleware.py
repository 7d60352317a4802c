"""ASGI middleware feeding request counts and latencies into the accumulator."""

from __future__ import annotations

import time
from typing import Any

from pizzeria.metrics.accumulator import MetricsAccumulator


class RequestMetricsMiddleware:
    """Counts every HTTP request by method and times it until the response is sent.

    Latency is taken after the wrapped app returns, i.e. once the last
    ``http.response.body`` message has gone out, not when headers start.
    """

    def __init__(self, app: Any, accumulator: MetricsAccumulator) -> None:
        self.app = app
        self.accumulator = accumulator

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        self.accumulator.record_request(scope.get("method", "GET"))
        start = time.perf_counter()
        try:
            await self.app(scope, receive, send)
        finally:
            self.accumulator.record_request_latency((time.perf_counter() - start) * 1_000)
