"""Periodic push of accumulated metrics to an OTLP/HTTP collector.

Every tick drains the accumulator, encodes each metric, and POSTs the
batch once. A failed push is logged and the batch dropped; there is no
retry and no re-queueing. Counters stay cumulative across ticks, sample
lists are emptied by each tick.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

import httpx
import orjson

from pizzeria.config import MetricsConfig
from pizzeria.errors import ConfigError, MetricsExportError
from pizzeria.logging import get_logger
from pizzeria.metrics.accumulator import MetricsAccumulator
from pizzeria.metrics.encoder import MetricKind, ValueType, build_metric, build_payload
from pizzeria.metrics.sampler import cpu_load_percent, memory_usage_percent
from pizzeria.tracing import traced
from pizzeria.utils.service import BaseBackgroundService

log = get_logger("pizzeria.metrics.exporter")


class ExporterState(str, Enum):
    IDLE = "idle"
    EXPORTING = "exporting"


class MetricsExporter(BaseBackgroundService):
    """Drains a ``MetricsAccumulator`` every ``interval_ms`` and pushes the batch."""

    def __init__(
        self,
        accumulator: MetricsAccumulator,
        config: MetricsConfig,
        *,
        client: httpx.AsyncClient | None = None,
        cpu_sampler: Callable[[], float] = cpu_load_percent,
        memory_sampler: Callable[[], float] = memory_usage_percent,
    ) -> None:
        if not config.url or not config.api_key:
            raise ConfigError("metrics.url and metrics.api_key are required to export metrics")
        super().__init__(config.interval_ms / 1000)
        self.accumulator = accumulator
        self.url = config.url
        self.api_key = config.api_key
        self.source = config.source
        self.timeout = config.timeout
        self.state = ExporterState.IDLE
        self._client = client
        self._owns_client = client is None
        self._cpu_sampler = cpu_sampler
        self._memory_sampler = memory_sampler

    def _metric(
        self,
        name: str,
        value: float,
        unit: str,
        kind: MetricKind,
        value_type: ValueType,
        attributes: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return build_metric(name, value, unit, kind, value_type, attributes, source=self.source)

    def collect(self) -> list[dict[str, Any]]:
        """Encode the current interval. Drains the latency sample lists."""
        snap = self.accumulator.snapshot(drain=True)
        metrics: list[dict[str, Any]] = []

        for method, count in snap.requests.items():
            metrics.append(self._metric("requests", count, "1", MetricKind.SUM, ValueType.INT, {"method": method}))

        metrics.append(self._metric("cpu", self._cpu_sampler(), "%", MetricKind.GAUGE, ValueType.DOUBLE))
        metrics.append(self._metric("memory", self._memory_sampler(), "%", MetricKind.GAUGE, ValueType.DOUBLE))

        # Can decrease on logout, so never a monotonic sum.
        metrics.append(self._metric("active_users", snap.active_users, "1", MetricKind.GAUGE, ValueType.INT))

        metrics.append(self._metric("pizzas_sold", snap.pizzas_sold, "1", MetricKind.SUM, ValueType.INT))
        metrics.append(self._metric("purchase_failures", snap.purchase_failures, "1", MetricKind.SUM, ValueType.INT))
        metrics.append(self._metric("revenue", snap.revenue, "1", MetricKind.SUM, ValueType.DOUBLE))
        metrics.append(self._metric("auth_successes", snap.auth_successes, "1", MetricKind.SUM, ValueType.INT))
        metrics.append(self._metric("auth_failures", snap.auth_failures, "1", MetricKind.SUM, ValueType.INT))

        if snap.request_latencies:
            metrics.append(
                self._metric(
                    "request_latency", max(snap.request_latencies), "ms", MetricKind.GAUGE, ValueType.DOUBLE
                )
            )
        if snap.pizza_creation_latencies:
            metrics.append(
                self._metric(
                    "pizza_creation_latency",
                    max(snap.pizza_creation_latencies),
                    "ms",
                    MetricKind.GAUGE,
                    ValueType.DOUBLE,
                )
            )
        return metrics

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def push(self, metrics: list[dict[str, Any]]) -> None:
        """POST one batch. Raises ``MetricsExportError`` on non-2xx or transport failure."""
        body = orjson.dumps(build_payload(metrics))
        try:
            resp = await self._get_client().post(
                self.url,
                content=body,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise MetricsExportError(f"transport error: {e!r}") from e
        if not resp.is_success:
            raise MetricsExportError(f"HTTP status: {resp.status_code}")

    @traced("metrics.export")
    async def tick(self) -> None:
        """One export tick. Never raises; failures are logged and the batch dropped."""
        self.state = ExporterState.EXPORTING
        try:
            metrics = self.collect()
            await self.push(metrics)
        except MetricsExportError as e:
            log.error("metrics_push_failed", error=str(e), url=self.url)
        except Exception as e:
            log.error("metrics_export_error", error=str(e), exc_info=True)
        else:
            log.debug("metrics_pushed", count=len(metrics))
        finally:
            self.state = ExporterState.IDLE

    async def close(self) -> None:
        """Stop the timer and release the HTTP client if we created it."""
        await self.stop()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
