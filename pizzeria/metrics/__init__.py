"""In-process metrics accumulation and periodic OTLP/JSON export."""

from pizzeria.metrics.accumulator import MetricsAccumulator, MetricsSnapshot
from pizzeria.metrics.encoder import MetricKind, ValueType, build_metric, build_payload
from pizzeria.metrics.exporter import ExporterState, MetricsExporter
from pizzeria.metrics.middleware import RequestMetricsMiddleware

__all__ = [
    "ExporterState",
    "MetricKind",
    "MetricsAccumulator",
    "MetricsExporter",
    "MetricsSnapshot",
    "RequestMetricsMiddleware",
    "ValueType",
    "build_metric",
    "build_payload",
]
