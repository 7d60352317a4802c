"""OTLP/JSON metric encoding.

Produces plain dicts ready for ``orjson.dumps``::

    {
        "name": "requests",
        "unit": "1",
        "sum": {
            "dataPoints": [
                {"asInt": 3, "timeUnixNano": 1700000000000000000,
                 "attributes": [{"key": "source", "value": {"stringValue": "pizza"}}]}
            ],
            "aggregationTemporality": "AGGREGATION_TEMPORALITY_CUMULATIVE",
            "isMonotonic": true
        }
    }
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from enum import Enum
from typing import Any

AGGREGATION_TEMPORALITY_CUMULATIVE = "AGGREGATION_TEMPORALITY_CUMULATIVE"


class MetricKind(str, Enum):
    """Which OTLP data variant a metric uses."""

    SUM = "sum"
    GAUGE = "gauge"


class ValueType(str, Enum):
    """Numeric representation of a data point value."""

    INT = "asInt"
    DOUBLE = "asDouble"


def _attribute(key: str, value: Any) -> dict[str, Any]:
    return {"key": key, "value": {"stringValue": str(value)}}


def build_metric(
    name: str,
    value: float,
    unit: str,
    kind: MetricKind,
    value_type: ValueType,
    attributes: Mapping[str, Any] | None = None,
    *,
    source: str,
) -> dict[str, Any]:
    """Encode one measurement as a single-data-point OTLP metric.

    ``source`` is always attached and wins over a caller-supplied
    ``source`` attribute. Sums are always cumulative and monotonic;
    anything that can go down must be a gauge.
    """
    kind = MetricKind(kind)
    value_type = ValueType(value_type)

    merged = {k: v for k, v in (attributes or {}).items() if k != "source"}
    merged["source"] = source

    number: int | float = int(value) if value_type is ValueType.INT else float(value)
    data: dict[str, Any] = {
        "dataPoints": [
            {
                value_type.value: number,
                "timeUnixNano": time.time_ns(),
                "attributes": [_attribute(k, v) for k, v in merged.items()],
            }
        ],
    }
    if kind is MetricKind.SUM:
        data["aggregationTemporality"] = AGGREGATION_TEMPORALITY_CUMULATIVE
        data["isMonotonic"] = True

    return {"name": name, "unit": unit, kind.value: data}


def build_payload(metrics: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap metrics in one resource and one scope."""
    return {"resourceMetrics": [{"scopeMetrics": [{"metrics": metrics}]}]}
