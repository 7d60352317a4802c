"""Process-wide metric counters and latency sample lists.

One ``MetricsAccumulator`` is built at startup and handed to both the
request layer and the exporter. Every entry point takes the same lock,
since sync route handlers run on Starlette's thread pool.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the accumulator."""

    requests: dict[str, int] = field(default_factory=dict)
    active_users: int = 0
    auth_successes: int = 0
    auth_failures: int = 0
    pizzas_sold: int = 0
    purchase_failures: int = 0
    revenue: float = 0.0
    request_latencies: list[float] = field(default_factory=list)
    pizza_creation_latencies: list[float] = field(default_factory=list)


class MetricsAccumulator:
    """Accumulates request, auth and order counters plus latency samples."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests: dict[str, int] = {}
        self._active_users: int = 0
        self._auth_successes: int = 0
        self._auth_failures: int = 0
        self._pizzas_sold: int = 0
        self._purchase_failures: int = 0
        self._revenue: float = 0.0
        self._request_latencies: list[float] = []
        self._pizza_creation_latencies: list[float] = []

    def record_request(self, method: str) -> None:
        """Count one inbound request under its HTTP method."""
        key = method.upper()
        with self._lock:
            self._requests[key] = self._requests.get(key, 0) + 1

    def user_session_started(self) -> None:
        """A successful login: one more active user and one more auth success."""
        with self._lock:
            self._active_users += 1
            self._auth_successes += 1

    def user_session_ended(self) -> None:
        # Unbounded below; balanced start/end is the caller's job.
        with self._lock:
            self._active_users -= 1

    def auth_failed(self) -> None:
        with self._lock:
            self._auth_failures += 1

    def transaction_completed(self, success: bool, amount: float = 0.0) -> None:
        """Record a resolved purchase. ``amount`` is ignored on failure."""
        with self._lock:
            if success:
                self._pizzas_sold += 1
                self._revenue += amount
            else:
                self._purchase_failures += 1

    def record_request_latency(self, duration_ms: float) -> None:
        with self._lock:
            self._request_latencies.append(duration_ms)

    def record_domain_latency(self, duration_ms: float) -> None:
        """Record how long one pizza creation took."""
        with self._lock:
            self._pizza_creation_latencies.append(duration_ms)

    def snapshot(self, *, drain: bool = False) -> MetricsSnapshot:
        """Copy every counter; with ``drain=True`` also take the sample lists.

        Counters are cumulative and never reset. Draining swaps in fresh
        lists under the lock, so an append racing the drain lands in exactly
        one interval.
        """
        with self._lock:
            if drain:
                request_latencies = self._request_latencies
                pizza_latencies = self._pizza_creation_latencies
                self._request_latencies = []
                self._pizza_creation_latencies = []
            else:
                request_latencies = list(self._request_latencies)
                pizza_latencies = list(self._pizza_creation_latencies)
            return MetricsSnapshot(
                requests=dict(self._requests),
                active_users=self._active_users,
                auth_successes=self._auth_successes,
                auth_failures=self._auth_failures,
                pizzas_sold=self._pizzas_sold,
                purchase_failures=self._purchase_failures,
                revenue=self._revenue,
                request_latencies=request_latencies,
                pizza_creation_latencies=pizza_latencies,
            )
