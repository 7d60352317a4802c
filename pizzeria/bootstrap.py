"""Pizzeria application bootstrap: owns every subsystem and its lifecycle."""

from __future__ import annotations

import asyncio
import time

from pizzeria.auth import AuthService
from pizzeria.config import PizzeriaConfig
from pizzeria.logging import get_logger, setup_logging
from pizzeria.metrics.accumulator import MetricsAccumulator
from pizzeria.metrics.exporter import MetricsExporter
from pizzeria.orders import OrderService, PizzaFactory, create_factory
from pizzeria.store import PizzaStore
from pizzeria.tracing import setup_tracing

log = get_logger("pizzeria.bootstrap")


class PizzeriaApp:
    """Owns the single ``MetricsAccumulator`` and everything that feeds or drains it.

    Construction is synchronous and side-effect free so the HTTP layer can
    wire its middleware at import time. ``start()`` sets up observability
    and the metrics exporter; ``shutdown()`` tears them down.
    """

    def __init__(
        self,
        config: PizzeriaConfig | None = None,
        *,
        factory: PizzaFactory | None = None,
    ) -> None:
        self.config = config or PizzeriaConfig()
        self.metrics = MetricsAccumulator()
        self.store = PizzaStore()
        self.auth = AuthService(self.store, self.metrics, token_bytes=self.config.auth.token_bytes)
        self.factory = factory or create_factory(self.config.factory)
        self.orders = OrderService(self.store, self.metrics, self.factory)
        self.exporter: MetricsExporter | None = None
        self.start_time: float = time.monotonic()

    @classmethod
    def from_env(cls) -> PizzeriaApp:
        """Build from ``~/.pizzeria/config.toml`` and ``PIZZERIA_*`` env vars."""
        return cls(PizzeriaConfig.load())

    async def start(self, *, export_metrics: bool = True) -> None:
        """Configure logging and tracing, then start the periodic exporter."""
        config = self.config
        self.start_time = time.monotonic()

        setup_logging(json_output=config.server.log_format == "json", level=config.server.log_level)
        setup_tracing(service_name="pizzeria", console=config.tracing.console)
        log.info("config_loaded", host=config.server.host, port=config.server.port)

        if export_metrics:
            self.start_metrics_export()

    def start_metrics_export(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if self.exporter and self.exporter.is_running:
            return
        if not self.config.metrics_ready:
            log.warning("metrics_export_disabled", url_set=bool(self.config.metrics.url))
            return
        self.exporter = MetricsExporter(self.metrics, self.config.metrics)
        self.exporter.start(loop)

    async def stop_metrics_export(self) -> None:
        if self.exporter:
            await self.exporter.close()
            self.exporter = None

    async def shutdown(self) -> None:
        """Gracefully shut down all subsystems."""
        log.info("graceful_shutdown_started")
        await self.stop_metrics_export()
        try:
            await self.factory.aclose()
        except Exception:
            log.warning("factory_close_failed", exc_info=True)
        log.info("graceful_shutdown_complete")
