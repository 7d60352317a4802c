"""Tests for pizzeria.bootstrap: PizzeriaApp ownership and exporter lifecycle."""

import pytest

from pizzeria.bootstrap import PizzeriaApp
from pizzeria.config import MetricsConfig, PizzeriaConfig
from pizzeria.metrics.exporter import MetricsExporter


def _ready_config():
    return PizzeriaConfig(
        metrics=MetricsConfig(url="https://collector.example.com/v1/metrics", api_key="k", source="pizza-test")
    )


class TestPizzeriaApp:
    def test_services_share_one_accumulator(self):
        app = PizzeriaApp(PizzeriaConfig())
        assert app.auth.metrics is app.metrics
        assert app.orders.metrics is app.metrics
        assert app.exporter is None

    def test_instances_are_isolated(self):
        a, b = PizzeriaApp(PizzeriaConfig()), PizzeriaApp(PizzeriaConfig())
        a.metrics.record_request("GET")
        assert b.metrics.snapshot().requests == {}

    @pytest.mark.asyncio
    async def test_exporter_not_started_without_collector(self):
        app = PizzeriaApp(PizzeriaConfig())
        await app.start()
        assert app.exporter is None
        await app.shutdown()

    @pytest.mark.asyncio
    async def test_exporter_started_and_stopped(self):
        app = PizzeriaApp(_ready_config())
        await app.start()
        exporter = app.exporter
        assert isinstance(exporter, MetricsExporter)
        assert exporter.is_running
        assert exporter.accumulator is app.metrics

        app.start_metrics_export()
        assert app.exporter is exporter

        await app.shutdown()
        assert app.exporter is None
        assert exporter.is_running is False

    @pytest.mark.asyncio
    async def test_start_without_export(self):
        app = PizzeriaApp(_ready_config())
        await app.start(export_metrics=False)
        assert app.exporter is None
        await app.shutdown()
