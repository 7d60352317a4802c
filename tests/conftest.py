"""Shared test fixtures for the Pizzeria test suite."""

import os

import pytest

from pizzeria.config import MetricsConfig
from pizzeria.metrics.accumulator import MetricsAccumulator
from tests.mocks.collector import Collector


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    """Drop PIZZERIA_ env vars so tests never push to a real collector."""
    for key in list(os.environ):
        if key.startswith("PIZZERIA_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def tmp_toml(tmp_path):
    """Create a temporary TOML config file and return its Path."""

    def _write(content: str):
        p = tmp_path / "config.toml"
        p.write_text(content)
        return p

    return _write


@pytest.fixture
def accumulator():
    return MetricsAccumulator()


@pytest.fixture
def metrics_config():
    return MetricsConfig(
        url="https://collector.example.com/otlp/v1/metrics",
        api_key="test-api-key",
        source="pizza-test",
    )


@pytest.fixture
def collector():
    return Collector()
