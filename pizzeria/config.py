"""
Pizzeria Configuration System.

Uses pydantic-settings for type-safe configuration with TOML file support
and environment variable overrides.

Resolution priority (highest wins):
  1. Environment variables (PIZZERIA_ prefix, e.g. PIZZERIA_METRICS__URL)
  2. TOML config file (~/.pizzeria/config.toml)
  3. Built-in defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Default config file location
CONFIG_DIR = Path.home() / ".pizzeria"
CONFIG_PATH = CONFIG_DIR / "config.toml"


class ServerConfig(BaseModel):
    """FastAPI server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"


class MetricsConfig(BaseModel):
    """Metrics exporter configuration.

    url: OTLP/HTTP metrics endpoint of the collector (e.g. Grafana Cloud).
    api_key: Sent as ``Authorization: Bearer <api_key>``.
    source: Value of the ``source`` attribute stamped on every data point,
        distinguishing this deployment in the collector's data.
    interval_ms: Export period.
    timeout: Seconds before a push is abandoned and the batch dropped.
    """

    url: str | None = None
    api_key: str | None = None
    source: str = "jwt-pizza-service"
    interval_ms: int = 10_000
    timeout: float = 5.0
    enabled: bool = True


class FactoryConfig(BaseModel):
    """Pizza factory endpoint. When ``url`` is unset orders are baked in-process."""

    url: str | None = None
    api_key: str | None = None
    timeout: float = 10.0


class AuthConfig(BaseModel):
    """Bearer token settings."""

    token_bytes: int = 32


class TracingConfig(BaseModel):
    """OpenTelemetry tracing configuration."""

    console: bool = False


class TomlSource(PydanticBaseSettingsSource):
    """Settings source that loads the default TOML file (py3.11+ tomllib)."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        # Not used because we return full dict in __call__
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        path = CONFIG_PATH
        if path.exists():
            try:
                import tomllib

                with open(path, "rb") as f:
                    return tomllib.load(f)
            except (OSError, ValueError):
                pass
        return {}


class PizzeriaConfig(BaseSettings):
    """Root configuration for the Pizzeria service.

    Load order (highest priority wins):
    1. Init arguments
    2. Environment variables (PIZZERIA_ prefix)
    3. TOML config file (~/.pizzeria/config.toml)
    4. Built-in defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="PIZZERIA_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    factory: FactoryConfig = Field(default_factory=FactoryConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlSource(settings_cls),
            file_secret_settings,
        )

    def model_post_init(self, __context: Any) -> None:
        """Warn about metrics settings that would silently disable or flood the exporter."""
        import logging as _logging

        _log = _logging.getLogger("pizzeria.config")

        if self.metrics.enabled and not (self.metrics.url and self.metrics.api_key):
            _log.warning(
                "Metrics export enabled but metrics.url or metrics.api_key is missing; "
                "the exporter will not start. Set PIZZERIA_METRICS__URL and PIZZERIA_METRICS__API_KEY."
            )
        if self.metrics.interval_ms < 1000:
            _log.warning(
                "metrics.interval_ms=%d is very low; each tick is an HTTPS round-trip "
                "to the collector. Consider >= 5000ms.",
                self.metrics.interval_ms,
            )

    @property
    def metrics_ready(self) -> bool:
        """True when the exporter has everything it needs to push."""
        return bool(self.metrics.enabled and self.metrics.url and self.metrics.api_key)

    @classmethod
    def load(cls, config_path: Path | None = None) -> PizzeriaConfig:
        """Load configuration.

        Args:
            config_path: Override for TOML file location. An explicit file is
                passed as init args, so it wins over environment variables.
                The default path goes through ``TomlSource`` (env > TOML).
        """
        if config_path and config_path.exists():
            import tomllib

            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            return cls(**toml_data)

        return cls()
