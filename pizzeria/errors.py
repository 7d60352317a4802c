"""Pizzeria application exception hierarchy.

All application errors derive from :class:`PizzeriaError` so callers can
use a single ``except`` clause when needed.
"""


class PizzeriaError(Exception):
    """Base class for all Pizzeria application errors."""


class ConfigError(PizzeriaError):
    """Invalid or missing configuration."""


class MetricsExportError(PizzeriaError):
    """Pushing a metrics batch to the collector failed (HTTP status or transport)."""


class AuthError(PizzeriaError):
    """Unknown credentials or an invalid bearer token."""


class NotFoundError(PizzeriaError, LookupError):
    """A requested user, menu item or order does not exist."""


class OrderError(PizzeriaError):
    """The pizza factory could not fulfil an order."""
