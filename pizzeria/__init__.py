"""Pizzeria: pizza-ordering service backend with a push-based metrics exporter."""

__version__ = "1.0.0"
