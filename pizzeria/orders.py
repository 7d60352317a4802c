"""Order placement through the pizza factory.

Each purchase is timed (pizza creation latency) and reported as a
successful or failed transaction.
"""

from __future__ import annotations

import secrets
import time
from typing import Any, Protocol

import httpx

from pizzeria.config import FactoryConfig
from pizzeria.errors import OrderError
from pizzeria.logging import get_logger
from pizzeria.metrics.accumulator import MetricsAccumulator
from pizzeria.models import Order, OrderRequest, User
from pizzeria.store import PizzaStore
from pizzeria.tracing import traced

log = get_logger("pizzeria.orders")


class PizzaFactory(Protocol):
    async def create(self, user: User, order: Order) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...


class LocalFactory:
    """Bakes in-process; used when no factory URL is configured."""

    async def create(self, user: User, order: Order) -> dict[str, Any]:
        return {"jwt": secrets.token_urlsafe(24)}

    async def aclose(self) -> None:
        pass


class HttpFactory:
    """Client for the remote pizza factory's ``POST /api/order``."""

    def __init__(self, config: FactoryConfig, *, client: httpx.AsyncClient | None = None) -> None:
        if not config.url:
            raise ValueError("factory url is required")
        self.url = config.url.rstrip("/") + "/api/order"
        self.api_key = config.api_key
        self._http = client or httpx.AsyncClient(timeout=config.timeout)

    async def create(self, user: User, order: Order) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}
        try:
            resp = await self._http.post(
                self.url,
                json={
                    "diner": {"id": user.id, "name": user.name, "email": user.email},
                    "order": order.model_dump(by_alias=True),
                },
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise OrderError(f"Failed to fulfill order at factory: {e}") from e
        if not resp.is_success:
            raise OrderError(f"Failed to fulfill order at factory (status {resp.status_code})")
        try:
            return resp.json()
        except ValueError as e:
            raise OrderError(f"Factory returned an unreadable receipt: {e}") from e

    async def aclose(self) -> None:
        await self._http.aclose()


def create_factory(config: FactoryConfig) -> PizzaFactory:
    if config.url:
        return HttpFactory(config)
    return LocalFactory()


class OrderService:
    def __init__(self, store: PizzaStore, metrics: MetricsAccumulator, factory: PizzaFactory) -> None:
        self.store = store
        self.metrics = metrics
        self.factory = factory

    @traced("orders.fulfil")
    async def fulfil(self, user: User, request: OrderRequest) -> tuple[Order, dict[str, Any]]:
        """Record the order, have the factory make it, and report the transaction."""
        order = self.store.add_order(user, request)
        start = time.perf_counter()
        try:
            receipt = await self.factory.create(user, order)
        except Exception as e:
            self.metrics.transaction_completed(False)
            log.warning("order_failed", order_id=order.id, error=str(e))
            raise
        finally:
            self.metrics.record_domain_latency((time.perf_counter() - start) * 1_000)
        self.metrics.transaction_completed(True, order.total)
        log.info("order_fulfilled", order_id=order.id, total=order.total)
        return order, receipt
