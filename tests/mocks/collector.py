"""Fake OTLP collector and pizza factory for tests."""

import httpx

from pizzeria.errors import OrderError


class Collector:
    """httpx.MockTransport handler that records pushes and answers with ``status``."""

    def __init__(self, status: int = 200, error: Exception | None = None):
        self.status = status
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


class BrokenFactory:
    """Pizza factory that is always down."""

    def __init__(self):
        self.calls = 0

    async def create(self, user, order):
        self.calls += 1
        raise OrderError("Failed to fulfill order at factory")

    async def aclose(self):
        pass
