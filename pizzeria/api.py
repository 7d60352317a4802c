"""HTTP surface: just enough routes to drive the metrics producers."""

import time
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Header, Request
from fastapi.responses import JSONResponse

from pizzeria import __version__
from pizzeria.bootstrap import PizzeriaApp
from pizzeria.errors import AuthError, NotFoundError, OrderError
from pizzeria.metrics.middleware import RequestMetricsMiddleware
from pizzeria.models import LoginRequest, MenuItem, OrderRequest, RegisterRequest, User


def _pizzeria(request: Request) -> PizzeriaApp:
    return request.app.state.pizzeria


def _bearer_token(authorization: Annotated[str | None, Header()] = None) -> str | None:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return None


PizzeriaDep = Annotated[PizzeriaApp, Depends(_pizzeria)]
TokenDep = Annotated[str | None, Depends(_bearer_token)]


def _current_user(pizzeria: PizzeriaDep, token: TokenDep) -> User:
    return pizzeria.auth.authenticate(token)


UserDep = Annotated[User, Depends(_current_user)]


def create_app(pizzeria: PizzeriaApp, *, export_metrics: bool = True) -> FastAPI:
    """Build the FastAPI app around an already-constructed ``PizzeriaApp``."""

    @asynccontextmanager
    async def lifespan(app_instance: FastAPI):
        await pizzeria.start(export_metrics=export_metrics)
        yield
        await pizzeria.shutdown()

    app = FastAPI(title="JWT Pizza", version=__version__, lifespan=lifespan)
    app.state.pizzeria = pizzeria
    app.add_middleware(RequestMetricsMiddleware, accumulator=pizzeria.metrics)

    @app.exception_handler(AuthError)
    async def _auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"message": str(exc)})

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"message": str(exc)})

    @app.exception_handler(OrderError)
    async def _order_error(request: Request, exc: OrderError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"message": str(exc)})

    # ------------------------------------------------------------------
    # Service info
    # ------------------------------------------------------------------

    @app.get("/")
    async def welcome():
        return {"message": "welcome to JWT Pizza", "version": __version__}

    @app.get("/health")
    async def health(pizzeria: PizzeriaDep):
        snap = pizzeria.metrics.snapshot()
        exporter = pizzeria.exporter
        return {
            "status": "ok",
            "uptime_seconds": round(time.monotonic() - pizzeria.start_time, 1),
            "metrics_export": exporter.state.value if exporter and exporter.is_running else "disabled",
            "requests": snap.requests,
            "active_users": snap.active_users,
            "pizzas_sold": snap.pizzas_sold,
        }

    # ------------------------------------------------------------------
    # Auth (sync handlers: password hashing runs on the thread pool)
    # ------------------------------------------------------------------

    @app.post("/api/auth")
    def register(body: RegisterRequest, pizzeria: PizzeriaDep):
        user, token = pizzeria.auth.register(body.name, body.email, body.password)
        return {"user": user.model_dump(), "token": token}

    @app.put("/api/auth")
    def login(body: LoginRequest, pizzeria: PizzeriaDep):
        user, token = pizzeria.auth.login(body.email, body.password)
        return {"user": user.model_dump(), "token": token}

    @app.delete("/api/auth")
    def logout(pizzeria: PizzeriaDep, token: TokenDep):
        if not token:
            raise AuthError("unauthorized")
        pizzeria.auth.logout(token)
        return {"message": "logout successful"}

    @app.get("/api/user/me")
    def me(user: UserDep):
        return user.model_dump()

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    @app.get("/api/order/menu", response_model=list[MenuItem])
    def menu(pizzeria: PizzeriaDep):
        return pizzeria.store.get_menu()

    @app.get("/api/order")
    def list_orders(pizzeria: PizzeriaDep, user: UserDep):
        orders = pizzeria.store.get_orders(user)
        return {"dinerId": user.id, "orders": [o.model_dump(by_alias=True) for o in orders]}

    @app.post("/api/order")
    async def create_order(body: OrderRequest, pizzeria: PizzeriaDep, user: UserDep):
        order, receipt = await pizzeria.orders.fulfil(user, body)
        return {"order": order.model_dump(by_alias=True), "jwt": receipt.get("jwt")}

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "PATCH"], include_in_schema=False)
    async def unknown_endpoint(path: str):
        return JSONResponse(status_code=404, content={"message": "unknown endpoint"})

    return app
