"""In-memory user, session, menu and order storage.

Stands in for the relational store. Route handlers may run on a thread
pool, so every mutation is serialized with a ``threading.Lock``.
"""

from __future__ import annotations

import hashlib
import secrets
import threading
from itertools import count

from pizzeria.errors import NotFoundError
from pizzeria.models import MenuItem, Order, OrderRequest, User

DEFAULT_MENU = [
    MenuItem(id=1, title="Veggie", description="A garden of delight", image="pizza1.png", price=0.0038),
    MenuItem(id=2, title="Pepperoni", description="Spicy treat", image="pizza2.png", price=0.0042),
    MenuItem(id=3, title="Margarita", description="Essential classic", image="pizza3.png", price=0.0042),
    MenuItem(id=4, title="Crusty", description="A dry mouthed favorite", image="pizza4.png", price=0.0028),
    MenuItem(id=5, title="Charred Leopard", description="For those with a darker side", image="pizza5.png", price=0.0099),
]


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, 100_000)


class PizzaStore:
    def __init__(self, menu: list[MenuItem] | None = None) -> None:
        self._lock = threading.Lock()
        self._users: dict[int, User] = {}
        self._credentials: dict[str, tuple[int, bytes, bytes]] = {}  # email -> (id, salt, hash)
        self._sessions: dict[str, int] = {}  # token -> user id
        self._orders: dict[int, Order] = {}
        self._menu = list(DEFAULT_MENU if menu is None else menu)
        self._user_ids = count(1)
        self._order_ids = count(1)

    # -- users -----------------------------------------------------------

    def add_user(self, name: str, email: str, password: str) -> User:
        salt = secrets.token_bytes(16)
        digest = _hash_password(password, salt)
        with self._lock:
            user = User(id=next(self._user_ids), name=name, email=email)
            self._users[user.id] = user
            self._credentials[email] = (user.id, salt, digest)
        return user

    def verify_user(self, email: str, password: str) -> User | None:
        """Return the user if the password matches, else None."""
        with self._lock:
            entry = self._credentials.get(email)
        if entry is None:
            return None
        user_id, salt, digest = entry
        if not secrets.compare_digest(_hash_password(password, salt), digest):
            return None
        return self.get_user(user_id)

    def get_user(self, user_id: int) -> User:
        with self._lock:
            try:
                return self._users[user_id]
            except KeyError:
                raise NotFoundError(f"unknown user {user_id}") from None

    # -- sessions --------------------------------------------------------

    def open_session(self, user_id: int, token: str) -> None:
        with self._lock:
            self._sessions[token] = user_id

    def close_session(self, token: str) -> bool:
        """Drop a session; returns False if the token was not logged in."""
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def session_user(self, token: str) -> User | None:
        with self._lock:
            user_id = self._sessions.get(token)
        return None if user_id is None else self.get_user(user_id)

    # -- menu & orders ---------------------------------------------------

    def get_menu(self) -> list[MenuItem]:
        with self._lock:
            return list(self._menu)

    def add_order(self, user: User, request: OrderRequest) -> Order:
        with self._lock:
            order = Order(
                id=next(self._order_ids),
                dinerId=user.id,
                franchiseId=request.franchise_id,
                storeId=request.store_id,
                items=request.items,
            )
            self._orders[order.id] = order
        return order

    def get_orders(self, user: User) -> list[Order]:
        with self._lock:
            return [o for o in self._orders.values() if o.diner_id == user.id]
