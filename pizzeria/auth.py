"""Registration, login and logout, reporting session metrics."""

from __future__ import annotations

import secrets

from pizzeria.errors import AuthError
from pizzeria.logging import get_logger
from pizzeria.metrics.accumulator import MetricsAccumulator
from pizzeria.models import User
from pizzeria.store import PizzaStore

log = get_logger("pizzeria.auth")


class AuthService:
    def __init__(self, store: PizzaStore, metrics: MetricsAccumulator, *, token_bytes: int = 32) -> None:
        self.store = store
        self.metrics = metrics
        self.token_bytes = token_bytes

    def _issue_token(self, user: User) -> str:
        token = secrets.token_urlsafe(self.token_bytes)
        self.store.open_session(user.id, token)
        return token

    def register(self, name: str, email: str, password: str) -> tuple[User, str]:
        """Create a user and hand back a token for it. Not counted as a login."""
        user = self.store.add_user(name, email, password)
        log.info("user_registered", user_id=user.id)
        return user, self._issue_token(user)

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self.store.verify_user(email, password)
        if user is None:
            self.metrics.auth_failed()
            log.info("login_failed")
            raise AuthError("unknown user")
        token = self._issue_token(user)
        self.metrics.user_session_started()
        log.info("login_succeeded", user_id=user.id)
        return user, token

    def logout(self, token: str) -> None:
        if not self.store.close_session(token):
            raise AuthError("unauthorized")
        self.metrics.user_session_ended()

    def authenticate(self, token: str | None) -> User:
        """Resolve a bearer token to its user or raise ``AuthError``."""
        user = self.store.session_user(token) if token else None
        if user is None:
            raise AuthError("unauthorized")
        return user
