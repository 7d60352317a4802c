"""Tests for pizzeria.auth: AuthService session metrics."""

import pytest

from pizzeria.auth import AuthService
from pizzeria.errors import AuthError
from pizzeria.store import PizzaStore


@pytest.fixture
def auth(accumulator):
    service = AuthService(PizzaStore(), accumulator)
    service.register("pizza diner", "d@test.com", "secret")
    return service


class TestLogin:
    def test_success_starts_session(self, auth, accumulator):
        user, token = auth.login("d@test.com", "secret")
        assert user.email == "d@test.com"
        assert auth.authenticate(token) == user
        snap = accumulator.snapshot()
        assert snap.active_users == 1
        assert snap.auth_successes == 1

    def test_wrong_password(self, auth, accumulator):
        with pytest.raises(AuthError):
            auth.login("d@test.com", "nope")
        snap = accumulator.snapshot()
        assert snap.auth_failures == 1
        assert snap.active_users == 0

    def test_unknown_email(self, auth, accumulator):
        with pytest.raises(AuthError):
            auth.login("ghost@test.com", "secret")
        assert accumulator.snapshot().auth_failures == 1

    def test_tokens_are_unique(self, auth):
        _, t1 = auth.login("d@test.com", "secret")
        _, t2 = auth.login("d@test.com", "secret")
        assert t1 != t2


class TestLogout:
    def test_balanced_sessions(self, auth, accumulator):
        tokens = [auth.login("d@test.com", "secret")[1] for _ in range(3)]
        auth.logout(tokens[0])
        snap = accumulator.snapshot()
        assert snap.active_users == 2
        assert snap.auth_successes == 3

    def test_logout_twice_rejected(self, auth, accumulator):
        _, token = auth.login("d@test.com", "secret")
        auth.logout(token)
        with pytest.raises(AuthError):
            auth.logout(token)
        assert accumulator.snapshot().active_users == 0

    def test_token_invalid_after_logout(self, auth):
        _, token = auth.login("d@test.com", "secret")
        auth.logout(token)
        with pytest.raises(AuthError):
            auth.authenticate(token)


class TestAuthenticate:
    def test_missing_token(self, auth):
        with pytest.raises(AuthError):
            auth.authenticate(None)

    def test_registration_token_authenticates(self, accumulator):
        service = AuthService(PizzaStore(), accumulator)
        user, token = service.register("n", "n@test.com", "pw")
        assert service.authenticate(token).id == user.id
