import pytest

from totp_backend import create_app
from totp_backend.config import TestConfig


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the clock the /totp route reads; returns a setter."""
    import totp_backend.routes as routes

    def _freeze(ts: int):
        monkeypatch.setattr(routes, "_now", lambda: ts)
        return ts

    return _freeze
