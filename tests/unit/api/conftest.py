"""Fixtures for HTTP service tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from amm.api.endpoints import get_exchange
from amm.api.main import app
from amm.exchange import Exchange
from tests.helpers import make_exchange


@pytest.fixture
def api_exchange() -> Exchange:
    """Isolated exchange served by the client fixture."""
    return make_exchange()


@pytest.fixture
def client(api_exchange: Exchange) -> Iterator[TestClient]:
    """Create a test client bound to api_exchange."""
    app.dependency_overrides[get_exchange] = lambda: api_exchange
    yield TestClient(app)
    app.dependency_overrides.clear()
