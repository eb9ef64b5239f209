# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from server import app, get_gateway

from .fakes import FakeGateway


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def client(gateway: FakeGateway) -> Iterator[TestClient]:
    """
    TestClient with the Notion gateway replaced by an in-memory fake.

    No request leaves the process.
    """
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
