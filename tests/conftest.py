"""Pytest fixtures for storefront workflow tests."""

import pytest

from fakes import FakeSchemaClient
from storefront.commerce.context import StoreContext


@pytest.fixture
def client():
    return FakeSchemaClient()


@pytest.fixture
def ctx(client):
    return StoreContext(client, session_id="sess-1")
