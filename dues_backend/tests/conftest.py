from contextlib import contextmanager
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from dues_api.db import SQLiteConnectionProvider
from dues_api.repositories import DueRepository

FIXED_NOW = datetime(2025, 1, 25, 10, 15, 30)


class FakeProvider:
    """Connection provider handing out one MagicMock store handle."""

    def __init__(self):
        self.handle = MagicMock()
        self.opened = 0

    @contextmanager
    def connection(self):
        self.opened += 1
        yield self.handle


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_repo(fake_provider):
    return DueRepository(fake_provider, clock=lambda: FIXED_NOW)


@pytest.fixture
def provider():
    p = SQLiteConnectionProvider()
    yield p
    p.close()


@pytest.fixture
def repo(provider):
    return DueRepository(provider)
