"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from procpool.config import runtime
from tests.helpers.process_fakes import FakeLauncher


@pytest.fixture(autouse=True)
def isolate_dotenv_defaults():
    """Keep developer .env files out of configuration lookups."""
    runtime._DEFAULT_VALUES = {}
    yield
    runtime._DEFAULT_VALUES = None


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()
