"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import itertools
from typing import Any, Callable, Dict

import pytest

from scaffold_ledger.config import LedgerConfig, reload_config
from scaffold_ledger.container import LedgerServices
from scaffold_ledger.store import Collections, InMemoryDocumentStore

TODAY = dt.date(2024, 3, 15)


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        "STORE_BACKEND": "memory",
        "FIRESTORE_PROJECT_ID": "test-project",
        "ENVIRONMENT": "testing",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "MAX_RETRIES": "2",
        "RETRY_DELAY": "0",
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import scaffold_ledger.config.settings

    scaffold_ledger.config.settings._config = None

    yield test_env_vars

    scaffold_ledger.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> LedgerConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def clock() -> Callable[[], dt.datetime]:
    """Write clock that advances one second per call."""
    start = dt.datetime(2024, 3, 1, 12, 0, tzinfo=dt.timezone.utc)
    ticks = itertools.count()
    return lambda: start + dt.timedelta(seconds=next(ticks))


@pytest.fixture
def store(clock) -> InMemoryDocumentStore:
    """Empty in-memory document store."""
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def services(store) -> LedgerServices:
    """Ledger services wired on the in-memory store, with a fixed today."""
    return LedgerServices.from_store(store, today=lambda: TODAY)


@pytest.fixture
def make_project(store) -> Callable[..., str]:
    """Create a project document and return its id."""

    def _make(name: str = "Garage Build", budget: Any = 10000, **fields) -> str:
        data = {"name": name, "budget": budget}
        data.update(fields)
        return store.create(Collections.PROJECTS, data)

    return _make


@pytest.fixture
def make_staff(store) -> Callable[..., str]:
    """Create a staff member document and return its id."""

    def _make(name: str = "Alice Ng") -> str:
        return store.create(Collections.STAFF_MEMBERS, {"name": name})

    return _make


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")
    config.addinivalue_line(
        "markers", "integration: tests that need a live Firestore database"
    )
