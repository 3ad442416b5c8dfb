"""
Shared fixtures for the RecipeFind tests.

Every test gets its own event log file so analytics writes never land in the
working directory.
"""

import pytest

from recipefind.auth import AuthService
from recipefind.session import Session
from recipefind.storage import MemoryStorage, PersistentStore


@pytest.fixture(autouse=True)
def isolated_event_log(tmp_path, monkeypatch):
    """Redirect the event log into the test's temporary directory."""
    log_file = tmp_path / "events.log"
    monkeypatch.setattr("recipefind.events.EVENT_LOG_FILE", log_file)
    return log_file


@pytest.fixture
def store():
    return PersistentStore(MemoryStorage())


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def auth(store, session):
    """AuthService with all simulated latencies disabled."""
    return AuthService(store, session, auth_delay=0, reset_delay=0)
