"""Shared pytest fixtures for the timer core and the API."""

import pytest
from fastapi.testclient import TestClient

from app.infra.supabase.client import get_repositories
from app.infra.supabase.repositories import RepositoryFactory
from app.main import app
from app.middleware.auth import get_current_user_id
from app.services.timer import MemoryStorage, PauseStore, TimerSubject, VisibilityGate

from helpers import USER_ID, FakeClock, FakeMutations, FakeSupabase


@pytest.fixture
def clock():
    """Frozen clock at 2025-01-01 12:00:00 UTC."""
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def pause_store(storage):
    return PauseStore(storage)


@pytest.fixture
def gate():
    return VisibilityGate()


@pytest.fixture
def subject():
    """A task with a 60 second timer that has not been started."""
    return TimerSubject(id="task-1", title="Boil pasta", timer_duration_seconds=60)


@pytest.fixture
def mutations(subject, clock):
    return FakeMutations(subject, clock)


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def repos(supabase):
    return RepositoryFactory(supabase)


@pytest.fixture
def client(repos):
    """TestClient authenticated as USER_ID and backed by the in-memory Supabase."""
    app.dependency_overrides[get_current_user_id] = lambda: USER_ID
    app.dependency_overrides[get_repositories] = lambda: repos
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
