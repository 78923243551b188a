"""Shared fixtures for quome CLI tests."""

import uuid

import pytest
from click.testing import CliRunner

from quome.cli.platform.config import ENV_APP, ENV_DEBUG, ENV_ORG, ENV_TOKEN
from quome.cli.platform.store import ConfigStore
from quome.cli.platform.types import AgentState

THREAD_ID = uuid.UUID("3f2a8c1e-5b7d-4e9a-8c6f-1d2e3f4a5b6c")
USER_ID = uuid.UUID("11111111-2222-3333-4444-555555555555")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's QUOME_* variables out of the tests."""
    for name in (ENV_TOKEN, ENV_ORG, ENV_APP, ENV_DEBUG, "QUOME_API_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    """Provide a CLI runner."""
    return CliRunner()


@pytest.fixture
def store(tmp_path):
    """Empty config store in a temporary directory."""
    return ConfigStore(tmp_path / "config.json")


@pytest.fixture
def logged_in_store(store):
    """Config store holding a logged-in user."""
    store.set_user("test-token-123", USER_ID, "dev@example.com")
    store.save()
    return store


def make_state(**overrides) -> AgentState:
    """Build an AgentState from wire-format fields with defaults."""
    data = {"thread_id": str(THREAD_ID), "is_working": True}
    data.update(overrides)
    return AgentState.model_validate(data)


def assistant(content: str | None) -> dict:
    return {"type": "assistant", "content": content}


def user_msg(content: str) -> dict:
    return {"type": "user", "content": content}
