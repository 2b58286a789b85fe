"""Shared fixtures: an isolated home directory and a fake Secrets Manager client."""
import logging
from pathlib import Path

import pytest

from agent_awstoolkit.cli.console import PACKAGE_LOGGER
from agent_awstoolkit.secrets.domains import preferences
from agent_awstoolkit.secrets.domains.aws_client import SecretStoreClient
from agent_awstoolkit.secrets.domains.models import RetrievalResult


class FakeSecretClient(SecretStoreClient):
    """In-memory client that records every call made to it."""

    missing_tool_message = "AWS CLI is not installed. Please install it first."

    def __init__(self, result=None, available=True, authenticated=True):
        self.result = result if result is not None else RetrievalResult.success("value")
        self.available = available
        self.authenticated = authenticated
        self.calls = []
        self.requests = []

    def is_available(self):
        self.calls.append("is_available")
        return self.available

    def probe_identity(self):
        self.calls.append("probe_identity")
        return self.authenticated

    def get_secret(self, request):
        self.calls.append("get_secret")
        self.requests.append(request)
        return self.result


@pytest.fixture(autouse=True)
def temp_home(tmp_path, monkeypatch):
    """Point home, preferences and environment at a throwaway directory."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setattr(Path, "home", lambda: fake_home)

    fake_config_dir = fake_home / ".config" / "agent-awstoolkit"
    monkeypatch.setattr(preferences, "PREFERENCES_DIR", fake_config_dir)
    monkeypatch.setattr(preferences, "PREFERENCES_FILE", fake_config_dir / "preferences.json")

    monkeypatch.delenv("AWS_TOOLKIT_REGION", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    return fake_home


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI installed so they never outlive a captured stream."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_config_dir(temp_home):
    config_dir = temp_home / ".config" / "agent-awstoolkit"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def fake_client():
    """Factory for FakeSecretClient instances."""
    return FakeSecretClient
