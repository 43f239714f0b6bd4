"""
Shared test fixtures and helpers.
"""
from __future__ import annotations

import hashlib
import hmac
from pathlib import Path
from typing import Generator, List

import pytest

from webhook_handler.config import WebhookSettings
from webhook_handler.services.actions import ActionLauncher
from webhook_handler.services.stats import DeliveryStats, StatsCollector, stats_collector
from webhook_handler.state import AppState, app_state


# Secret used to sign test deliveries
TEST_SECRET_RAW = b"test-secret-key-for-unit-tests"


@pytest.fixture
def test_secret() -> bytes:
    """Return the raw test secret bytes."""
    return TEST_SECRET_RAW


def sign_body(body: bytes, secret: bytes) -> str:
    """Create an X-Hub-Signature-256 value for a body."""
    return "sha256=" + hmac.new(secret, body, hashlib.sha256).hexdigest()


class RecordingLauncher(ActionLauncher):
    """Launcher that records launches instead of starting a process."""

    def __init__(self, script: Path, interpreter: str = "bash"):
        super().__init__(script, interpreter)
        self.launches: List[List[str]] = []

    def launch(self):
        self.launches.append(self.command())
        return None


@pytest.fixture
def script_path(tmp_path) -> Path:
    """A harmless script that exists on disk."""
    path = tmp_path / "deploy.sh"
    path.write_text("exit 0\n")
    return path


@pytest.fixture
def test_settings(test_secret, script_path) -> WebhookSettings:
    return WebhookSettings(secret=test_secret, script=script_path)


@pytest.fixture
def recording_launcher(script_path) -> RecordingLauncher:
    return RecordingLauncher(script_path)


@pytest.fixture
def fresh_stats_collector() -> StatsCollector:
    """Create a fresh StatsCollector instance for testing."""
    return StatsCollector()


@pytest.fixture(autouse=True)
def reset_stats():
    """Clear the shared delivery counters around each test."""
    stats_collector._stats = DeliveryStats()
    yield
    stats_collector._stats = DeliveryStats()


@pytest.fixture
def mock_app_state(test_settings, recording_launcher) -> Generator[AppState, None, None]:
    """
    Set up app_state with test values and reset after test.
    """
    # Store original values
    original_settings = app_state.settings
    original_launcher = app_state.launcher

    # Set test values
    app_state.settings = test_settings
    app_state.launcher = recording_launcher

    yield app_state

    # Restore original values
    app_state.settings = original_settings
    app_state.launcher = original_launcher


@pytest.fixture
def mock_env(test_secret, script_path, monkeypatch):
    """Set up environment variables for testing."""
    monkeypatch.setenv("WEBHOOK_SECRET", test_secret.decode())
    monkeypatch.setenv("WEBHOOK_SCRIPT", str(script_path))
    # Clear the cached config
    from webhook_handler.config import get_config
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def unset_env(monkeypatch, tmp_path):
    """Make sure neither the environment nor a .env file provides the settings."""
    monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("WEBHOOK_SCRIPT", raising=False)
    monkeypatch.chdir(tmp_path)
    from webhook_handler.config import get_config
    get_config.cache_clear()
    yield
    get_config.cache_clear()
