"""Pytest configuration and shared fixtures for all tests."""

from unittest.mock import Mock

import pytest
import requests


@pytest.fixture(autouse=True)
def disable_sentry_for_tests(monkeypatch):
    """Disable Sentry telemetry for all tests."""
    monkeypatch.setenv("TELEMETRY", "false")
    monkeypatch.delenv("SENTRY_DSN", raising=False)


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    """Keep a developer's GITHUB_TOKEN out of configuration tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def mock_session():
    """Create a mock requests session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def make_response():
    """Factory for mock HTTP responses."""

    def _make(payload=None, status_code=200):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = payload
        return response

    return _make
