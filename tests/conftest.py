"""Test configuration and fixtures for envbind tests."""

import os

import pytest


@pytest.fixture
def clean_environ(monkeypatch):
    """Empty the process environment for the duration of a test."""
    for key in list(os.environ):
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.fixture
def env_vars(clean_environ):
    """Set up test environment variables."""
    test_vars = {
        "MYAPP_DEBUG": "true",
        "MYAPP_DATABASE_HOST": "db.example.com",
        "MYAPP_DATABASE_PORT": "3306",
        "MYAPP_SERVER_WORKERS": "4",
    }

    for key, value in test_vars.items():
        clean_environ.setenv(key, value)

    return test_vars


@pytest.fixture
def pairs():
    """Build a ``KEY=VALUE`` list from keyword arguments."""

    def build(**values):
        return [f"{key}={value}" for key, value in values.items()]

    return build
