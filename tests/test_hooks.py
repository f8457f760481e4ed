"""Tests for custom unmarshal hooks."""

import json
from typing import NewType, Optional

import pytest

from envbind.hooks import EnvUnmarshaler, apply_hook, hook_type


class IDList(list):
    """List parsed from a JSON array."""

    def unmarshal_env(self, value: str) -> None:
        self[:] = json.loads(value)


class Secret:
    """Value object recording how often it was parsed."""

    def __init__(self):
        self.value = ""
        self.calls = 0

    def unmarshal_env(self, value: str) -> None:
        self.calls += 1
        self.value = value[::-1]


class Plain:
    pass


SecretAlias = NewType("SecretAlias", Secret)


class TestHookType:
    """Test detecting hook implementations."""

    def test_detects_implementation(self):
        """Test classes with unmarshal_env are hooks."""
        assert hook_type(IDList) is IDList
        assert hook_type(Secret) is Secret

    def test_unwraps_optional(self):
        """Test Optional and NewType wrappers are looked through."""
        assert hook_type(Optional[Secret]) is Secret
        assert hook_type(Secret | None) is Secret
        assert hook_type(SecretAlias) is Secret

    def test_non_hooks(self):
        """Test ordinary types are not hooks."""
        assert hook_type(Plain) is None
        assert hook_type(str) is None
        assert hook_type(list[str]) is None
        assert hook_type(Optional[int]) is None

    def test_structural_protocol(self):
        """Test instances satisfy the protocol without subclassing it."""
        assert isinstance(Secret(), EnvUnmarshaler)
        assert not isinstance(Plain(), EnvUnmarshaler)


class TestApplyHook:
    """Test materializing hook receivers."""

    def test_creates_instance_when_missing(self):
        """Test a new instance is built when the field is None."""
        result = apply_hook(None, Secret, "abc")
        assert isinstance(result, Secret)
        assert result.value == "cba"

    def test_reuses_existing_instance(self):
        """Test the current instance is updated in place."""
        existing = Secret()
        result = apply_hook(existing, Secret, "xy")
        assert result is existing
        assert existing.value == "yx"
        assert existing.calls == 1

    def test_hook_errors_propagate(self):
        """Test hook failures are raised to the caller."""
        with pytest.raises(json.JSONDecodeError):
            apply_hook(None, IDList, "not json")
