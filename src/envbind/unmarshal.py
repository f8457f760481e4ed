"""Entry points for populating dataclasses from environment variables."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from typing import Any, Optional, TypeVar, Union

from loguru import logger

from .analysis import is_frozen, is_record_instance, is_record_type
from .errors import FieldParseError, InvalidTargetError
from .walker import walk, zero_value

T = TypeVar("T")

Pairs = Union[Iterable[str], Mapping[str, str]]

_TARGET_MESSAGE = "out must be a mutable dataclass instance"


def parse_env(pairs: Pairs) -> dict[str, str]:
    """Build the variable mapping from ``KEY=VALUE`` strings.

    Entries without ``=`` are ignored and later duplicates win. A mapping
    (such as ``os.environ``) is copied as is.

    Args:
        pairs: ``KEY=VALUE`` strings or a mapping

    Returns:
        Mapping of variable name to value
    """
    if isinstance(pairs, Mapping):
        return dict(pairs)

    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        env[key] = value
    return env


def _check_target(out: Any) -> None:
    if out is None:
        raise InvalidTargetError(f"{_TARGET_MESSAGE}, got None")
    if isinstance(out, type):
        raise InvalidTargetError(f"{_TARGET_MESSAGE}, got the class {out.__name__}", out)
    if not is_record_instance(out):
        raise InvalidTargetError(f"{_TARGET_MESSAGE}, got {type(out).__name__}", out)
    if is_frozen(out):
        raise InvalidTargetError(f"{_TARGET_MESSAGE}, {type(out).__name__} is frozen", out)


def unmarshal(pairs: Pairs, out: Any) -> None:
    """Populate ``out`` from environment variables.

    Each public field of ``out`` is mapped to a variable, either named by
    its ``env`` tag or derived from the field name (``signing_key`` ->
    ``SIGNING_KEY``, ``TTLSeconds`` -> ``TTL_SECONDS``). Nested dataclasses
    inherit their parent's variable name as a prefix (``AUTH_SIGNING_KEY``).
    Fields whose variable is absent and that have no tag default are left
    untouched.

    Args:
        pairs: ``KEY=VALUE`` strings, typically from the process environment
        out: Dataclass instance, populated in place

    Raises:
        InvalidTargetError: If ``out`` is not a mutable dataclass instance
        FieldParseError: If a field cannot be populated
    """
    unmarshal_with_prefix(pairs, out, "")


def unmarshal_with_prefix(pairs: Pairs, out: Any, prefix: str) -> None:
    """Populate ``out``, prepending ``prefix`` to every derived top-level name.

    The prefix is used verbatim, include the separator (``"MYAPP_"``).
    Explicit tag names are never prefixed.
    """
    _check_target(out)

    env = parse_env(pairs)
    record_name = type(out).__name__
    logger.debug(f"Unmarshaling {len(env)} variables into {record_name} (prefix={prefix!r})")

    try:
        walk(out, env, "", prefix)
    except FieldParseError as e:
        e.add_note(f"while unmarshaling {record_name}")
        logger.error(f"Failed to unmarshal {record_name}: {e}")
        raise


def unmarshal_environ(out: Any, prefix: str = "") -> None:
    """Populate ``out`` from ``os.environ``."""
    unmarshal_with_prefix(os.environ, out, prefix)


def load(cls: type[T], pairs: Optional[Pairs] = None, prefix: str = "") -> T:
    """Create a dataclass instance populated from environment variables.

    Fields without a default start at their zero value (``""``, ``0``,
    ``False``, ``None`` for Optional ...) before the environment is applied.

    Args:
        cls: Dataclass type
        pairs: ``KEY=VALUE`` strings or a mapping; ``os.environ`` when None
        prefix: Prefix for derived top-level names

    Returns:
        Populated instance

    Raises:
        InvalidTargetError: If ``cls`` is not a dataclass or cannot be built
        FieldParseError: If a field cannot be populated
    """
    if not is_record_type(cls):
        raise InvalidTargetError(f"{cls!r} is not a dataclass", cls)

    out = zero_value(cls)
    unmarshal_with_prefix(os.environ if pairs is None else pairs, out, prefix)
    return out
