"""Exception hierarchy for envbind.

Every failure that happens while populating a record is reported through a
single exception type, :class:`FieldParseError`, which names the field and
the environment variable involved and wraps the underlying cause. Failures
that happen before any field is looked at (a bad target) raise
:class:`InvalidTargetError` instead.

Exception Hierarchy:
    EnvError: Base exception for all envbind errors
    ├── InvalidTargetError: Target is not a mutable dataclass instance
    │   └── UnresolvedAnnotationError: String annotation cannot be evaluated
    ├── FieldParseError: A single field could not be populated
    ├── MissingValueError: Required value absent (wrapped by FieldParseError)
    ├── UnsupportedTypeError: Field type cannot be coerced (wrapped)
    └── ConversionError: Raw value failed to parse (wrapped)

Example:
    >>> try:
    ...     unmarshal(os.environ, config)
    ... except FieldParseError as e:
    ...     print(f"{e.env_var} -> {e.field}: {e.cause}")
"""

from __future__ import annotations

from typing import Any


class EnvError(Exception):
    """Base exception for all envbind errors."""

    pass


class InvalidTargetError(EnvError, TypeError):
    """Raised when the unmarshal target is unusable.

    This occurs when:
    - The target is None
    - The target is a class rather than an instance
    - The target is not a dataclass instance
    - The target is a frozen dataclass instance
    """

    def __init__(self, message: str, target: Any = None):
        super().__init__(message)
        self.target = target


class UnresolvedAnnotationError(InvalidTargetError):
    """Raised when a postponed (string) field annotation cannot be evaluated.

    Typically a record defined inside a function under
    ``from __future__ import annotations`` that refers to another local class.
    """

    def __init__(self, annotation: str, target: Any = None):
        self.annotation = annotation
        super().__init__(f'cannot resolve type annotation "{annotation}"', target)


class MissingValueError(EnvError):
    """Raised when a required field has no value and no default."""

    def __init__(self, message: str = "required value not set"):
        super().__init__(message)


class UnsupportedTypeError(EnvError, TypeError):
    """Raised when a field type has no parser, no hook and is not a record."""

    def __init__(self, type_hint: Any):
        self.type_hint = type_hint
        super().__init__(f"unsupported field type {type_name(type_hint)}")


class ConversionError(EnvError, ValueError):
    """Raised when a raw value cannot be parsed into the target type."""

    def __init__(self, value: str, type_hint: Any, reason: str):
        self.value = value
        self.type_hint = type_hint
        self.reason = reason
        super().__init__(f"cannot parse {value!r} as {type_name(type_hint)}: {reason}")


class FieldParseError(EnvError):
    """Raised when a field could not be populated from the environment.

    Attributes:
        field: Dotted path of the field (e.g. ``auth.signing_key``)
        env_var: Name of the environment variable the field maps to
        cause: The underlying exception
    """

    def __init__(self, cause: BaseException, field: str, env_var: str):
        self.cause = cause
        self.field = field
        self.env_var = env_var
        super().__init__(
            f'failed to unmarshal environment variable "{env_var}" into field "{field}": {cause}'
        )


def type_name(type_hint: Any) -> str:
    """Readable name of a type hint for error messages."""
    if isinstance(type_hint, type) and not getattr(type_hint, "__args__", None):
        return type_hint.__name__
    return str(type_hint).replace("typing.", "")
