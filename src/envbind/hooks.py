"""Custom conversion hooks.

A field type takes over its own conversion by implementing
``unmarshal_env``::

    class IDList(list):
        def unmarshal_env(self, value: str) -> None:
            self[:] = json.loads(value)

The method receives the raw value and raises on failure. It is called on
the field's current value when that is already an instance of the type;
otherwise a new instance is created with no arguments first. When the
variable is absent and there is no default, the hook is not called and an
``Optional`` field stays ``None``.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, get_origin, runtime_checkable

from .analysis import get_optional_inner, unwrap_newtype


@runtime_checkable
class EnvUnmarshaler(Protocol):
    """Protocol for types that parse themselves from a raw string."""

    def unmarshal_env(self, value: str) -> None: ...


def hook_type(type_hint: Any) -> Optional[type]:
    """Return the class implementing :class:`EnvUnmarshaler`, if any.

    Optional and NewType wrappers are unwrapped first.
    """
    target = unwrap_newtype(get_optional_inner(type_hint))
    if not isinstance(target, type) or get_origin(target) is not None:
        return None
    if issubclass(target, EnvUnmarshaler):
        return target
    return None


def apply_hook(current: Any, cls: type, value: str) -> Any:
    """Materialize the hook receiver and hand it the raw value.

    Args:
        current: Current value of the field
        cls: Type implementing the hook
        value: Raw value

    Returns:
        The instance to assign to the field
    """
    target = current if isinstance(current, cls) else cls()
    target.unmarshal_env(value)
    return target
