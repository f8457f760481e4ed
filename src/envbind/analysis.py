"""Type hint helpers used while walking records."""

from __future__ import annotations

import dataclasses
import inspect
import sys
import types
from typing import Any, Union, get_args, get_origin, get_type_hints


def is_optional(type_hint: Any) -> bool:
    """Check if a type hint is Optional[T] (or ``T | None``)."""
    origin = get_origin(type_hint)
    if origin is Union or origin is types.UnionType:
        args = get_args(type_hint)
        return len(args) == 2 and type(None) in args
    return False


def get_optional_inner(type_hint: Any) -> Any:
    """Get the inner type from Optional[T]."""
    if is_optional(type_hint):
        args = get_args(type_hint)
        return args[0] if args[1] is type(None) else args[1]
    return type_hint


def unwrap_newtype(type_hint: Any) -> Any:
    """Follow NewType aliases down to the concrete supertype."""
    while hasattr(type_hint, "__supertype__"):
        type_hint = type_hint.__supertype__
    return type_hint


def is_record_type(type_hint: Any) -> bool:
    """Check if a type hint is a dataclass type."""
    return isinstance(type_hint, type) and dataclasses.is_dataclass(type_hint)


def is_record_instance(obj: Any) -> bool:
    """Check if object is a dataclass instance."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def is_frozen(obj: Any) -> bool:
    params = getattr(type(obj), "__dataclass_params__", None)
    return bool(params and params.frozen)


def is_exported(name: str) -> bool:
    return not name.startswith("_")


def is_unresolved(type_hint: Any) -> bool:
    """Check if a type hint is a string annotation that could not be evaluated."""
    return isinstance(type_hint, str)


def get_field_types(record_type: type) -> dict[str, Any]:
    """Resolve the field type hints of a dataclass.

    String annotations are resolved with :func:`typing.get_type_hints`.
    When that fails (e.g. a forward reference to a class local to a
    function), each annotation is evaluated on its own, in the namespace
    of the class that declares it, so one bad annotation does not spoil
    the others. Annotations that still cannot be evaluated are returned
    as their strings; see :func:`is_unresolved`.

    Args:
        record_type: Dataclass type

    Returns:
        Mapping of field name to type hint
    """
    try:
        return get_type_hints(record_type)
    except (NameError, AttributeError, TypeError):
        pass

    hints: dict[str, Any] = {}
    for base in reversed(record_type.__mro__):
        module = sys.modules.get(base.__module__)
        globalns = getattr(module, "__dict__", {})
        for name, annotation in inspect.get_annotations(base).items():
            hints[name] = _resolve_annotation(annotation, globalns, dict(vars(base)))
    return hints


def _resolve_annotation(annotation: Any, globalns: dict[str, Any], classns: dict[str, Any]) -> Any:
    if not isinstance(annotation, str):
        return annotation
    # module globals win over class attributes, as in typing.get_type_hints
    try:
        return eval(annotation, classns, globalns)
    except (NameError, AttributeError, TypeError, SyntaxError):
        return annotation
