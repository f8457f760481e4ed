"""Recursive population of dataclass records from an environment mapping.

For every public field, in declaration order, the walker:

1. Parses the field's ``env`` tag; ``-`` skips the field.
2. Resolves the variable name: the tag name, or the inherited prefix plus
   the name derived from the field identifier.
3. Looks the variable up, falling back to the tag default. A required
   field with neither fails.
4. Hands the raw value to the field type's ``unmarshal_env`` hook, or
   recurses into nested records with the accumulated prefixes, or coerces
   the value with the built-in parsers.

The first failure aborts the walk and is raised as a
:class:`~envbind.errors.FieldParseError` naming the field path and the
variable. Errors are wrapped once, where they happen.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, get_origin

from loguru import logger

from .analysis import (
    get_field_types,
    is_exported,
    is_frozen,
    is_optional,
    is_record_type,
    is_unresolved,
    unwrap_newtype,
)
from .coercion import parse_value, parser_for
from .errors import (
    ConversionError,
    FieldParseError,
    InvalidTargetError,
    MissingValueError,
    UnresolvedAnnotationError,
    UnsupportedTypeError,
    type_name,
)
from .hooks import apply_hook, hook_type
from .naming import SEPARATOR, derive_name
from .tags import field_tag, parse_tag

PATH_SEPARATOR = "."

FROM_ENVIRONMENT = "environment"
FROM_DEFAULT = "default"
ABSENT = "absent"


@dataclass(frozen=True)
class Binding:
    """Resolution state of one field."""

    field_path: str
    env_var: str
    raw: Optional[str] = None
    source: str = ABSENT

    @property
    def is_set(self) -> bool:
        return self.raw is not None


def resolve_binding(
    field: dataclasses.Field, env: Mapping[str, str], field_path: str = "", env_prefix: str = ""
) -> Optional[Binding]:
    """Resolve the variable name and raw value of a field.

    Args:
        field: Dataclass field
        env: Environment mapping
        field_path: Dotted path of the enclosing record, with trailing dot
        env_prefix: Variable prefix of the enclosing record, with trailing underscore

    Returns:
        The binding, or None when the field is tagged ``-``

    Raises:
        FieldParseError: If the field is required and has no value
    """
    tag = parse_tag(field_tag(field))
    if tag.skip:
        return None

    env_var = tag.name or env_prefix + derive_name(field.name)
    path = field_path + field.name

    if env_var in env:
        return Binding(path, env_var, env[env_var], FROM_ENVIRONMENT)
    if tag.has_default:
        return Binding(path, env_var, tag.default, FROM_DEFAULT)
    if tag.required:
        cause = MissingValueError()
        raise FieldParseError(cause, path, env_var) from cause
    return Binding(path, env_var)


def walk(
    record: Any, env: Mapping[str, str], field_path: str = "", env_prefix: str = ""
) -> None:
    """Populate a dataclass instance in place.

    Args:
        record: Dataclass instance
        env: Environment mapping
        field_path: Dotted path prefix for error reporting
        env_prefix: Prefix for derived variable names
    """
    hints = get_field_types(type(record))
    for field in dataclasses.fields(record):
        if not is_exported(field.name):
            continue
        _process_field(record, field, hints.get(field.name, field.type), env, field_path, env_prefix)


def _process_field(
    record: Any,
    field: dataclasses.Field,
    type_hint: Any,
    env: Mapping[str, str],
    field_path: str,
    env_prefix: str,
) -> None:
    binding = resolve_binding(field, env, field_path, env_prefix)
    if binding is None:
        logger.debug(f"Skipping field {field_path}{field.name}")
        return

    logger.debug(f"Resolved {binding.field_path} -> {binding.env_var} ({binding.source})")

    if is_unresolved(type_hint):
        cause = UnresolvedAnnotationError(type_hint, type(record))
        raise FieldParseError(cause, binding.field_path, binding.env_var) from cause

    hook = hook_type(type_hint)
    if hook is not None:
        if not binding.is_set:
            return
        logger.debug(f"Dispatching {binding.env_var} to {hook.__name__}.unmarshal_env")
        try:
            value = apply_hook(getattr(record, field.name, None), hook, binding.raw)
        except Exception as e:
            raise FieldParseError(e, binding.field_path, binding.env_var) from e
        setattr(record, field.name, value)
        return

    target = unwrap_newtype(type_hint)
    if is_record_type(target):
        nested = _nested_record(record, field, target, binding)
        logger.debug(f"Descending into {binding.field_path} with prefix {binding.env_var}_")
        walk(
            nested,
            env,
            binding.field_path + PATH_SEPARATOR,
            binding.env_var + SEPARATOR,
        )
        return

    try:
        parser = parser_for(type_hint)
    except UnsupportedTypeError as e:
        raise FieldParseError(e, binding.field_path, binding.env_var) from e

    if not binding.is_set:
        return

    try:
        value = parse_value(parser, binding.raw, type_hint)
    except ConversionError as e:
        raise FieldParseError(e, binding.field_path, binding.env_var) from e
    setattr(record, field.name, value)


def _nested_record(record: Any, field: dataclasses.Field, target: type, binding: Binding) -> Any:
    nested = getattr(record, field.name, None)
    try:
        if not isinstance(nested, target):
            nested = zero_value(target)
            setattr(record, field.name, nested)
        if is_frozen(nested):
            raise InvalidTargetError(f"{target.__name__} is a frozen dataclass", nested)
    except InvalidTargetError as e:
        raise FieldParseError(e, binding.field_path, binding.env_var) from e
    return nested


def zero_value(type_hint: Any) -> Any:
    """Build the zero value of a type.

    Optional types are ``None``, records are built with every field that
    lacks a default set to its own zero value, and any other type is called
    with no arguments (``str()``, ``int()``, ``numpy.int8()`` ...).

    Raises:
        InvalidTargetError: If the type cannot be built without arguments,
            or is an annotation that could not be resolved
    """
    if is_unresolved(type_hint):
        raise UnresolvedAnnotationError(type_hint)
    if is_optional(type_hint):
        return None

    target = unwrap_newtype(type_hint)
    origin = get_origin(target)
    if origin is not None:
        target = origin

    try:
        if is_record_type(target):
            return _zero_record(target)
        return target()
    except InvalidTargetError:
        raise
    except (TypeError, ValueError) as e:
        raise InvalidTargetError(f"cannot build a zero value of {type_name(type_hint)}: {e}") from e


def _zero_record(record_type: type) -> Any:
    hints = get_field_types(record_type)
    kwargs = {}
    for field in dataclasses.fields(record_type):
        if not field.init:
            continue
        if field.default is not dataclasses.MISSING:
            continue
        if field.default_factory is not dataclasses.MISSING:
            continue
        kwargs[field.name] = zero_value(hints.get(field.name, field.type))
    return record_type(**kwargs)
