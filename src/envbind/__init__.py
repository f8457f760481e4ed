"""Populate dataclasses from environment variables."""

from loguru import logger

from .coercion import coerce
from .errors import (
    ConversionError,
    EnvError,
    FieldParseError,
    InvalidTargetError,
    MissingValueError,
    UnresolvedAnnotationError,
    UnsupportedTypeError,
)
from .hooks import EnvUnmarshaler
from .naming import derive_name
from .tags import TagDirectives, env_field, parse_tag
from .unmarshal import load, parse_env, unmarshal, unmarshal_environ, unmarshal_with_prefix

logger.disable("envbind")

__all__ = [
    "ConversionError",
    "EnvError",
    "EnvUnmarshaler",
    "FieldParseError",
    "InvalidTargetError",
    "MissingValueError",
    "TagDirectives",
    "UnresolvedAnnotationError",
    "UnsupportedTypeError",
    "coerce",
    "derive_name",
    "env_field",
    "load",
    "parse_env",
    "parse_tag",
    "unmarshal",
    "unmarshal_environ",
    "unmarshal_with_prefix",
]

__version__ = "0.1.0"
