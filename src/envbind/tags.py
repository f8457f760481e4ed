"""Parsing of ``env`` field tags.

A tag is attached to a dataclass field through its metadata::

    @dataclass
    class Config:
        name: str = env_field(",required default=John\\sDoe")
        ttl: int = env_field("JWT_TTL", default=0)
        internal: object = env_field("-", default=None)

The part before the first comma overrides the variable name (``-`` skips
the field). The rest is a space separated list of directives: ``required``
and ``default=<value>``, where ``\\s`` stands for a literal space.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional

TAG_KEY = "env"
SKIP = "-"

_REQUIRED = "required"
_DEFAULT = "default"
_SPACE_ESCAPE = "\\s"


@dataclass(frozen=True)
class TagDirectives:
    """Directives parsed from a field tag."""

    name: str = ""
    default: Optional[str] = None
    required: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def skip(self) -> bool:
        return self.name == SKIP


def parse_tag(tag: str) -> TagDirectives:
    """Parse raw tag text into directives.

    Unknown or malformed directives are ignored.

    Args:
        tag: Raw tag text, e.g. ``"NAME,required default=x"``

    Returns:
        Parsed directives
    """
    name, _, rest = tag.partition(",")
    name = name.strip()
    if not rest:
        return TagDirectives(name=name)

    default: Optional[str] = None
    required = False
    for token in rest.split(" "):
        key, sep, value = token.partition("=")
        key = key.lower()
        if not sep:
            if key == _REQUIRED:
                required = True
            continue
        if key == _DEFAULT:
            default = value.replace(_SPACE_ESCAPE, " ")

    return TagDirectives(name=name, default=default, required=required)


def field_tag(field: dataclasses.Field) -> str:
    """Return the raw ``env`` tag of a dataclass field."""
    return field.metadata.get(TAG_KEY, "")


def env_field(tag: str = "", **kwargs: Any) -> Any:
    """Declare a dataclass field carrying an ``env`` tag.

    Accepts the same keyword arguments as :func:`dataclasses.field`.

    Args:
        tag: Tag text

    Returns:
        A dataclass field
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return dataclasses.field(metadata=metadata, **kwargs)
