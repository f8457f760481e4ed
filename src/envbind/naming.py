"""Derivation of environment variable names from field names."""

from __future__ import annotations

SEPARATOR = "_"


def derive_name(identifier: str) -> str:
    """Convert a field identifier into its environment variable name.

    An underscore is inserted wherever the identifier changes "word":

    - before an upper case letter followed by a lower case one
      (``JSONString`` -> ``JSON_STRING``)
    - after a lower case letter followed by an upper case one
      (``fooBar`` -> ``FOO_BAR``)
    - between letters and digits (``JSON1String`` -> ``JSON_1_STRING``)

    Underscores already in the identifier are kept as boundaries, so
    snake_case names map directly (``signing_key`` -> ``SIGNING_KEY``).

    Args:
        identifier: Field name

    Returns:
        Upper case, underscore separated name
    """
    segments = [_split_segment(part) for part in identifier.split(SEPARATOR) if part]
    return SEPARATOR.join(segments)


def _split_segment(segment: str) -> str:
    out: list[str] = []
    for i, cur in enumerate(segment):
        if i > 0 and out[-1] != SEPARATOR and _is_boundary(segment, i):
            out.append(SEPARATOR)
        out.append(cur.upper())
    return "".join(out)


def _is_boundary(segment: str, i: int) -> bool:
    prev, cur = segment[i - 1], segment[i]
    nxt = segment[i + 1] if i + 1 < len(segment) else ""

    if cur.isupper() and nxt.islower():
        return True
    if prev.islower() and cur.isupper():
        return True
    if prev.isalpha() and cur.isdigit():
        return True
    return prev.isdigit() and cur.isalpha()
