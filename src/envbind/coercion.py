"""Conversion of raw environment strings into typed field values.

The registry maps each supported target type to a parser. Fixed width
numeric kinds are expressed with numpy scalar types (``numpy.int8``,
``numpy.uint32``, ``numpy.float32`` ...) and are range checked against
their width; the builtin ``int`` is unbounded.

Types not in the registry are still supported when:

- they subclass a registered type (``class Port(int)``, ``class Mode(str, Enum)``),
  in which case the nearest registered base parses the value and the result
  is passed to the type's constructor
- they are a ``typing.NewType`` of a supported type
- they are byte sequences (``bytes``, ``bytearray``, ``list[numpy.uint8]``,
  ``list[numpy.int8]``) or code point sequences (``list[str]``, ``list[numpy.int32]``), which
  are filled by decomposing the whole raw value
"""

from __future__ import annotations

import math
import re
import sys
from types import MappingProxyType
from typing import Any, Callable, Optional, get_args, get_origin

import numpy as np

from .analysis import get_optional_inner, unwrap_newtype
from .errors import ConversionError, UnsupportedTypeError

Parser = Callable[[str], Any]

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INFINITY = frozenset({"inf", "infinity"})


def _parse_str(value: str) -> str:
    return value


def _parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError("invalid syntax")


def _parse_int(value: str) -> int:
    if not _SIGNED.fullmatch(value):
        raise ValueError("invalid syntax")
    return int(value)


def _int_parser(np_type: type) -> Parser:
    info = np.iinfo(np_type)
    low, high = int(info.min), int(info.max)
    pattern = _UNSIGNED if low == 0 else _SIGNED

    def parse(value: str) -> Any:
        if not pattern.fullmatch(value):
            raise ValueError("invalid syntax")
        number = int(value)
        if number < low or number > high:
            raise ValueError(f"value out of range [{low}, {high}]")
        return np_type(number)

    return parse


def _float_parser(limit: float, cast: Callable[[float], Any]) -> Parser:
    def parse(value: str) -> Any:
        if not value or value != value.strip() or "_" in value:
            raise ValueError("invalid syntax")
        number = float(value)
        # float() overflows to inf silently
        if abs(number) > limit and value.lstrip("+-").lower() not in _INFINITY:
            raise ValueError("value out of range")
        return cast(number)

    return parse


PARSERS: MappingProxyType[Any, Parser] = MappingProxyType(
    {
        str: _parse_str,
        bool: _parse_bool,
        np.bool_: lambda value: np.bool_(_parse_bool(value)),
        int: _parse_int,
        np.int8: _int_parser(np.int8),
        np.int16: _int_parser(np.int16),
        np.int32: _int_parser(np.int32),
        np.int64: _int_parser(np.int64),
        np.uint8: _int_parser(np.uint8),
        np.uint16: _int_parser(np.uint16),
        np.uint32: _int_parser(np.uint32),
        np.uint64: _int_parser(np.uint64),
        float: _float_parser(sys.float_info.max, float),
        np.float32: _float_parser(float(np.finfo(np.float32).max), np.float32),
        np.float64: _float_parser(float(np.finfo(np.float64).max), np.float64),
    }
)


def _to_bytes(value: str) -> bytes:
    # surrogateescape restores the original bytes of values read from os.environ
    return value.encode("utf-8", "surrogateescape")


def _sequence_parser(target: Any) -> Optional[Parser]:
    if target is bytes:
        return _to_bytes
    if target is bytearray:
        return lambda value: bytearray(_to_bytes(value))

    if get_origin(target) is not list:
        return None
    args = get_args(target)
    if len(args) != 1:
        return None

    element = unwrap_newtype(args[0])
    if element is np.uint8:
        return lambda value: [np.uint8(b) for b in _to_bytes(value)]
    if element is np.int8:
        return lambda value: list(np.frombuffer(_to_bytes(value), dtype=np.int8))
    if element is str:
        return list
    if element is np.int32:
        return lambda value: [np.int32(ord(c)) for c in value]
    return None


def _subtype_parser(parser: Parser, target: type) -> Parser:
    return lambda value: target(parser(value))


def parser_for(type_hint: Any) -> Parser:
    """Find the parser for a field type.

    One level of Optional is unwrapped first.

    Args:
        type_hint: Declared field type

    Returns:
        Function converting a raw string to the field type

    Raises:
        UnsupportedTypeError: If the type cannot be produced from a string
    """
    target = unwrap_newtype(get_optional_inner(type_hint))

    sequence = _sequence_parser(target)
    if sequence is not None:
        return sequence

    if not isinstance(target, type) or get_origin(target) is not None:
        raise UnsupportedTypeError(target)

    for base in target.__mro__:
        parser = PARSERS.get(base)
        if parser is None:
            continue
        if base is target:
            return parser
        return _subtype_parser(parser, target)

    raise UnsupportedTypeError(target)


def parse_value(parser: Parser, value: str, type_hint: Any) -> Any:
    """Run a parser, turning parse failures into ConversionError."""
    try:
        return parser(value)
    except (ValueError, OverflowError) as e:
        raise ConversionError(value, get_optional_inner(type_hint), str(e)) from e


def coerce(value: str, type_hint: Any) -> Any:
    """Convert a raw string to the given type.

    Args:
        value: Raw string
        type_hint: Target type

    Returns:
        Converted value

    Raises:
        UnsupportedTypeError: If the type is not supported
        ConversionError: If the value cannot be parsed
    """
    return parse_value(parser_for(type_hint), value, type_hint)
