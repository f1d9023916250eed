"""Built-in leaf types available to every suite."""

from __future__ import annotations

import array
import datetime
import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from ifacecheck.types import MISSING, BasicType

_SCALARS = (str, int, float, bool)

# Typed arrays map onto array.array by element kind and width; the width of
# a type code ("l" is 4 or 8 bytes) depends on the platform.
_SIGNED = "bhilq"
_UNSIGNED = "BHILQ"
_FLOAT = "fd"

_TYPED_ARRAYS: dict[str, tuple[str, int]] = {
    "Int8Array": (_SIGNED, 1),
    "Uint8Array": (_UNSIGNED, 1),
    "Uint8ClampedArray": (_UNSIGNED, 1),
    "Int16Array": (_SIGNED, 2),
    "Uint16Array": (_UNSIGNED, 2),
    "Int32Array": (_SIGNED, 4),
    "Uint32Array": (_UNSIGNED, 4),
    "Float32Array": (_FLOAT, 4),
    "Float64Array": (_FLOAT, 8),
    "BigInt64Array": (_SIGNED, 8),
    "BigUint64Array": (_UNSIGNED, 8),
}


def _is_number(v: Any) -> bool:
    return isinstance(v, int | float) and not isinstance(v, bool)


def _is_object(v: Any) -> bool:
    if v is None or v is MISSING or isinstance(v, _SCALARS):
        return False
    return not callable(v)


def _typed_array(kind: str, itemsize: int) -> Callable[[Any], bool]:
    return lambda v: (
        isinstance(v, array.array) and v.typecode in kind and v.itemsize == itemsize
    )


def _basic(name: str, predicate: Callable[[Any], bool], message: str) -> BasicType:
    return BasicType(name=name, predicate=predicate, message=message)


def _build_registry() -> dict[str, BasicType]:
    registry = {
        "any": _basic("any", lambda v: True, "is invalid"),
        "number": _basic("number", _is_number, "is not a number"),
        "object": _basic("object", _is_object, "is not an object"),
        "boolean": _basic("boolean", lambda v: isinstance(v, bool), "is not a boolean"),
        "string": _basic("string", lambda v: isinstance(v, str), "is not a string"),
        "symbol": _basic("symbol", lambda v: type(v) is object, "is not a symbol"),
        "void": _basic("void", lambda v: v is None or v is MISSING, "is not void"),
        "undefined": _basic("undefined", lambda v: v is MISSING, "is not undefined"),
        "null": _basic("null", lambda v: v is None, "is not null"),
        "never": _basic("never", lambda v: False, "is unexpected"),
        "Date": _basic(
            "Date", lambda v: isinstance(v, datetime.date), "is not a Date"
        ),
        "RegExp": _basic(
            "RegExp", lambda v: isinstance(v, re.Pattern), "is not a RegExp"
        ),
        "Buffer": _basic(
            "Buffer", lambda v: isinstance(v, bytes | bytearray), "is not a Buffer"
        ),
        "ArrayBuffer": _basic(
            "ArrayBuffer", lambda v: isinstance(v, memoryview), "is not an ArrayBuffer"
        ),
    }
    for type_name, (kind, itemsize) in _TYPED_ARRAYS.items():
        registry[type_name] = _basic(
            type_name, _typed_array(kind, itemsize), f"is not a {type_name}"
        )
    return registry


basic_types: Mapping[str, BasicType] = MappingProxyType(_build_registry())
