"""Helpers for writing descriptor trees concisely.

A type spec is either a TType, a string (shorthand for a named reference) or
a plain mapping (shorthand for an anonymous interface with no bases):

    import ifacecheck.builders as t

    suite = {
        "ICacheItem": t.iface([], {
            "key": "string",
            "value": "any",
            "size": "number",
            "tag?": "string",
        }),
        "Shape": t.union("Square", "Rectangle", "Circle"),
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Final

from ifacecheck.errors import SuiteError
from ifacecheck.types import (
    ArrayType,
    EnumLiteralType,
    EnumType,
    FuncType,
    IfaceType,
    IntersectionType,
    LiteralType,
    NameType,
    OptionalType,
    Param,
    ParamListType,
    Prop,
    Scalar,
    TType,
    TupleType,
    TypeSpec,
    UnionType,
)


class _IndexKey:
    def __repr__(self) -> str:
        return "INDEX_KEY"


# Key of a property mapping entry that declares an index signature:
#   t.iface([], {INDEX_KEY: "number"})  ~  {[key: string]: number}
INDEX_KEY: Final = _IndexKey()

_OPTIONAL_SUFFIX = "?"


def parse_spec(spec: TypeSpec) -> TType:
    """Turn a type spec into a TType node.

    Raises:
        SuiteError: If the spec is neither a TType, a string nor a mapping

    """
    if isinstance(spec, TType):
        return spec
    if isinstance(spec, str):
        return NameType(name=spec)
    if isinstance(spec, Mapping):
        return iface([], spec)
    msg = f"Cannot build a type from {spec!r}"
    raise SuiteError(msg)


def name(value: str) -> NameType:
    """Reference a built-in or suite type by name."""
    return NameType(name=value)


def lit(value: Scalar) -> LiteralType:
    """Exact literal value, e.g. lit("hello") or lit(123)."""
    return LiteralType(value=value)


def array(spec: TypeSpec) -> ArrayType:
    return ArrayType(element=parse_spec(spec))


def tuple_(*specs: TypeSpec) -> TupleType:
    return TupleType(elements=tuple(parse_spec(s) for s in specs))


def union(*specs: TypeSpec) -> UnionType:
    return UnionType(members=tuple(parse_spec(s) for s in specs))


def intersection(*specs: TypeSpec) -> IntersectionType:
    return IntersectionType(members=tuple(parse_spec(s) for s in specs))


def opt(spec: TypeSpec) -> OptionalType:
    """Mark a property, parameter or tuple element as optional."""
    return OptionalType(type=parse_spec(spec))


def prop(prop_name: str, spec: TypeSpec, optional: bool = False) -> Prop:
    return Prop(name=prop_name, type=parse_spec(spec), optional=optional)


def _make_prop(key: str, spec: TypeSpec) -> Prop:
    optional = False
    if key.endswith(_OPTIONAL_SUFFIX):
        key = key.removesuffix(_OPTIONAL_SUFFIX)
        optional = True
    if isinstance(spec, OptionalType):
        return Prop(name=key, type=spec.type, optional=True)
    return Prop(name=key, type=parse_spec(spec), optional=optional)


def iface(
    bases: Iterable[str],
    props: Mapping[str | _IndexKey, TypeSpec] | Iterable[Prop],
) -> IfaceType:
    """Define an interface.

    Args:
        bases: Names of the interfaces it extends
        props: Mapping of property name to type spec, or a sequence of Prop
            nodes. A key ending in "?" or a value wrapped in opt() declares an
            optional property; the INDEX_KEY entry declares an index signature.

    Returns:
        The IfaceType node

    """
    index_type: TType | None = None
    built: list[Prop] = []
    if isinstance(props, Mapping):
        for key, spec in props.items():
            if key is INDEX_KEY:
                index_type = parse_spec(spec)
            else:
                built.append(_make_prop(key, spec))
    else:
        built.extend(props)
    return IfaceType(bases=tuple(bases), props=tuple(built), index_type=index_type)


def param(param_name: str, spec: TypeSpec, optional: bool = False) -> Param:
    if isinstance(spec, OptionalType):
        return Param(name=param_name, type=spec.type, optional=True)
    return Param(name=param_name, type=parse_spec(spec), optional=optional)


def func(result: TypeSpec, *params: Param) -> FuncType:
    """Define a function: func("string", param("name", "string"))."""
    return FuncType(params=ParamListType(params=params), result=parse_spec(result))


def enumtype(members: Mapping[str, str | int | float]) -> EnumType:
    return EnumType(members=tuple(members.items()))


def enumlit(enum_name: str, member: str) -> EnumLiteralType:
    """Pin a type to a single member of a named enum."""
    return EnumLiteralType(enum_name=enum_name, member=member)
