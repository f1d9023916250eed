"""Type descriptor nodes describing the shape of runtime values."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Final, TypeAlias, dataclass_transform


class _MissingType:
    """Type of the MISSING sentinel."""

    _instance: ClassVar[_MissingType | None] = None

    def __new__(cls) -> _MissingType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


# Stands for an absent value: a key not present in a mapping, or a position
# past the end of a sequence.
MISSING: Final = _MissingType()

Scalar: TypeAlias = str | int | float | bool | None


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class TNode:
    """Base for descriptor nodes."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[TNode]]] = {}

    def __init_subclass__(cls, tag: str | None = None, *, abstract: bool = False) -> None:
        """Register node subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        if abstract:
            return
        cls.tag = tag if tag is not None else cls.__name__.lower().removesuffix("type")

        if (existing := TNode.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        TNode.registry[cls.tag] = cls


class TType(TNode, abstract=True):
    """Node that describes a type."""


class NameType(TType, tag="name"):
    """Reference to a type by name, resolved against the suite when compiled."""

    name: str


class LiteralType(TType, tag="lit"):
    """Exact scalar value: lit("square") → LiteralType(value="square")."""

    value: Scalar


class ArrayType(TType, tag="array"):
    """Homogeneous array: array("number") → ArrayType(element=NameType("number"))."""

    element: TType


class TupleType(TType, tag="tuple"):
    """Fixed-position array; extra trailing elements only fail strict checks."""

    elements: tuple[TType, ...]


class UnionType(TType, tag="union"):
    """Value must satisfy at least one member."""

    members: tuple[TType, ...]


class IntersectionType(TType, tag="intersection"):
    """Value must satisfy every member."""

    members: tuple[TType, ...]


class OptionalType(TType, tag="opt"):
    """Accepts MISSING in addition to the wrapped type."""

    type: TType


class Prop(TNode, tag="prop"):
    """Named property of an interface."""

    name: str
    type: TType
    optional: bool = False


class IfaceType(TType, tag="iface"):
    """Object shape.

    Attributes:
        bases: Names of the interfaces this one extends.
        props: Declared properties, in declaration order.
        index_type: Type every property value must satisfy when the
            interface has an index signature.

    """

    bases: tuple[str, ...] = ()
    props: tuple[Prop, ...] = ()
    index_type: TType | None = None


class EnumType(TType, tag="enum"):
    """Closed set of named scalar values, in declaration order."""

    members: tuple[tuple[str, str | int | float], ...]

    @property
    def values(self) -> tuple[str | int | float, ...]:
        return tuple(value for _, value in self.members)

    def get(self, member: str) -> str | int | float | None:
        return dict(self.members).get(member)

    def __contains__(self, member: object) -> bool:
        return any(name == member for name, _ in self.members)


class EnumLiteralType(TType, tag="enumlit"):
    """Single member of a named enum: enumlit("Direction", "Left")."""

    enum_name: str
    member: str


class Param(TNode, tag="param"):
    """Named function parameter."""

    name: str
    type: TType
    optional: bool = False


class ParamListType(TType, tag="params"):
    """Ordered argument list of a function."""

    params: tuple[Param, ...] = ()


class FuncType(TType, tag="func"):
    """Callable with a parameter list and a result type."""

    params: ParamListType
    result: TType


class BasicType(TType, tag="basic"):
    """Leaf validator for a primitive or native kind."""

    name: str
    predicate: Callable[[Any], bool]
    message: str


TypeSpec: TypeAlias = TType | str | Mapping[Any, Any]
TypeSuite: TypeAlias = Mapping[str, TType]
