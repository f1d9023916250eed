"""Shared type suites for the checker tests."""

import pytest

import ifacecheck.builders as t
from ifacecheck.types import TType


@pytest.fixture
def sample() -> dict[str, TType]:
    """Cache-flavoured suite covering most descriptor kinds."""
    return {
        "ICacheItem": t.iface([], {
            "key": "string",
            "value": "any",
            "size": "number",
            "tag": t.opt("string"),
        }),
        "ILRUCache": t.iface([], {
            "capacity": "number",
            "set": t.func(
                "boolean",
                t.param("item", "ICacheItem"),
                t.param("overwrite", "boolean", True),
            ),
            "get": t.func("ICacheItem", t.param("key", "string")),
        }),
        "MyType": t.union("boolean", "number", "ILRUCache"),
        "NumberAlias": t.name("number"),
        "NumberAlias2": t.name("NumberAlias"),
        "ISampling": t.iface(["ICacheItem"], {
            "xstring": "string",
            "xnumber2?": "number",
            "xnull": "null",
            "xMyType": "MyType",
            "xarray": t.array("string"),
            "xtuple": t.tuple_("string", "number"),
            "xunion": t.union("number", "null"),
            "xiface": {"foo": "string", "bar": "number"},
            "xliteral": t.union(t.lit("foo"), t.lit('ba"r'), t.lit(3)),
            "xfunc": t.func("number", t.param("price", "number")),
        }),
        "Direction": t.enumtype({"Up": 1, "Down": 2, "Left": 17, "Right": 18}),
        "DirectionStr": t.enumtype({
            "Up": "UP",
            "Down": "DOWN",
            "Left": "LEFT",
            "Right": "RIGHT",
        }),
        "BooleanLikeHeterogeneousEnum": t.enumtype({"No": 0, "Yes": "YES"}),
        "EnumComputed": t.enumtype({"Read": 2, "Write": 4, "ReadWrite": 6, "G": 16}),
    }


@pytest.fixture
def shapes() -> dict[str, TType]:
    """Literal-discriminated union of shapes."""
    return {
        "Square": t.iface([], {"kind": t.lit("square"), "size": "number"}),
        "Rectangle": t.iface([], {
            "kind": t.lit("rectangle"),
            "width": "number",
            "height": "number",
        }),
        "Circle": t.iface([], {"kind": t.lit("circle"), "radius": "number"}),
        "Shape": t.union("Square", "Rectangle", "Circle"),
    }


@pytest.fixture
def enum_shapes() -> dict[str, TType]:
    """Enum-discriminated shapes extending a common base."""
    return {
        "ShapeKind": t.enumtype({"Square": 0, "Rectangle": 1, "Circle": 2}),
        "Shape": t.iface([], {"kind": "ShapeKind"}),
        "Square": t.iface(["Shape"], {
            "kind": t.enumlit("ShapeKind", "Square"),
            "size": "number",
        }),
        "Rectangle": t.iface(["Shape"], {
            "kind": t.enumlit("ShapeKind", "Rectangle"),
            "width": "number",
            "height": "number",
        }),
        "Circle": t.iface(["Shape"], {
            "kind": t.enumlit("ShapeKind", "Circle"),
            "radius": "number",
        }),
    }


@pytest.fixture
def vehicles() -> dict[str, TType]:
    """Intersections of small interfaces."""
    return {
        "Wheels": t.iface([], {"numWheels": "number"}),
        "Doors": t.iface([], {"numDoors": "number"}),
        "Car": t.intersection("Wheels", "Doors"),
        "House": t.intersection("Doors", t.iface([], {"numRooms": "number"})),
    }


@pytest.fixture
def greeter() -> dict[str, TType]:
    return {
        "Greeter": t.iface([], {"greet": t.func("string", t.param("name", "string"))}),
    }
