"""Tests for ifacecheck.types and ifacecheck.builders."""

import dataclasses

import pytest

import ifacecheck.builders as t
from ifacecheck.builders import INDEX_KEY
from ifacecheck.compiler import compiled_kinds
from ifacecheck.errors import SuiteError
from ifacecheck.types import (
    MISSING,
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
    TNode,
    TType,
    TupleType,
    UnionType,
)


class TestMissing:
    """Test the MISSING sentinel."""

    def test_singleton(self) -> None:
        """Test that MISSING has a single instance."""
        assert type(MISSING)() is MISSING

    def test_falsy_and_repr(self) -> None:
        """Test the truth value and repr of MISSING."""
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_distinct_from_none(self) -> None:
        """Test that MISSING is not None."""
        assert MISSING is not None


class TestNodeRegistry:
    """Test tag registration of descriptor nodes."""

    def test_tags(self) -> None:
        """Test the tag of each node kind."""
        assert NameType.tag == "name"
        assert LiteralType.tag == "lit"
        assert ArrayType.tag == "array"
        assert TupleType.tag == "tuple"
        assert UnionType.tag == "union"
        assert IntersectionType.tag == "intersection"
        assert OptionalType.tag == "opt"
        assert IfaceType.tag == "iface"
        assert EnumType.tag == "enum"
        assert EnumLiteralType.tag == "enumlit"
        assert FuncType.tag == "func"
        assert ParamListType.tag == "params"
        assert Prop.tag == "prop"
        assert Param.tag == "param"

    def test_registry_lookup(self) -> None:
        """Test looking up node classes by tag."""
        assert TNode.registry["iface"] is IfaceType
        assert TNode.registry["enumlit"] is EnumLiteralType

    def test_duplicate_tag_rejected(self) -> None:
        """Test that a second class cannot claim an existing tag."""
        with pytest.raises(ValueError, match="already registered"):

            class Impostor(TType, tag="iface"):
                pass

    def test_every_type_kind_compiles(self) -> None:
        """Test that the compiler covers every registered type kind."""
        type_kinds = {
            cls for cls in TNode.registry.values() if issubclass(cls, TType)
        }
        assert type_kinds <= compiled_kinds()

    def test_nodes_are_frozen(self) -> None:
        """Test that nodes are immutable."""
        node = NameType(name="number")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.name = "string"  # type: ignore[misc]

    def test_nodes_compare_by_value(self) -> None:
        """Test that equal trees compare and hash equal."""
        assert t.union("string", t.lit(3)) == t.union("string", t.lit(3))
        assert hash(t.array("number")) == hash(t.array("number"))


class TestEnumType:
    """Test EnumType member lookup."""

    def test_values_in_order(self) -> None:
        """Test that enum values keep declaration order."""
        enum = t.enumtype({"Up": 1, "Down": 2, "Left": 17})
        assert enum.values == (1, 2, 17)

    def test_get_and_contains(self) -> None:
        """Test enum member lookup."""
        enum = t.enumtype({"No": 0, "Yes": "YES"})
        assert "Yes" in enum
        assert "Maybe" not in enum
        assert enum.get("Yes") == "YES"
        assert enum.get("No") == 0
        assert enum.get("Maybe") is None


class TestParseSpec:
    """Test the type spec shorthands."""

    def test_string_is_name(self) -> None:
        """Test that a string spec is a named reference."""
        assert t.parse_spec("number") == NameType(name="number")

    def test_ttype_passes_through(self) -> None:
        """Test that a node spec is returned unchanged."""
        node = t.lit("foo")
        assert t.parse_spec(node) is node

    def test_mapping_is_anonymous_iface(self) -> None:
        """Test that a mapping spec is an anonymous interface."""
        node = t.parse_spec({"foo": "string"})
        assert node == IfaceType(props=(Prop(name="foo", type=NameType(name="string")),))

    @pytest.mark.parametrize("spec", [17, None, ["string"], 4.5])
    def test_rejects_other_values(self, spec) -> None:
        """Test that other values are not type specs."""
        with pytest.raises(SuiteError, match="Cannot build a type"):
            t.parse_spec(spec)


class TestBuilders:
    """Test the builder functions."""

    def test_lit(self) -> None:
        """Test building literals."""
        assert t.lit("square") == LiteralType(value="square")
        assert t.lit(None).value is None

    def test_array(self) -> None:
        """Test building arrays."""
        assert t.array("string") == ArrayType(element=NameType(name="string"))

    def test_tuple(self) -> None:
        """Test building tuples."""
        node = t.tuple_("string", "number")
        assert node.elements == (NameType(name="string"), NameType(name="number"))

    def test_union_and_intersection(self) -> None:
        """Test building unions and intersections."""
        assert t.union("A", "B").members == (NameType(name="A"), NameType(name="B"))
        assert t.intersection("A", "B").members == (NameType(name="A"), NameType(name="B"))

    def test_opt(self) -> None:
        """Test building optional types."""
        assert t.opt("string") == OptionalType(type=NameType(name="string"))

    def test_iface_props_in_order(self) -> None:
        """Test that interface properties keep declaration order."""
        node = t.iface(["Base"], {"b": "number", "a": "string"})
        assert node.bases == ("Base",)
        assert [p.name for p in node.props] == ["b", "a"]
        assert node.index_type is None

    def test_optional_suffix_equals_opt(self) -> None:
        """Test that "name?" and opt() declare the same property."""
        by_suffix = t.iface([], {"tag?": "string"})
        by_wrapper = t.iface([], {"tag": t.opt("string")})
        assert by_suffix == by_wrapper
        assert by_suffix.props[0] == Prop(
            name="tag", type=NameType(name="string"), optional=True
        )

    def test_iface_from_props(self) -> None:
        """Test building an interface from Prop nodes."""
        node = t.iface([], [t.prop("x", "number"), t.prop("y", "number", True)])
        assert [p.optional for p in node.props] == [False, True]

    def test_index_signature(self) -> None:
        """Test declaring an index signature."""
        node = t.iface([], {INDEX_KEY: "number", "name": "string"})
        assert node.index_type == NameType(name="number")
        assert [p.name for p in node.props] == ["name"]

    def test_param(self) -> None:
        """Test building parameters."""
        assert t.param("a", "number") == Param(name="a", type=NameType(name="number"))
        assert t.param("b", "string", True).optional
        assert t.param("c", t.opt("string")) == Param(
            name="c", type=NameType(name="string"), optional=True
        )

    def test_func(self) -> None:
        """Test building a function type."""
        node = t.func("string", t.param("a", "number"))
        assert node.result == NameType(name="string")
        assert node.params == ParamListType(params=(Param(name="a", type=NameType(name="number")),))

    def test_func_without_params(self) -> None:
        """Test a function type with no parameters."""
        assert t.func("void").params == ParamListType()

    def test_enumlit(self) -> None:
        """Test building an enum literal."""
        assert t.enumlit("Direction", "Up") == EnumLiteralType(enum_name="Direction", member="Up")

    def test_builders_do_not_mutate_inputs(self) -> None:
        """Test that builders leave their inputs unchanged."""
        props = {"a": "string", "b?": "number"}
        first = t.iface([], props)
        second = t.iface([], props)
        assert props == {"a": "string", "b?": "number"}
        assert first == second
