"""ifacecheck - Runtime validation of data against interface-style type descriptors."""

from ifacecheck.basic import basic_types
from ifacecheck.builders import (
    INDEX_KEY,
    array,
    enumlit,
    enumtype,
    func,
    iface,
    intersection,
    lit,
    name,
    opt,
    param,
    parse_spec,
    prop,
    tuple_,
    union,
)
from ifacecheck.checker import Checker, create_checkers
from ifacecheck.context import Context, DetailContext, NoopContext
from ifacecheck.errors import ErrorDetail, SuiteError, ValidationError
from ifacecheck.serialization import from_dict, from_json, to_dict, to_json
from ifacecheck.types import (
    MISSING,
    ArrayType,
    BasicType,
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

__all__ = [
    # Builders
    "INDEX_KEY",
    # Sentinel for absent values
    "MISSING",
    # Descriptor nodes
    "ArrayType",
    "BasicType",
    # Checkers
    "Checker",
    # Contexts
    "Context",
    "DetailContext",
    "EnumLiteralType",
    "EnumType",
    # Errors
    "ErrorDetail",
    "FuncType",
    "IfaceType",
    "IntersectionType",
    "LiteralType",
    "NameType",
    "NoopContext",
    "OptionalType",
    "Param",
    "ParamListType",
    "Prop",
    "SuiteError",
    "TNode",
    "TType",
    "TupleType",
    "UnionType",
    "ValidationError",
    "array",
    "basic_types",
    "create_checkers",
    "enumlit",
    "enumtype",
    # Serialization
    "from_dict",
    "from_json",
    "func",
    "iface",
    "intersection",
    "lit",
    "name",
    "opt",
    "param",
    "parse_spec",
    "prop",
    "to_dict",
    "to_json",
    "tuple_",
    "union",
]
