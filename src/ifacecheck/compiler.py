"""Compilation of descriptor trees into checker closures.

Each descriptor kind has a compile function that, given the compiler (which
holds the suite and the strict flag), returns a closure
``(value, ctx) -> bool``. Closures record failures on ``ctx`` and return
False on rejection; they never raise for bad values.

Named references compile their target once per compiler. A reference met
while its own target is still being compiled (a recursive type) becomes a
deferred closure that reads the finished checker on first use. Checks that
must call other checkers at compile time (computed optionality probes) run
after the whole reachable graph has been compiled.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from ifacecheck.context import Context, NoopContext
from ifacecheck.errors import SuiteError
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
    ParamListType,
    Scalar,
    TType,
    TupleType,
    TypeSuite,
    UnionType,
)

logger = logging.getLogger(__name__)

CheckerFunc: TypeAlias = Callable[[Any, Context], bool]

# Beyond this many named members, union failure messages stop listing names.
_MAX_NAMES_IN_SUMMARY = 5


class AllowedProps:
    """Property names permitted by strict checks, shared by the members of
    an intersection and by an interface and its bases."""

    def __init__(self) -> None:
        self.names: set[str] = set()
        # Set when some member has an index signature: any name is allowed.
        self.open = False

    def allows(self, key: Any) -> bool:
        return self.open or key in self.names


class CheckerCompiler:
    """Compiles descriptors against one suite with one strictness."""

    def __init__(self, suite: TypeSuite, *, strict: bool) -> None:
        self.suite = suite
        self.strict = strict
        self._named: dict[str, list[CheckerFunc]] = {}
        self._probes: list[Callable[[], None]] = []
        # Names being compiled inline (bases, intersection members) since the
        # last property or element boundary.
        self._inline: set[str] = set()

    def compile(self, ttype: TType) -> CheckerFunc:
        """Compile a descriptor tree into a checker closure.

        Raises:
            SuiteError: If the tree references unknown types or enum members

        """
        checker = self.compile_node(ttype)
        probes, self._probes = self._probes, []
        for probe in probes:
            probe()
        logger.debug(
            "Compiled %s checker for %s (%d named types)",
            "strict" if self.strict else "plain",
            type(ttype).__name__,
            len(self._named),
        )
        return checker

    def compile_node(self, ttype: TType, allowed: AllowedProps | None = None) -> CheckerFunc:
        compile_fn = _COMPILERS.get(type(ttype))
        if compile_fn is None:
            msg = f"Cannot compile a checker for {type(ttype).__name__}"
            raise SuiteError(msg)
        if allowed is not None:
            return compile_fn(self, ttype, allowed)
        saved, self._inline = self._inline, set()
        try:
            return compile_fn(self, ttype, None)
        finally:
            self._inline = saved

    def resolve(self, type_name: str) -> TType:
        ttype = self.suite.get(type_name)
        if ttype is None:
            msg = f"Unknown type {type_name}"
            raise SuiteError(msg)
        return ttype

    def compile_named(self, type_name: str, target: TType) -> CheckerFunc:
        """Compile a named target once, deferring recursive references."""
        cell = self._named.get(type_name)
        if cell is None:
            cell = self._named[type_name] = []
            cell.append(self.compile_node(target))
            return cell[0]
        if cell:
            return cell[0]
        logger.debug("Deferring recursive reference to %s", type_name)
        return lambda value, ctx: cell[0](value, ctx)

    def compile_inline(self, type_name: str, allowed: AllowedProps) -> CheckerFunc:
        """Compile a named target sharing the caller's allowed properties."""
        target = self.resolve(type_name)
        if type_name in self._inline:
            msg = f"Type {type_name} extends or includes itself"
            raise SuiteError(msg)
        self._inline.add(type_name)
        try:
            return self.compile_node(target, allowed)
        finally:
            self._inline.discard(type_name)

    def add_probe(self, probe: Callable[[], None]) -> None:
        self._probes.append(probe)


def accepts_missing(checker: CheckerFunc) -> bool:
    """Whether a checker accepts an absent value on its own."""
    return checker(MISSING, NoopContext())


def _is_array(value: Any) -> bool:
    return isinstance(value, list | tuple)


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _literal_matcher(expected: Scalar) -> Callable[[Any], bool]:
    # True == 1 in Python; literals compare by kind first.
    if expected is None or isinstance(expected, bool):
        return lambda v: v is expected
    if isinstance(expected, str):
        return lambda v: isinstance(v, str) and v == expected
    return lambda v: _is_number(v) and v == expected


def literal_name(value: Scalar) -> str:
    return json.dumps(value)


# =============================================================================
# Compile functions: (compiler, node, allowed) -> CheckerFunc
# =============================================================================


def _compile_name(
    c: CheckerCompiler, t: NameType, allowed: AllowedProps | None
) -> CheckerFunc:
    target = c.resolve(t.name)
    if allowed is not None:
        checker = c.compile_inline(t.name, allowed)
    else:
        checker = c.compile_named(t.name, target)
    if isinstance(target, BasicType | NameType):
        return checker

    fail_msg = f"is not a {t.name}"

    def check_named(value: Any, ctx: Context) -> bool:
        return checker(value, ctx) or ctx.fail(None, fail_msg, 0)

    return check_named


def _compile_literal(
    c: CheckerCompiler, t: LiteralType, allowed: AllowedProps | None
) -> CheckerFunc:
    matches = _literal_matcher(t.value)
    fail_msg = f"is not {literal_name(t.value)}"

    def check_literal(value: Any, ctx: Context) -> bool:
        return matches(value) or ctx.fail(None, fail_msg, -1)

    return check_literal


def _compile_array(
    c: CheckerCompiler, t: ArrayType, allowed: AllowedProps | None
) -> CheckerFunc:
    item_checker = c.compile_node(t.element)

    def check_array(value: Any, ctx: Context) -> bool:
        if not _is_array(value):
            return ctx.fail(None, "is not an array", 0)
        for i, item in enumerate(value):
            if not item_checker(item, ctx):
                return ctx.fail(i, None, 1)
        return True

    return check_array


def _compile_tuple(
    c: CheckerCompiler, t: TupleType, allowed: AllowedProps | None
) -> CheckerFunc:
    item_checkers = [c.compile_node(e) for e in t.elements]
    size = len(item_checkers)
    strict = c.strict

    def check_tuple(value: Any, ctx: Context) -> bool:
        if not _is_array(value):
            return ctx.fail(None, "is not an array", 0)
        length = len(value)
        for i, item_checker in enumerate(item_checkers):
            item = value[i] if i < length else MISSING
            if not item_checker(item, ctx):
                return ctx.fail(i, None, 1)
        if strict and length > size:
            return ctx.fail(size, "is extraneous", 2)
        return True

    return check_tuple


def _union_summary(members: tuple[TType, ...]) -> str:
    names: list[str] = []
    for m in members:
        if isinstance(m, NameType):
            names.append(m.name)
        elif isinstance(m, LiteralType):
            names.append(literal_name(m.value))
        elif isinstance(m, EnumLiteralType):
            names.append(f"{m.enum_name}.{m.member}")
    if not names:
        return f"{len(members)} types"
    shown = names[:_MAX_NAMES_IN_SUMMARY]
    others = len(members) - len(shown)
    if others > 0:
        shown.append(f"{others} more")
    return ", ".join(shown)


def _compile_union(
    c: CheckerCompiler, t: UnionType, allowed: AllowedProps | None
) -> CheckerFunc:
    if not t.members:
        msg = "Union must have at least one member"
        raise SuiteError(msg)
    member_checkers = [c.compile_node(m, allowed) for m in t.members]
    fail_msg = f"is none of {_union_summary(t.members)}"

    def check_union(value: Any, ctx: Context) -> bool:
        resolver = ctx.union_resolver()
        for member_checker in member_checkers:
            if member_checker(value, resolver.create_context()):
                return True
        ctx.resolve_union(resolver)
        return ctx.fail(None, fail_msg, 0)

    return check_union


def _compile_intersection(
    c: CheckerCompiler, t: IntersectionType, allowed: AllowedProps | None
) -> CheckerFunc:
    if not t.members:
        msg = "Intersection must have at least one member"
        raise SuiteError(msg)
    shared = allowed if allowed is not None else AllowedProps()
    member_checkers = [c.compile_node(m, shared) for m in t.members]

    def check_intersection(value: Any, ctx: Context) -> bool:
        return all(member_checker(value, ctx) for member_checker in member_checkers)

    return check_intersection


def _compile_iface(
    c: CheckerCompiler, t: IfaceType, allowed: AllowedProps | None
) -> CheckerFunc:
    scope = allowed if allowed is not None else AllowedProps()
    scope.names.update(p.name for p in t.props)
    if t.index_type is not None:
        scope.open = True

    base_checkers = [c.compile_inline(b, scope) for b in t.bases]
    props = t.props
    prop_checkers = [c.compile_node(p.type) for p in props]
    index_checker = c.compile_node(t.index_type) if t.index_type is not None else None
    check_extraneous = c.strict and t.index_type is None

    # Declared flags first; refined once every reachable checker exists.
    required = [not p.optional for p in props]

    def probe_required() -> None:
        for i, prop_checker in enumerate(prop_checkers):
            if required[i] and accepts_missing(prop_checker):
                required[i] = False

    c.add_probe(probe_required)

    def check_iface(value: Any, ctx: Context) -> bool:
        if not isinstance(value, Mapping):
            return ctx.fail(None, "is not an object", 0)
        for base_checker in base_checkers:
            if not base_checker(value, ctx):
                return False
        for i, prop in enumerate(props):
            item = value.get(prop.name, MISSING)
            if item is MISSING:
                if required[i]:
                    ctx.fork().fail(prop.name, "is missing", 1)
            else:
                prop_ctx = ctx.fork()
                if not prop_checkers[i](item, prop_ctx):
                    prop_ctx.fail(prop.name, None, 1)
            if not ctx.complete_fork():
                return False
        if index_checker is not None:
            for key, item in value.items():
                key_ctx = ctx.fork()
                if not index_checker(item, key_ctx):
                    key_ctx.fail(key, None, 1)
                if not ctx.complete_fork():
                    return False
        if ctx.failed():
            return False
        if check_extraneous:
            for key in value:
                if not scope.allows(key):
                    return ctx.fail(key, "is extraneous", 2)
        return True

    return check_iface


def _compile_optional(
    c: CheckerCompiler, t: OptionalType, allowed: AllowedProps | None
) -> CheckerFunc:
    inner = c.compile_node(t.type, allowed)

    def check_optional(value: Any, ctx: Context) -> bool:
        return value is MISSING or inner(value, ctx)

    return check_optional


def _compile_enum(
    c: CheckerCompiler, t: EnumType, allowed: AllowedProps | None
) -> CheckerFunc:
    strings = frozenset(v for v in t.values if isinstance(v, str))
    numbers = frozenset(v for v in t.values if _is_number(v))

    def check_enum(value: Any, ctx: Context) -> bool:
        if isinstance(value, str):
            ok = value in strings
        else:
            ok = _is_number(value) and value in numbers
        return ok or ctx.fail(None, "is not a valid enum value", 0)

    return check_enum


def _compile_enum_literal(
    c: CheckerCompiler, t: EnumLiteralType, allowed: AllowedProps | None
) -> CheckerFunc:
    enum = c.resolve(t.enum_name)
    if not isinstance(enum, EnumType):
        msg = f"Type {t.enum_name} used in enumlit is not an enum type"
        raise SuiteError(msg)
    if t.member not in enum:
        msg = f"Unknown value {t.enum_name}.{t.member} used in enumlit"
        raise SuiteError(msg)
    matches = _literal_matcher(enum.get(t.member))
    fail_msg = f"is not {t.enum_name}.{t.member}"

    def check_enum_literal(value: Any, ctx: Context) -> bool:
        return matches(value) or ctx.fail(None, fail_msg, -1)

    return check_enum_literal


def _compile_func(
    c: CheckerCompiler, t: FuncType, allowed: AllowedProps | None
) -> CheckerFunc:
    # Arguments and results are checked through Checker.get_args()/get_result().
    def check_func(value: Any, ctx: Context) -> bool:
        return callable(value) or ctx.fail(None, "is not a function", 0)

    return check_func


def _compile_param_list(
    c: CheckerCompiler, t: ParamListType, allowed: AllowedProps | None
) -> CheckerFunc:
    params = t.params
    param_checkers = [c.compile_node(p.type) for p in params]
    size = len(param_checkers)
    strict = c.strict
    required = [not p.optional for p in params]

    def probe_required() -> None:
        for i, param_checker in enumerate(param_checkers):
            if required[i] and accepts_missing(param_checker):
                required[i] = False

    c.add_probe(probe_required)

    def check_params(value: Any, ctx: Context) -> bool:
        if not _is_array(value):
            return ctx.fail(None, "is not an array", 0)
        length = len(value)
        for i, param in enumerate(params):
            item = value[i] if i < length else MISSING
            if item is MISSING:
                if required[i]:
                    ctx.fork().fail(param.name, "is missing", 1)
            else:
                param_ctx = ctx.fork()
                if not param_checkers[i](item, param_ctx):
                    param_ctx.fail(param.name, None, 1)
            if not ctx.complete_fork():
                return False
        if ctx.failed():
            return False
        if strict and length > size:
            return ctx.fail(size, "is extraneous", 2)
        return True

    return check_params


def _compile_basic(
    c: CheckerCompiler, t: BasicType, allowed: AllowedProps | None
) -> CheckerFunc:
    predicate = t.predicate
    fail_msg = t.message

    def check_basic(value: Any, ctx: Context) -> bool:
        return bool(predicate(value)) or ctx.fail(None, fail_msg, 0)

    return check_basic


CompileFunc: TypeAlias = Callable[[CheckerCompiler, Any, AllowedProps | None], CheckerFunc]

_COMPILERS: dict[type[TType], CompileFunc] = {
    NameType: _compile_name,
    LiteralType: _compile_literal,
    ArrayType: _compile_array,
    TupleType: _compile_tuple,
    UnionType: _compile_union,
    IntersectionType: _compile_intersection,
    IfaceType: _compile_iface,
    OptionalType: _compile_optional,
    EnumType: _compile_enum,
    EnumLiteralType: _compile_enum_literal,
    FuncType: _compile_func,
    ParamListType: _compile_param_list,
    BasicType: _compile_basic,
}


def compiled_kinds() -> frozenset[type[TType]]:
    """Descriptor kinds the compiler can handle."""
    return frozenset(_COMPILERS)
