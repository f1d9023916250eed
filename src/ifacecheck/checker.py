"""Public checkers built from type suites.

Example usage:
    import ifacecheck.builders as t
    from ifacecheck import create_checkers

    checkers = create_checkers({
        "ICacheItem": t.iface([], {
            "key": "string",
            "value": "any",
            "size": "number",
            "tag?": "string",
        }),
    })
    checkers["ICacheItem"].check({"key": "foo", "value": {}, "size": 17})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ifacecheck.basic import basic_types
from ifacecheck.compiler import CheckerCompiler
from ifacecheck.context import DetailContext, NoopContext
from ifacecheck.types import FuncType, IfaceType, Prop

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ifacecheck.compiler import CheckerFunc
    from ifacecheck.errors import ErrorDetail
    from ifacecheck.types import TType, TypeSuite

logger = logging.getLogger(__name__)

DEFAULT_REPORTED_PATH = "value"


def create_checkers(*suites: TypeSuite) -> dict[str, Checker]:
    """Compile a Checker for every type declared by the given suites.

    Names resolve against the basic types plus all suites merged in
    argument order, so a later suite overrides an earlier one.

    Args:
        suites: Mappings of type name to descriptor

    Returns:
        Mapping of type name to Checker

    Raises:
        SuiteError: If any type references an unknown name or enum member

    """
    full_suite: dict[str, TType] = dict(basic_types)
    for suite in suites:
        full_suite.update(suite)

    checkers: dict[str, Checker] = {}
    for suite in suites:
        for type_name in suite:
            checkers[type_name] = Checker(full_suite, full_suite[type_name])
    logger.debug("Created %d checkers from %d suite(s)", len(checkers), len(suites))
    return checkers


class Checker:
    """Validator for one type, with plain and strict variants.

    Plain checks ignore unknown properties; strict checks also reject
    properties and tuple elements the type does not declare. Both run a fast
    pass first and only build error details when the value is invalid.
    """

    def __init__(self, suite: TypeSuite, ttype: TType) -> None:
        self._suite = suite
        self._type = ttype
        self._path = DEFAULT_REPORTED_PATH
        self._checker_plain = CheckerCompiler(suite, strict=False).compile(ttype)
        self._checker_strict = CheckerCompiler(suite, strict=True).compile(ttype)

    def set_reported_path(self, path: str) -> None:
        """Set the name the checked value is reported under (default "value")."""
        self._path = path

    def check(self, value: Any) -> None:
        """Raise ValidationError unless value satisfies this type."""
        self._do_check(self._checker_plain, value)

    def test(self, value: Any) -> bool:
        """Return whether value satisfies this type, without building messages."""
        return self._checker_plain(value, NoopContext())

    def validate(self, value: Any) -> list[ErrorDetail]:
        """Return the failures of value, or an empty list if it is valid."""
        return self._do_validate(self._checker_plain, value)

    def strict_check(self, value: Any) -> None:
        """Like check(), also rejecting undeclared properties and elements.

        Strict checks are not forward compatible: data produced by a newer
        version of a type fails them. Prefer check() for such data.
        """
        self._do_check(self._checker_strict, value)

    def strict_test(self, value: Any) -> bool:
        return self._checker_strict(value, NoopContext())

    def strict_validate(self, value: Any) -> list[ErrorDetail]:
        return self._do_validate(self._checker_strict, value)

    def get_prop(self, prop_name: str) -> Checker:
        """Return a Checker for the type of a property of this interface.

        Raises:
            KeyError: If the interface has no such property

        """
        return Checker(self._suite, self._get_prop(prop_name).type)

    def method_args(self, method_name: str) -> Checker:
        """Return a Checker for the argument list of a method of this interface.

        For an interface with ``find(s: string, pos?: number): number``,
        ``method_args("find")`` accepts ``["foo"]`` and ``["foo", 3]`` but
        not ``[17]``.
        """
        return Checker(self._suite, self._get_method(method_name).params)

    def method_result(self, method_name: str) -> Checker:
        return Checker(self._suite, self._get_method(method_name).result)

    def get_args(self) -> Checker:
        """Return a Checker for the argument list of this function type.

        Raises:
            TypeError: If this checker is not for a function type

        """
        return Checker(self._suite, self._get_func("get_args").params)

    def get_result(self) -> Checker:
        return Checker(self._suite, self._get_func("get_result").result)

    def get_type(self) -> TType:
        return self._type

    def _do_check(self, checker: CheckerFunc, value: Any) -> None:
        if checker(value, NoopContext()):
            return
        ctx = DetailContext()
        checker(value, ctx)
        raise ctx.get_error(self._path)

    def _do_validate(self, checker: CheckerFunc, value: Any) -> list[ErrorDetail]:
        if checker(value, NoopContext()):
            return []
        ctx = DetailContext()
        checker(value, ctx)
        return ctx.get_error_details(self._path)

    def _iter_props(self, ttype: TType | None, seen: set[str]) -> Iterator[Prop]:
        if not isinstance(ttype, IfaceType):
            return
        yield from ttype.props
        for base in ttype.bases:
            if base not in seen:
                seen.add(base)
                yield from self._iter_props(self._suite.get(base), seen)

    def _get_prop(self, prop_name: str) -> Prop:
        for prop in self._iter_props(self._type, set()):
            if prop.name == prop_name:
                return prop
        msg = f"Type has no property {prop_name}"
        raise KeyError(msg)

    def _get_method(self, method_name: str) -> FuncType:
        ttype = self._get_prop(method_name).type
        if not isinstance(ttype, FuncType):
            msg = f"Property {method_name} is not a method"
            raise TypeError(msg)
        return ttype

    def _get_func(self, operation: str) -> FuncType:
        if not isinstance(self._type, FuncType):
            msg = f"{operation}() applied to non-function"
            raise TypeError(msg)
        return self._type
