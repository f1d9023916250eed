"""Error types raised while building and running checkers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

_NESTED_INDENT = "    "


class SuiteError(ValueError):
    """A suite cannot be compiled: unknown names, bad enum literals, bad specs."""


@dataclass(frozen=True)
class ErrorDetail:
    """One failure, with the failures found beneath it."""

    path: str
    message: str
    nested: tuple[ErrorDetail, ...] = ()

    def __str__(self) -> str:
        return _format_detail(self, "")


def _format_detail(detail: ErrorDetail, indent: str) -> str:
    # A single nested failure continues the sentence; several are listed
    # on their own lines, one level deeper.
    text = f"{detail.path} {detail.message}"
    if len(detail.nested) == 1:
        return f"{text}; {_format_detail(detail.nested[0], indent)}"
    child_indent = indent + _NESTED_INDENT
    for child in detail.nested:
        text += f"\n{child_indent}{_format_detail(child, child_indent)}"
    return text


def format_details(details: Sequence[ErrorDetail]) -> str:
    """Render failures as text, one top-level failure per line."""
    return "\n".join(_format_detail(d, "") for d in details)


class ValidationError(ValueError):
    """Value does not conform to its type.

    Attributes:
        path: Path of the first offending location, e.g. "value.spam.foo"
        message: Message recorded at that location, e.g. "is missing"
        details: Full tree of failures

    """

    def __init__(self, path: str, message: str, details: Sequence[ErrorDetail] = ()) -> None:
        self.path = path
        self.message = message
        self.details = tuple(details)
        super().__init__(format_details(self.details) or f"{path} {message}")

    @classmethod
    def from_details(cls, root_path: str, details: Sequence[ErrorDetail]) -> ValidationError:
        """Build an error pointing at the first leaf of the failure tree."""
        if not details:
            return cls(root_path, "is invalid")
        first = details[0]
        while first.nested:
            first = first.nested[0]
        return cls(first.path, first.message, details)
