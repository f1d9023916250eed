"""Validation contexts: where checkers record why a value failed.

Checkers run a value twice only when it is invalid. The first pass uses a
NoopContext, which only remembers that something failed. If that pass
rejects the value, a second pass with a DetailContext records paths,
messages and scores so a readable error can be built.

Scores rank the members of a failed union: the member whose failure has the
highest total score is the one reported. Scores are a heuristic for "which
branch did the author mean", not a proof of intent. The conventions are:

    -1  literal mismatch (weak: most union branches mismatch some literal)
     0  wrong type at this exact position
     1  missing property, or a bad value one level down
     2  extraneous property or tuple element
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, TypeAlias

from ifacecheck.errors import ErrorDetail, ValidationError

PathSegment: TypeAlias = str | int | None


class UnionResolver(ABC):
    """Hands out one fresh context per attempted union member."""

    __slots__ = ()

    @abstractmethod
    def create_context(self) -> Context: ...


class Context(ABC):
    """Accumulator for one top-level validation call."""

    __slots__ = ()

    @abstractmethod
    def fail(self, segment: PathSegment, message: str | None, score: int) -> bool:
        """Record a failure at the current level. Always returns False.

        Args:
            segment: Property/parameter name, element index, or None when
                the value itself is wrong
            message: What is wrong, or None when a nested call already said it
            score: Severity score used to rank union members

        """

    @abstractmethod
    def union_resolver(self) -> UnionResolver: ...

    @abstractmethod
    def resolve_union(self, resolver: UnionResolver) -> None:
        """Adopt the failure of the best-matching union member."""

    @abstractmethod
    def fork(self) -> Context:
        """Return a context for the next independent sub-check."""

    @abstractmethod
    def complete_fork(self) -> bool:
        """Finish the current fork; return whether to attempt more forks."""

    @abstractmethod
    def failed(self) -> bool: ...


class NoopContext(Context, UnionResolver):
    """Context that only remembers whether anything failed."""

    __slots__ = ("_failed",)

    def __init__(self) -> None:
        self._failed = False

    def fail(self, segment: PathSegment, message: str | None, score: int) -> bool:
        self._failed = True
        return False

    def union_resolver(self) -> UnionResolver:
        return self

    def create_context(self) -> Context:
        return NoopContext()

    def resolve_union(self, resolver: UnionResolver) -> None:
        pass

    def fork(self) -> Context:
        return self

    def complete_fork(self) -> bool:
        return not self._failed

    def failed(self) -> bool:
        return self._failed


class DetailUnionResolver(UnionResolver):
    """Keeps every context handed out so the best one can be picked."""

    def __init__(self) -> None:
        self.contexts: list[DetailContext] = []

    def create_context(self) -> DetailContext:
        ctx = DetailContext()
        self.contexts.append(ctx)
        return ctx


class DetailContext(Context):
    """Context that records failures for error reporting.

    Failures form a stack: the innermost call records first, so the stack is
    read in reverse to render the path from the root. Independent failures
    below the innermost point (several bad properties of one object) are
    kept as failed forks, at most max_forks of them.
    """

    max_forks: ClassVar[int] = 3

    def __init__(self) -> None:
        self._segments: list[PathSegment] = []
        self._messages: list[str | None] = []
        self._score = 0
        self._failed_forks: list[DetailContext] = []
        self._current_fork: DetailContext | None = None

    @property
    def score(self) -> int:
        """Total score, including the scores of failed forks."""
        return self._score + sum(f.score for f in self._failed_forks)

    def fail(self, segment: PathSegment, message: str | None, score: int) -> bool:
        self._segments.append(segment)
        self._messages.append(message)
        self._score += score
        return False

    def union_resolver(self) -> DetailUnionResolver:
        return DetailUnionResolver()

    def resolve_union(self, resolver: UnionResolver) -> None:
        if not isinstance(resolver, DetailUnionResolver):
            msg = f"Expected DetailUnionResolver, got {type(resolver).__name__}"
            raise TypeError(msg)
        best: DetailContext | None = None
        for ctx in resolver.contexts:
            if best is None or ctx.score > best.score:
                best = ctx
        # Members that failed without any positive evidence add only noise.
        if best is None or best.score <= 0:
            return
        self._segments.extend(best._segments)
        self._messages.extend(best._messages)
        self._score += best._score
        self._failed_forks.extend(best._failed_forks)

    def fork(self) -> DetailContext:
        if self._current_fork is None:
            self._current_fork = DetailContext()
        return self._current_fork

    def complete_fork(self) -> bool:
        current = self._current_fork
        if current is not None and current.failed():
            self._failed_forks.append(current)
            self._current_fork = None
        return len(self._failed_forks) < self.max_forks

    def failed(self) -> bool:
        return bool(self._segments) or bool(self._failed_forks)

    def get_error_details(self, path: str) -> list[ErrorDetail]:
        """Build the failure tree, with paths starting at the given root path."""
        chain: list[tuple[str, str]] = []
        for segment, message in zip(
            reversed(self._segments), reversed(self._messages), strict=True
        ):
            path = extend_path(path, segment)
            if message:
                chain.append((path, message))

        nested = [
            detail
            for fork in self._failed_forks
            for detail in fork.get_error_details(path)
        ]
        for detail_path, message in reversed(chain):
            nested = [ErrorDetail(detail_path, message, tuple(nested))]
        return nested

    def get_error(self, path: str) -> ValidationError:
        return ValidationError.from_details(path, self.get_error_details(path))


def extend_path(path: str, segment: PathSegment) -> str:
    """Append one segment: ".name" for names, "[i]" for indices."""
    if segment is None or segment == "":
        return path
    if isinstance(segment, int) and not isinstance(segment, bool):
        return f"{path}[{segment}]"
    return f"{path}.{segment}"
