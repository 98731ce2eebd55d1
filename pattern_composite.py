"""
Composite patterns built from other patterns.

* ``AllPattern``       – conjunction, every child must accept the node
* ``AnyPattern``       – disjunction, first child that engages wins
* ``ExceptPattern``    – negation of a single child
* ``IgnoredPattern``   – fences off a subtree from all further matching
* ``PredicatePattern`` – a child filtered by an arbitrary node test
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from base_pattern import BasePattern
from config import PatternConfigError, Response
from models import Match


def _check_pattern(pattern: Any) -> BasePattern:
    if not isinstance(pattern, BasePattern):
        raise PatternConfigError(f"not a pattern: {pattern!r}")
    return pattern


def _check_patterns(patterns: Sequence[BasePattern], what: str) -> list[BasePattern]:
    patterns = list(patterns)
    if not patterns:
        raise PatternConfigError(f"{what} needs at least one pattern")
    return [_check_pattern(p) for p in patterns]


# ── AllPattern ────────────────────────────────────────────────────────────


class AllPattern(BasePattern):
    """Accept a node only if every child accepts it."""

    def __init__(self, patterns: Sequence[BasePattern], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.patterns = _check_patterns(patterns, "AllPattern")
        # Every child sees the same nodes, so the parent's match suffices
        for pat in self.patterns:
            pat.disable_handling()

    def _describe(self) -> str:
        return f"of {len(self.patterns)}"

    def sub_patterns(self) -> list[BasePattern]:
        return self.patterns

    def _match(self, node: Any, depth: int) -> Response:
        for pat in self.patterns:
            response = pat.matches(node, depth)
            if response is not Response.MATCHING:
                return response
        return Response.MATCHING


# ── AnyPattern ────────────────────────────────────────────────────────────


class AnyPattern(BasePattern):
    """Accept a node if any child engages with it.

    Children keep their own matches because each may be in the middle of
    a multi-node match.  The parent's ``Match`` holds the children's
    matches (in child order), so a transform can tell which branch fired.
    """

    def __init__(self, patterns: Sequence[BasePattern], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.patterns = _check_patterns(patterns, "AnyPattern")
        for pat in self.patterns:
            if not pat.manages_match:
                raise PatternConfigError(
                    f"AnyPattern branches must record their own matches: {pat!r}"
                )
        if self.match is not None:
            self.match = self._new_wrapper()

    def _describe(self) -> str:
        return f"of {len(self.patterns)}"

    def sub_patterns(self) -> list[BasePattern]:
        return self.patterns

    def _new_wrapper(self) -> Match:
        return Match(self, [pat.match for pat in self.patterns])

    def push(self, node: Any) -> None:
        # Nodes land in the branch matches, never in the wrapper itself
        pass

    def reset(self) -> Match | None:
        old = super().reset()
        if self.match is not None:
            self.match = self._new_wrapper()
        return old

    def _match(self, node: Any, depth: int) -> Response:
        rejected = False
        for index, pat in enumerate(self.patterns):
            response = pat.matches(node, depth)
            if response is Response.NON_MATCHING:
                rejected = True
                pat.reset()
                if self.match is not None:
                    self.match.nodes[index] = pat.match
            elif response is not Response.UNAPPLIED:
                return response
        return Response.NON_MATCHING if rejected else Response.UNAPPLIED


# ── ExceptPattern ─────────────────────────────────────────────────────────


class ExceptPattern(BasePattern):
    """Accept exactly the nodes the wrapped pattern rejects."""

    def __init__(self, pattern: BasePattern, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.pattern = _check_pattern(pattern)
        self.pattern.disable_handling()

    def _describe(self) -> str:
        return f"not {self.pattern!r}"

    def sub_patterns(self) -> list[BasePattern]:
        return [self.pattern]

    def _match(self, node: Any, depth: int) -> Response:
        response = self.pattern.matches(node, depth)
        if response in (Response.MATCHING, Response.COMPLETED):
            return Response.NON_MATCHING
        if response is Response.NON_MATCHING:
            return Response.MATCHING
        return response


# ── IgnoredPattern ────────────────────────────────────────────────────────


class IgnoredPattern(BasePattern):
    """Turn any engagement of the wrapped pattern into ``Break``.

    The annotator then skips the remaining patterns for the node and does
    not descend into it (lists, code blocks, …).
    """

    def __init__(
        self,
        pattern: BasePattern,
        *,
        terminal: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(terminal=terminal, **kwargs)
        self.pattern = _check_pattern(pattern)
        self.pattern.disable_handling()

    def _describe(self) -> str:
        return f"{self.pattern!r}"

    def sub_patterns(self) -> list[BasePattern]:
        return [self.pattern]

    def _match(self, node: Any, depth: int) -> Response:
        response = self.pattern.matches(node, depth)
        if response not in (Response.INCOMPLETE, Response.UNAPPLIED):
            # Break is never reset by the annotator, so do it here
            self.pattern.reset()
        if response in (Response.INCOMPLETE, Response.MATCHING, Response.BREAK):
            return Response.BREAK
        return response


# ── PredicatePattern ──────────────────────────────────────────────────────


class PredicatePattern(BasePattern):
    """Accept what the wrapped pattern accepts and *test* approves."""

    def __init__(
        self,
        pattern: BasePattern,
        test: Callable[[Any], bool],
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        if not callable(test):
            raise PatternConfigError(f"test must be callable, got {test!r}")
        self.pattern = _check_pattern(pattern)
        self.pattern.disable_handling()
        self.test = test

    def _describe(self) -> str:
        return f"{self.pattern!r} if {getattr(self.test, '__name__', self.test)}"

    def sub_patterns(self) -> list[BasePattern]:
        return [self.pattern]

    def _match(self, node: Any, depth: int) -> Response:
        response = self.pattern.matches(node, depth)
        if response in (Response.MATCHING, Response.COMPLETED) and not self.test(node):
            return Response.NON_MATCHING
        return response
