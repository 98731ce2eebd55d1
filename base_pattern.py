"""
Abstract base pattern for the markup-tree annotator.

Concrete subclasses (``FieldPattern``, ``SequencePattern``, the composite
patterns) implement ``_match``; the base class applies the depth and
application limits, keeps the live ``Match``, and records the depth at
which a multi-node match started.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

from config import (
    DEFAULT_ABSOLUTE_DEPTH,
    DEFAULT_APPLICATIONS,
    DEFAULT_DEPTH,
    DEFAULT_PRIORITY,
    PatternConfigError,
    Response,
    check_limit,
)
from models import Match

Transform = Callable[[Match], None]


class BasePattern(ABC):
    """Base class for all patterns.

    Parameters
    ----------
    priority : int
        Kept for configuration compatibility; list order in the annotator
        is the only precedence.
    compounds : bool
        Whether matches of later patterns may coexist with this one.
    terminal : bool
        Stop examining the node (and its children) once this matches.
    open_ended : bool
        Reserved; stored but not consulted.
    depth : int
        Relative depth window measured from the first matched node.
    absolute_depth : int
        Deepest traversal depth the pattern will look at.
    applications : int
        Maximum number of ``Matching`` responses.
    manage_match : bool
        Whether the pattern records its own ``Match``.  Composites switch
        this off on children they only delegate to.
    transform : callable
        Called with each finished ``Match``.
    """

    def __init__(
        self,
        *,
        priority: int = DEFAULT_PRIORITY,
        compounds: bool = True,
        terminal: bool = False,
        open_ended: bool = True,
        depth: int = DEFAULT_DEPTH,
        absolute_depth: int = DEFAULT_ABSOLUTE_DEPTH,
        applications: int = DEFAULT_APPLICATIONS,
        manage_match: bool = True,
        transform: Transform | None = None,
    ) -> None:
        if transform is not None and not callable(transform):
            raise PatternConfigError(
                f"transform must be callable, got {transform!r}"
            )
        self.priority = check_limit("priority", priority)
        self.compounds = compounds
        self.terminal = terminal
        self.open_ended = open_ended
        self.depth = check_limit("depth", depth)
        self.absolute_depth = check_limit("absolute_depth", absolute_depth)
        self.applications = check_limit("applications", applications)
        self.transform = transform

        self.match: Match | None = Match(self) if manage_match else None
        self._anchor_depth: int | None = None
        self._applied = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._describe()}>"

    def _describe(self) -> str:
        return ""

    # ── public entry point ──

    def matches(self, node: Any, depth: int) -> Response:
        """Offer *node* (found at traversal *depth*) to this pattern."""
        if 0 <= self.absolute_depth < depth:
            return Response.UNAPPLIED
        if 0 <= self.applications <= self._applied:
            return Response.UNAPPLIED
        if self._anchor_depth is not None and self.depth >= 0:
            if not self._anchor_depth <= depth <= self._anchor_depth + self.depth:
                return Response.UNAPPLIED

        response = self._match(node, depth)
        if response in (Response.MATCHING, Response.INCOMPLETE):
            # The first node of a match fixes the depth window
            if self._anchor_depth is None:
                self._anchor_depth = depth
            if response is Response.MATCHING:
                self._applied += 1
            self.push(node)
        return response

    def reset(self) -> Match | None:
        """Start a fresh match and return the previous one to the caller.

        Children are reset too, so none of them keeps the depth anchor of
        a match that no longer exists.
        """
        for child in self.sub_patterns():
            child.reset()
        old = self.match
        self._anchor_depth = None
        if self.match is not None:
            self.match = Match(self)
        return old

    def restart(self) -> None:
        """Reset and forget how many times the pattern already applied."""
        for child in self.sub_patterns():
            child.restart()
        self._applied = 0
        self.reset()

    def apply(self, match: Match | None = None) -> None:
        if self.transform is not None:
            self.transform(self.match if match is None else match)

    # ── abstract methods ── (to be implemented by subclasses)

    @abstractmethod
    def _match(self, node: Any, depth: int) -> Response:
        """Compare *node* against the pattern-specific rule."""
        ...

    # ── concrete helpers ──

    def sub_patterns(self) -> list[BasePattern]:
        """Patterns this one delegates to (none for leaf patterns)."""
        return []

    def above_anchor(self, depth: int) -> bool:
        """Whether *depth* lies above the window of the open match.

        The annotator closes such a match instead of offering it the node.
        """
        return (
            self._anchor_depth is not None
            and self.depth >= 0
            and depth < self._anchor_depth
        )

    @property
    def manages_match(self) -> bool:
        return self.match is not None

    @property
    def applied_count(self) -> int:
        return self._applied

    def disable_handling(self) -> None:
        """Stop recording matches; a parent pattern owns them instead."""
        self.match = None

    def push(self, node: Any) -> None:
        if self.match is not None:
            self.match.push(node)
