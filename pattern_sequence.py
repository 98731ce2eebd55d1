"""
Sequence pattern: an ordered run of sibling nodes.

Each child pattern is paired with a ``(min, max)`` repeat bound.  The
sequence owns the single ``Match`` for the whole run; its children only
answer whether the node in front of them fits.
"""

from __future__ import annotations

from typing import Any, Sequence

from base_pattern import BasePattern
from config import DEFAULT_REPEAT, UNBOUNDED, PatternConfigError, Response
from models import Match


def _check_repeats(
    repeats: Sequence[Sequence[int]] | None,
    count: int,
) -> list[tuple[int, int]]:
    if repeats is None:
        return [DEFAULT_REPEAT] * count
    repeats = list(repeats)
    if len(repeats) != count:
        raise PatternConfigError(
            f"got {len(repeats)} repeat bounds for {count} patterns"
        )

    bounds: list[tuple[int, int]] = []
    for rep in repeats:
        rep = [rep] if isinstance(rep, int) else list(rep)
        # A single number means "exactly that many"
        if len(rep) == 1:
            rep = [rep[0], rep[0]]
        if len(rep) != 2:
            raise PatternConfigError(f"repeat bound must be (min, max), got {rep!r}")
        lo, hi = rep
        if isinstance(lo, bool) or isinstance(hi, bool) \
                or not isinstance(lo, int) or not isinstance(hi, int):
            raise PatternConfigError(f"repeat bounds must be integers, got {rep!r}")
        if lo < 0:
            raise PatternConfigError(f"minimum repeat must be >= 0, got {lo}")
        if hi != UNBOUNDED and hi < max(lo, 1):
            raise PatternConfigError(
                f"maximum repeat must be -1 or >= max(min, 1), got {rep!r}"
            )
        bounds.append((lo, hi))
    return bounds


class SequencePattern(BasePattern):
    """Match children one after another, each repeated within its bounds.

    A node the current child rejects may still start the next child, so
    the sequence advances and retries the same node.  Running past the
    last child this way yields ``Completed``: the run ended *before* the
    node, and the annotator re-offers the node to the reset sequence.
    """

    def __init__(
        self,
        patterns: Sequence[BasePattern],
        repeats: Sequence[Sequence[int]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        patterns = list(patterns)
        if not patterns:
            raise PatternConfigError("a sequence needs at least one pattern")
        for pat in patterns:
            if not isinstance(pat, BasePattern):
                raise PatternConfigError(f"not a pattern: {pat!r}")
            pat.disable_handling()
        self.patterns = patterns
        self.repeats = _check_repeats(repeats, len(patterns))
        self._cursor = 0
        self._count = 0

    def _describe(self) -> str:
        return f"of {len(self.patterns)}"

    def sub_patterns(self) -> list[BasePattern]:
        return self.patterns

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self.patterns)

    def reset(self) -> Match | None:
        self._cursor = 0
        self._count = 0
        return super().reset()

    def _advance(self) -> None:
        self._cursor += 1
        self._count = 0

    def _match(self, node: Any, depth: int) -> Response:
        if self.exhausted:
            # Nested in another pattern that kept going: begin a new run
            self._cursor = 0
            self._count = 0
        while True:
            child = self.patterns[self._cursor]
            lo, hi = self.repeats[self._cursor]
            response = child.matches(node, depth)

            if response is Response.NON_MATCHING and self._count >= lo:
                # The current child is satisfied; try the node on the next one
                self._advance()
                if self.exhausted:
                    return Response.COMPLETED
                continue

            if response in (Response.MATCHING, Response.COMPLETED):
                self._count += 1
                if hi != UNBOUNDED and self._count >= hi:
                    self._advance()
                if self.exhausted:
                    return Response.MATCHING
                return Response.INCOMPLETE

            return response
