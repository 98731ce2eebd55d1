"""
Data models for the markup-tree pattern annotator.

Contains the Match dataclass (the ordered record of what a pattern has
matched so far) and the WorkingSet utility used by the annotator to keep
live matches in discovery order.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

if TYPE_CHECKING:
    from base_pattern import BasePattern


_match_ids = itertools.count(1)


def _next_match_id() -> int:
    return next(_match_ids)


# ── Match ─────────────────────────────────────────────────────────────────


@dataclass(eq=False)
class Match:
    """The nodes a single pattern has matched between two resets.

    ``nodes`` holds tree nodes or nested ``Match`` objects (a disjunction
    records its branches' matches here) in the order they were met during
    the traversal.  Matches compare and hash by identity.
    """

    owner: BasePattern
    nodes: list[Any] = field(default_factory=list)
    complete: bool = False
    match_id: int = field(default_factory=_next_match_id)
    applied: bool = field(default=False, repr=False)

    # ── accumulation ──

    def push(self, item: Any) -> None:
        self.nodes.append(item)

    def finalize(self) -> None:
        """Mark the match as complete.  Calling it again is harmless."""
        self.complete = True

    @property
    def unfinished(self) -> bool:
        return len(self.nodes) > 0 and not self.complete

    # ── inspection ──

    def node_list(self, recurse: bool = True) -> list[Any]:
        """Return the matched tree nodes in traversal order.

        Nested matches are flattened into the result when *recurse* is
        true and skipped entirely otherwise.
        """
        out: list[Any] = []
        self._fill_node_list(out, recurse)
        return out

    def _fill_node_list(self, out: list[Any], recurse: bool) -> None:
        for item in self.nodes:
            if isinstance(item, Match):
                if recurse:
                    item._fill_node_list(out, recurse)
            else:
                out.append(item)

    def slice(self, start: int | None, end: int | None = None) -> Match:
        """Return a new match with the same owner over ``nodes[start:end]``."""
        return Match(
            owner=self.owner,
            nodes=self.nodes[start:end],
            complete=self.complete,
        )

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.nodes)

    # ── application ──

    def apply(self) -> None:
        """Hand this match to its owner's transform (at most once)."""
        if self.applied:
            raise RuntimeError(f"match #{self.match_id} was already applied")
        self.applied = True
        self.owner.apply(self)


# ── WorkingSet ────────────────────────────────────────────────────────────


class WorkingSet:
    """Live matches of one traversal, keyed by ``match_id``.

    Rules
    -----
    * A match is stored once; adding it again keeps its first position.
    * Iteration follows registration order.
    * ``truncate_after`` drops every match registered after a given one.
    """

    def __init__(self) -> None:
        self._matches: dict[int, Match] = {}

    # ── public API ──

    def add(self, match: Match) -> None:
        self._matches.setdefault(match.match_id, match)

    def discard(self, match: Match) -> None:
        self._matches.pop(match.match_id, None)

    def truncate_after(self, match: Match) -> list[Match]:
        """Remove and return all matches registered after *match*.

        Returns an empty list when *match* is not in the set.
        """
        if match.match_id not in self._matches:
            return []
        keys = list(self._matches)
        later = keys[keys.index(match.match_id) + 1:]
        return [self._matches.pop(key) for key in later]

    def __contains__(self, match: object) -> bool:
        return (
            isinstance(match, Match)
            and self._matches.get(match.match_id) is match
        )

    def __iter__(self) -> Iterator[Match]:
        return iter(list(self._matches.values()))

    def __len__(self) -> int:
        return len(self._matches)
