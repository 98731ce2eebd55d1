"""
Annotator: walks a markup tree once and applies every pattern's transform.

The walk is depth-first and pre-order.  Every element is offered to each
pattern in list order (the only precedence there is); the matches found
are collected in a ``WorkingSet`` and handed to their transforms after
the walk, so transforms never disturb the traversal.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from base_pattern import BasePattern
from config import PatternConfigError, Response
from dom import element_children
from models import Match, WorkingSet

logger = logging.getLogger(__name__)


class Annotator:
    """Apply a list of top-level patterns to a tree.

    Pattern objects carry state (application counters) from one ``apply``
    to the next; call ``restart`` in between to reuse the same set.
    """

    def __init__(self, patterns: Sequence[BasePattern]) -> None:
        patterns = list(patterns)
        for pat in patterns:
            if not isinstance(pat, BasePattern):
                raise PatternConfigError(f"not a pattern: {pat!r}")
            if not pat.manages_match:
                raise PatternConfigError(
                    f"top-level patterns must record their own matches: {pat!r}"
                )
        self.patterns = patterns

    # ── public API ──

    def apply(self, root: Any, max_depth: int | None = None) -> list[Match]:
        """Match all patterns below *root* and run their transforms.

        *root* itself is not matched; its children are at depth 0.  A
        non-negative *max_depth* is the deepest level offered, so
        ``max_depth=0`` visits the root's children only; ``None`` or a
        negative value walks the whole tree.  Zero is a real limit here,
        not another way of saying "unlimited".
        Returns the matches that were applied, in discovery order.
        """
        logger.debug(
            "Annotating with %d patterns (max depth %s)",
            len(self.patterns), max_depth,
        )
        working = WorkingSet()
        self._apply_rec(root, working, max_depth, 0)

        applied: list[Match] = []
        for match in working:
            if not match.node_list():
                logger.debug("Skipping empty match #%d", match.match_id)
                continue
            # Open matches are accepted as they stand at the end of the tree
            match.finalize()
            logger.debug(
                "Applying match #%d of %r (%d nodes)",
                match.match_id, match.owner, len(match.node_list()),
            )
            match.apply()
            applied.append(match)
        return applied

    def restart(self) -> None:
        """Reset every pattern, including its application counter."""
        for pat in self.patterns:
            pat.restart()

    # ── traversal ──

    def _apply_rec(
        self,
        root: Any,
        working: WorkingSet,
        max_depth: int | None,
        depth: int,
    ) -> None:
        if max_depth is not None and 0 <= max_depth < depth:
            return
        for node in element_children(root):
            response = self._match_node(node, working, depth)
            if response is not Response.BREAK:
                self._apply_rec(node, working, max_depth, depth + 1)

    def _match_node(self, node: Any, working: WorkingSet, depth: int) -> Response:
        """Offer *node* to every pattern; return the last response seen."""
        response = Response.MATCHING
        for pat in self.patterns:
            response, break_flag = self._offer(pat, node, working, depth)
            if response is Response.COMPLETED:
                # The node closed the previous match; it may also open the next
                response, retry_break = self._offer(pat, node, working, depth)
                break_flag = break_flag or retry_break
            if break_flag:
                break
        return response

    def _offer(
        self,
        pat: BasePattern,
        node: Any,
        working: WorkingSet,
        depth: int,
    ) -> tuple[Response, bool]:
        if pat.above_anchor(depth):
            # The walk climbed out of the level the open match lives on
            self._close(pat, working)
        match = pat.match
        response = pat.matches(node, depth)
        return self._handle_response(response, pat, working, match)

    def _close(self, pat: BasePattern, working: WorkingSet) -> None:
        """Keep *pat*'s open match as it stands and reset the pattern."""
        match = pat.match
        if match in working:
            match.finalize()
            logger.debug(
                "Match #%d of %r closed on leaving its level",
                match.match_id, pat,
            )
            if not pat.compounds:
                self._truncate(working, match)
        pat.reset()

    def _truncate(self, working: WorkingSet, match: Match) -> None:
        for dropped in working.truncate_after(match):
            logger.debug(
                "Match #%d of %r overridden by #%d",
                dropped.match_id, dropped.owner, match.match_id,
            )
            if dropped.owner.match is dropped:
                dropped.owner.reset()

    def _handle_response(
        self,
        response: Response,
        pat: BasePattern,
        working: WorkingSet,
        match: Match,
    ) -> tuple[Response, bool]:
        """Update the working set for one response.

        Returns the (possibly rewritten) response and whether the remaining
        patterns must be skipped for this node.
        """
        break_flag = False

        if response is Response.NON_MATCHING:
            # Whatever the pattern had built up is abandoned
            pat.reset()
            working.discard(match)

        elif response is Response.INCOMPLETE:
            working.add(match)

        elif response in (Response.MATCHING, Response.COMPLETED):
            working.add(match)
            match.finalize()
            logger.debug(
                "Match #%d of %r finished (%s)",
                match.match_id, pat, response.value,
            )
            if not pat.compounds:
                self._truncate(working, match)
                break_flag = True
            if pat.terminal:
                response = Response.BREAK
                break_flag = True
            pat.reset()

        elif response is Response.BREAK:
            break_flag = True

        return response, break_flag
