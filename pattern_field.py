"""
Field patterns: the leaves every composite pattern bottoms out in.

A field pattern reads one field of a node (tag name, class tokens or a
plain attribute, see ``dom.node_field``) and compares it against a list
of option strings.
"""

from __future__ import annotations

from typing import Any, Sequence

from base_pattern import BasePattern
from config import FIELD_CLASS, FIELD_TAG, PatternConfigError, Quantifier, Response
from dom import node_field


def _check_options(options: Sequence[str], what: str) -> list[str]:
    if isinstance(options, str):
        # A bare string would silently match character by character
        raise PatternConfigError(f"{what} must be a list of strings, got {options!r}")
    options = list(options)
    if not options:
        raise PatternConfigError(f"{what} must not be empty")
    for opt in options:
        if not isinstance(opt, str):
            raise PatternConfigError(f"{what} must be strings, got {opt!r}")
    return options


def match_field(
    value: str | list[str],
    options: list[str],
    exact: bool,
    quantifier: Quantifier,
) -> Response:
    """Compare a field *value* against *options*.

    With ``exact`` the value must equal an option; otherwise the option
    must be contained in it (substring for strings, membership for token
    lists).  ``ANY`` needs one satisfied option, ``ALL`` needs every one.
    An exact comparison against a token list uses the space-joined tokens.
    """
    if exact:
        if isinstance(value, list):
            value = " ".join(value)
        hits = (value == opt for opt in options)
    else:
        hits = (opt in value for opt in options)

    if quantifier is Quantifier.ALL:
        return Response.MATCHING if all(hits) else Response.NON_MATCHING
    return Response.MATCHING if any(hits) else Response.NON_MATCHING


# ── FieldPattern ──────────────────────────────────────────────────────────


class FieldPattern(BasePattern):
    """Match a single node whose *field_name* satisfies *options*."""

    def __init__(
        self,
        options: Sequence[str],
        field_name: str,
        *,
        exact: bool = False,
        quantifier: Quantifier | str = Quantifier.ANY,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.options = _check_options(options, "field options")
        self.field_name = field_name
        self.exact = exact
        try:
            self.quantifier = Quantifier(quantifier)
        except ValueError:
            raise PatternConfigError(f"unknown quantifier {quantifier!r}") from None

    def _describe(self) -> str:
        return f"{self.field_name}={self.options!r}"

    def _match(self, node: Any, depth: int) -> Response:
        value = node_field(node, self.field_name)
        return match_field(value, self.options, self.exact, self.quantifier)


class TagPattern(FieldPattern):
    """Match nodes by tag name (case-insensitive, always exact)."""

    def __init__(
        self,
        tags: Sequence[str],
        *,
        quantifier: Quantifier | str = Quantifier.ANY,
        **kwargs: Any,
    ) -> None:
        tags = [t.lower() for t in _check_options(tags, "tags")]
        super().__init__(tags, FIELD_TAG, exact=True, quantifier=quantifier, **kwargs)


class ClassPattern(FieldPattern):
    """Match nodes carrying class tokens (by default all of them)."""

    def __init__(
        self,
        classes: Sequence[str],
        *,
        exact: bool = False,
        quantifier: Quantifier | str = Quantifier.ALL,
        **kwargs: Any,
    ) -> None:
        super().__init__(classes, FIELD_CLASS, exact=exact, quantifier=quantifier, **kwargs)
