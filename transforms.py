"""
Ready-made transforms for annotating BeautifulSoup trees.

Each factory returns a callable suitable for a pattern's ``transform``
option.  The callable receives one finished ``Match``.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from bs4 import Tag

from dom import soup_of
from models import Match
from pattern_field import TagPattern


def add_class(node: Tag, css_class: str) -> None:
    """Add *css_class* to *node* unless it already carries it."""
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    if css_class not in classes:
        node["class"] = list(classes) + [css_class]


def class_adder(css_class: str) -> Callable[[Match], None]:
    """Add *css_class* to every element of the match (nested ones too)."""

    def _transform(match: Match) -> None:
        for node in match.node_list(recurse=True):
            if isinstance(node, Tag):
                add_class(node, css_class)

    return _transform


def tag_class_pattern(tags: Sequence[str], css_class: str, **options: Any) -> TagPattern:
    """A ``TagPattern`` that adds *css_class* to every element it matches."""
    return TagPattern(tags, transform=class_adder(css_class), **options)


def section_maker(
    section_class: str = "section",
    header_class: str | None = None,
    body_class: str = "section-body",
) -> Callable[[Match], None]:
    """Wrap a matched sibling run into a section container.

    Result::

        <div class="{section_class}">
            <h2 class="{header_class}">…</h2>
            <div class="{body_class}"> …remaining nodes… </div>
        </div>

    The first matched node is the header; the body container is omitted
    when the match holds only the header.
    """

    def _transform(match: Match) -> None:
        nodes = [n for n in match.node_list(recurse=True) if isinstance(n, Tag)]
        if not nodes:
            return
        header, body = nodes[0], nodes[1:]
        soup = soup_of(header)

        section = soup.new_tag("div", attrs={"class": section_class})
        header.insert_before(section)
        section.append(header.extract())
        if header_class:
            add_class(header, header_class)

        if body:
            container = soup.new_tag("div", attrs={"class": body_class})
            section.append(container)
            for node in body:
                container.append(node.extract())

    return _transform
