"""
BeautifulSoup binding for the tree nodes the annotator walks.

Patterns never touch bs4 directly: they read node fields through
``node_field`` and the annotator walks ``element_children``.  Text,
comments and other ``NavigableString`` children are not nodes here.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from config import FIELD_CLASS, FIELD_TAG


def parse_html(markup: str, features: str = "lxml") -> Tag:
    """Parse an HTML fragment and return the element holding its top level.

    The ``lxml`` builder wraps fragments in ``<html><body>``; the body is
    returned in that case so that the fragment's own elements are the
    root's children.
    """
    soup = BeautifulSoup(markup, features)
    if soup.body is not None:
        return soup.body
    return soup


def element_children(node: Tag) -> list[Tag]:
    """Return the element children of *node* in document order."""
    return [child for child in node.children if isinstance(child, Tag)]


def node_field(node: Tag, field_name: str) -> str | list[str]:
    """Read the field a pattern compares against.

    * ``"tag"``   → lower-cased tag name
    * ``"class"`` → list of class tokens (empty when absent)
    * anything else → the attribute value, ``""`` when absent
    """
    if field_name == FIELD_TAG:
        return (node.name or "").lower()

    if field_name == FIELD_CLASS:
        classes = node.get("class")
        if classes is None:
            return []
        if isinstance(classes, str):
            return classes.split()
        return list(classes)

    value = node.get(field_name)
    if value is None:
        return ""
    return value


def soup_of(node: Tag) -> BeautifulSoup:
    """Return the document *node* belongs to (for creating new elements)."""
    top = node
    while top.parent is not None:
        top = top.parent
    if not isinstance(top, BeautifulSoup):
        raise ValueError(f"<{node.name}> is not attached to a document")
    return top
