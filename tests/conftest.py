import pytest

from config import HEADING_TAGS
from dom import element_children, parse_html
from pattern_composite import ExceptPattern
from pattern_field import TagPattern
from pattern_sequence import SequencePattern


class Collector:
    """Transform that only remembers the matches it was given."""

    def __init__(self):
        self.matches = []

    def __call__(self, match):
        self.matches.append(match)

    @property
    def tags(self):
        return [[node.name for node in m.node_list()] for m in self.matches]

    @property
    def texts(self):
        return [[node.get_text() for node in m.node_list()] for m in self.matches]


@pytest.fixture
def collector():
    return Collector()


@pytest.fixture
def make_collector():
    return Collector


@pytest.fixture
def nodes():
    """Parse a fragment and return its top-level elements."""

    def _nodes(markup):
        return element_children(parse_html(markup))

    return _nodes


@pytest.fixture
def heading_section():
    """A heading followed by one or more non-heading siblings."""

    def _heading_section(**kwargs):
        return SequencePattern(
            [
                TagPattern(HEADING_TAGS),
                ExceptPattern(TagPattern(HEADING_TAGS)),
            ],
            [(1, 1), (1, -1)],
            **kwargs,
        )

    return _heading_section
