import pytest

from annotator import Annotator
from config import PatternConfigError, Response
from dom import parse_html
from pattern_field import TagPattern
from pattern_sequence import SequencePattern


def _responses(pattern, elements, depth=0):
    return [pattern.matches(el, depth) for el in elements]


def test_heading_run_rolls_over_on_next_heading(heading_section, nodes):
    elements = nodes("<h2>A</h2><p>1</p><p>2</p><h3>B</h3>")
    pattern = heading_section()

    assert _responses(pattern, elements) == [
        Response.INCOMPLETE,
        Response.INCOMPLETE,
        Response.INCOMPLETE,
        Response.COMPLETED,
    ]
    # The heading that closed the run is not part of it
    assert pattern.match.nodes == elements[:3]


def test_two_sections_with_lookahead_retry(heading_section, collector):
    root = parse_html("<h2>A</h2><p>1</p><p>2</p><h3>B</h3><p>3</p>")

    Annotator([heading_section(transform=collector)]).apply(root)

    assert collector.tags == [["h2", "p", "p"], ["h3", "p"]]
    assert collector.texts == [["A", "1", "2"], ["B", "3"]]


def test_bounded_sequence_reports_matching(nodes):
    h2, p = nodes("<h2>A</h2><p>1</p>")
    pattern = SequencePattern([TagPattern(["h2"]), TagPattern(["p"])])

    assert _responses(pattern, [h2, p]) == [Response.INCOMPLETE, Response.MATCHING]
    assert pattern.match.nodes == [h2, p]


def test_too_few_repeats_do_not_match(nodes):
    h2, p, div = nodes("<h2>A</h2><p>1</p><div></div>")
    pattern = SequencePattern(
        [TagPattern(["h2"]), TagPattern(["p"])],
        [(1, 1), (2, 2)],
    )

    assert _responses(pattern, [h2, p, div]) == [
        Response.INCOMPLETE,
        Response.INCOMPLETE,
        Response.NON_MATCHING,
    ]


def test_optional_child_is_skipped(nodes):
    h2, p = nodes("<h2>A</h2><p>1</p>")
    pattern = SequencePattern(
        [TagPattern(["h2"]), TagPattern(["img"]), TagPattern(["p"])],
        [(1, 1), (0, 1), (1, 1)],
    )

    assert _responses(pattern, [h2, p]) == [Response.INCOMPLETE, Response.MATCHING]


def test_single_number_repeat_means_exactly(nodes):
    p1, p2, p3 = nodes("<p>1</p><p>2</p><p>3</p>")
    pattern = SequencePattern([TagPattern(["p"])], [[2]])

    assert _responses(pattern, [p1, p2]) == [Response.INCOMPLETE, Response.MATCHING]
    assert pattern.repeats == [(2, 2)]


def test_reset_rewinds_cursor(nodes):
    h2, p = nodes("<h2>A</h2><p>1</p>")
    pattern = SequencePattern([TagPattern(["h2"]), TagPattern(["p"])])

    assert pattern.matches(h2, 0) is Response.INCOMPLETE
    old = pattern.reset()
    assert old.nodes == [h2]
    # Back on the first child, so a paragraph cannot start the run
    assert pattern.matches(p, 0) is Response.NON_MATCHING


def test_sequence_ignores_deeper_nodes(nodes):
    h2, p = nodes("<h2>A</h2><p>1</p>")
    pattern = SequencePattern([TagPattern(["h2"]), TagPattern(["p"])])

    assert pattern.matches(h2, 0) is Response.INCOMPLETE
    assert pattern.matches(p, 1) is Response.UNAPPLIED
    assert pattern.matches(p, 0) is Response.MATCHING


def test_paragraph_runs_of_at_least_two(collector):
    root = parse_html(
        "<p>1</p><div></div><p>2</p><p>3</p><p>4</p><div></div><p>5</p>"
    )
    pattern = SequencePattern([TagPattern(["p"])], [(2, -1)], transform=collector)

    Annotator([pattern]).apply(root)

    assert collector.texts == [["2", "3", "4"]]


def test_nested_sequence_starts_a_new_run(nodes):
    h2, p, h3, p2 = nodes("<h2>A</h2><p>1</p><h3>B</h3><p>2</p>")
    pair = SequencePattern([TagPattern(["h2", "h3"]), TagPattern(["p"])])
    pairs = SequencePattern([pair], [(1, -1)])

    assert _responses(pairs, [h2, p, h3, p2]) == [Response.INCOMPLETE] * 4
    assert pairs.match.nodes == [h2, p, h3, p2]


def test_children_delegate_their_matches():
    child = TagPattern(["p"])
    SequencePattern([child])
    assert not child.manages_match


@pytest.mark.parametrize(
    "patterns, repeats",
    [
        ([], None),
        (["p"], None),
        ([TagPattern(["p"])], [(1, 1), (1, 1)]),
        ([TagPattern(["p"])], [(-1, 1)]),
        ([TagPattern(["p"])], [(2, 1)]),
        ([TagPattern(["p"])], [(0, 0)]),
        ([TagPattern(["p"])], [(1, 2, 3)]),
        ([TagPattern(["p"])], [(1.0, 2)]),
    ],
)
def test_bad_sequences_are_rejected(patterns, repeats):
    with pytest.raises(PatternConfigError):
        SequencePattern(patterns, repeats)
