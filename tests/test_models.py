import pytest

from models import Match, WorkingSet
from pattern_field import TagPattern


@pytest.fixture
def owner(collector):
    return TagPattern(["p"], transform=collector)


def test_match_ids_are_unique_and_increasing(owner):
    first, second = Match(owner), Match(owner)
    assert second.match_id > first.match_id


def test_node_list_flattens_nested_matches(owner, nodes):
    h2, p, img = nodes("<h2>t</h2><p>x</p><img src='a.png'>")
    inner = Match(owner, [p, img])
    outer = Match(owner, [h2, inner])

    assert outer.node_list() == [h2, p, img]
    assert outer.node_list(recurse=False) == [h2]
    assert len(outer) == 2
    assert list(outer) == [h2, inner]


def test_unfinished_and_finalize(owner, nodes):
    (p,) = nodes("<p>x</p>")
    match = Match(owner)
    assert not match.unfinished

    match.push(p)
    assert match.unfinished

    match.finalize()
    match.finalize()
    assert match.complete
    assert not match.unfinished


def test_slice_keeps_owner_with_fresh_id(owner, nodes):
    a, b, c = nodes("<p>a</p><p>b</p><p>c</p>")
    match = Match(owner, [a, b, c])

    part = match.slice(1, 3)
    assert part.owner is owner
    assert part.nodes == [b, c]
    assert part.match_id != match.match_id
    assert match.nodes == [a, b, c]


def test_apply_runs_transform_once(owner, collector, nodes):
    (p,) = nodes("<p>x</p>")
    match = Match(owner, [p])

    match.apply()
    assert collector.matches == [match]

    with pytest.raises(RuntimeError):
        match.apply()
    assert collector.matches == [match]


def test_matches_hash_by_identity(owner):
    assert Match(owner) != Match(owner)
    match = Match(owner)
    assert {match: 1}[match] == 1


def test_working_set_keeps_first_position(owner):
    a, b, c = Match(owner), Match(owner), Match(owner)
    working = WorkingSet()
    for m in (a, b, c, a):
        working.add(m)

    assert list(working) == [a, b, c]
    assert len(working) == 3


def test_working_set_discard(owner):
    a, b = Match(owner), Match(owner)
    working = WorkingSet()
    working.add(a)
    working.discard(b)
    working.discard(a)

    assert len(working) == 0
    assert a not in working


def test_working_set_truncate_after(owner):
    a, b, c, d = (Match(owner) for _ in range(4))
    working = WorkingSet()
    for m in (a, b, c, d):
        working.add(m)

    dropped = working.truncate_after(b)
    assert dropped == [c, d]
    assert list(working) == [a, b]
    assert working.truncate_after(c) == []
    assert working.truncate_after(b) == []
