from slideshow.models import Asset
from slideshow.stages.interleave import interleave


def _p(aid):
    return Asset(id=aid, pixel_width=3, pixel_height=4)


def _l(aid):
    return Asset(id=aid, pixel_width=4, pixel_height=3)


def test_alternates_pair_then_landscape():
    pairs = [[_p("p1"), _p("p2")], [_p("p3"), _p("p4")]]
    lands = [_l("l1"), _l("l2"), _l("l3")]
    out = interleave(pairs, lands)
    assert [a.id for a in out] == ["p1", "p2", "l1", "p3", "p4", "l2", "l3"]


def test_more_pairs_than_landscapes():
    pairs = [[_p("p1"), _p("p2")], [_p("p3"), _p("p4")], [_p("p5"), _p("p6")]]
    out = interleave(pairs, [_l("l1")])
    assert [a.id for a in out] == ["p1", "p2", "l1", "p3", "p4", "p5", "p6"]


def test_malformed_portrait_groups_skipped_whole():
    pairs = [[_p("solo")], [_p("p1"), _p("p2")], [_p("a"), _p("b"), _p("c")], []]
    out = interleave(pairs, [_l("l1"), _l("l2")])
    assert [a.id for a in out] == ["l1", "p1", "p2", "l2"]


def test_empty_inputs():
    assert interleave([], []) == []
    assert [a.id for a in interleave([], [_l("x")])] == ["x"]
