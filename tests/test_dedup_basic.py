import datetime as dt

from slideshow.models import Asset
from slideshow.stages.dedup import dedup_by_creation_date

T = dt.datetime(2024, 5, 1, 12, 0, 0, tzinfo=dt.timezone.utc)


def _a(aid, ts, w=4000, h=3000):
    return Asset(id=aid, pixel_width=w, pixel_height=h, creation_date=ts)


def test_dedup_keeps_first_of_identical_timestamps():
    items = [_a("a", T), _a("b", T), _a("c", T + dt.timedelta(seconds=1))]
    out = dedup_by_creation_date(items)
    assert [x.id for x in out] == ["a", "c"]


def test_dedup_preserves_input_order_and_empty():
    items = [_a("z", T + dt.timedelta(days=2)), _a("y", T), _a("x", T + dt.timedelta(days=1))]
    assert [x.id for x in dedup_by_creation_date(items)] == ["z", "y", "x"]
    assert dedup_by_creation_date([]) == []


def test_dedup_missing_dates_share_one_slot():
    items = [_a("n1", None), _a("t", T), _a("n2", None)]
    out = dedup_by_creation_date(items)
    assert [x.id for x in out] == ["n1", "t"]


def test_dedup_tolerance_window():
    items = [_a("a", T), _a("b", T + dt.timedelta(seconds=1)), _a("c", T + dt.timedelta(seconds=10))]
    assert [x.id for x in dedup_by_creation_date(items)] == ["a", "b", "c"]
    out = dedup_by_creation_date(items, tolerance_seconds=2)
    assert [x.id for x in out] == ["a", "c"]


def test_dedup_reads_naive_dates_in_frame_zone():
    naive = _a("naive", dt.datetime(2024, 1, 1, 12, 0))
    aware = _a("aware", dt.datetime(2024, 1, 1, 12, 0, tzinfo=dt.timezone.utc))
    utc = dt.timezone.utc
    assert [x.id for x in dedup_by_creation_date([naive, aware], tz=utc)] == ["naive"]
    assert [x.id for x in dedup_by_creation_date([naive, aware], tolerance_seconds=5, tz=utc)] == ["naive"]

    east = dt.timezone(dt.timedelta(hours=2))
    assert [x.id for x in dedup_by_creation_date([naive, aware], tz=east)] == ["naive", "aware"]
