import pytest

from travel_stats.counting import bound_modes_for, count_spans
from travel_stats.errors import UnsupportedOptionError
from travel_stats.models import BoundMode, DetailSpan, Span, TravelRecord

FULL = BoundMode.FULL
HALF = BoundMode.HALF
EXCLUDE = BoundMode.EXCLUDE


def test_single_span_full():
    assert count_spans([Span(1, 10)], FULL, FULL) == 10


def test_single_day_span_counts_once():
    assert count_spans([Span(5, 5)], FULL, FULL) == 1
    assert count_spans([Span(5, 5)], HALF, HALF) == 0.5


def test_shared_boundary_keeps_max_weight():
    # day 5 is the end of one span (weight 1) and the start of the next (weight 0)
    assert count_spans([Span(1, 5), Span(5, 10)], EXCLUDE, FULL) == 9
    assert count_spans([Span(1, 5), Span(5, 10)], FULL, EXCLUDE) == 9


def test_shared_boundary_half_counts_once():
    assert count_spans([Span(1, 5), Span(5, 10)], HALF, HALF) == 8.5


@pytest.mark.parametrize(
    "lower, upper, expected",
    [
        (FULL, FULL, 10),
        (HALF, HALF, 9),
        (FULL, EXCLUDE, 9),
        (EXCLUDE, FULL, 9),
        (EXCLUDE, EXCLUDE, 8),
    ],
)
def test_bound_modes(lower, upper, expected):
    assert count_spans([Span(1, 10)], lower, upper) == expected


def test_clamp_to_cutoffs():
    assert count_spans([Span(1, 100)], FULL, FULL, 50, 60) == 11


def test_span_outside_window_is_ignored():
    spans = [Span(1, 10), Span(20, 30)]
    assert count_spans(spans, FULL, FULL, lower_cutoff=15) == 11
    assert count_spans(spans, FULL, FULL, upper_cutoff=15) == 10
    assert count_spans(spans, FULL, FULL, 11, 19) == 0


def test_cutoff_on_boundary_day():
    assert count_spans([Span(1, 10)], FULL, FULL, lower_cutoff=10) == 1
    assert count_spans([Span(1, 10)], FULL, FULL, upper_cutoff=1) == 1


def test_inverted_cutoffs_count_nothing():
    assert count_spans([Span(1, 100)], FULL, FULL, 60, 50) == 0


def test_overlapping_interiors_are_counted_per_span():
    # interiors 8 + 2, boundary days 1, 3, 6, 10
    assert count_spans([Span(1, 10), Span(3, 6)], FULL, FULL) == 14


def test_unsorted_input():
    assert count_spans([Span(5, 10), Span(1, 5)], EXCLUDE, FULL) == 9


def test_empty_input():
    assert count_spans([], FULL, FULL) == 0


def test_accepts_records_and_details():
    spans = [TravelRecord(start=1, end=3, name="A"), DetailSpan(start=3, end=6, name="B")]
    assert count_spans(spans, FULL, FULL) == 6


@pytest.mark.parametrize(
    "method, modes",
    [
        ("full", (FULL, FULL)),
        ("half", (HALF, HALF)),
        ("entry", (FULL, EXCLUDE)),
        ("exit", (EXCLUDE, FULL)),
    ],
)
def test_bound_modes_for(method, modes):
    assert bound_modes_for(method) == modes


def test_bound_modes_for_unknown():
    with pytest.raises(UnsupportedOptionError):
        bound_modes_for("quarter")


def test_bound_mode_values():
    assert BoundMode("countAs0.5") is HALF
    assert [m.weight for m in (EXCLUDE, HALF, FULL)] == [0.0, 0.5, 1.0]


def test_span_rejects_end_before_start():
    with pytest.raises(ValueError):
        Span(5, 4)
