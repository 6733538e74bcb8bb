"""Weighted day counting over a set of day spans."""

from __future__ import annotations

from typing import Iterable, Protocol

from travel_stats.errors import UnsupportedOptionError
from travel_stats.models import BoundMode


class SpanLike(Protocol):
    @property
    def start(self) -> int: ...

    @property
    def end(self) -> int: ...


COUNTING_METHODS: dict[str, tuple[BoundMode, BoundMode]] = {
    "full": (BoundMode.FULL, BoundMode.FULL),
    "half": (BoundMode.HALF, BoundMode.HALF),
    "entry": (BoundMode.FULL, BoundMode.EXCLUDE),
    "exit": (BoundMode.EXCLUDE, BoundMode.FULL),
}


def bound_modes_for(counting_method: str) -> tuple[BoundMode, BoundMode]:
    """Map a counting method to (lower, upper) bound modes.

    Raises:
        UnsupportedOptionError: If the method is unknown.
    """

    try:
        return COUNTING_METHODS[counting_method]
    except KeyError as exc:
        raise UnsupportedOptionError(
            f"未知计数方式：{counting_method!r}。可选：{', '.join(COUNTING_METHODS)}"
        ) from exc


def _merge_weight(weights: dict[int, float], day: int, weight: float) -> None:
    if weight > 0:
        weights[day] = max(weights.get(day, 0.0), weight)


def count_spans(
    spans: Iterable[SpanLike],
    lower_bound_mode: BoundMode,
    upper_bound_mode: BoundMode,
    lower_cutoff: int | None = None,
    upper_cutoff: int | None = None,
) -> float:
    """Count days covered by spans with weighted boundary days.

    Interior days (strictly between start and end) count 1 each and are summed
    per span, so overlapping interiors of different spans are counted twice.
    Start and end days are weighted by the bound modes and recorded in a
    day -> weight table; a day that is a boundary of several spans counts
    once, with the largest weight.

    Args:
        spans: Objects with ``start``/``end`` day indexes. Need not be sorted or disjoint.
        lower_bound_mode: Weight of each span's start day.
        upper_bound_mode: Weight of each span's end day.
        lower_cutoff: Days before this are ignored; spans are clamped to it.
        upper_cutoff: Days after this are ignored; spans are clamped to it.

    Returns:
        Total weighted day count (a multiple of 0.5).
    """

    lower_weight = lower_bound_mode.weight
    upper_weight = upper_bound_mode.weight
    weights: dict[int, float] = {}
    interior = 0

    for span in spans:
        start, end = span.start, span.end
        if lower_cutoff is not None:
            if end < lower_cutoff:
                continue
            start = max(start, lower_cutoff)
        if upper_cutoff is not None:
            if start > upper_cutoff:
                continue
            end = min(end, upper_cutoff)

        _merge_weight(weights, start, lower_weight)
        _merge_weight(weights, end, upper_weight)
        interior += 0 if start == end else max(0, end - start - 1)

    return interior + sum(weights.values())
