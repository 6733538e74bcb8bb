"""Per-destination day aggregation and ranking."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from typing import Final, Iterable, Sequence

from travel_stats.counting import bound_modes_for, count_spans
from travel_stats.dateutils import (
    format_days,
    iso_date_str_to_num,
    n_days_ago,
    one_year_ago,
    two_years_ago,
)
from travel_stats.errors import UnsupportedOptionError
from travel_stats.models import (
    DEFAULT_OTHER_NAME,
    OTHER_THRESHOLD_PERCENT,
    AggregatedResult,
    DetailSpan,
    TravelRecord,
)

logger = logging.getLogger(__name__)

BREAKDOWNS: Final[tuple[str, ...]] = ("region", "details")
PERIOD_KINDS: Final[tuple[str, ...]] = ("all", "2years", "1year", "180", "custom")
SORT_KEYS: Final[tuple[str, ...]] = ("days", "time")
RECENT_DAYS: Final[int] = 180


@dataclass(frozen=True, slots=True)
class PeriodSpec:
    """Statistics period.

    Attributes:
        kind: One of "all", "2years", "1year", "180" (or "180days") and "custom".
        custom_from: ISO date (YYYY-MM-DD) for the lower bound of a custom range.
        custom_to: ISO date for the upper bound of a custom range.
            Both bounds are required for "custom"; an empty one is a FormatError.
    """

    kind: str = "all"
    custom_from: str = ""
    custom_to: str = ""


def resolve_cutoffs(period: PeriodSpec, today: date | None = None) -> tuple[int | None, int | None]:
    """Resolve a period into (lower_cutoff, upper_cutoff) day indexes.

    Args:
        period: Period selection.
        today: Reference date for relative periods. Defaults to the current UTC date.

    Raises:
        UnsupportedOptionError: If the period kind is unknown.
        FormatError: If a custom bound is not a valid ISO date.
    """

    kind = period.kind
    if kind == "all":
        return None, None
    if kind == "2years":
        return two_years_ago(today), None
    if kind == "1year":
        return one_year_ago(today), None
    if kind in ("180", "180days"):
        return n_days_ago(RECENT_DAYS, today), None
    if kind == "custom":
        return iso_date_str_to_num(period.custom_from), iso_date_str_to_num(period.custom_to)
    raise UnsupportedOptionError(f"未知统计周期：{kind!r}。可选：{', '.join(PERIOD_KINDS)}")


def _spans_of(record: TravelRecord, breakdown: str) -> Sequence[TravelRecord | DetailSpan]:
    if breakdown == "details" and record.has_details:
        return record.details
    return (record,)


def group_spans(records: Iterable[TravelRecord], breakdown: str = "region") -> dict[str, list[TravelRecord | DetailSpan]]:
    """Group the spans of records by destination name.

    Args:
        records: Parsed travel records.
        breakdown: "region" groups by trip name; "details" groups by detail name,
            falling back to the trip itself when it has no details.

    Returns:
        Mapping name -> spans, in first-seen order.
    """

    if breakdown not in BREAKDOWNS:
        raise UnsupportedOptionError(f"未知细分方式：{breakdown!r}。可选：{', '.join(BREAKDOWNS)}")

    groups: dict[str, list[TravelRecord | DetailSpan]] = {}
    for record in records:
        for item in _spans_of(record, breakdown):
            groups.setdefault(item.name, []).append(item)
    return groups


def aggregate(
    records: Sequence[TravelRecord],
    breakdown: str = "region",
    counting_method: str = "full",
    period: PeriodSpec = PeriodSpec(),
    *,
    today: date | None = None,
    sort_by: str = "days",
) -> list[AggregatedResult]:
    """Compute days and percentage per destination.

    Args:
        records: Parsed travel records.
        breakdown: "region" or "details".
        counting_method: "full", "half", "entry" or "exit".
        period: Statistics period.
        today: Reference date for relative periods (injectable for tests).
        sort_by: Only "days" is implemented.

    Returns:
        Results sorted by days descending. Groups with zero days are omitted.

    Raises:
        UnsupportedOptionError: For unknown options, or ``sort_by="time"``.
    """

    if sort_by == "time":
        raise UnsupportedOptionError("按时间排序尚未实现")
    if sort_by not in SORT_KEYS:
        raise UnsupportedOptionError(f"未知排序方式：{sort_by!r}。可选：{', '.join(SORT_KEYS)}")

    lower_mode, upper_mode = bound_modes_for(counting_method)
    lower_cutoff, upper_cutoff = resolve_cutoffs(period, today)
    groups = group_spans(records, breakdown)
    logger.debug(
        "aggregate: groups=%s, modes=(%s, %s), cutoffs=(%s, %s)",
        len(groups),
        lower_mode.value,
        upper_mode.value,
        lower_cutoff,
        upper_cutoff,
    )

    days_by_name: dict[str, float] = {}
    for name, spans in groups.items():
        days = count_spans(spans, lower_mode, upper_mode, lower_cutoff, upper_cutoff)
        if days == 0:
            logger.debug("跳过 0 天的目的地：%s", name)
            continue
        days_by_name[name] = days

    total = sum(days_by_name.values())
    results = [
        AggregatedResult(name=name, days=days, percentage=(days / total) * 100 if total > 0 else 0.0)
        for name, days in days_by_name.items()
    ]
    # sorted() is stable, so ties keep grouping order
    return sorted(results, key=lambda r: r.days, reverse=True)


def total_days(results: Iterable[AggregatedResult]) -> float:
    """Sum of days over results."""

    return sum(r.days for r in results)


def merge_small_entries(
    results: Sequence[AggregatedResult],
    threshold: float = OTHER_THRESHOLD_PERCENT,
    other_name: str = DEFAULT_OTHER_NAME,
) -> list[AggregatedResult]:
    """Fold entries below ``threshold`` percent into one trailing "Other" entry.

    The kept entries stay in their original order; the synthetic entry is appended last.
    """

    kept = [r for r in results if r.percentage >= threshold]
    small = [r for r in results if r.percentage < threshold]
    if not small:
        return list(results)
    other = AggregatedResult(
        name=other_name,
        days=sum(r.days for r in small),
        percentage=sum(r.percentage for r in small),
    )
    return kept + [other]


def results_to_csv_text(results: Iterable[AggregatedResult]) -> str:
    """Render results as CSV text (for download in the UI)."""

    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=["name", "days", "percentage"], lineterminator="\n")
    w.writeheader()
    for r in results:
        w.writerow(
            {
                "name": r.name,
                "days": format_days(r.days),
                "percentage": f"{r.percentage:.1f}",
            }
        )
    return buf.getvalue()
