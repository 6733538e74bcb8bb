"""Parsing of tab-delimited travel record text.

Each row has up to six positional fields::

    start  end  name  sub_name  sub_start  sub_end

A row with ``start``/``end``/``name`` opens a new trip. A row with only the
sub fields adds a detail to the current trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from travel_stats.dateutils import date_str_to_num
from travel_stats.errors import FormatError, StateError
from travel_stats.models import FIELD_DELIMITER, DetailSpan, TravelRecord

logger = logging.getLogger(__name__)

_FIELD_COUNT = 6


@dataclass(frozen=True, slots=True)
class RecordsSummary:
    """Quick summary of a parsed records text."""

    rows_total: int
    rows_ignored: int
    records: int
    details: int
    min_day: int | None
    max_day: int | None


@dataclass(frozen=True, slots=True)
class _Row:
    start: str
    end: str
    name: str
    sub_name: str
    sub_start: str
    sub_end: str

    @property
    def is_trip(self) -> bool:
        return bool(self.start and self.end and self.name)

    @property
    def is_continuation(self) -> bool:
        return not (self.start or self.end or self.name) and bool(self.sub_name)


@dataclass(frozen=True, slots=True)
class _AwaitingTopLevel:
    """No trip row has been seen yet."""


@dataclass(slots=True)
class _HasCurrent:
    """A trip is open and may still receive detail rows."""

    start: int
    end: int
    name: str
    details: list[DetailSpan] = field(default_factory=list)

    def to_record(self) -> TravelRecord:
        return TravelRecord(start=self.start, end=self.end, name=self.name, details=tuple(self.details))


def _split_row(line: str) -> _Row:
    cells = [c.strip() for c in line.split(FIELD_DELIMITER)]
    cells = (cells + [""] * _FIELD_COUNT)[:_FIELD_COUNT]
    return _Row(*cells)


def _to_num(text: str, row_no: int) -> int:
    try:
        return date_str_to_num(text)
    except FormatError as exc:
        raise FormatError(f"第 {row_no} 行：{exc}") from exc


def _open_trip(row: _Row, row_no: int) -> _HasCurrent:
    start = _to_num(row.start, row_no)
    end = _to_num(row.end, row_no)
    current = _HasCurrent(start=start, end=end, name=row.name)
    if row.sub_name:
        # inline first detail; empty sub dates fall back to the trip's dates
        current.details.append(
            DetailSpan(
                start=_to_num(row.sub_start or row.start, row_no),
                end=_to_num(row.sub_end or row.end, row_no),
                name=row.sub_name,
            )
        )
    return current


def _parse_rows(text: str) -> tuple[list[TravelRecord], int, int]:
    records: list[TravelRecord] = []
    state: _AwaitingTopLevel | _HasCurrent = _AwaitingTopLevel()
    rows_total = 0
    ignored = 0

    for row_no, line in enumerate(text.split("\n"), start=1):
        rows_total += 1
        row = _split_row(line)

        if row.is_trip:
            if isinstance(state, _HasCurrent):
                records.append(state.to_record())
            state = _open_trip(row, row_no)
        elif row.is_continuation:
            if isinstance(state, _AwaitingTopLevel):
                raise StateError(f"第 {row_no} 行：明细行 {row.sub_name!r} 之前没有任何行程行")
            state.details.append(
                DetailSpan(
                    start=_to_num(row.sub_start, row_no),
                    end=_to_num(row.sub_end, row_no),
                    name=row.sub_name,
                )
            )
        elif line.strip():
            ignored += 1
            logger.debug("忽略第 %s 行：%r", row_no, line)

    if isinstance(state, _HasCurrent):
        records.append(state.to_record())
    return records, rows_total, ignored


def parse(text: str) -> list[TravelRecord]:
    """Parse raw record text into travel records.

    Args:
        text: Tab-delimited rows separated by newlines. No header row.

    Returns:
        Records in row order. Empty text yields an empty list.

    Raises:
        FormatError: If any date field is malformed. Nothing is returned in that case.
        StateError: If a detail continuation row comes before any trip row.
    """

    records, _, ignored = _parse_rows(text)
    if ignored > 0:
        logger.warning("记录中有 %s 行格式不符已忽略", ignored)
    return records


def summarize_records(
    records: Sequence[TravelRecord],
    rows_total: int | None = None,
    rows_ignored: int = 0,
) -> RecordsSummary:
    """Build a summary of already-parsed records."""

    days = [r.start for r in records] + [r.end for r in records]
    days += [d.start for r in records for d in r.details] + [d.end for r in records for d in r.details]
    return RecordsSummary(
        rows_total=rows_total if rows_total is not None else len(records),
        rows_ignored=rows_ignored,
        records=len(records),
        details=sum(len(r.details) for r in records),
        min_day=min(days) if days else None,
        max_day=max(days) if days else None,
    )


def load_records(path: str | Path) -> tuple[list[TravelRecord], RecordsSummary]:
    """Read a UTF-8 records file and parse it.

    Args:
        path: Path to a tab-delimited records file.

    Returns:
        (records, summary)
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    records, rows_total, ignored = _parse_rows(text)
    if ignored > 0:
        logger.warning("%s 中有 %s 行格式不符已忽略", p, ignored)
    return records, summarize_records(records, rows_total=rows_total, rows_ignored=ignored)
