"""Data models for travel spans, records and aggregated results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Final


EPOCH: Final[date] = date(1970, 1, 1)
FIELD_DELIMITER: Final[str] = "\t"
OTHER_THRESHOLD_PERCENT: Final[float] = 2.0
DEFAULT_OTHER_NAME: Final[str] = "Other"


class BoundMode(str, Enum):
    """How the start or end day of a span contributes to a day count."""

    EXCLUDE = "countAs0"
    HALF = "countAs0.5"
    FULL = "countAs1"

    @property
    def weight(self) -> float:
        if self is BoundMode.FULL:
            return 1.0
        if self is BoundMode.HALF:
            return 0.5
        return 0.0


@dataclass(frozen=True, slots=True)
class Span:
    """An inclusive day interval [start, end].

    Attributes:
        start: Entry day as a day index (days since 1970-01-01).
        end: Exit day as a day index. Must not be before ``start``.
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"区间结束早于开始：start={self.start}, end={self.end}")


@dataclass(frozen=True, slots=True)
class DetailSpan:
    """A named sub-destination span inside a trip."""

    start: int
    end: int
    name: str


@dataclass(frozen=True, slots=True)
class TravelRecord:
    """One top-level trip segment.

    Note:
        ``details`` is expected to partition ``[start, end]`` but this is not
        enforced; the parser stores what the user wrote.
    """

    start: int
    end: int
    name: str
    details: tuple[DetailSpan, ...] = ()

    @property
    def has_details(self) -> bool:
        return bool(self.details)


@dataclass(frozen=True, slots=True)
class AggregatedResult:
    """Days spent at one destination and its share of the total."""

    name: str
    days: float
    percentage: float
