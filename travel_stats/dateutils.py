"""Date parsing, day-index conversion and formatting utilities."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

from travel_stats.errors import FormatError
from travel_stats.models import EPOCH

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _date_to_num(d: date) -> int:
    return (d - EPOCH).days


def _build_date(year: int, month: int, day: int, text: str) -> date:
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"无效日期：{text!r}（不存在该日历日期）") from exc


def date_str_to_num(text: str) -> int:
    """Parse a compact ``YYYYMMDD`` date to a day index.

    Args:
        text: Date string such as "20190219".

    Returns:
        Whole days between 1970-01-01 and the given UTC calendar date.

    Raises:
        FormatError: If the text is not 8 ASCII digits or not a valid date.
    """

    if len(text) != 8:
        raise FormatError(f"无效日期：{text!r}。格式应为 YYYYMMDD，例如 20190219")
    if not (text.isascii() and text.isdigit()):
        raise FormatError(f"无效日期：{text!r}。只能包含数字，例如 20190219")
    return _date_to_num(_build_date(int(text[0:4]), int(text[4:6]), int(text[6:8]), text))


def iso_date_str_to_num(text: str) -> int:
    """Parse an ISO ``YYYY-MM-DD`` date to a day index.

    Raises:
        FormatError: If the text does not match the pattern or is not a valid date.
    """

    if not _ISO_DATE_RE.match(text):
        raise FormatError(f"无效日期：{text!r}。格式应为 YYYY-MM-DD，例如 2019-02-19")
    return _date_to_num(_build_date(int(text[0:4]), int(text[5:7]), int(text[8:10]), text))


def num_to_date(day_index: int) -> date:
    """Convert a day index back to a calendar date."""

    return EPOCH + timedelta(days=day_index)


def num_to_date_str(day_index: int) -> str:
    return num_to_date(day_index).strftime("%Y%m%d")


def num_to_iso_date_str(day_index: int) -> str:
    return num_to_date(day_index).isoformat()


def today_utc() -> date:
    """Current calendar date in UTC. The only wall-clock read in the package."""

    return datetime.now(UTC).date()


def _shift_years(d: date, years: int) -> date:
    # Feb 29 in a non-leap target year overflows to Mar 1.
    try:
        return d.replace(year=d.year - years)
    except ValueError:
        return date(d.year - years, 3, 1)


def today(today: date | None = None) -> int:
    """Day index of ``today`` (defaults to the current UTC date)."""

    return _date_to_num(today or today_utc())


def n_days_ago(n: int, today: date | None = None) -> int:
    """Day index ``n`` days before ``today``."""

    return _date_to_num(today or today_utc()) - n


def n_years_ago(n: int, today: date | None = None) -> int:
    """Day index of the same month/day ``n`` calendar years before ``today``."""

    return _date_to_num(_shift_years(today or today_utc(), n))


def one_year_ago(today: date | None = None) -> int:
    return n_years_ago(1, today)


def two_years_ago(today: date | None = None) -> int:
    return n_years_ago(2, today)


def iso_today(today: date | None = None) -> str:
    return (today or today_utc()).isoformat()


def iso_one_year_ago(today: date | None = None) -> str:
    return _shift_years(today or today_utc(), 1).isoformat()


def format_days(days: float) -> str:
    """Render a day total.

    Integral values render without a decimal point; others with one decimal.

    Examples:
        >>> format_days(7)
        '7'
        >>> format_days(6.5)
        '6.5'
    """

    if float(days).is_integer():
        return str(int(days))
    return f"{days:.1f}"
