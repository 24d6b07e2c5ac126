"""Timeline and Interval objects.

A Timeline is the ordered list of observation dates of a classified raster,
one date per layer. Intervals are closed date ranges evaluated against it.
Dates are rendered as ``YYYY-MM-DD`` strings, which are also the column
names of ResultTable objects.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence, Union

import pandas as pd

from lucsmith.utils.errors import DateNotFoundError, InvalidIntervalError

DateLike = Union[str, date, pd.Timestamp]

DATE_FORMAT = "%Y-%m-%d"


def to_timestamp(value: Any) -> pd.Timestamp:
    """Parse a date-like value into a midnight-normalized Timestamp.

    Args:
        value: String, date, datetime or Timestamp.

    Returns:
        Normalized pandas Timestamp.

    Raises:
        InvalidIntervalError: If the value cannot be parsed as a date.
    """
    if value is None:
        raise InvalidIntervalError("Date must be defined, got None")
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise InvalidIntervalError(
            f"Cannot parse date: {value!r}",
            suggestion="Use the format 'YYYY-MM-DD', e.g. '2001-09-01'",
        ) from e
    if pd.isna(ts):
        raise InvalidIntervalError(f"Cannot parse date: {value!r}")
    return ts.normalize()


def date_label(value: Any) -> str:
    """Render a date-like value as a ``YYYY-MM-DD`` column label."""
    return to_timestamp(value).strftime(DATE_FORMAT)


@dataclass(frozen=True)
class Interval:
    """Closed date interval with ``start <= end``.

    Attributes:
        start: First date of the interval.
        end: Last date of the interval.
    """

    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self) -> None:
        """Parse and validate interval bounds."""
        start = to_timestamp(self.start)
        end = to_timestamp(self.end)
        if start > end:
            raise InvalidIntervalError(
                f"Interval start {start.strftime(DATE_FORMAT)} is after "
                f"end {end.strftime(DATE_FORMAT)}",
                suggestion="First date needs to be less than or equal to the second",
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def is_instant(self) -> bool:
        """True when the interval covers a single date."""
        return self.start == self.end

    @property
    def labels(self) -> tuple[str, str]:
        """Start and end as ``YYYY-MM-DD`` strings."""
        return self.start.strftime(DATE_FORMAT), self.end.strftime(DATE_FORMAT)

    def contains(self, value: DateLike) -> bool:
        """Check whether a date falls inside the closed interval."""
        ts = to_timestamp(value)
        return self.start <= ts <= self.end

    def overlaps(self, other: "Interval") -> bool:
        """Check whether two closed intervals share at least one date."""
        return self.start <= other.end and other.start <= self.end

    def precedes(self, other: "Interval") -> bool:
        """Check whether this interval ends strictly before ``other`` starts."""
        return self.end < other.start

    def __repr__(self) -> str:
        """String representation."""
        start, end = self.labels
        return f"Interval({start}, {end})"


@dataclass(frozen=True)
class Timeline:
    """Ordered observation dates of a classified raster.

    Position ``i`` of the timeline is the date of raster layer ``i``.

    Attributes:
        dates: Strictly increasing dates. Any sequence of date-like values
            is accepted and stored as a normalized DatetimeIndex.
    """

    dates: pd.DatetimeIndex

    def __post_init__(self) -> None:
        """Validate timeline dates."""
        try:
            dates = pd.DatetimeIndex(pd.to_datetime(list(self.dates))).normalize()
        except (ValueError, TypeError) as e:
            raise ValueError(f"Timeline contains unparseable dates: {e}") from e

        if len(dates) == 0:
            raise ValueError("Timeline must contain at least one date")
        if dates.hasnans:
            raise ValueError("Timeline cannot contain missing dates")
        if not dates.is_unique or not dates.is_monotonic_increasing:
            raise ValueError(
                "Timeline dates must be strictly increasing, "
                f"got {list(dates.strftime(DATE_FORMAT))}"
            )

        object.__setattr__(self, "dates", dates)

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def labels(self) -> list[str]:
        """All dates as ``YYYY-MM-DD`` strings."""
        return list(self.dates.strftime(DATE_FORMAT))

    def index_of(self, value: DateLike) -> int:
        """Resolve a date to its layer index by exact membership.

        Raises:
            DateNotFoundError: If the date is not part of the timeline.
        """
        ts = to_timestamp(value)
        position = self.dates.get_indexer([ts])[0]
        if position < 0:
            raise DateNotFoundError(
                f"Date {ts.strftime(DATE_FORMAT)} is not part of the timeline",
                suggestion=f"Use one of: {', '.join(self.labels)}",
            )
        return int(position)

    def dates_between(self, interval: Interval) -> list[str]:
        """Labels of all timeline dates inside a closed interval."""
        mask = (self.dates >= interval.start) & (self.dates <= interval.end)
        return list(self.dates[mask].strftime(DATE_FORMAT))

    def pairs(self) -> list[tuple[str, str]]:
        """Consecutive date pairs ``(date[i], date[i + 1])`` as labels."""
        labels = self.labels
        return list(zip(labels[:-1], labels[1:]))

    @classmethod
    def from_sequence(cls, dates: Sequence[DateLike]) -> "Timeline":
        """Create a timeline from any sequence of date-like values."""
        return cls(dates=list(dates))

    def __repr__(self) -> str:
        """String representation."""
        labels = self.labels
        return f"Timeline(n_dates={len(labels)}, start={labels[0]}, end={labels[-1]})"
