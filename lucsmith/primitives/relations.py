"""Allen relations between HOLDS results, and the recurrence matcher.

Layer 2: Primitives - Pure operations.

Each function joins two ResultTable objects on pixel coordinates and keeps
the pixels whose class occurrences satisfy a temporal relation:

- ``relation_follows``: the first occurrence ends before the second begins,
  any gap allowed (used by EVOLVE).
- ``relation_meets``: the second occurrence starts at the timeline date
  right after the first one ends (used by CONVERT).
- ``find_recurrences``: the class disappears and then reappears inside the
  second table (used by RECUR).

Reference: J. F. Allen. Towards a general theory of action and time.
Artificial Intelligence, 23(2): 123-154, 1984.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from lucsmith.objects.resulttable import COORD_COLUMNS, ResultTable
from lucsmith.objects.timeline import Timeline
from lucsmith.primitives.table_algebra import sort_rows
from lucsmith.utils.errors import DataValidationError, DateNotFoundError

logger = logging.getLogger(__name__)


def _presence(frame: pd.DataFrame, columns: list[str]) -> np.ndarray:
    """Boolean matrix, True where a cell holds a class."""
    if not columns:
        return np.zeros((len(frame), 0), dtype=bool)
    return frame[columns].notna().to_numpy()


def _join(res1: ResultTable, res2: ResultTable) -> pd.DataFrame:
    shared = set(res1.date_columns) & set(res2.date_columns)
    if shared:
        raise DataValidationError(
            f"Tables share date columns {sorted(shared)}",
            suggestion="Relations combine tables from disjoint time intervals",
        )
    return res1.data.merge(res2.data, on=list(COORD_COLUMNS), how="inner")


def _positions(
    columns: list[str], ordered_dates: list[str]
) -> np.ndarray:
    """Timeline position of every date column."""
    lookup = {label: i for i, label in enumerate(ordered_dates)}
    missing = [col for col in columns if col not in lookup]
    if missing:
        raise DateNotFoundError(f"Date columns {missing} are not part of the timeline")
    return np.array([lookup[col] for col in columns], dtype=int)


def _spans(
    res1: ResultTable, res2: ResultTable, timeline: Optional[Timeline]
) -> tuple[pd.DataFrame, np.ndarray, np.ndarray]:
    """Join two tables and locate each pixel's occurrence boundaries.

    Returns:
        Tuple ``(joined, last1, first2)`` where ``last1`` is the timeline
        position of the last occurrence in ``res1`` and ``first2`` that of the
        first occurrence in ``res2``. Pixels without an occurrence get -1
        and a position past the end respectively.
    """
    cols1, cols2 = res1.date_columns, res2.date_columns
    joined = _join(res1, res2)

    if timeline is not None:
        ordered_dates = timeline.labels
    else:
        # ISO labels sort chronologically
        ordered_dates = sorted(cols1 + cols2)

    pos1 = _positions(cols1, ordered_dates)
    pos2 = _positions(cols2, ordered_dates)
    present1 = _presence(joined, cols1)
    present2 = _presence(joined, cols2)

    last1 = np.where(present1, pos1, -1).max(axis=1, initial=-1)
    first2 = np.where(present2, pos2, len(ordered_dates)).min(
        axis=1, initial=len(ordered_dates)
    )
    has_both = present1.any(axis=1) & present2.any(axis=1)
    last1 = np.where(has_both, last1, -1)
    first2 = np.where(has_both, first2, len(ordered_dates))
    return joined, last1, first2


def _empty_union(res1: ResultTable, res2: ResultTable) -> ResultTable:
    return ResultTable.empty(res1.date_columns + res2.date_columns)


def relation_follows(
    res1: ResultTable,
    res2: ResultTable,
    timeline: Optional[Timeline] = None,
) -> ResultTable:
    """Keep pixels where the ``res1`` occurrence precedes the ``res2`` one.

    Args:
        res1: HOLDS result of the first class and interval.
        res2: HOLDS result of the second class and interval.
        timeline: Timeline ordering the date columns. Defaults to the
            sorted union of both tables' date columns.

    Returns:
        Joined table with the columns of both inputs; empty when either
        input is empty or no pixel qualifies.

    Raises:
        DataValidationError: If the tables share a date column.
    """
    if res1.is_empty or res2.is_empty:
        return _empty_union(res1, res2)

    joined, last1, first2 = _spans(res1, res2, timeline)
    keep = (last1 >= 0) & (last1 < first2)
    logger.debug(f"follows: {int(keep.sum()):,} of {len(joined):,} joined pixels")
    return ResultTable(data=sort_rows(joined[keep]))


def relation_meets(
    res1: ResultTable,
    res2: ResultTable,
    timeline: Optional[Timeline] = None,
) -> ResultTable:
    """Keep pixels where the ``res2`` occurrence starts right after ``res1`` ends.

    Adjacency is measured on the timeline: the first occurrence in ``res2``
    must sit at the date immediately following the last occurrence in
    ``res1``.

    Args:
        res1: HOLDS result of the first class and interval.
        res2: HOLDS result of the second class and interval.
        timeline: Timeline ordering the date columns. Without one, the
            sorted union of both tables' date columns is used, which cannot
            see dates missing from both tables.

    Returns:
        Joined table with the columns of both inputs; empty when either
        input is empty or no pixel qualifies.

    Raises:
        DataValidationError: If the tables share a date column.
        DateNotFoundError: If a date column is not part of ``timeline``.
    """
    if res1.is_empty or res2.is_empty:
        return _empty_union(res1, res2)

    joined, last1, first2 = _spans(res1, res2, timeline)
    keep = (last1 >= 0) & (first2 == last1 + 1)
    logger.debug(f"meets: {int(keep.sum()):,} of {len(joined):,} joined pixels")
    return ResultTable(data=sort_rows(joined[keep]))


def mask_leading_presence(row: np.ndarray) -> np.ndarray:
    """Blank out occurrences that come before the first absence of a row.

    An occurrence with no absence before it continues the earlier interval
    rather than recurring. Rows without an absence are returned unchanged.

    Args:
        row: Cells of one pixel, None where the class is absent.

    Returns:
        New array with leading occurrences replaced by None.

    Example:
        >>> mask_leading_presence(np.array(["F", None, None, "F"], dtype=object))
        array([None, None, None, 'F'], dtype=object)
    """
    masked = np.array(row, dtype=object, copy=True)
    for i, value in enumerate(masked):
        if pd.isna(value):
            break
        masked[i] = None
    else:
        return np.array(row, dtype=object, copy=True)
    return masked


def find_recurrences(res1: ResultTable, res2: ResultTable) -> ResultTable:
    """Find pixels where a class disappears and then reappears.

    ``res2`` rows without any absence are dropped, as are rows where no
    absence is followed by an occurrence. Remaining rows are masked with
    :func:`mask_leading_presence` and joined with ``res1`` on coordinates.

    Args:
        res1: HOLDS ('equals') result of the class over the first interval.
        res2: HOLDS ('contains') result of the class over the second interval.

    Returns:
        Joined table with the columns of both inputs; empty when nothing
        recurs.
    """
    if res1.is_empty or res2.is_empty:
        return _empty_union(res1, res2)

    cols2 = res2.date_columns
    present = _presence(res2.data, cols2)
    complete = present.all(axis=1)
    reappears = (~present[:, :-1] & present[:, 1:]).any(axis=1)
    candidates = res2.data[~complete & reappears]

    if candidates.empty:
        logger.info("No pixel disappears and reappears in the second interval")
        return _empty_union(res1, res2)

    masked = np.vstack(
        [mask_leading_presence(row) for row in candidates[cols2].to_numpy()]
    )
    masked_frame = pd.DataFrame(masked, columns=cols2, index=candidates.index)
    masked_frame.insert(0, COORD_COLUMNS[0], candidates[COORD_COLUMNS[0]])
    masked_frame.insert(1, COORD_COLUMNS[1], candidates[COORD_COLUMNS[1]])

    joined = _join(res1, ResultTable(data=masked_frame))
    logger.debug(f"recur: {len(joined):,} pixels recur")
    return ResultTable(data=sort_rows(joined))
