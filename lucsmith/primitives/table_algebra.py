"""Result-table algebra: deduplication, column removal and union merge.

Layer 2: Primitives - Pure operations.

Every operation returns a new ResultTable; inputs are never modified.
"""

import logging
from typing import Any, Iterable, Optional, Union

import pandas as pd

from lucsmith.objects.resulttable import COORD_COLUMNS, ResultTable
from lucsmith.objects.timeline import date_label
from lucsmith.utils.errors import InvalidIntervalError, ParameterError

logger = logging.getLogger(__name__)


def sort_rows(frame: pd.DataFrame) -> pd.DataFrame:
    """Order rows by coordinate so results do not depend on input order."""
    return frame.sort_values(list(COORD_COLUMNS), kind="mergesort").reset_index(
        drop=True
    )


def drop_duplicate_rows(table: ResultTable) -> ResultTable:
    """Remove rows that repeat an earlier row cell by cell.

    Absent cells compare equal to each other.
    """
    frame = table.data.drop_duplicates(keep="first")
    removed = len(table) - len(frame)
    if removed:
        logger.debug(f"Dropped {removed} duplicated rows")
    return ResultTable(data=frame)


def _column_name(name: Any) -> str:
    try:
        return date_label(name)
    except InvalidIntervalError:
        return str(name)


def remove_columns(
    table: ResultTable, name_columns: Union[str, Any, Iterable[Any]]
) -> ResultTable:
    """Remove date columns from a result table.

    Args:
        table: Input table.
        name_columns: A date or an iterable of dates (strings or date
            objects). Dates without a column are ignored.

    Returns:
        New table without the named columns.

    Raises:
        ParameterError: If a coordinate column is named.

    Example:
        >>> evolve = remove_columns(evolve, ["2007-09-01"])
    """
    if isinstance(name_columns, (str, bytes)) or not isinstance(name_columns, Iterable):
        name_columns = [name_columns]

    names = [_column_name(name) for name in name_columns]
    protected = [name for name in names if name in COORD_COLUMNS]
    if protected:
        raise ParameterError(
            f"Coordinate columns {protected} cannot be removed from a result table"
        )

    to_drop = [name for name in names if name in table.date_columns]
    return ResultTable(data=table.data.drop(columns=to_drop))


def merge_tables(*tables: Optional[ResultTable]) -> ResultTable:
    """Union several result tables into one wide table.

    Rows are outer-joined on ``(x, y)``. When two tables carry the same date
    column, the first non-absent value wins. Empty tables and None are
    neutral elements, so a sweep can start from ``merged = None``.

    Args:
        *tables: Tables to merge, in priority order.

    Returns:
        Table with the union of all pixels and date columns, date columns in
        chronological order and rows sorted by coordinate.

    Example:
        >>> merged = None
        >>> for table in per_pair_results:
        ...     merged = merge_tables(merged, table)
    """
    keys = list(COORD_COLUMNS)
    merged: Optional[pd.DataFrame] = None

    for table in tables:
        if table is None or table.is_empty:
            continue
        frame = table.data.set_index(keys)
        frame = frame[~frame.index.duplicated(keep="first")]
        merged = frame if merged is None else merged.combine_first(frame)

    if merged is None:
        return ResultTable.empty()

    # ISO labels sort chronologically
    date_columns = sorted(merged.columns)
    frame = merged[date_columns].reset_index().drop_duplicates(keep="first")

    logger.debug(
        f"Merged {len(tables)} tables into {len(frame):,} rows x "
        f"{len(date_columns)} dates"
    )
    return ResultTable(data=sort_rows(frame))
