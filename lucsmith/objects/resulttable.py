"""Sparse, coordinate-keyed predicate results.

A ResultTable has the coordinate columns ``x`` and ``y`` followed by one
column per timeline date (``YYYY-MM-DD``). A cell holds the class name that
matched at that date, or ``None`` when the class is absent. A table with no
rows is the "never holds" outcome passed along by predicates.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

COORD_COLUMNS = ("x", "y")


@dataclass(frozen=True)
class ResultTable:
    """Result of a temporal predicate.

    Attributes:
        data: DataFrame with ``x``, ``y`` and one column per date.
    """

    data: pd.DataFrame

    def __post_init__(self) -> None:
        """Validate columns and normalize absent cells to None."""
        if not isinstance(self.data, pd.DataFrame):
            raise ValueError(f"data must be pandas DataFrame, got {type(self.data)}")

        missing = [col for col in COORD_COLUMNS if col not in self.data.columns]
        if missing:
            raise ValueError(
                f"Coordinate columns {missing} not found in DataFrame. "
                f"Available columns: {list(self.data.columns)}"
            )

        frame = self.data.rename(columns=str)
        if frame.columns.duplicated().any():
            raise ValueError(f"Duplicated columns: {list(frame.columns)}")

        date_cols = [col for col in frame.columns if col not in COORD_COLUMNS]
        coords = frame[list(COORD_COLUMNS)].astype(float)
        cells = frame[date_cols].astype(object)
        cells = cells.where(cells.notna(), None)

        normalized = pd.concat([coords, cells], axis=1).reset_index(drop=True)
        object.__setattr__(self, "data", normalized)

    @classmethod
    def empty(cls, date_columns: Sequence[str] = ()) -> "ResultTable":
        """Create a table without rows."""
        columns = list(COORD_COLUMNS) + list(date_columns)
        return cls(data=pd.DataFrame(columns=columns))

    @property
    def date_columns(self) -> list[str]:
        """Names of the date columns, in table order."""
        return [col for col in self.data.columns if col not in COORD_COLUMNS]

    @property
    def is_empty(self) -> bool:
        """True when no pixel satisfies the predicate."""
        return len(self.data) == 0

    def __len__(self) -> int:
        return len(self.data)

    def coordinates(self) -> set[tuple[float, float]]:
        """Set of ``(x, y)`` pixel coordinates present in the table."""
        return set(zip(self.data["x"].tolist(), self.data["y"].tolist()))

    def get_row(self, x: float, y: float) -> dict[str, Optional[str]]:
        """Date-to-class mapping for one pixel.

        Raises:
            KeyError: If the pixel is not part of the table.
        """
        match = self.data[(self.data["x"] == x) & (self.data["y"] == y)]
        if match.empty:
            raise KeyError(f"Pixel ({x}, {y}) not found in result table")
        return {col: match.iloc[0][col] for col in self.date_columns}

    def to_frame(self) -> pd.DataFrame:
        """Copy of the underlying DataFrame."""
        return self.data.copy()

    def __repr__(self) -> str:
        """String representation."""
        dates = self.date_columns
        span = f", dates={dates[0]}..{dates[-1]}" if dates else ""
        return f"ResultTable(n_rows={len(self)}, n_dates={len(dates)}{span})"
