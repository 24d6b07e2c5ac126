"""Per-year, per-class measures of a predicate result.

Layer 2: Primitives - Pure operations.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from lucsmith.objects.resulttable import ResultTable
from lucsmith.objects.timeline import Timeline, to_timestamp
from lucsmith.utils.errors import DateNotFoundError, raise_parameter_error

logger = logging.getLogger(__name__)

MEASURES_COLUMNS = [
    "year",
    "class",
    "pixel_count",
    "area_km2",
    "cumulative_sum",
    "relative_frequency",
    "cumulative_relative_frequency",
]


def pixel_area_km2(pixel_count: float, pixel_resolution: float) -> float:
    """Area in km² covered by ``pixel_count`` square pixels.

    Args:
        pixel_count: Number of pixels.
        pixel_resolution: Pixel side length in meters.

    Returns:
        ``pixel_count * pixel_resolution**2 / 1e6``.
    """
    return pixel_count * pixel_resolution**2 / 1e6


def result_measures(
    table: ResultTable,
    pixel_resolution: float,
    timeline: Optional[Timeline] = None,
) -> pd.DataFrame:
    """Count pixels and area per year and class in a result table.

    Each date column contributes the number of cells holding each class
    label; counts of columns in the same year are summed.

    Args:
        table: Predicate result.
        pixel_resolution: Pixel side length in meters, e.g. 61.006.
        timeline: Optional timeline; every date column must belong to it.

    Returns:
        DataFrame with columns ``year``, ``class``, ``pixel_count``,
        ``area_km2``, ``cumulative_sum`` (accumulated area),
        ``relative_frequency`` (percent of all counted pixels) and
        ``cumulative_relative_frequency``, ordered by year then class.

    Raises:
        ParameterError: If ``pixel_resolution`` is not positive.
        DateNotFoundError: If a date column is not part of ``timeline``.

    Example:
        >>> measures = result_measures(deforestation, pixel_resolution=61.006)
        >>> measures[["year", "area_km2"]].head()
    """
    if pixel_resolution is None or pixel_resolution <= 0:
        raise_parameter_error(
            "pixel_resolution", pixel_resolution, constraint="must be positive"
        )

    date_columns = table.date_columns
    if timeline is not None:
        missing = [col for col in date_columns if col not in timeline.labels]
        if missing:
            raise DateNotFoundError(
                f"Date columns {missing} are not part of the timeline"
            )

    counts: list[dict] = []
    for col in date_columns:
        year = to_timestamp(col).year
        column_counts = table.data[col].dropna().value_counts()
        for class_name, count in column_counts.items():
            counts.append({"year": year, "class": class_name, "pixel_count": count})

    if not counts:
        logger.info("Result table has no class occurrences to measure")
        return pd.DataFrame(columns=MEASURES_COLUMNS)

    measures = (
        pd.DataFrame(counts)
        .groupby(["year", "class"], as_index=False)["pixel_count"]
        .sum()
        .sort_values(["year", "class"], kind="mergesort")
        .reset_index(drop=True)
    )
    measures["pixel_count"] = measures["pixel_count"].astype(np.int64)

    total = measures["pixel_count"].sum()
    measures["area_km2"] = pixel_area_km2(measures["pixel_count"], pixel_resolution)
    measures["cumulative_sum"] = measures["area_km2"].cumsum()
    measures["relative_frequency"] = measures["pixel_count"] / total * 100
    measures["cumulative_relative_frequency"] = measures["relative_frequency"].cumsum()

    logger.info(
        f"Measured {total:,} pixels over {measures['year'].nunique()} years "
        f"({measures['area_km2'].sum():.2f} km²)"
    )
    return measures[MEASURES_COLUMNS]
