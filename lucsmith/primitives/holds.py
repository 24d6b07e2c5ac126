"""HOLDS predicate over a classified raster.

Layer 2: Primitives - Pure operations.

HOLDS is true at a location when a class occupies it during a time
interval. Two Allen relations between the class occurrence and the interval
are supported:

- ``equals``: the class is present at every date of the interval.
- ``contains``: the class is present at least once inside the interval.
"""

import logging
from typing import Literal

import numpy as np
import pandas as pd

from lucsmith.objects.classified_raster import RasterSource
from lucsmith.objects.labelset import LabelSet
from lucsmith.objects.resulttable import COORD_COLUMNS, ResultTable
from lucsmith.objects.timeline import Timeline
from lucsmith.primitives.intervals import IntervalLike, as_interval
from lucsmith.utils.errors import raise_parameter_error, raise_validation_error

logger = logging.getLogger(__name__)

RELATIONS = ("equals", "contains")

Relation = Literal["equals", "contains"]


def validate_relation(relation_interval: str, parameter_name: str = "relation_interval") -> str:
    """Check that a relation is one of ``equals`` or ``contains``.

    Raises:
        ParameterError: For any other value.
    """
    if relation_interval not in RELATIONS:
        raise_parameter_error(
            parameter_name,
            relation_interval,
            valid_values=list(RELATIONS),
            suggestion="'equals' or 'contains' must be defined",
        )
    return relation_interval


def holds(
    raster: RasterSource,
    class_name: str,
    time_interval: IntervalLike,
    labels: LabelSet,
    timeline: Timeline,
    relation_interval: Relation = "contains",
) -> ResultTable:
    """Evaluate HOLDS(location, class, interval) for every pixel.

    Args:
        raster: Classified raster, one layer per timeline date.
        class_name: Class of interest, e.g. 'Forest'.
        time_interval: Interval or ``(start, end)`` pair of timeline dates.
        labels: Class names in raster code order.
        timeline: Observation dates of the raster layers.
        relation_interval: 'equals' (class at every date) or 'contains'
            (class at least once), default 'contains'.

    Returns:
        ResultTable with one column per date of the interval. Cells hold
        ``class_name`` where the class is present and None elsewhere. Pixels
        where the relation does not hold are dropped; the table is empty
        when no pixel qualifies.

    Raises:
        InvalidIntervalError: If the interval is malformed.
        DateNotFoundError: If an interval endpoint is not in the timeline.
        ParameterError: If the relation or the class is unknown.
        DataValidationError: If raster layers and timeline disagree.

    Example:
        >>> forest = holds(
        ...     raster, "Forest", ("2001-09-01", "2003-09-01"),
        ...     labels=labels, timeline=timeline, relation_interval="equals",
        ... )
    """
    validate_relation(relation_interval)
    interval = as_interval(time_interval)
    code = labels.code_of(class_name)

    n_layers = raster.layer_count()
    if n_layers != len(timeline):
        raise_validation_error(
            "Raster layers and timeline dates must match one to one",
            expected=f"{len(timeline)} layers",
            received=f"{n_layers} layers",
            suggestion="Provide one timeline date per raster layer",
        )

    start_idx = timeline.index_of(interval.start)
    end_idx = timeline.index_of(interval.end)
    layer_indices = list(range(start_idx, end_idx + 1))

    coords, values = raster.get_layer_values(layer_indices)
    values = np.asarray(values)

    marks = values == code
    nodata = getattr(raster, "nodata", None)
    if nodata is not None:
        marks &= values != nodata

    if relation_interval == "equals":
        keep = marks.all(axis=1)
    else:
        keep = marks.any(axis=1)

    date_columns = timeline.labels[start_idx : end_idx + 1]

    if not keep.any():
        logger.info(
            f"Class '{class_name}' does not hold ({relation_interval}) "
            f"during {interval!r}"
        )
        return ResultTable.empty(date_columns)

    kept_marks = marks[keep]
    cells = np.where(kept_marks, class_name, None).astype(object)

    frame = pd.DataFrame(cells, columns=date_columns)
    frame.insert(0, COORD_COLUMNS[0], coords[keep, 0])
    frame.insert(1, COORD_COLUMNS[1], coords[keep, 1])
    frame = frame.sort_values(list(COORD_COLUMNS), kind="mergesort")

    logger.info(
        f"Class '{class_name}' holds ({relation_interval}) during {interval!r} "
        f"at {int(keep.sum()):,} pixels"
    )
    return ResultTable(data=frame)
