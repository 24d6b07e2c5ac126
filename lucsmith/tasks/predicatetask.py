"""Land-use change predicates RECUR, EVOLVE and CONVERT.

Layer 3: Tasks - User intent translation.

Each predicate validates its two intervals, evaluates HOLDS once per
interval and combines both results with an Allen relation:

- RECUR(location, class, interval1, interval2): the class holds during the
  whole first interval, then disappears and reappears in the second.
- EVOLVE(location, class1, interval1, class2, interval2): class1 occurs in
  the first interval and is later followed by class2 (relation follows).
- CONVERT(location, class1, interval1, class2, interval2): class1 is
  immediately replaced by class2 (relation meets).

A predicate whose inputs never hold logs that it cannot be applied and
returns an empty ResultTable, so sweeps over many dates keep going.
"""

import logging
from typing import Optional

import pandas as pd

from lucsmith.config import PredicateConfig, configured_labels
from lucsmith.objects.classified_raster import RasterSource
from lucsmith.objects.labelset import LabelSet
from lucsmith.objects.resulttable import ResultTable
from lucsmith.objects.timeline import Interval, Timeline, date_label
from lucsmith.primitives.holds import Relation, holds, validate_relation
from lucsmith.primitives.intervals import IntervalLike, as_interval, check_ordered
from lucsmith.primitives.measures import result_measures
from lucsmith.primitives.relations import (
    find_recurrences,
    relation_follows,
    relation_meets,
)
from lucsmith.primitives.table_algebra import (
    drop_duplicate_rows,
    merge_tables,
    remove_columns,
)
from lucsmith.utils.errors import ParameterError

logger = logging.getLogger(__name__)


def _interval_pair(
    time_interval1: IntervalLike, time_interval2: IntervalLike
) -> tuple[Interval, Interval]:
    return check_ordered(as_interval(time_interval1), as_interval(time_interval2))


def first_interval_columns(interval: Interval, timeline: Timeline) -> list[str]:
    """Date columns that belong to the first interval of a predicate."""
    if interval.is_instant:
        return [date_label(interval.start)]
    return timeline.dates_between(interval)


def _finish(
    result: ResultTable,
    first: Interval,
    timeline: Timeline,
    remove_column: bool,
) -> ResultTable:
    result = drop_duplicate_rows(result)
    if remove_column:
        result = remove_columns(result, first_interval_columns(first, timeline))
    return result


def pred_holds(
    raster: RasterSource,
    class_name: str,
    time_interval: IntervalLike,
    labels: LabelSet,
    timeline: Timeline,
    relation_interval: Relation = "contains",
) -> ResultTable:
    """HOLDS(location, class, interval); see :func:`lucsmith.primitives.holds`."""
    return holds(
        raster,
        class_name,
        time_interval,
        labels=labels,
        timeline=timeline,
        relation_interval=relation_interval,
    )


def pred_recur(
    raster: RasterSource,
    class_name: str,
    time_interval1: IntervalLike,
    time_interval2: IntervalLike,
    labels: LabelSet,
    timeline: Timeline,
    remove_column: bool = True,
) -> ResultTable:
    """RECUR: a class holds, disappears and then reappears.

    The class must hold ('equals') over ``time_interval1`` and occur
    ('contains') in ``time_interval2``, with an absence followed by a new
    occurrence inside ``time_interval2``.

    Args:
        raster: Classified raster, one layer per timeline date.
        class_name: Class of interest, e.g. 'Forest'.
        time_interval1: First interval, e.g. ('2001-09-01', '2001-09-01').
        time_interval2: Second interval, at least two timeline dates.
        labels: Class names in raster code order.
        timeline: Observation dates of the raster layers.
        remove_column: Drop the dates of ``time_interval1`` from the output.

    Returns:
        ResultTable of recurring pixels; empty when the predicate cannot
        be applied.

    Raises:
        OverlapError: If the intervals overlap.
        InvalidIntervalError: If an interval is malformed or out of order.
        DateNotFoundError: If an endpoint is not in the timeline.

    Example:
        >>> recur = pred_recur(
        ...     raster, "Forest",
        ...     ("2001-09-01", "2001-09-01"), ("2002-09-01", "2005-09-01"),
        ...     labels=labels, timeline=timeline,
        ... )
    """
    first, second = _interval_pair(time_interval1, time_interval2)

    res1 = holds(raster, class_name, first, labels, timeline, "equals")
    res2 = holds(raster, class_name, second, labels, timeline, "contains")

    if res1.is_empty or res2.is_empty:
        logger.warning(
            f"Relation RECUR cannot be applied: class '{class_name}' does not "
            "exist in the defined interval"
        )
        return ResultTable.empty()

    if len(res2.date_columns) < 2:
        logger.warning(
            "Relation RECUR cannot be applied: second time interval must "
            "cover at least two dates"
        )
        return ResultTable.empty()

    result = find_recurrences(res1, res2)
    if result.is_empty:
        logger.warning(
            "Relation RECUR cannot be applied: second time interval has no "
            "elements with recurrence"
        )
        return ResultTable.empty()

    result = _finish(result, first, timeline, remove_column)
    logger.info(f"RECUR '{class_name}' holds at {len(result):,} pixels")
    return result


def pred_evolve(
    raster: RasterSource,
    class_name1: str,
    time_interval1: IntervalLike,
    class_name2: str,
    time_interval2: IntervalLike,
    labels: LabelSet,
    timeline: Timeline,
    relation_interval1: Relation = "contains",
    relation_interval2: Relation = "contains",
    remove_column: bool = True,
) -> ResultTable:
    """EVOLVE: ``class_name1`` is followed, with any gap, by ``class_name2``.

    Args:
        raster: Classified raster, one layer per timeline date.
        class_name1: Class in the first interval, e.g. 'Forest'.
        time_interval1: First interval.
        class_name2: Class in the second interval, e.g. 'Deforestation'.
        time_interval2: Second interval, after the first one.
        labels: Class names in raster code order.
        timeline: Observation dates of the raster layers.
        relation_interval1: HOLDS relation for the first interval.
        relation_interval2: HOLDS relation for the second interval.
        remove_column: Drop the dates of ``time_interval1`` from the output.

    Returns:
        ResultTable of evolving pixels; empty when the predicate cannot
        be applied.
    """
    first, second = _interval_pair(time_interval1, time_interval2)
    validate_relation(relation_interval1, "relation_interval1")
    validate_relation(relation_interval2, "relation_interval2")

    res1 = holds(raster, class_name1, first, labels, timeline, relation_interval1)
    res2 = holds(raster, class_name2, second, labels, timeline, relation_interval2)

    if res1.is_empty or res2.is_empty:
        logger.warning(
            "Relation EVOLVE cannot be applied: class does not exist in the "
            "defined interval"
        )
        return ResultTable.empty()

    result = relation_follows(res1, res2, timeline)
    result = _finish(result, first, timeline, remove_column)
    logger.info(
        f"EVOLVE '{class_name1}' -> '{class_name2}' holds at {len(result):,} pixels"
    )
    return result


def pred_convert(
    raster: RasterSource,
    class_name1: str,
    time_interval1: IntervalLike,
    class_name2: str,
    time_interval2: IntervalLike,
    labels: LabelSet,
    timeline: Timeline,
    relation_interval1: Relation = "equals",
    relation_interval2: Relation = "equals",
    remove_column: bool = True,
) -> ResultTable:
    """CONVERT: ``class_name1`` is directly replaced by ``class_name2``.

    The last occurrence of ``class_name1`` and the first occurrence of
    ``class_name2`` must be consecutive timeline dates.

    Args:
        raster: Classified raster, one layer per timeline date.
        class_name1: Class before the transition, e.g. 'Forest'.
        time_interval1: First interval.
        class_name2: Class after the transition, e.g. 'Deforestation'.
        time_interval2: Second interval, after the first one.
        labels: Class names in raster code order.
        timeline: Observation dates of the raster layers.
        relation_interval1: HOLDS relation for the first interval.
        relation_interval2: HOLDS relation for the second interval.
        remove_column: Drop the dates of ``time_interval1`` from the output.

    Returns:
        ResultTable of converted pixels; empty when the predicate cannot
        be applied.
    """
    first, second = _interval_pair(time_interval1, time_interval2)
    validate_relation(relation_interval1, "relation_interval1")
    validate_relation(relation_interval2, "relation_interval2")

    res1 = holds(raster, class_name1, first, labels, timeline, relation_interval1)
    res2 = holds(raster, class_name2, second, labels, timeline, relation_interval2)

    if res1.is_empty or res2.is_empty:
        logger.warning(
            "Relation CONVERT cannot be applied: class does not exist in the "
            "defined interval"
        )
        return ResultTable.empty()

    result = relation_meets(res1, res2, timeline)
    result = _finish(result, first, timeline, remove_column)
    logger.info(
        f"CONVERT '{class_name1}' -> '{class_name2}' holds at {len(result):,} pixels"
    )
    return result


def convert_sweep(
    raster: RasterSource,
    class_name1: str,
    class_name2: str,
    labels: LabelSet,
    timeline: Timeline,
    relation_interval1: Relation = "equals",
    relation_interval2: Relation = "equals",
) -> ResultTable:
    """Run CONVERT over every pair of consecutive timeline dates.

    For each pair ``(date[i], date[i + 1])`` the antecedent column is
    dropped and the per-pair results are merged into one table, so a pixel
    converted in several years carries a value in each of those columns.

    Args:
        raster: Classified raster, one layer per timeline date.
        class_name1: Class before the transition.
        class_name2: Class after the transition.
        labels: Class names in raster code order.
        timeline: Observation dates of the raster layers.
        relation_interval1: HOLDS relation for each antecedent date.
        relation_interval2: HOLDS relation for each consequent date.

    Returns:
        Merged ResultTable; empty when no pair converts.

    Example:
        >>> forest_to_deforestation = convert_sweep(
        ...     raster, "Forest", "Deforestation", labels=labels, timeline=timeline
        ... )
    """
    if len(timeline) < 2:
        raise ParameterError("CONVERT sweep needs a timeline with at least two dates")

    merged: Optional[ResultTable] = None
    for t_1, t_2 in timeline.pairs():
        logger.debug(f"CONVERT sweep pair {t_1}, {t_2}")
        pair_result = pred_convert(
            raster,
            class_name1,
            (t_1, t_1),
            class_name2,
            (t_2, t_2),
            labels=labels,
            timeline=timeline,
            relation_interval1=relation_interval1,
            relation_interval2=relation_interval2,
            remove_column=True,
        )
        merged = merge_tables(merged, pair_result)

    return merged if merged is not None else ResultTable.empty()


class PredicateTask:
    """Task bundling a raster with its labels, timeline and defaults.

    Translates user intent for predicate evaluation into primitive calls.
    """

    def __init__(
        self,
        raster: RasterSource,
        labels: LabelSet,
        timeline: Timeline,
        config: Optional[PredicateConfig] = None,
    ):
        """Initialize PredicateTask.

        Args:
            raster: Classified raster, one layer per timeline date.
            labels: LabelSet, or class names in raster code order.
            timeline: Observation dates of the raster layers.
            config: Defaults for relations, column removal, resolution and
                the raster code of the first class.
        """
        self.raster = raster
        self.config = config or PredicateConfig()
        self.labels = configured_labels(labels, self.config)
        self.timeline = timeline

    def _relations(
        self,
        relation_interval1: Optional[str],
        relation_interval2: Optional[str],
        default1: str,
        default2: str,
    ) -> tuple[str, str]:
        first = relation_interval1 or self.config.relation_interval1 or default1
        second = relation_interval2 or self.config.relation_interval2 or default2
        return first, second

    def _remove_column(self, remove_column: Optional[bool]) -> bool:
        return self.config.remove_column if remove_column is None else remove_column

    def holds(
        self,
        class_name: str,
        time_interval: IntervalLike,
        relation_interval: Optional[str] = None,
    ) -> ResultTable:
        """Evaluate HOLDS with the configured default relation."""
        return holds(
            self.raster,
            class_name,
            time_interval,
            self.labels,
            self.timeline,
            relation_interval or self.config.relation_interval,
        )

    def recur(
        self,
        class_name: str,
        time_interval1: IntervalLike,
        time_interval2: IntervalLike,
        remove_column: Optional[bool] = None,
    ) -> ResultTable:
        """Evaluate RECUR."""
        return pred_recur(
            self.raster,
            class_name,
            time_interval1,
            time_interval2,
            self.labels,
            self.timeline,
            remove_column=self._remove_column(remove_column),
        )

    def evolve(
        self,
        class_name1: str,
        time_interval1: IntervalLike,
        class_name2: str,
        time_interval2: IntervalLike,
        relation_interval1: Optional[str] = None,
        relation_interval2: Optional[str] = None,
        remove_column: Optional[bool] = None,
    ) -> ResultTable:
        """Evaluate EVOLVE."""
        first, second = self._relations(
            relation_interval1, relation_interval2, "contains", "contains"
        )
        return pred_evolve(
            self.raster,
            class_name1,
            time_interval1,
            class_name2,
            time_interval2,
            self.labels,
            self.timeline,
            relation_interval1=first,
            relation_interval2=second,
            remove_column=self._remove_column(remove_column),
        )

    def convert(
        self,
        class_name1: str,
        time_interval1: IntervalLike,
        class_name2: str,
        time_interval2: IntervalLike,
        relation_interval1: Optional[str] = None,
        relation_interval2: Optional[str] = None,
        remove_column: Optional[bool] = None,
    ) -> ResultTable:
        """Evaluate CONVERT."""
        first, second = self._relations(
            relation_interval1, relation_interval2, "equals", "equals"
        )
        return pred_convert(
            self.raster,
            class_name1,
            time_interval1,
            class_name2,
            time_interval2,
            self.labels,
            self.timeline,
            relation_interval1=first,
            relation_interval2=second,
            remove_column=self._remove_column(remove_column),
        )

    def convert_sweep(
        self,
        class_name1: str,
        class_name2: str,
        relation_interval1: Optional[str] = None,
        relation_interval2: Optional[str] = None,
    ) -> ResultTable:
        """Evaluate CONVERT across every consecutive date pair."""
        first, second = self._relations(
            relation_interval1, relation_interval2, "equals", "equals"
        )
        return convert_sweep(
            self.raster,
            class_name1,
            class_name2,
            self.labels,
            self.timeline,
            relation_interval1=first,
            relation_interval2=second,
        )

    def measures(
        self, table: ResultTable, pixel_resolution: Optional[float] = None
    ) -> pd.DataFrame:
        """Per-year, per-class measures of a result table.

        The resolution falls back to the configured ``pixel_resolution``,
        then to the raster's own ``resolution`` attribute.
        """
        resolution = (
            pixel_resolution
            or self.config.pixel_resolution
            or getattr(self.raster, "resolution", None)
        )
        return result_measures(table, resolution, timeline=self.timeline)
