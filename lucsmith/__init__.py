"""LucSmith: land-use change calculus over classified raster time series.

Temporal predicates (HOLDS, RECUR, EVOLVE, CONVERT) built on Allen's
interval algebra, evaluated independently for every pixel of a classified
raster across a shared timeline.
"""

from lucsmith.config import PredicateConfig, load_config
from lucsmith.objects import (
    ClassifiedRaster,
    Interval,
    LabelSet,
    RasterSource,
    ResultTable,
    Timeline,
)
from lucsmith.primitives import (
    check_disjoint,
    drop_duplicate_rows,
    holds,
    merge_tables,
    remove_columns,
    result_measures,
    validate_interval,
)
from lucsmith.tasks import (
    PredicateTask,
    convert_sweep,
    pred_convert,
    pred_evolve,
    pred_holds,
    pred_recur,
)
from lucsmith.utils.errors import (
    DataValidationError,
    DateNotFoundError,
    InvalidIntervalError,
    LucSmithError,
    OverlapError,
    ParameterError,
)

__version__ = "0.1.0"

__all__ = [
    "ClassifiedRaster",
    "DataValidationError",
    "DateNotFoundError",
    "Interval",
    "InvalidIntervalError",
    "LabelSet",
    "LucSmithError",
    "OverlapError",
    "ParameterError",
    "PredicateConfig",
    "PredicateTask",
    "RasterSource",
    "ResultTable",
    "Timeline",
    "check_disjoint",
    "convert_sweep",
    "drop_duplicate_rows",
    "holds",
    "load_config",
    "merge_tables",
    "pred_convert",
    "pred_evolve",
    "pred_holds",
    "pred_recur",
    "remove_columns",
    "result_measures",
    "validate_interval",
]
