"""Layer 3: Tasks - User intent translation.

Tasks translate user intent into object creation and primitive calls.
Tasks must not import matplotlib.
"""

from lucsmith.tasks.predicatetask import (
    PredicateTask,
    convert_sweep,
    first_interval_columns,
    pred_convert,
    pred_evolve,
    pred_holds,
    pred_recur,
)

__all__ = [
    "PredicateTask",
    "convert_sweep",
    "first_interval_columns",
    "pred_convert",
    "pred_evolve",
    "pred_holds",
    "pred_recur",
]
