"""Layer 2: Primitives - Pure operations.

Interval validation, the HOLDS predicate, Allen relations between HOLDS
results, the result-table algebra and result measures.
"""

from lucsmith.primitives.holds import RELATIONS, holds, validate_relation
from lucsmith.primitives.intervals import (
    as_interval,
    check_disjoint,
    check_ordered,
    parse_date,
    validate_interval,
)
from lucsmith.primitives.measures import (
    MEASURES_COLUMNS,
    pixel_area_km2,
    result_measures,
)
from lucsmith.primitives.relations import (
    find_recurrences,
    mask_leading_presence,
    relation_follows,
    relation_meets,
)
from lucsmith.primitives.table_algebra import (
    drop_duplicate_rows,
    merge_tables,
    remove_columns,
    sort_rows,
)

__all__ = [
    "MEASURES_COLUMNS",
    "RELATIONS",
    "as_interval",
    "check_disjoint",
    "check_ordered",
    "drop_duplicate_rows",
    "find_recurrences",
    "holds",
    "mask_leading_presence",
    "merge_tables",
    "parse_date",
    "pixel_area_km2",
    "relation_follows",
    "relation_meets",
    "remove_columns",
    "result_measures",
    "sort_rows",
    "validate_interval",
    "validate_relation",
]
