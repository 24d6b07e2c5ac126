"""Layer 1: Objects - Immutable data representations.

This layer contains only data structures. No I/O libraries, no rasterio,
no matplotlib. Only standard library + numpy + pandas.
"""

from lucsmith.objects.classified_raster import ClassifiedRaster, RasterSource
from lucsmith.objects.labelset import LabelSet
from lucsmith.objects.resulttable import COORD_COLUMNS, ResultTable
from lucsmith.objects.timeline import Interval, Timeline, date_label, to_timestamp

__all__ = [
    "COORD_COLUMNS",
    "ClassifiedRaster",
    "Interval",
    "LabelSet",
    "RasterSource",
    "ResultTable",
    "Timeline",
    "date_label",
    "to_timestamp",
]
