"""Classified raster access.

Predicates read a raster only through the ``RasterSource`` protocol: the
number of layers and, for a set of layers, the categorical value of every
pixel together with its coordinates. ``ClassifiedRaster`` is the in-memory
implementation backed by a numpy array.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class RasterSource(Protocol):
    """Read-only access to a time-indexed classified raster."""

    def layer_count(self) -> int:
        """Number of time layers."""
        ...

    def get_layer_values(
        self, layer_indices: Sequence[int]
    ) -> tuple[np.ndarray, np.ndarray]:
        """Pixel coordinates and class codes for the requested layers.

        Returns:
            Tuple ``(coords, values)`` with ``coords`` of shape
            ``(n_pixels, 2)`` holding x, y and ``values`` of shape
            ``(n_pixels, len(layer_indices))``.
        """
        ...


@dataclass(frozen=True)
class ClassifiedRaster:
    """In-memory classified raster brick.

    Attributes:
        values: Integer class codes, shape (n_layers, n_rows, n_cols).
            A 2D array is treated as a single layer.
        x_origin: X coordinate of the upper-left corner.
        y_origin: Y coordinate of the upper-left corner.
        resolution: Pixel size in map units (meters for projected rasters).
        nodata: Reserved value marking cells without a class, or None.
    """

    values: np.ndarray
    x_origin: float = 0.0
    y_origin: float = 0.0
    resolution: float = 1.0
    nodata: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate raster parameters."""
        values = np.array(self.values, copy=True)
        if values.ndim == 2:
            values = values[np.newaxis, :, :]
        if values.ndim != 3:
            raise ValueError(
                f"values must be 3D (n_layers, n_rows, n_cols), got shape {values.shape}"
            )
        if not np.issubdtype(values.dtype, np.integer):
            raise ValueError(f"values must hold integer class codes, got {values.dtype}")
        if values.size == 0:
            raise ValueError("values cannot be empty")
        if self.resolution <= 0:
            raise ValueError(f"resolution must be positive, got {self.resolution}")

        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def n_layers(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_rows(self) -> int:
        return int(self.values.shape[1])

    @property
    def n_cols(self) -> int:
        return int(self.values.shape[2])

    @property
    def n_pixels(self) -> int:
        return self.n_rows * self.n_cols

    def coordinates(self) -> np.ndarray:
        """Cell-centre coordinates in row-major order, shape (n_pixels, 2)."""
        cols = self.x_origin + (np.arange(self.n_cols) + 0.5) * self.resolution
        rows = self.y_origin - (np.arange(self.n_rows) + 0.5) * self.resolution
        xx, yy = np.meshgrid(cols, rows)
        return np.column_stack([xx.ravel(), yy.ravel()])

    def layer_count(self) -> int:
        """Number of time layers."""
        return self.n_layers

    def get_layer_values(
        self, layer_indices: Sequence[int]
    ) -> tuple[np.ndarray, np.ndarray]:
        """Pixel coordinates and class codes for the requested layers.

        Args:
            layer_indices: 0-based layer positions, in the desired column order.

        Returns:
            Tuple ``(coords, values)``; ``values`` has one column per
            requested layer.
        """
        indices = np.asarray(list(layer_indices), dtype=int)
        if indices.size == 0:
            raise ValueError("layer_indices cannot be empty")
        if indices.min() < 0 or indices.max() >= self.n_layers:
            raise ValueError(
                f"layer_indices must be within 0..{self.n_layers - 1}, "
                f"got {indices.tolist()}"
            )
        selected = self.values[indices].reshape(len(indices), -1).T
        return self.coordinates(), selected

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"ClassifiedRaster(n_layers={self.n_layers}, "
            f"shape=({self.n_rows}, {self.n_cols}), resolution={self.resolution})"
        )
