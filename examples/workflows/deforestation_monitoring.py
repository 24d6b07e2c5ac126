"""Deforestation Monitoring Workflow Demo.

Runs the YAML workflow in ``prodes/deforestation.yaml`` against a synthetic
yearly land-cover raster:

1. Deforestation HOLDS over the whole series, with area measures
2. EVOLVE from Forest in 2007 to later Deforestation
3. CONVERT sweep over consecutive years, with area measures

In practice the raster would be read from the PRODES GeoTIFF brick and
wrapped in any object implementing ``RasterSource``.
"""

import logging
from pathlib import Path

import numpy as np

from lucsmith import ClassifiedRaster, LabelSet, Timeline
from lucsmith.workflows import run_workflow

WORKFLOW_FILE = Path(__file__).parent / "prodes" / "deforestation.yaml"


def create_synthetic_raster() -> ClassifiedRaster:
    """Forest cleared in random years, with a permanent river."""
    np.random.seed(7)
    n_years, n_rows, n_cols = 11, 50, 50

    clearing_year = np.random.randint(1, n_years + 4, size=(n_rows, n_cols))
    layers = np.arange(n_years)[:, None, None]
    values = np.where(layers < clearing_year, 1, 2)
    values[:, 25, :] = 4

    return ClassifiedRaster(values=values, resolution=61.006)


def main():
    """Run the deforestation monitoring workflow."""
    logging.basicConfig(level=logging.INFO, format="%(name)s - %(message)s")

    raster = create_synthetic_raster()
    labels = LabelSet(names=("Forest", "Deforestation", "Non-Forest", "Hydrograph"))
    timeline = Timeline.from_sequence([f"{year}-09-01" for year in range(2007, 2018)])

    results = run_workflow(WORKFLOW_FILE, raster, labels, timeline)

    print("\nDeforestation (HOLDS) per year:")
    print(results["deforestation_holds_measures"].to_string(index=False))

    print(f"\nForest -> Deforestation (EVOLVE): {len(results['forest_evolve']):,} pixels")

    print("\nForest -> Deforestation (CONVERT) per year:")
    convert_measures = results["forest_convert_measures"]
    print(convert_measures.to_string(index=False))
    print(f"\nTotal cleared area: {convert_measures['area_km2'].sum():.2f} km²")


if __name__ == "__main__":
    main()
