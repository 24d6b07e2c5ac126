"""Example: Forest to deforestation events in a yearly land-cover series.

Demonstrates HOLDS, EVOLVE, RECUR and the CONVERT sweep on a synthetic
classified raster laid out like the PRODES Amazon deforestation maps
(2007-2017, 61.006 m pixels).
"""

import numpy as np

from lucsmith import ClassifiedRaster, LabelSet, PredicateConfig, PredicateTask, Timeline

FOREST, DEFORESTATION, NON_FOREST, HYDROGRAPH = 1, 2, 3, 4


def create_synthetic_prodes(n_rows: int = 60, n_cols: int = 80):
    """Yearly classification where clearing spreads from a road eastward."""
    np.random.seed(42)
    n_years = 11

    # Distance from a north-south road at the western edge drives clearing
    distance = np.tile(np.arange(n_cols), (n_rows, 1)).astype(float)
    clearing_year = (distance / n_cols * 14 + np.random.randn(n_rows, n_cols) * 2).astype(int)
    clearing_year = np.clip(clearing_year, 0, n_years)

    layers = np.arange(n_years)[:, None, None]
    values = np.where(layers < clearing_year, FOREST, DEFORESTATION)

    # Natural non-forest patch and a river
    values[:, 5:15, 60:75] = NON_FOREST
    values[:, :, 40] = HYDROGRAPH

    # Secondary regrowth on a few cleared pixels
    regrowth = np.random.rand(n_rows, n_cols) < 0.02
    values[8:, regrowth] = FOREST

    return values


def main():
    """Run deforestation example."""
    print("=" * 60)
    print("Land-Use Change Predicates: Deforestation Example")
    print("=" * 60)

    print("\n1. Creating synthetic classified raster...")
    values = create_synthetic_prodes()
    raster = ClassifiedRaster(
        values=values, x_origin=-55.0, y_origin=-6.0, resolution=61.006
    )
    labels = LabelSet(names=("Forest", "Deforestation", "Non-Forest", "Hydrograph"))
    timeline = Timeline.from_sequence([f"{year}-09-01" for year in range(2007, 2018)])
    print(f"Raster: {raster}")
    print(f"Timeline: {timeline}")

    task = PredicateTask(
        raster, labels, timeline, PredicateConfig(pixel_resolution=61.006)
    )

    print("\n2. HOLDS: pixels with Deforestation at any date...")
    deforestation = task.holds("Deforestation", ("2007-09-01", "2017-09-01"), "contains")
    print(f"{len(deforestation):,} pixels")
    print(task.measures(deforestation).to_string(index=False))

    print("\n3. EVOLVE: Forest in 2007 followed by Deforestation...")
    forest_evolve = task.evolve(
        "Forest", ("2007-09-01", "2007-09-01"),
        "Deforestation", ("2008-09-01", "2017-09-01"),
        relation_interval1="equals",
        relation_interval2="contains",
    )
    print(f"{len(forest_evolve):,} pixels")

    print("\n4. CONVERT sweep: Forest -> Deforestation between consecutive years...")
    forest_convert = task.convert_sweep("Forest", "Deforestation")
    measures = task.measures(forest_convert)
    print(measures.to_string(index=False))
    print(f"Total cleared area: {measures['area_km2'].sum():.2f} km²")

    print("\n5. RECUR: Forest present in 2007 that disappears and returns...")
    forest_recur = task.recur(
        "Forest", ("2007-09-01", "2007-09-01"), ("2008-09-01", "2017-09-01")
    )
    print(f"{len(forest_recur):,} pixels with regrowth")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
