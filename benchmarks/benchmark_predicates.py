"""Performance benchmarks for predicate evaluation."""

import time
from typing import Dict

import numpy as np

from lucsmith import ClassifiedRaster, LabelSet, Timeline
from lucsmith.primitives.holds import holds
from lucsmith.primitives.measures import result_measures
from lucsmith.tasks.predicatetask import convert_sweep, pred_evolve

LABELS = LabelSet(names=("Forest", "Deforestation", "Non-Forest"))


def _scenario(size: int, n_years: int):
    np.random.seed(42)
    clearing_year = np.random.randint(0, n_years + 1, size=(size, size))
    layers = np.arange(n_years)[:, None, None]
    values = np.where(layers < clearing_year, 1, 2)
    raster = ClassifiedRaster(values=values, resolution=30.0)
    timeline = Timeline.from_sequence(
        [f"{2000 + year}-09-01" for year in range(n_years)]
    )
    return raster, timeline


def benchmark_holds(size: int = 500, n_years: int = 11) -> Dict[str, float]:
    """Benchmark HOLDS over the full timeline.

    Args:
        size: Raster side length in pixels.
        n_years: Number of yearly layers.

    Returns:
        Dictionary with timing results.
    """
    raster, timeline = _scenario(size, n_years)
    interval = (timeline.labels[0], timeline.labels[-1])

    start = time.perf_counter()
    result = holds(raster, "Deforestation", interval, LABELS, timeline, "contains")
    holds_time = time.perf_counter() - start

    start = time.perf_counter()
    result_measures(result, raster.resolution)
    measures_time = time.perf_counter() - start

    n_pixels = raster.n_pixels
    return {
        "n_pixels": n_pixels,
        "n_years": n_years,
        "n_rows_out": len(result),
        "holds_time_seconds": holds_time,
        "measures_time_seconds": measures_time,
        "pixels_per_second": n_pixels / holds_time if holds_time > 0 else 0,
    }


def benchmark_evolve(size: int = 500, n_years: int = 11) -> Dict[str, float]:
    """Benchmark EVOLVE from the first date to the rest of the series."""
    raster, timeline = _scenario(size, n_years)
    dates = timeline.labels

    start = time.perf_counter()
    result = pred_evolve(
        raster, "Forest", (dates[0], dates[0]),
        "Deforestation", (dates[1], dates[-1]),
        LABELS, timeline, relation_interval1="equals",
    )
    evolve_time = time.perf_counter() - start

    return {
        "n_pixels": raster.n_pixels,
        "n_rows_out": len(result),
        "evolve_time_seconds": evolve_time,
    }


def benchmark_convert_sweep(size: int = 500, n_years: int = 11) -> Dict[str, float]:
    """Benchmark the CONVERT sweep over consecutive dates."""
    raster, timeline = _scenario(size, n_years)

    start = time.perf_counter()
    result = convert_sweep(raster, "Forest", "Deforestation", LABELS, timeline)
    sweep_time = time.perf_counter() - start

    n_pairs = n_years - 1
    return {
        "n_pixels": raster.n_pixels,
        "n_pairs": n_pairs,
        "n_rows_out": len(result),
        "sweep_time_seconds": sweep_time,
        "seconds_per_pair": sweep_time / n_pairs,
    }


def run_all_predicate_benchmarks() -> Dict:
    """Run all predicate benchmarks.

    Returns:
        Dictionary with all benchmark results.
    """
    results = {}

    print("Benchmarking HOLDS...")
    results["holds_scalability"] = {
        "small": benchmark_holds(size=100),
        "medium": benchmark_holds(size=500),
        "large": benchmark_holds(size=1000),
    }

    print("Benchmarking EVOLVE...")
    results["evolve"] = benchmark_evolve(size=500)

    print("Benchmarking CONVERT sweep...")
    results["convert_sweep_scalability"] = {
        "small": benchmark_convert_sweep(size=100),
        "large": benchmark_convert_sweep(size=500),
    }

    return results


if __name__ == "__main__":
    import json

    results = run_all_predicate_benchmarks()
    print(json.dumps(results, indent=2, default=float))
