"""Tests for the RECUR, EVOLVE and CONVERT predicates."""

import logging

import numpy as np
import pytest

from lucsmith.config import PredicateConfig
from lucsmith.objects import ClassifiedRaster, LabelSet, Timeline
from lucsmith.tasks.predicatetask import (
    PredicateTask,
    convert_sweep,
    pred_convert,
    pred_evolve,
    pred_holds,
    pred_recur,
)
from lucsmith.utils.errors import InvalidIntervalError, OverlapError

F, D, N = 1, 2, 3

D1, D2, D3, D4 = "2001-09-01", "2002-09-01", "2003-09-01", "2004-09-01"


def build_raster(sequences: dict, shape=(10, 10)) -> ClassifiedRaster:
    """Raster whose pixel centres are integer coordinates.

    Pixel ``(x, y)`` sits at column ``x`` and row ``shape[0] - 1 - y``;
    unlisted pixels are Non-Forest at every date.
    """
    n_layers = len(next(iter(sequences.values())))
    values = np.full((n_layers, *shape), N)
    for (x, y), sequence in sequences.items():
        values[:, shape[0] - 1 - y, x] = sequence
    return ClassifiedRaster(
        values=values, x_origin=-0.5, y_origin=shape[0] - 0.5, resolution=1.0
    )


@pytest.fixture
def labels():
    return LabelSet(names=("Forest", "Deforestation", "Non-Forest"))


@pytest.fixture
def timeline3():
    return Timeline.from_sequence([D1, D2, D3])


@pytest.fixture
def timeline4():
    return Timeline.from_sequence([D1, D2, D3, D4])


class TestRasterHelper:
    """Sanity check for the coordinate layout used below."""

    def test_coordinates(self, labels, timeline3):
        raster = build_raster({(5, 5): [F, F, F]})
        result = pred_holds(raster, "Forest", (D1, D3), labels, timeline3, "equals")
        assert result.coordinates() == {(5.0, 5.0)}


class TestRecur:
    """Tests for pred_recur."""

    @pytest.fixture
    def raster(self):
        return build_raster(
            {
                (7, 7): [F, D, F],
                (8, 8): [F, F, F],
                (9, 9): [D, D, F],
            }
        )

    def test_reappearance_included(self, raster, labels, timeline3):
        result = pred_recur(raster, "Forest", (D1, D1), (D2, D3), labels, timeline3)
        assert result.coordinates() == {(7.0, 7.0)}

    def test_continuous_presence_excluded(self, raster, labels, timeline3):
        result = pred_recur(raster, "Forest", (D1, D1), (D2, D3), labels, timeline3)
        assert (8.0, 8.0) not in result.coordinates()

    def test_single_date_first_interval_column_removed(
        self, raster, labels, timeline3
    ):
        result = pred_recur(raster, "Forest", (D1, D1), (D2, D3), labels, timeline3)
        assert D1 not in result.date_columns
        assert result.get_row(7, 7) == {D2: None, D3: "Forest"}

    def test_multi_date_first_interval_columns_removed(self, labels, timeline4):
        raster = build_raster({(1, 1): [F, F, D, F]})
        result = pred_recur(raster, "Forest", (D1, D2), (D3, D4), labels, timeline4)
        assert result.coordinates() == {(1.0, 1.0)}
        assert result.date_columns == [D3, D4]

    def test_keep_columns(self, raster, labels, timeline3):
        result = pred_recur(
            raster, "Forest", (D1, D1), (D2, D3), labels, timeline3,
            remove_column=False,
        )
        assert result.date_columns == [D1, D2, D3]

    def test_second_interval_single_date(self, raster, labels, timeline3, caplog):
        with caplog.at_level(logging.WARNING):
            result = pred_recur(
                raster, "Forest", (D1, D1), (D3, D3), labels, timeline3
            )
        assert result.is_empty
        assert "cannot be applied" in caplog.text

    def test_first_interval_never_holds(self, labels, timeline3, caplog):
        raster = build_raster({(8, 8): [F, F, F]})
        with caplog.at_level(logging.WARNING):
            result = pred_recur(
                raster, "Deforestation", (D1, D1), (D2, D3), labels, timeline3
            )
        assert result.is_empty
        assert "RECUR cannot be applied" in caplog.text

    def test_no_recurrence(self, labels, timeline3):
        raster = build_raster({(8, 8): [F, F, F]})
        result = pred_recur(raster, "Forest", (D1, D1), (D2, D3), labels, timeline3)
        assert result.is_empty

    def test_overlap_raises(self, raster, labels, timeline3):
        with pytest.raises(OverlapError):
            pred_recur(raster, "Forest", (D1, D2), (D2, D3), labels, timeline3)


class TestEvolve:
    """Tests for pred_evolve."""

    @pytest.fixture
    def raster(self):
        return build_raster({(5, 5): [F, F, D], (6, 6): [D, F, F]})

    def test_forest_evolves_to_deforestation(self, raster, labels, timeline3):
        result = pred_evolve(
            raster, "Forest", (D1, D1), "Deforestation", (D2, D3),
            labels, timeline3, relation_interval1="equals",
        )
        assert result.coordinates() == {(5.0, 5.0)}

    def test_first_interval_removed(self, raster, labels, timeline3):
        result = pred_evolve(
            raster, "Forest", (D1, D1), "Deforestation", (D2, D3), labels, timeline3
        )
        assert result.date_columns == [D2, D3]
        assert result.get_row(5, 5) == {D2: None, D3: "Deforestation"}

    def test_multi_date_first_interval(self, raster, labels, timeline3):
        result = pred_evolve(
            raster, "Forest", (D1, D2), "Deforestation", (D3, D3), labels, timeline3
        )
        assert result.coordinates() == {(5.0, 5.0)}
        assert result.date_columns == [D3]

    def test_overlap_raises(self, raster, labels, timeline3):
        with pytest.raises(OverlapError):
            pred_evolve(
                raster, "Forest", (D1, D2), "Deforestation", (D1, D3),
                labels, timeline3,
            )

    def test_reversed_intervals_raise(self, raster, labels, timeline3):
        with pytest.raises(InvalidIntervalError, match="before"):
            pred_evolve(
                raster, "Forest", (D3, D3), "Deforestation", (D1, D2),
                labels, timeline3,
            )

    def test_empty_second_class(self, raster, labels, timeline3, caplog):
        with caplog.at_level(logging.WARNING):
            result = pred_evolve(
                raster, "Forest", (D1, D1), "Deforestation", (D2, D2),
                labels, timeline3,
            )
        assert result.is_empty
        assert "EVOLVE cannot be applied" in caplog.text


class TestConvert:
    """Tests for pred_convert."""

    @pytest.fixture
    def raster(self):
        return build_raster({(5, 5): [F, F, D], (6, 6): [F, D, D]})

    def test_adjacent_conversion(self, labels, timeline3):
        raster = build_raster({(5, 5): [F, D, D]})
        result = pred_convert(
            raster, "Forest", (D1, D1), "Deforestation", (D2, D2), labels, timeline3
        )
        assert result.coordinates() == {(5.0, 5.0)}
        assert result.date_columns == [D2]

    def test_non_adjacent_dates_excluded(self, raster, labels, timeline3):
        """Forest at date 1 and Deforestation at date 3 are not adjacent."""
        result = pred_convert(
            raster, "Forest", (D1, D1), "Deforestation", (D3, D3), labels, timeline3
        )
        assert (5.0, 5.0) not in result.coordinates()

    def test_converts_between_dates_two_and_three(
        self, raster, labels, timeline3
    ):
        result = pred_convert(
            raster, "Forest", (D2, D2), "Deforestation", (D3, D3), labels, timeline3
        )
        assert result.coordinates() == {(5.0, 5.0)}

    def test_keep_columns(self, raster, labels, timeline3):
        result = pred_convert(
            raster, "Forest", (D1, D1), "Deforestation", (D2, D2),
            labels, timeline3, remove_column=False,
        )
        assert result.date_columns == [D1, D2]
        assert result.get_row(6, 6) == {D1: "Forest", D2: "Deforestation"}

    def test_overlap_raises(self, raster, labels, timeline3):
        with pytest.raises(OverlapError):
            pred_convert(
                raster, "Forest", (D2, D2), "Deforestation", (D2, D3),
                labels, timeline3,
            )


class TestEvolveAndConvertExample:
    """Pixel (5, 5) with classes [Forest, Forest, Deforestation]."""

    @pytest.fixture
    def raster(self):
        return build_raster({(5, 5): [F, F, D]})

    def test_evolve_includes_pixel(self, raster, labels, timeline3):
        result = pred_evolve(
            raster, "Forest", (D1, D1), "Deforestation", (D2, D3),
            labels, timeline3, relation_interval1="equals",
            relation_interval2="contains",
        )
        assert (5.0, 5.0) in result.coordinates()

    def test_convert_to_date_three_excludes_pixel(self, raster, labels, timeline3):
        result = pred_convert(
            raster, "Forest", (D1, D1), "Deforestation", (D3, D3), labels, timeline3
        )
        assert result.is_empty


class TestConvertSweep:
    """Tests for convert_sweep."""

    @pytest.fixture
    def raster(self):
        return build_raster(
            {
                (1, 1): [F, D, D, D],
                (2, 2): [F, F, F, D],
                (3, 3): [F, F, F, F],
            }
        )

    def test_union_of_pair_results(self, raster, labels, timeline4):
        result = convert_sweep(raster, "Forest", "Deforestation", labels, timeline4)
        assert result.coordinates() == {(1.0, 1.0), (2.0, 2.0)}
        assert result.date_columns == [D2, D4]
        assert result.get_row(1, 1) == {D2: "Deforestation", D4: None}
        assert result.get_row(2, 2) == {D2: None, D4: "Deforestation"}

    def test_no_conversion_anywhere(self, raster, labels, timeline4):
        result = convert_sweep(raster, "Deforestation", "Forest", labels, timeline4)
        assert result.is_empty


class TestPredicateTaskIndexBase:
    """Tests for the configured raster code of the first class."""

    @pytest.fixture
    def raster(self):
        return ClassifiedRaster(values=np.zeros((3, 2, 2), dtype=np.int16))

    def test_zero_based_codes(self, raster, timeline3):
        task = PredicateTask(
            raster,
            LabelSet(names=("Forest", "Deforestation")),
            timeline3,
            PredicateConfig(index_base=0),
        )
        assert task.labels.code_of("Forest") == 0
        assert len(task.holds("Forest", (D1, D3), "equals")) == 4

    def test_label_set_base_kept_without_config(self, raster, timeline3):
        labels = LabelSet(names=("Forest", "Deforestation"), index_base=0)
        task = PredicateTask(raster, labels, timeline3)
        assert task.labels is labels
        assert len(task.holds("Forest", (D1, D1))) == 4

    def test_names_accepted(self, raster, timeline3):
        task = PredicateTask(raster, ["Forest", "Deforestation"], timeline3)
        assert task.labels.index_base == 1
        assert task.holds("Forest", (D1, D1)).is_empty


class TestPredicateTask:
    """Tests for PredicateTask defaults."""

    @pytest.fixture
    def raster(self):
        return build_raster({(5, 5): [F, F, D], (6, 6): [F, D, F]})

    def test_configured_relation(self, raster, labels, timeline3):
        task = PredicateTask(
            raster, labels, timeline3, PredicateConfig(relation_interval="equals")
        )
        result = task.holds("Forest", (D1, D2))
        assert result.coordinates() == {(5.0, 5.0)}

    def test_configured_remove_column(self, raster, labels, timeline3):
        task = PredicateTask(
            raster, labels, timeline3, PredicateConfig(remove_column=False)
        )
        result = task.convert("Forest", (D2, D2), "Deforestation", (D3, D3))
        assert result.date_columns == [D2, D3]

    def test_recur(self, raster, labels, timeline3):
        task = PredicateTask(raster, labels, timeline3)
        assert task.recur("Forest", (D1, D1), (D2, D3)).coordinates() == {(6.0, 6.0)}

    def test_evolve(self, raster, labels, timeline3):
        task = PredicateTask(raster, labels, timeline3)
        result = task.evolve("Forest", (D1, D1), "Deforestation", (D2, D3))
        assert result.coordinates() == {(5.0, 5.0), (6.0, 6.0)}

    def test_convert_sweep(self, raster, labels, timeline3):
        task = PredicateTask(raster, labels, timeline3)
        result = task.convert_sweep("Forest", "Deforestation")
        assert result.date_columns == [D2, D3]

    def test_measures_uses_raster_resolution(self, raster, labels, timeline3):
        task = PredicateTask(raster, labels, timeline3)
        result = task.holds("Forest", (D1, D3))
        measures = task.measures(result)
        # unit pixels: 1e-6 km² each
        assert measures["area_km2"].sum() == pytest.approx(
            measures["pixel_count"].sum() * 1e-6
        )

    def test_measures_configured_resolution(self, raster, labels, timeline3):
        task = PredicateTask(
            raster, labels, timeline3, PredicateConfig(pixel_resolution=1000.0)
        )
        measures = task.measures(task.holds("Forest", (D1, D1)))
        assert measures["area_km2"].tolist() == pytest.approx([2.0])
