"""Tests for config-driven predicate workflows."""

import numpy as np
import pandas as pd
import pytest

from lucsmith.config import PredicateConfig
from lucsmith.objects import ClassifiedRaster, LabelSet, ResultTable, Timeline
from lucsmith.workflows import (
    STEP_REGISTRY,
    WorkflowOrchestrator,
    load_workflow,
    register_step,
    run_workflow,
)

F, D, N = 1, 2, 3

D1, D2, D3 = "2001-09-01", "2002-09-01", "2003-09-01"

WORKFLOW_YAML = """
config: predicates.yaml
steps:
  - name: forest_evolve
    type: evolve
    params:
      class_name1: Forest
      time_interval1: ["2001-09-01", "2001-09-01"]
      class_name2: Deforestation
      time_interval2: ["2002-09-01", "2003-09-01"]
  - name: forest_measures
    type: measures
    params:
      table: ${forest_evolve}
      pixel_resolution: ${config.pixel_resolution}
"""


@pytest.fixture
def labels():
    return LabelSet(names=("Forest", "Deforestation", "Non-Forest"))


@pytest.fixture
def timeline():
    return Timeline.from_sequence([D1, D2, D3])


@pytest.fixture
def raster():
    """1 x 3 raster: converts at date 2, converts at date 3, stays Forest."""
    values = np.full((3, 1, 3), N)
    values[:, 0, 0] = [F, D, D]
    values[:, 0, 1] = [F, F, D]
    values[:, 0, 2] = [F, F, F]
    return ClassifiedRaster(values=values, resolution=100.0)


@pytest.fixture
def orchestrator(raster, labels, timeline, tmp_path):
    return WorkflowOrchestrator(raster, labels, timeline, working_dir=tmp_path)


class TestStepRegistry:
    """Tests for the step registry."""

    def test_default_steps(self):
        for name in (
            "holds", "recur", "evolve", "convert", "convert_sweep",
            "merge", "remove_columns", "drop_duplicates", "measures",
        ):
            assert name in STEP_REGISTRY

    def test_register_custom_step(self, orchestrator):
        register_step("count_rows", lambda table: len(table))
        try:
            orchestrator.execute(
                {
                    "steps": [
                        {
                            "name": "forest",
                            "type": "holds",
                            "params": {
                                "class_name": "Forest",
                                "time_interval": [D1, D1],
                            },
                        },
                        {
                            "name": "n",
                            "type": "count_rows",
                            "params": {"table": "${forest}"},
                        },
                    ]
                }
            )
        finally:
            STEP_REGISTRY.pop("count_rows")
        assert orchestrator.results["n"] == 3


class TestWorkflowExecution:
    """Tests for WorkflowOrchestrator.execute."""

    def test_context_injected(self, orchestrator):
        results = orchestrator.execute(
            {
                "steps": [
                    {
                        "name": "deforestation",
                        "type": "holds",
                        "params": {
                            "class_name": "Deforestation",
                            "time_interval": [D2, D3],
                            "relation_interval": "equals",
                        },
                    }
                ]
            }
        )
        table = results["deforestation"]
        assert isinstance(table, ResultTable)
        assert table.coordinates() == {(0.5 * 100.0, -0.5 * 100.0)}

    def test_step_references(self, orchestrator):
        """Sweep, then merge the sweep with a CONVERT result."""
        results = orchestrator.execute(
            {
                "steps": [
                    {
                        "name": "sweep",
                        "type": "convert_sweep",
                        "params": {
                            "class_name1": "Forest",
                            "class_name2": "Deforestation",
                        },
                    },
                    {
                        "name": "late",
                        "type": "convert",
                        "params": {
                            "class_name1": "Forest",
                            "time_interval1": [D2, D2],
                            "class_name2": "Deforestation",
                            "time_interval2": [D3, D3],
                        },
                    },
                    {
                        "name": "merged",
                        "type": "merge",
                        "params": {"tables": ["${sweep}", "${late}"]},
                    },
                    {
                        "name": "columns",
                        "type": "remove_columns",
                        "params": {"table": "${merged}", "name_columns": [D2]},
                    },
                ]
            }
        )
        assert len(results["sweep"]) == 2
        assert results["merged"].date_columns == [D2, D3]
        assert results["columns"].date_columns == [D3]

    def test_attribute_reference(self, orchestrator):
        results = orchestrator.execute(
            {
                "steps": [
                    {
                        "name": "forest",
                        "type": "holds",
                        "params": {"class_name": "Forest", "time_interval": [D1, D3]},
                    },
                    {
                        "name": "trimmed",
                        "type": "remove_columns",
                        "params": {
                            "table": "${forest}",
                            "name_columns": "${forest.date_columns}",
                        },
                    },
                ]
            }
        )
        assert results["trimmed"].date_columns == []

    def test_config_reference(self, raster, labels, timeline, tmp_path):
        orchestrator = WorkflowOrchestrator(
            raster, labels, timeline,
            config=PredicateConfig(pixel_resolution=1000.0),
            working_dir=tmp_path,
        )
        results = orchestrator.execute(
            {
                "steps": [
                    {
                        "name": "forest",
                        "type": "holds",
                        "params": {"class_name": "Forest", "time_interval": [D1, D1]},
                    },
                    {
                        "name": "area",
                        "type": "measures",
                        "params": {
                            "table": "${forest}",
                            "pixel_resolution": "${config.pixel_resolution}",
                        },
                    },
                ]
            }
        )
        measures = results["area"]
        assert isinstance(measures, pd.DataFrame)
        assert measures["area_km2"].tolist() == pytest.approx([3.0])

    def test_unknown_step_type(self, orchestrator):
        with pytest.raises(ValueError, match="Unknown step type"):
            orchestrator.execute({"steps": [{"name": "x", "type": "during"}]})

    def test_missing_step_type(self, orchestrator):
        with pytest.raises(ValueError, match="missing 'type'"):
            orchestrator.execute({"steps": [{"name": "x"}]})

    def test_missing_steps(self, orchestrator):
        with pytest.raises(ValueError, match="steps"):
            orchestrator.execute({})

    def test_missing_reference(self, orchestrator):
        with pytest.raises(ValueError, match="not found in results"):
            orchestrator.execute(
                {
                    "steps": [
                        {
                            "name": "d",
                            "type": "drop_duplicates",
                            "params": {"table": "${nothing}"},
                        }
                    ]
                }
            )

    def test_continue_on_error(self, orchestrator):
        results = orchestrator.execute(
            {
                "stop_on_error": False,
                "steps": [
                    {
                        "name": "bad",
                        "type": "holds",
                        "params": {"class_name": "Pasture", "time_interval": [D1, D1]},
                    },
                    {
                        "name": "good",
                        "type": "holds",
                        "params": {"class_name": "Forest", "time_interval": [D1, D1]},
                    },
                ],
            }
        )
        assert "bad" not in results
        assert len(results["good"]) == 3


class TestConfiguredDefaults:
    """Configuration values fill step parameters that a workflow leaves unset."""

    HOLDS_STEP = {
        "name": "deforestation",
        "type": "holds",
        "params": {"class_name": "Deforestation", "time_interval": [D1, D3]},
    }

    EVOLVE_STEP = {
        "name": "forest_evolve",
        "type": "evolve",
        "params": {
            "class_name1": "Forest",
            "time_interval1": [D1, D1],
            "class_name2": "Deforestation",
            "time_interval2": [D2, D3],
        },
    }

    @pytest.fixture
    def configured(self, raster, labels, timeline, tmp_path):
        config = PredicateConfig(remove_column=False, relation_interval="equals")
        return WorkflowOrchestrator(
            raster, labels, timeline, config=config, working_dir=tmp_path
        )

    def test_relation_interval_from_config(self, orchestrator, configured):
        """No pixel is Deforestation at all three dates."""
        default = orchestrator.execute({"steps": [self.HOLDS_STEP]})
        equals = configured.execute({"steps": [self.HOLDS_STEP]})
        assert len(default["deforestation"]) == 2
        assert equals["deforestation"].is_empty

    def test_remove_column_from_config(self, orchestrator, configured):
        default = orchestrator.execute({"steps": [self.EVOLVE_STEP]})
        kept = configured.execute({"steps": [self.EVOLVE_STEP]})
        assert default["forest_evolve"].date_columns == [D2, D3]
        assert kept["forest_evolve"].date_columns == [D1, D2, D3]

    def test_explicit_parameter_wins(self, configured):
        step = {
            "name": "deforestation",
            "type": "holds",
            "params": {
                "class_name": "Deforestation",
                "time_interval": [D1, D3],
                "relation_interval": "contains",
            },
        }
        results = configured.execute({"steps": [step]})
        assert len(results["deforestation"]) == 2

    def test_relations_from_config_file(self, raster, labels, timeline, tmp_path):
        (tmp_path / "predicates.yaml").write_text(
            "relation_interval1: equals\nrelation_interval2: equals\n"
        )
        orchestrator = WorkflowOrchestrator(
            raster, labels, timeline, working_dir=tmp_path
        )
        results = orchestrator.execute(
            {
                "config": "predicates.yaml",
                "steps": [
                    {
                        "name": "forest_evolve",
                        "type": "evolve",
                        "params": {
                            "class_name1": "Forest",
                            "time_interval1": [D1, D1],
                            "class_name2": "Deforestation",
                            "time_interval2": [D2, D3],
                        },
                    }
                ],
            }
        )
        # only the pixel cleared at date 2 is Deforestation at both dates
        assert results["forest_evolve"].coordinates() == {(50.0, -50.0)}

    def test_index_base_from_config(self, timeline, tmp_path):
        values = np.zeros((3, 1, 2), dtype=np.int16)
        values[:, 0, 1] = 1
        raster = ClassifiedRaster(values=values, resolution=100.0)
        orchestrator = WorkflowOrchestrator(
            raster,
            LabelSet(names=("Forest", "Deforestation")),
            timeline,
            config=PredicateConfig(index_base=0),
            working_dir=tmp_path,
        )
        results = orchestrator.execute(
            {
                "steps": [
                    {
                        "name": "forest",
                        "type": "holds",
                        "params": {"class_name": "Forest", "time_interval": [D1, D3]},
                    }
                ]
            }
        )
        assert results["forest"].coordinates() == {(50.0, -50.0)}


class TestWorkflowFiles:
    """Tests for workflow files."""

    def test_run_yaml_workflow(self, raster, labels, timeline, tmp_path):
        (tmp_path / "predicates.yaml").write_text("pixel_resolution: 100.0\n")
        workflow_file = tmp_path / "evolve.yaml"
        workflow_file.write_text(WORKFLOW_YAML)

        results = run_workflow(workflow_file, raster, labels, timeline)

        evolve = results["forest_evolve"]
        assert len(evolve) == 2
        assert evolve.date_columns == [D2, D3]

        measures = results["forest_measures"]
        # date 2: one pixel, date 3: both pixels, 0.01 km² each
        assert measures["pixel_count"].tolist() == [1, 2]
        assert measures["cumulative_sum"].iloc[-1] == pytest.approx(0.03)

    def test_load_workflow(self, tmp_path):
        workflow_file = tmp_path / "evolve.yml"
        workflow_file.write_text(WORKFLOW_YAML)
        workflow = load_workflow(workflow_file)
        assert [step["type"] for step in workflow["steps"]] == ["evolve", "measures"]

    def test_unsupported_format(self, tmp_path):
        workflow_file = tmp_path / "evolve.txt"
        workflow_file.write_text("steps: []")
        with pytest.raises(ValueError, match="Unsupported workflow file format"):
            load_workflow(workflow_file)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_workflow(tmp_path / "missing.yaml")
