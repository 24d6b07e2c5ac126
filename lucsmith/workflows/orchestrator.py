"""
Workflow orchestrator for executing config-driven predicate workflows.

Supports YAML/JSON workflow definitions with steps and parameters, e.g.::

    config: predicates.yaml
    steps:
      - name: forest_evolve
        type: evolve
        params:
          class_name1: Forest
          time_interval1: ["2007-09-01", "2007-09-01"]
          class_name2: Deforestation
          time_interval2: ["2008-09-01", "2017-09-01"]
      - name: forest_evolve_measures
        type: measures
        params:
          table: ${forest_evolve}
          pixel_resolution: ${config.pixel_resolution}
"""

import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from lucsmith.config import (
    PredicateConfig,
    configured_labels,
    get_config_value,
    load_config,
    read_mapping_file,
    step_defaults,
)
from lucsmith.objects.classified_raster import RasterSource
from lucsmith.objects.labelset import LabelSet
from lucsmith.objects.resulttable import ResultTable
from lucsmith.objects.timeline import Timeline
from lucsmith.primitives.measures import result_measures
from lucsmith.primitives.table_algebra import (
    drop_duplicate_rows,
    merge_tables,
    remove_columns,
)
from lucsmith.tasks.predicatetask import (
    convert_sweep,
    pred_convert,
    pred_evolve,
    pred_holds,
    pred_recur,
)

logger = logging.getLogger(__name__)


# Registry of available workflow steps
STEP_REGISTRY: dict[str, Callable] = {}

# Arguments filled from the orchestrator context when a step declares them
CONTEXT_ARGUMENTS = ("raster", "labels", "timeline", "config")


def register_step(name: str, func: Callable):
    """Register a function as a workflow step."""
    STEP_REGISTRY[name] = func
    logger.debug(f"Registered workflow step: {name}")


def _merge_step(tables: list[Optional[ResultTable]]) -> ResultTable:
    """Merge a list of step outputs into one table."""
    return merge_tables(*tables)


def _register_default_steps():
    """Register default workflow steps."""
    register_step("holds", pred_holds)
    register_step("recur", pred_recur)
    register_step("evolve", pred_evolve)
    register_step("convert", pred_convert)
    register_step("convert_sweep", convert_sweep)
    register_step("merge", _merge_step)
    register_step("remove_columns", remove_columns)
    register_step("drop_duplicates", drop_duplicate_rows)
    register_step("measures", result_measures)


# Initialize default steps
_register_default_steps()


class WorkflowOrchestrator:
    """
    Orchestrator for executing config-driven predicate workflows.

    Loads workflow definitions from YAML/JSON and executes steps in order
    against one classified raster, its labels and its timeline.
    """

    def __init__(
        self,
        raster: RasterSource,
        labels: LabelSet,
        timeline: Timeline,
        config: PredicateConfig | None = None,
        working_dir: str | Path | None = None,
    ):
        """
        Initialize workflow orchestrator.

        Parameters
        ----------
        raster : RasterSource
            Classified raster shared by all steps
        labels : LabelSet or sequence of str
            Class names in raster code order
        timeline : Timeline
            Observation dates of the raster layers
        config : PredicateConfig, optional
            Configuration. Its relation and remove_column settings fill
            step parameters left unset, and its index_base applies to labels.
        working_dir : str or Path, optional
            Working directory for relative paths in workflow
        """
        self.raster = raster
        self.labels = labels
        self.timeline = timeline
        self.config = config
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.results: dict[str, Any] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def load_workflow_file(self, file_path: str | Path) -> dict[str, Any]:
        """
        Load workflow definition from file.

        Parameters
        ----------
        file_path : str or Path
            Path to YAML or JSON workflow file

        Returns
        -------
        dict
            Workflow definition

        Raises
        ------
        FileNotFoundError
            If file doesn't exist
        ValueError
            If file format is unsupported
        """
        workflow = load_workflow(file_path)
        self.logger.info(f"Loaded workflow from {file_path}")
        return workflow

    def _resolve_parameter(self, value: Any, step_name: str) -> Any:
        """
        Resolve parameter value, supporting references to previous steps.

        Parameters
        ----------
        value : any
            Parameter value (may be string reference like "${step_name.attr}")
        step_name : str
            Current step name

        Returns
        -------
        any
            Resolved value
        """
        if not (isinstance(value, str) and value.startswith("${") and value.endswith("}")):
            return value

        ref = value[2:-1]

        if ref.startswith("config."):
            return get_config_value(ref[7:], config=self.config)

        if "." in ref:
            step_ref, attr = ref.split(".", 1)
        else:
            step_ref = ref
            attr = "output"

        if step_ref not in self.results:
            raise ValueError(
                f"Step '{step_ref}' not found in results "
                f"(referenced by {value} in step '{step_name}')"
            )

        result = self.results[step_ref]
        if attr == "output":
            return result
        elif isinstance(result, pd.DataFrame):
            if attr in result.columns:
                return result[attr].values
            raise ValueError(
                f"Column '{attr}' not found in step '{step_ref}' output. "
                f"Available columns: {list(result.columns)}"
            )
        elif isinstance(result, dict) and attr in result:
            return result[attr]
        elif hasattr(result, attr):
            return getattr(result, attr)
        else:
            raise ValueError(
                f"Reference {value} not found in step '{step_ref}'. "
                f"Result type: {type(result)}"
            )

    def _resolve_parameters(
        self, params: dict[str, Any], step_name: str
    ) -> dict[str, Any]:
        """Resolve all parameters in a dictionary."""
        resolved = {}
        for key, value in params.items():
            if isinstance(value, dict):
                resolved[key] = self._resolve_parameters(value, step_name)
            elif isinstance(value, list):
                resolved[key] = [
                    self._resolve_parameter(item, step_name) for item in value
                ]
            else:
                resolved[key] = self._resolve_parameter(value, step_name)
        return resolved

    def _context(self) -> dict[str, Any]:
        return {
            "raster": self.raster,
            "labels": configured_labels(self.labels, self.config),
            "timeline": self.timeline,
            "config": self.config,
        }

    def _execute_step(self, step: dict[str, Any], step_index: int) -> Any:
        """
        Execute a single workflow step.

        Parameters
        ----------
        step : dict
            Step definition
        step_index : int
            Step index (for logging)

        Returns
        -------
        any
            Step result
        """
        step_name = step.get("name") or step.get("step") or f"step_{step_index}"
        step_type = step.get("type") or step.get("function")

        if not step_type:
            raise ValueError(f"Step {step_name} missing 'type' or 'function' field")

        self.logger.info(f"Executing step {step_index + 1}: {step_name} ({step_type})")

        func = STEP_REGISTRY.get(step_type)
        if func is None:
            raise ValueError(
                f"Unknown step type: {step_type}. "
                f"Available: {list(STEP_REGISTRY.keys())}"
            )

        params = step.get("params", step.get("parameters", {})) or {}
        params = self._resolve_parameters(params, step_name)

        sig = inspect.signature(func)
        for name, value in self._context().items():
            if name in sig.parameters and name not in params:
                params[name] = value
        for name, value in step_defaults(list(sig.parameters), self.config).items():
            params.setdefault(name, value)

        try:
            result = func(**params)
            self.results[step_name] = result
            self.logger.info(f"✓ Step {step_name} completed successfully")
            return result
        except Exception as e:
            self.logger.error(f"✗ Step {step_name} failed: {e}")
            raise

    def execute(self, workflow: dict[str, Any]) -> dict[str, Any]:
        """
        Execute a workflow definition.

        Parameters
        ----------
        workflow : dict
            Workflow definition with 'steps' list

        Returns
        -------
        dict
            Results from all steps
        """
        self.logger.info("Starting workflow execution")

        config_file = workflow.get("config")
        if config_file:
            config_path = Path(config_file)
            if not config_path.is_absolute():
                config_path = self.working_dir / config_path
            self.config = load_config(config_path)
            self.logger.info(f"Loaded config from {config_path}")

        steps = workflow.get("steps", [])
        if not steps:
            raise ValueError("Workflow must contain 'steps' list")

        for i, step in enumerate(steps):
            try:
                self._execute_step(step, i)
            except Exception as e:
                self.logger.error(f"Workflow failed at step {i + 1}: {e}")
                if workflow.get("stop_on_error", True):
                    raise

        self.logger.info(f"Workflow completed ({len(steps)} steps)")
        return self.results

    def execute_file(self, file_path: str | Path) -> dict[str, Any]:
        """
        Load and execute workflow from file.

        Parameters
        ----------
        file_path : str or Path
            Path to workflow file

        Returns
        -------
        dict
            Results from all steps
        """
        workflow = self.load_workflow_file(file_path)
        return self.execute(workflow)


def run_workflow(
    workflow_file: str | Path,
    raster: RasterSource,
    labels: LabelSet,
    timeline: Timeline,
    config: PredicateConfig | None = None,
    working_dir: str | Path | None = None,
) -> dict[str, Any]:
    """
    Convenience function to run a workflow from a file.

    Parameters
    ----------
    workflow_file : str or Path
        Path to workflow YAML/JSON file
    raster : RasterSource
        Classified raster
    labels : LabelSet
        Class names in raster code order
    timeline : Timeline
        Observation dates of the raster layers
    config : PredicateConfig, optional
        Configuration
    working_dir : str or Path, optional
        Working directory. Defaults to the workflow file's directory.

    Returns
    -------
    dict
        Results from all steps

    Example
    -------
    >>> from lucsmith.workflows import run_workflow
    >>> results = run_workflow("prodes.yaml", raster, labels, timeline)
    """
    workflow_file = Path(workflow_file)
    orchestrator = WorkflowOrchestrator(
        raster,
        labels,
        timeline,
        config=config,
        working_dir=working_dir or workflow_file.parent,
    )
    return orchestrator.execute_file(workflow_file)


def load_workflow(file_path: str | Path) -> dict[str, Any]:
    """
    Load workflow definition without executing.

    Parameters
    ----------
    file_path : str or Path
        Path to workflow file

    Returns
    -------
    dict
        Workflow definition
    """
    return read_mapping_file(file_path, kind="workflow")
