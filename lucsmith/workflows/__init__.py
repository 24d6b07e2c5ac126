"""Layer 4: Workflows - Public entry points.

Workflows read YAML/JSON workflow definitions and chain predicate tasks.
Raster file I/O and plotting live outside this package.
"""

from lucsmith.workflows.orchestrator import (
    STEP_REGISTRY,
    WorkflowOrchestrator,
    load_workflow,
    register_step,
    run_workflow,
)

__all__ = [
    "STEP_REGISTRY",
    "WorkflowOrchestrator",
    "load_workflow",
    "register_step",
    "run_workflow",
]
