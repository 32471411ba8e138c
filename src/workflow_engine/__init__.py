"""Workflow engine.

Register reusable workflow definitions (states and the actions between them) and
run independent instances of them:
- core validation and transition rules in `workflow_engine.engine`
- a REST API in `workflow_engine.server`
- the `workflow-engine` CLI in `workflow_engine.cli`
"""

__version__ = "0.1.0"

from workflow_engine.engine import DefinitionStore, InstanceEngine, WorkflowDefinition

__all__ = ["__version__", "DefinitionStore", "InstanceEngine", "WorkflowDefinition"]
