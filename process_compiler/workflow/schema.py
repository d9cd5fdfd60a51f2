""" Compiled workflow definition: the value handed to storage and the test engine. """

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .. import config
from ..errors import DefinitionValidationError
from .models import StepType


class JsonSchemaLike(BaseModel):
    type: str = "object"
    properties: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)
    description: str = ""


class StepTestConfig(BaseModel):
    mockable: bool = True
    timeout_ms: int = config.DEFAULT_STEP_TIMEOUT_MS
    retry_count: int = config.DEFAULT_RETRY_COUNT
    requires_real_api: bool = False
    operations: List[str] = Field(default_factory=lambda: ["read"])


class WorkflowStepDefinition(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str
    name: str
    order: int
    step_type: StepType
    integration: Optional[str] = None
    description: str = ""
    sub_steps: List[str] = Field(default_factory=list)
    input_schema: JsonSchemaLike = Field(default_factory=JsonSchemaLike)
    output_schema: JsonSchemaLike = Field(default_factory=JsonSchemaLike)
    dependencies: List[str] = Field(default_factory=list)
    test_config: StepTestConfig = Field(default_factory=StepTestConfig)


class WorkflowConnection(BaseModel):
    from_step_id: str
    to_step_id: str
    condition: str = config.DEFAULT_CONNECTION_CONDITION
    label: Optional[str] = None


class WorkflowTestConfig(BaseModel):
    default_run_mode: str = config.DEFAULT_RUN_MODE
    timeout_ms: int = 0
    retry_count: int = config.DEFAULT_RETRY_COUNT
    continue_on_failure: bool = False


class WorkflowDefinition(BaseModel):
    process_map_id: str = ""
    org_id: str = ""
    steps: List[WorkflowStepDefinition] = Field(default_factory=list)
    connections: List[WorkflowConnection] = Field(default_factory=list)
    test_config: WorkflowTestConfig = Field(default_factory=WorkflowTestConfig)
    mock_config: Dict[str, Any] = Field(default_factory=dict)
    version: int = config.WORKFLOW_VERSION
    is_active: bool = True


def validate_definition(definition: WorkflowDefinition) -> None:
    """
    Check id uniqueness, referential integrity and that dependencies form a DAG (Kahn).
    """
    step_ids = [step.id for step in definition.steps]
    seen = set()
    for step_id in step_ids:
        if step_id in seen:
            raise DefinitionValidationError(f"Duplicate step id: {step_id}")
        seen.add(step_id)

    for conn in definition.connections:
        if conn.from_step_id not in seen or conn.to_step_id not in seen:
            raise DefinitionValidationError(
                f"Connection references unknown step: {conn.from_step_id} -> {conn.to_step_id}")

    indegree = {step_id: 0 for step_id in step_ids}
    adjacency: Dict[str, List[str]] = {step_id: [] for step_id in step_ids}
    for step in definition.steps:
        for dep in step.dependencies:
            if dep not in seen:
                raise DefinitionValidationError(f"Step {step.id} depends on unknown step: {dep}")
            adjacency[dep].append(step.id)
            indegree[step.id] += 1

    queue = [step_id for step_id, deg in indegree.items() if deg == 0]
    visited = 0
    while queue:
        current = queue.pop(0)
        visited += 1
        for neighbor in adjacency[current]:
            indegree[neighbor] -= 1
            if indegree[neighbor] == 0:
                queue.append(neighbor)

    if visited != len(step_ids):
        raise DefinitionValidationError("Cycle detected in step dependencies.")


def execution_order(definition: WorkflowDefinition) -> List[str]:
    """ Depth-first topological order: every step comes after its dependencies. """
    by_id = {step.id: step for step in definition.steps}
    visited = set()
    order: List[str] = []

    def _visit(step_id: str):
        if step_id in visited or step_id not in by_id:
            return
        visited.add(step_id)
        for dep in by_id[step_id].dependencies:
            _visit(dep)
        order.append(step_id)

    for step in definition.steps:
        _visit(step.id)
    return order
