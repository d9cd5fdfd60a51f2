""" Serialize a compiled WorkflowDefinition for storage collaborators and render it back to Mermaid. """

import json
import re
from typing import Any, Dict, List

import yaml

from ..workflow.models import StepType
from ..workflow.schema import WorkflowDefinition

# step type -> (open, close) Mermaid shape delimiters
_STEP_SHAPES: Dict[str, tuple] = {
    StepType.TRIGGER.value: ("((", "))"),
    StepType.CONDITION.value: ("{", "}"),
    StepType.STORAGE.value: ("[(", ")]"),
    StepType.NOTIFICATION.value: ("[[", "]]"),
}
_DEFAULT_SHAPE = ("[", "]")


def definition_to_dict(definition: WorkflowDefinition) -> Dict[str, Any]:
    return definition.model_dump(mode="json")


def definition_to_json(definition: WorkflowDefinition, indent: int = 2) -> str:
    return json.dumps(definition_to_dict(definition), indent=indent)


def definition_to_yaml(definition: WorkflowDefinition) -> str:
    return yaml.safe_dump(definition_to_dict(definition), sort_keys=False, allow_unicode=True)


def _node_id(step_id: str) -> str:
    # mermaid ids are word characters only
    return re.sub(r"\W", "_", step_id)


def _label(text: str) -> str:
    return '"' + (text or "").replace('"', "'") + '"'


def definition_to_mermaid(definition: WorkflowDefinition, direction: str = "TD") -> str:
    """
    Render steps as nodes (shape by step type) and connections as arrows.
    Default-condition connections are drawn unlabelled.
    """
    lines: List[str] = [f"flowchart {direction}"]
    for step in definition.steps:
        open_, close = _STEP_SHAPES.get(step.step_type, _DEFAULT_SHAPE)
        lines.append(f"    {_node_id(step.id)}{open_}{_label(step.name)}{close}")

    for conn in definition.connections:
        src, dst = _node_id(conn.from_step_id), _node_id(conn.to_step_id)
        if conn.label:
            lines.append(f"    {src} -->|{conn.label}| {dst}")
        else:
            lines.append(f"    {src} --> {dst}")
    return "\n".join(lines) + "\n"
