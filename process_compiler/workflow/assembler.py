"""
Assemble classified, schematized steps and diagram edges into a WorkflowDefinition.

Default connections link each step to the next in prose order. Labelled diagram
edges are folded in on top when both endpoints resolve to compiled steps; the
merge is additive and never removes or rewrites a default connection.
"""

import logging
import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from .. import config
from ..parsing.schemas import synthesize_output
from .models import ClassifiedStep, MermaidEdge, StepType
from .schema import (
    JsonSchemaLike,
    StepTestConfig,
    WorkflowConnection,
    WorkflowDefinition,
    WorkflowStepDefinition,
    WorkflowTestConfig,
)

logger = logging.getLogger(__name__)

READ_KEYWORDS = ("fetch", "get", "read", "retrieve", "list", "query", "search", "load", "look up")
WRITE_KEYWORDS = ("create", "update", "save", "store", "write", "insert", "upsert", "send", "post", "sync")
DELETE_KEYWORDS = ("delete", "remove", "archive", "purge")
REAL_API_KEYWORDS = ("fetch", "get")


def make_step_id(ordinal: int, title: str, max_length: int = config.SLUG_MAX_LENGTH) -> str:
    """ step_<ordinal>_<slug>: lowercase, non-alphanumeric runs collapsed to '_', capped at max_length. """
    slug = re.sub(r"[^a-z0-9]+", "_", (title or "").lower()).strip("_")[:max_length]
    return f"step_{ordinal}_{slug}"


def detect_operations(description: str) -> List[str]:
    text = (description or "").lower()
    operations = []
    if any(k in text for k in READ_KEYWORDS):
        operations.append("read")
    if any(k in text for k in WRITE_KEYWORDS):
        operations.append("write")
    if any(k in text for k in DELETE_KEYWORDS):
        operations.append("delete")
    return operations or ["read"]


def requires_real_api(step_type: StepType, description: str) -> bool:
    # only read-style external calls are forced to hit the real API
    text = (description or "").lower()
    return step_type == StepType.EXTERNAL_CALL and any(k in text for k in REAL_API_KEYWORDS)


def resolve_step_id(node_id: str, step_ids: Sequence[str]) -> Optional[str]:
    """ First compiled step id that contains the lowercased diagram node id. """
    needle = (node_id or "").lower()
    if not needle:
        return None
    return next((step_id for step_id in step_ids if needle in step_id), None)


def primary_integration(steps: Sequence[ClassifiedStep]) -> Optional[str]:
    """ Most frequent integration across steps; ties go to the first one seen. """
    counts = Counter(s.integration for s in steps if s.integration)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def build_step(item: ClassifiedStep, ordinal: int, step_id: str, previous_id: Optional[str],
               timeout_ms: int, retry_count: int) -> WorkflowStepDefinition:
    step = item.step
    return WorkflowStepDefinition(
        id=step_id,
        name=step.title,
        order=ordinal,
        step_type=item.step_type,
        integration=item.integration,
        description=step.description,
        sub_steps=list(step.sub_steps),
        input_schema=item.input_schema or JsonSchemaLike(description=f"Input data for {step.title}"),
        output_schema=item.output_schema or JsonSchemaLike(description=f"Output data for {step.title}"),
        dependencies=[previous_id] if previous_id else [],
        test_config=StepTestConfig(
            mockable=item.step_type != StepType.STORAGE,
            timeout_ms=timeout_ms,
            retry_count=retry_count,
            requires_real_api=requires_real_api(item.step_type, step.description),
            operations=detect_operations(step.description),
        ),
    )


def build_connections(step_ids: Sequence[str], edges: Sequence[MermaidEdge],
                      default_condition: str = config.DEFAULT_CONNECTION_CONDITION) -> List[WorkflowConnection]:
    connections = [
        WorkflowConnection(from_step_id=a, to_step_id=b, condition=default_condition)
        for a, b in zip(step_ids, step_ids[1:])
    ]
    used = {(c.from_step_id, c.condition) for c in connections}

    for edge in edges:
        if not edge.label:
            continue
        from_id = resolve_step_id(edge.from_id, step_ids)
        to_id = resolve_step_id(edge.to_id, step_ids)
        if not from_id or not to_id or from_id == to_id:
            logger.debug("Unresolved diagram edge %s -> %s (%s)", edge.from_id, edge.to_id, edge.label)
            continue
        if (from_id, edge.label) in used:
            logger.debug("Suppressing duplicate connection %s [%s]", from_id, edge.label)
            continue
        connections.append(WorkflowConnection(
            from_step_id=from_id, to_step_id=to_id, condition=edge.label, label=edge.label))
        used.add((from_id, edge.label))

    return connections


def build_mock_config(steps: Sequence[ClassifiedStep], definitions: Sequence[WorkflowStepDefinition]) -> Dict[str, Dict]:
    # one bucket only, for the primary integration
    primary = primary_integration(steps)
    if not primary:
        return {}
    responses = {
        d.id: synthesize_output(d.id, d.name, StepType(d.step_type))
        for d in definitions if d.integration == primary
    }
    return {primary: {"enabled": True, "responses": responses}}


def assemble_workflow(steps: Sequence[ClassifiedStep], edges: Sequence[MermaidEdge], *,
                      process_map_id: str = "", org_id: str = "",
                      step_timeout_ms: int = config.DEFAULT_STEP_TIMEOUT_MS,
                      retry_count: int = config.DEFAULT_RETRY_COUNT,
                      run_mode: str = config.DEFAULT_RUN_MODE) -> WorkflowDefinition:
    """
    Build the WorkflowDefinition. Step ids come from ordinal position (1-based)
    and title, so they are stable only while both stay unchanged.
    """
    definitions: List[WorkflowStepDefinition] = []
    previous_id: Optional[str] = None
    for ordinal, item in enumerate(steps, start=1):
        step_id = make_step_id(ordinal, item.step.title)
        definitions.append(build_step(item, ordinal, step_id, previous_id, step_timeout_ms, retry_count))
        previous_id = step_id

    step_ids = [d.id for d in definitions]
    return WorkflowDefinition(
        process_map_id=process_map_id,
        org_id=org_id,
        steps=definitions,
        connections=build_connections(step_ids, edges),
        test_config=WorkflowTestConfig(
            default_run_mode=run_mode,
            timeout_ms=step_timeout_ms * len(definitions),
            retry_count=retry_count,
            continue_on_failure=False,
        ),
        mock_config=build_mock_config(steps, definitions),
    )
