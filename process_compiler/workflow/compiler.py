""" Compile a process description and Mermaid diagram into a WorkflowDefinition. """

import logging
from typing import Optional

import yaml

from .. import config
from ..errors import InputTooLargeError
from ..parsing.classifier import classify_steps
from ..parsing.mermaid import parse_mermaid
from ..parsing.schemas import synthesize_schemas
from ..parsing.segmenter import parse_description
from .assembler import assemble_workflow
from .schema import WorkflowDefinition, validate_definition

logger = logging.getLogger(__name__)


def _check_size(name: str, text: str, max_lines: Optional[int]) -> None:
    if max_lines is None or not text:
        return
    line_count = text.count("\n") + 1
    if line_count > max_lines:
        raise InputTooLargeError(name, line_count, max_lines)


def compile_process(description: str, mermaid_code: str = "", *,
                    process_map_id: str = "", org_id: str = "",
                    max_lines: Optional[int] = config.MAX_INPUT_LINES,
                    step_timeout_ms: int = config.DEFAULT_STEP_TIMEOUT_MS,
                    retry_count: int = config.DEFAULT_RETRY_COUNT,
                    run_mode: str = config.DEFAULT_RUN_MODE) -> WorkflowDefinition:
    """
    Segment, classify and schematize the description, parse the diagram, and
    assemble both into one definition. Empty inputs give an empty definition.

    Raises InputTooLargeError when either input exceeds `max_lines`
    (pass max_lines=None to disable the guard).
    """
    _check_size("description", description, max_lines)
    _check_size("mermaid_code", mermaid_code, max_lines)

    steps = synthesize_schemas(classify_steps(parse_description(description)))
    diagram = parse_mermaid(mermaid_code)

    definition = assemble_workflow(
        steps,
        diagram.edges,
        process_map_id=process_map_id,
        org_id=org_id,
        step_timeout_ms=step_timeout_ms,
        retry_count=retry_count,
        run_mode=run_mode,
    )
    validate_definition(definition)

    if not definition.steps:
        logger.warning("No steps compiled for process map %r; check the description format", process_map_id)
    logger.info("Compiled process map %r: %d steps, %d connections, %d diagram nodes",
                process_map_id, len(definition.steps), len(definition.connections), len(diagram.nodes))
    return definition


def load_process_map(yaml_text: str, **kwargs) -> WorkflowDefinition:
    """
    Compile a process map from a YAML envelope:

        process_map_id: pm_1
        org_id: org_1
        description: |
          1. ...
        mermaid: |
          flowchart TD
          ...
    """
    data = yaml.safe_load(yaml_text) or {}
    if not isinstance(data, dict):
        raise ValueError("Process map YAML must be a mapping")

    for key in ["description", "mermaid"]:
        if key not in data:
            raise ValueError(f"Missing required top-level field: {key}")

    return compile_process(
        data.get("description") or "",
        data.get("mermaid") or "",
        process_map_id=str(data.get("process_map_id", "")),
        org_id=str(data.get("org_id", "")),
        **kwargs,
    )
