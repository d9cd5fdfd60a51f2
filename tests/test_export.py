"""Tests for serializing compiled definitions."""

import json

import yaml

from process_compiler.integrations.export import (
    definition_to_dict,
    definition_to_json,
    definition_to_mermaid,
    definition_to_yaml,
)
from process_compiler.parsing.mermaid import parse_mermaid
from process_compiler.workflow.compiler import compile_process
from process_compiler.workflow.models import ShapeType

DESCRIPTION = (
    "1. OAuth Connection: Connects via webhook.\n"
    "2. Store Record: Saves to the table.\n"
    "3. Send Notification: Emails the summary."
)


def test_definition_to_dict_uses_plain_values():
    data = definition_to_dict(compile_process(DESCRIPTION))

    assert data["steps"][0]["step_type"] == "trigger"
    assert data["steps"][1]["test_config"]["mockable"] is False
    assert data["connections"][0]["condition"] == "success"


def test_json_and_yaml_agree():
    definition = compile_process(DESCRIPTION)
    assert json.loads(definition_to_json(definition)) == yaml.safe_load(definition_to_yaml(definition))


def test_mermaid_rendering_parses_back():
    """Rendered Mermaid is readable by our own parser."""
    definition = compile_process(DESCRIPTION)
    definition.connections.append(
        definition.connections[0].model_copy(update={"condition": "retry", "label": "retry"}))

    diagram = parse_mermaid(definition_to_mermaid(definition))

    shapes = {n.id: n.shape_type for n in diagram.nodes}
    assert shapes == {
        "step_1_oauth_connection": ShapeType.START,
        "step_2_store_record": ShapeType.DATA,
        "step_3_send_notification": ShapeType.END,
    }
    assert [e.label for e in diagram.edges] == [None, None, "retry"]
