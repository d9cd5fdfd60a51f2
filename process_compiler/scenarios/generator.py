"""
Test scenario generation for canvas workflows.

For every condition node a pass and a fail payload is synthesized from the
condition's operator and threshold. With two or more conditions a combined
"pass all" payload is built by applying each condition's pass value to the
base payload in order; later conditions overwrite earlier ones on key
collisions. Three edge-case scenarios are always appended.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from .conditions import UNKNOWN_FIELD, Condition, parse_condition, synthesize_values
from .models import CanvasWorkflow, TestScenario

logger = logging.getLogger(__name__)

TRIGGER_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "deal_created": {
        "deal_id": "test_deal_123",
        "deal_name": "Standard Deal - Test Co",
        "value": 25000,
        "stage": "SQL",
        "company": "Test Company",
        "contact_name": "John Doe",
        "contact_email": "john@example.com",
        "owner": "current_user",
    },
    "stage_changed": {
        "deal_id": "test_deal_456",
        "deal_name": "Pipeline Test Deal",
        "old_stage": "SQL",
        "new_stage": "Opportunity",
        "value": 50000,
    },
    "activity_created": {
        "activity_type": "proposal_sent",
        "description": "Sent proposal to client",
        "deal_id": "test_deal_123",
        "deal_name": "Test Deal - Acme Corp",
        "company": "Acme Corp",
        "contact_name": "Jane Smith",
    },
    "activity_monitor": {
        "deal_id": "test_deal_789",
        "deal_name": "Activity Monitor Test",
        "days_inactive": 3,
        "last_activity": "2024-01-01",
        "activity_count": 2,
    },
    "task_overdue": {
        "task_id": "test_task_001",
        "task_title": "Follow up with client",
        "days_overdue": 1,
        "assigned_to": "current_user",
        "deal_name": "Overdue Task Deal",
    },
    "webhook_received": {
        "webhook_data": {
            "source": "external_system",
            "event": "data_updated",
            "payload": {"id": 123, "status": "active"},
        },
    },
}

DEFAULT_TRIGGER_PAYLOAD: Dict[str, Any] = {
    "deal_id": "test_deal_001",
    "deal_name": "Basic Test Deal",
    "value": 10000,
    "stage": "SQL",
}

# dropped by the missing-required-fields scenario
REQUIRED_FIELDS = ("deal_id", "deal_name")

INVALID_DATA_OVERRIDES: Dict[str, Any] = {
    "value": "not_a_number",
    "deal_value": "not_a_number",
    "deal_name": 12345,
    "stage": 42,
    "contact_email": "not-an-email@",
}

BOUNDARY_OVERRIDES: Dict[str, Any] = {
    "value": 0,
    "deal_value": -1,
    "activity_count": 999999999,
    "deal_name": "",
    "priority": "ultra_critical",
}


def generate_trigger_payload(trigger_type: str, run_id: Optional[str] = None,
                             timestamp: Optional[str] = None) -> Dict[str, Any]:
    """ Base payload for a trigger type; unknown types get a generic deal payload. """
    payload = {
        "test_run_id": run_id or f"test_{uuid.uuid4().hex[:12]}",
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
    }
    defaults = TRIGGER_DEFAULTS.get(trigger_type)
    if defaults is None:
        payload.update(DEFAULT_TRIGGER_PAYLOAD)
        payload["trigger_type"] = trigger_type
    else:
        payload.update(defaults)
    return payload


def _condition_key(condition: Condition) -> str:
    return "unknown_field" if condition.field == UNKNOWN_FIELD else condition.field


def _condition_payload(base: Dict[str, Any], condition: Condition, value: Any) -> Dict[str, Any]:
    return {**base, _condition_key(condition): value}


def _edge_case_scenarios(base: Dict[str, Any], label: str) -> List[TestScenario]:
    missing = {k: v for k, v in base.items() if k not in REQUIRED_FIELDS}
    return [
        TestScenario(
            id="missing_required_fields",
            name=f"{label} - Missing Required Fields",
            description=f"Payload without {', '.join(REQUIRED_FIELDS)}",
            test_data=missing,
            expected_outcome="fail",
            category="edge",
        ),
        TestScenario(
            id="invalid_data",
            name=f"{label} - Invalid Data",
            description="Wrong-typed values and a malformed email address",
            test_data={**base, **INVALID_DATA_OVERRIDES},
            expected_outcome="fail",
            category="edge",
        ),
        TestScenario(
            id="boundary_values",
            name=f"{label} - Boundary Values",
            description="Zero, negative, very large and empty values plus an out-of-range priority",
            test_data={**base, **BOUNDARY_OVERRIDES},
            expected_outcome="partial",
            category="edge",
        ),
    ]


def generate_test_scenarios(workflow: CanvasWorkflow, run_id: Optional[str] = None,
                            timestamp: Optional[str] = None) -> List[TestScenario]:
    """
    Derive pass/fail/edge scenarios for a canvas workflow. Conditions are
    processed in node order. A workflow without a trigger yields [].
    """
    trigger = workflow.trigger()
    if trigger is None:
        logger.warning("Workflow %r has no trigger node; no scenarios generated", workflow.name)
        return []

    trigger_type = trigger.data.get("triggerType") or trigger.data.get("type") or "default"
    label = trigger.label
    base = generate_trigger_payload(trigger_type, run_id, timestamp)
    scenarios: List[TestScenario] = []

    condition_nodes = workflow.conditions()
    pass_fields: List[Tuple[str, Any]] = []
    for index, node in enumerate(condition_nodes, start=1):
        condition = parse_condition(node.data)
        pass_value, fail_value = synthesize_values(condition)
        pass_data = _condition_payload(base, condition, pass_value)
        pass_fields.append((_condition_key(condition), pass_value))

        scenarios.append(TestScenario(
            id=f"pass_condition_{index}",
            name=f"{label} - Pass {node.label}",
            description=f"Data that should pass {condition}",
            test_data=pass_data,
            expected_outcome="pass",
            category="pass",
        ))
        scenarios.append(TestScenario(
            id=f"fail_condition_{index}",
            name=f"{label} - Fail {node.label}",
            description=f"Data that should fail {condition}",
            test_data=_condition_payload(base, condition, fail_value),
            expected_outcome="fail",
            category="fail",
        ))

    if len(pass_fields) >= 2:
        merged = dict(base)
        for key, value in pass_fields:
            merged[key] = value  # later conditions win on collisions
        scenarios.append(TestScenario(
            id="pass_all_conditions",
            name=f"{label} - Pass All Conditions",
            description=f"Data that should pass all {len(pass_fields)} conditions",
            test_data=merged,
            expected_outcome="pass",
            category="pass",
        ))

    if not condition_nodes:
        scenarios.append(TestScenario(
            id="basic_flow",
            name=f"{label} - Basic Flow",
            description=f"Typical {label.lower()} data",
            test_data=dict(base),
            expected_outcome="pass",
            category="pass",
        ))

    scenarios.extend(_edge_case_scenarios(base, label))
    logger.info("Generated %d scenarios for workflow %r (%d conditions)",
                len(scenarios), workflow.name, len(condition_nodes))
    return scenarios


def load_canvas_workflow(yaml_text: str) -> CanvasWorkflow:
    """
    Load a canvas workflow from YAML. Accepts the graph at the top level or
    under a `canvas_data` key.
    """
    data = yaml.safe_load(yaml_text) or {}
    if not isinstance(data, dict):
        raise ValueError("Canvas workflow YAML must be a mapping")
    if "canvas_data" in data:
        data = {"name": data.get("name", ""), **(data["canvas_data"] or {})}

    if "nodes" not in data:
        raise ValueError("Missing required top-level field: nodes")

    try:
        return CanvasWorkflow.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Canvas workflow validation error: {e}")
