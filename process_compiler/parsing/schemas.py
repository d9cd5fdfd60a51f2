"""
Per-step input/output schema synthesis.

Input schemas are seeded by integration and augmented by a keyword scan of the
step description; output schemas depend only on the step type. Everything here
is a pure function that never raises.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..workflow.models import ClassifiedStep, StepType
from ..workflow.schema import JsonSchemaLike

INTEGRATION_INPUT_FIELDS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "hubspot": (
        ("contact_id", "HubSpot contact ID"),
        ("deal_id", "HubSpot deal ID"),
        ("access_token", "HubSpot OAuth access token"),
    ),
    "fathom": (
        ("meeting_id", "Fathom meeting ID"),
        ("recording_url", "URL of the meeting recording"),
        ("transcript", "Meeting transcript text"),
    ),
    "google": (
        ("user_id", "Google user ID"),
        ("calendar_id", "Google calendar ID"),
        ("access_token", "Google OAuth access token"),
    ),
    "slack": (
        ("channel_id", "Slack channel ID"),
        ("message", "Message text to post"),
    ),
    "justcall": (
        ("call_id", "JustCall call ID"),
        ("phone_number", "Phone number in E.164 format"),
    ),
    "savvycal": (
        ("booking_id", "SavvyCal booking ID"),
        ("scheduling_link", "SavvyCal scheduling link"),
    ),
}

# description keyword -> generic input property
DESCRIPTION_INPUT_FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("id", "id", "Record identifier"),
    ("email", "email", "Email address"),
)

OUTPUT_FIELDS: Dict[StepType, Dict[str, Dict[str, Any]]] = {
    StepType.TRIGGER: {
        "event_id": {"type": "string", "description": "Unique event identifier"},
        "event_type": {"type": "string", "description": "Type of event received"},
        "payload": {"type": "object", "description": "Raw event payload"},
    },
    StepType.STORAGE: {
        "record_id": {"type": "string", "description": "ID of the stored record"},
        "created": {"type": "boolean", "description": "Whether a new record was created"},
        "updated": {"type": "boolean", "description": "Whether an existing record was updated"},
    },
    StepType.TRANSFORM: {
        "transformed_data": {"type": "object", "description": "Transformed data"},
        "extracted_items": {"type": "array", "description": "Items extracted from the input"},
    },
    StepType.EXTERNAL_CALL: {
        "status_code": {"type": "number", "description": "HTTP status code"},
        "response": {"type": "object", "description": "Response body"},
        "success": {"type": "boolean", "description": "Whether the call succeeded"},
    },
}

DEFAULT_OUTPUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "success": {"type": "boolean", "description": "Whether the step succeeded"},
    "data": {"type": "object", "description": "Step result data"},
}


def synthesize_input_schema(title: str, description: str, integration: Optional[str]) -> JsonSchemaLike:
    schema = JsonSchemaLike(description=f"Input data for {title or ''}".strip())
    for name, desc in INTEGRATION_INPUT_FIELDS.get(integration or "", ()):
        schema.properties[name] = {"type": "string", "description": desc}

    text = (description or "").lower()
    for keyword, name, desc in DESCRIPTION_INPUT_FIELDS:
        if keyword in text and name not in schema.properties:
            schema.properties[name] = {"type": "string", "description": desc}
    return schema


def synthesize_output_schema(title: str, step_type: StepType) -> JsonSchemaLike:
    fields = OUTPUT_FIELDS.get(step_type, DEFAULT_OUTPUT_FIELDS)
    return JsonSchemaLike(
        properties={name: dict(prop) for name, prop in fields.items()},
        description=f"Output data for {title or ''}".strip(),
    )


def synthesize_schemas(steps: List[ClassifiedStep]) -> List[ClassifiedStep]:
    """ Fill in input/output schemas on each classified step (in place) and return the list. """
    for item in steps:
        item.input_schema = synthesize_input_schema(item.step.title, item.step.description, item.integration)
        item.output_schema = synthesize_output_schema(item.step.title, item.step_type)
    return steps


def synthesize_output(step_id: str, step_name: str, step_type: StepType,
                      input_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Deterministic sample output shaped like the step type's output schema.
    Used as the canned response for mocked steps.
    """
    input_data = dict(input_data or {})
    if step_type == StepType.TRIGGER:
        return {
            "event_id": f"evt_{step_id}",
            "event_type": "_".join((step_name or "event").lower().split()),
            "payload": input_data,
        }
    if step_type == StepType.STORAGE:
        return {"record_id": f"rec_{step_id}", "created": True, "updated": False}
    if step_type == StepType.TRANSFORM:
        return {"transformed_data": input_data, "extracted_items": []}
    if step_type == StepType.EXTERNAL_CALL:
        return {"status_code": 200, "response": {"success": True}, "success": True}
    return {"success": True, "data": input_data}


# -------------------------
# VALIDATION
# -------------------------

@dataclass
class ValidationResult:
    rule: str
    passed: bool
    message: str
    severity: str  # "error" | "warning" | "info"


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _type_matches(actual: str, expected: str) -> bool:
    if actual == expected:
        return True
    return expected == "number" and actual == "integer"


def validate_against_schema(data: Dict[str, Any], schema: JsonSchemaLike) -> List[ValidationResult]:
    """
    Check `data` against a schema's required fields (errors) and declared
    property types (warnings). Returns one result per check; never raises.
    """
    data = data if isinstance(data, dict) else {}
    results: List[ValidationResult] = []

    for name in schema.required:
        present = data.get(name) is not None
        results.append(ValidationResult(
            rule=f"required:{name}",
            passed=present,
            message=f'Required field "{name}" is {"present" if present else "missing"}',
            severity="info" if present else "error",
        ))

    for name, prop in schema.properties.items():
        expected = prop.get("type")
        if name not in data or not expected:
            continue
        actual = _json_type(data[name])
        ok = _type_matches(actual, expected)
        results.append(ValidationResult(
            rule=f"type:{name}",
            passed=ok,
            message=f'Field "{name}" has correct type' if ok
                    else f'Field "{name}" expected {expected}, got {actual}',
            severity="info" if ok else "warning",
        ))

    return results
