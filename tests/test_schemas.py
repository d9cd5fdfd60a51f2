"""Tests for input/output schema synthesis and schema validation."""

from process_compiler.parsing.schemas import (
    synthesize_input_schema,
    synthesize_output,
    synthesize_output_schema,
    validate_against_schema,
)
from process_compiler.workflow.models import StepType
from process_compiler.workflow.schema import JsonSchemaLike


def test_input_schema_defaults():
    schema = synthesize_input_schema("Send Summary", "Post it", None)

    assert schema.type == "object"
    assert schema.properties == {}
    assert schema.required == []
    assert schema.description == "Input data for Send Summary"


def test_input_schema_seeded_by_integration():
    hubspot = synthesize_input_schema("Sync", "", "hubspot")
    fathom = synthesize_input_schema("Pull", "", "fathom")
    google = synthesize_input_schema("Book", "", "google")

    assert set(hubspot.properties) == {"contact_id", "deal_id", "access_token"}
    assert set(fathom.properties) == {"meeting_id", "recording_url", "transcript"}
    assert set(google.properties) == {"user_id", "calendar_id", "access_token"}
    assert all(p["type"] == "string" for p in hubspot.properties.values())


def test_description_keywords_add_generic_fields():
    """'id' and 'email' in the description add generic string properties."""
    schema = synthesize_input_schema("Lookup", "Find the contact by ID and email", None)

    assert schema.properties["id"]["type"] == "string"
    assert schema.properties["email"]["type"] == "string"


def test_description_keywords_do_not_replace_seeded_fields():
    schema = synthesize_input_schema("Sync", "match on email", "hubspot")
    assert list(schema.properties) == ["contact_id", "deal_id", "access_token", "email"]


def test_output_schema_keyed_by_step_type():
    assert set(synthesize_output_schema("T", StepType.TRIGGER).properties) == {"event_id", "event_type", "payload"}
    assert set(synthesize_output_schema("S", StepType.STORAGE).properties) == {"record_id", "created", "updated"}
    assert set(synthesize_output_schema("X", StepType.TRANSFORM).properties) == {"transformed_data", "extracted_items"}
    assert set(synthesize_output_schema("E", StepType.EXTERNAL_CALL).properties) == {"status_code", "response", "success"}
    for step_type in (StepType.ACTION, StepType.CONDITION, StepType.NOTIFICATION):
        assert set(synthesize_output_schema("A", step_type).properties) == {"success", "data"}


def test_synthesizer_tolerates_missing_data():
    schema = synthesize_input_schema(None, None, "not-an-integration")
    assert schema.properties == {}


def test_synthesized_output_matches_output_schema():
    for step_type in StepType:
        schema = synthesize_output_schema("Step", step_type)
        output = synthesize_output("step_1_step", "Step", step_type)
        results = validate_against_schema(output, schema)
        assert set(output) == set(schema.properties)
        assert all(r.passed for r in results), results


def test_validate_against_schema_reports_missing_and_mistyped_fields():
    schema = JsonSchemaLike(
        properties={"count": {"type": "number"}, "name": {"type": "string"}},
        required=["name", "owner"],
    )

    results = {r.rule: r for r in validate_against_schema({"name": "x", "count": "many"}, schema)}

    assert results["required:name"].passed
    assert not results["required:owner"].passed
    assert results["required:owner"].severity == "error"
    assert not results["type:count"].passed
    assert results["type:count"].severity == "warning"
    assert results["type:name"].passed
