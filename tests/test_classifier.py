"""Tests for step type and integration classification."""

import pytest

from process_compiler.parsing.classifier import (
    classify_steps,
    detect_integration,
    detect_step_type,
)
from process_compiler.parsing.segmenter import parse_description
from process_compiler.workflow.models import StepType


def test_scenario_trigger_storage_notification():
    """Keyword rules tag the canonical three-step description."""
    steps = parse_description(
        "1. OAuth Connection: Connects via webhook.\n"
        "2. Store Record: Saves to the table.\n"
        "3. Send Notification: Emails the summary."
    )

    classified = classify_steps(steps)

    assert [c.step_type for c in classified] == [
        StepType.TRIGGER, StepType.STORAGE, StepType.NOTIFICATION,
    ]


def test_first_match_wins_over_later_rules():
    """'check' (condition) is declared before 'api' (external_call)."""
    assert detect_step_type("Check API status", "", 1, 3) == StepType.CONDITION


@pytest.mark.parametrize("title, description, expected", [
    ("Parse Payload", "Extract the line items", StepType.TRANSFORM),
    ("Fetch Deals", "Calls the API", StepType.EXTERNAL_CALL),
    ("Assign Owner", "Round robin", StepType.ACTION),
    ("Validate Input", "", StepType.CONDITION),
])
def test_keyword_rules(title, description, expected):
    assert detect_step_type(title, description, 1, 3) == expected


def test_positional_fallback():
    """Unmatched text falls back on position, then storage words, then action."""
    assert detect_step_type("Begin", "nothing", 0, 3) == StepType.TRIGGER
    assert detect_step_type("Finish", "nothing", 2, 3) == StepType.NOTIFICATION
    assert detect_step_type("Middle", "nothing", 1, 3) == StepType.ACTION


def test_single_step_falls_back_to_trigger():
    assert detect_step_type("Only", "nothing", 0, 1) == StepType.TRIGGER


@pytest.mark.parametrize("text, expected", [
    ("Push deal to HubSpot", "hubspot"),
    ("Download the Fathom recording", "fathom"),
    ("Create a Google Calendar event", "google"),
    ("Post to the Slack channel", "slack"),
    ("Log the JustCall call", "justcall"),
    ("Create a SavvyCal booking link", "savvycal"),
    ("Nothing external here", None),
])
def test_detect_integration(text, expected):
    assert detect_integration(text, "") == expected


def test_first_integration_in_table_order_wins():
    assert detect_integration("Sync HubSpot deals to Slack", "") == "hubspot"


def test_classification_is_deterministic():
    title, description = "Sync Contacts", "Fetch HubSpot contacts and post to Slack"
    first = (detect_step_type(title, description, 1, 3), detect_integration(title, description))
    for _ in range(5):
        assert (detect_step_type(title, description, 1, 3), detect_integration(title, description)) == first
