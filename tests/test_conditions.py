"""Tests for condition parsing, value synthesis and evaluation."""

import pytest

from process_compiler.scenarios.conditions import (
    Condition,
    evaluate_condition,
    parse_condition,
    synthesize_fail_value,
    synthesize_pass_value,
    synthesize_values,
)


def test_parse_raw_condition_string():
    condition = parse_condition({"condition": "deal_value > 10000"})
    assert condition == Condition(field="deal_value", operator=">", value="10000")


def test_parse_raw_condition_strips_quotes():
    condition = parse_condition({"condition": "activity_type == 'proposal_sent'"})
    assert condition == Condition(field="activity_type", operator="==", value="proposal_sent")


def test_parse_structured_condition():
    condition = parse_condition({"field": "stage", "operator": "!=", "value": "Closed Lost"})
    assert condition == Condition(field="stage", operator="!=", value="Closed Lost")


def test_parse_condition_type_defaults():
    assert parse_condition({"conditionType": "value_check", "threshold": 50000}) == \
        Condition(field="value", operator=">", value="50000")
    assert parse_condition({"label": "Activity is a proposal"}) == \
        Condition(field="activity_type", operator="==", value="proposal_sent")


def test_unparseable_condition_falls_back_to_unknown_field():
    condition = parse_condition({"label": "Something vague"})
    assert condition.field == "unknown"


@pytest.mark.parametrize("op, passes, fails", [
    (">", 11000, 9000),
    (">=", 10000, 9999),
    ("<", 9000, 11000),
    ("<=", 10000, 10001),
    ("==", 10000, 10001),
    ("===", 10000, 10001),
    ("!=", 10001, 10000),
    ("!==", 10001, 10000),
    ("~=", 10000, 9000),
])
def test_numeric_value_synthesis(op, passes, fails):
    assert synthesize_pass_value(10000, op) == passes
    assert synthesize_fail_value(10000, op) == fails


@pytest.mark.parametrize("op", [">", ">=", "<", "<=", "==", "!="])
def test_synthesized_values_satisfy_and_violate_condition(op):
    """Pass values satisfy their condition and fail values violate it."""
    condition = Condition(field="deal_value", operator=op, value="2500")
    pass_value, fail_value = synthesize_values(condition)

    assert evaluate_condition(condition, {"deal_value": pass_value})
    assert not evaluate_condition(condition, {"deal_value": fail_value})


def test_categorical_fields_use_sentinel_fail_values():
    assert synthesize_values(Condition("activity_type", "==", "proposal_sent")) == ("proposal_sent", "call")
    assert synthesize_values(Condition("stage", "==", "Opportunity")) == ("Opportunity", "Different Stage")
    assert synthesize_values(Condition("priority", "==", "high")) == ("high", "lowest")


def test_negated_categorical_condition_swaps_values():
    assert synthesize_values(Condition("stage", "!=", "Closed")) == ("Different Stage", "Closed")


def test_unknown_field_substitution():
    assert synthesize_values(Condition("unknown", "==", None)) == ("test_value", "different_value")


def test_evaluate_condition_edge_cases():
    condition = Condition("deal_value", ">", "100")

    assert not evaluate_condition(condition, {})
    assert not evaluate_condition(Condition("deal_value", "~", "100"), {"deal_value": 500})
    assert evaluate_condition(condition, {"deal_value": "150"})
    assert evaluate_condition(Condition("stage", "==", "SQL"), {"stage": "SQL"})


def test_unrecognised_condition_type_names_the_field():
    """An unknown conditionType is taken as the field; a numeric threshold reads as '>'."""
    condition = parse_condition({"conditionType": "deal_value", "value": 10000})
    assert condition == Condition(field="deal_value", operator=">", value="10000")
    assert synthesize_values(condition) == (11000, 9000)


def test_unrecognised_condition_type_with_text_value():
    condition = parse_condition({"type": "lead_source", "value": "referral"})
    assert condition == Condition(field="lead_source", operator="==", value="referral")
