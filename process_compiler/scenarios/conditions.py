"""
Condition parsing, operator-aware test value synthesis, and condition evaluation.

A condition is a field/operator/value triple taken either from a raw string
("deal_value > 10000") or from a condition node's structured properties.
"""

import logging
import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]

_RAW_CONDITION = re.compile(r"(\w+)\s*([><=!]+)\s*(.+)")

# (operator, pass offset, fail offset) relative to the threshold
NUMERIC_OFFSETS: List[Tuple[str, int, int]] = [
    (">", 1000, -1000),
    (">=", 0, -1),
    ("<", -1000, 1000),
    ("<=", 0, 1),
    ("==", 0, 1),
    ("===", 0, 1),
    ("!=", 1, 0),
    ("!==", 1, 0),
]
UNKNOWN_OPERATOR_OFFSETS = (0, -1000)

# Non-numeric fields: pass uses the declared value, fail uses this sentinel.
CATEGORICAL_FAIL_VALUES: Dict[str, str] = {
    "activity_type": "call",
    "stage": "Different Stage",
    "priority": "lowest",
}
DEFAULT_FAIL_VALUE = "different_value"
DEFAULT_PASS_VALUE = "test_value"
UNKNOWN_FIELD = "unknown"

NEGATED_OPERATORS = ("!=", "!==")

_COMPARATORS: List[Tuple[str, Callable[[Any, Any], bool]]] = [
    (">", operator.gt),
    (">=", operator.ge),
    ("<", operator.lt),
    ("<=", operator.le),
    ("==", operator.eq),
    ("===", operator.eq),
    ("!=", operator.ne),
    ("!==", operator.ne),
]

# structured conditionType -> (field, default operator)
_CONDITION_TYPES: Dict[str, Tuple[str, str]] = {
    "value_check": ("value", ">"),
    "value_greater_than": ("value", ">"),
    "stage_check": ("stage", "=="),
    "activity_type": ("activity_type", "=="),
}


@dataclass
class Condition:
    field: str
    operator: str = "=="
    value: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.field} {self.operator} {self.value}"


def _strip_quotes(value: str) -> str:
    return value.strip().replace('"', "").replace("'", "")


def to_number(value: Any) -> Optional[Number]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else number


def parse_condition(data: Dict[str, Any]) -> Condition:
    """
    Build a Condition from a condition node's data. A raw `condition` string
    wins over structured properties; anything unusable becomes an
    "unknown" field condition.
    """
    data = data or {}
    raw = data.get("condition")
    if isinstance(raw, str):
        match = _RAW_CONDITION.match(raw.strip())
        if match:
            field, op, value = match.groups()
            return Condition(field=field, operator=op, value=_strip_quotes(value))

    condition_type = data.get("conditionType") or data.get("type")
    field, default_op = _CONDITION_TYPES.get(condition_type, (None, "=="))
    # any other conditionType names the field; numeric thresholds read as ">"
    typed_field = field is None and isinstance(condition_type, str) and bool(condition_type)
    if typed_field:
        field = condition_type
    field = data.get("field") or field
    if not field and "activity" in str(data.get("label", "")).lower():
        field = "activity_type"

    value = next((data[k] for k in ("value", "threshold", "expectedValue", "targetValue")
                  if data.get(k) not in (None, "")), None)
    if value is None and field == "activity_type":
        value = "proposal_sent"
    if typed_field and to_number(value) is not None:
        default_op = ">"

    if not field:
        logger.warning("Unparseable condition %r, falling back to unknown field", data)
        return Condition(field=UNKNOWN_FIELD, operator="==", value=None if value is None else str(value))
    return Condition(field=field, operator=data.get("operator") or default_op,
                     value=None if value is None else str(value))


def _offsets(op: str) -> Tuple[int, int]:
    for name, pass_offset, fail_offset in NUMERIC_OFFSETS:
        if name == op:
            return pass_offset, fail_offset
    return UNKNOWN_OPERATOR_OFFSETS


def synthesize_pass_value(threshold: Number, op: str) -> Number:
    return threshold + _offsets(op)[0]


def synthesize_fail_value(threshold: Number, op: str) -> Number:
    return threshold + _offsets(op)[1]


def synthesize_values(condition: Condition) -> Tuple[Any, Any]:
    """ (pass value, fail value) for a condition. """
    threshold = to_number(condition.value)
    if condition.field not in CATEGORICAL_FAIL_VALUES and threshold is not None:
        return (synthesize_pass_value(threshold, condition.operator),
                synthesize_fail_value(threshold, condition.operator))

    declared = condition.value if condition.value not in (None, "") else DEFAULT_PASS_VALUE
    sentinel = CATEGORICAL_FAIL_VALUES.get(condition.field, DEFAULT_FAIL_VALUE)
    if condition.operator in NEGATED_OPERATORS:
        return sentinel, declared
    return declared, sentinel


def evaluate_condition(condition: Condition, data: Dict[str, Any]) -> bool:
    """
    Evaluate a condition against a payload. Compares numerically when both
    sides are numbers, as strings otherwise. Unknown operators are False.
    """
    if condition.field not in data:
        return False
    compare = next((fn for name, fn in _COMPARATORS if name == condition.operator), None)
    if compare is None:
        return False

    actual, expected = data[condition.field], condition.value
    actual_num, expected_num = to_number(actual), to_number(expected)
    if actual_num is not None and expected_num is not None:
        return bool(compare(actual_num, expected_num))
    return bool(compare(str(actual), str(expected)))
