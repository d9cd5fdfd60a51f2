""" Heuristic step-type and integration tagging. """

import logging
from typing import List, Optional, Sequence, Tuple

from ..workflow.models import ClassifiedStep, ParsedStep, StepType

logger = logging.getLogger(__name__)

# Evaluated top to bottom, first match wins. Order is StepType declaration order.
STEP_TYPE_RULES: List[Tuple[StepType, Tuple[str, ...]]] = [
    (StepType.TRIGGER, ("oauth", "webhook", "trigger", "connects", "listens for", "receives")),
    (StepType.ACTION, ("create", "update", "assign", "generate", "process")),
    (StepType.CONDITION, ("check", "validate", "decision", "if ", "whether", "branch")),
    (StepType.TRANSFORM, ("transform", "parse", "format", "extract", "convert", "normalize")),
    (StepType.EXTERNAL_CALL, ("api", "sync", "fetch", "call ", "request")),
    (StepType.STORAGE, ("store", "save", "table", "database", "persist", "insert", "upsert")),
    (StepType.NOTIFICATION, ("notify", "notification", "email", "alert", "send", "post to")),
]

# keyword -> integration, first match wins
INTEGRATION_RULES: List[Tuple[str, Tuple[str, ...]]] = [
    ("hubspot", ("hubspot", "crm contact", "crm deal")),
    ("fathom", ("fathom", "meeting recording", "recording", "transcript")),
    ("google", ("google", "gmail", "calendar", "workspace")),
    ("slack", ("slack", "channel message")),
    ("justcall", ("justcall", "telephony", "phone call")),
    ("savvycal", ("savvycal", "booking link", "scheduling link")),
]


def _text(title: str, description: str) -> str:
    return f"{title or ''} {description or ''}".lower()


def detect_step_type(title: str, description: str, index: int, total: int) -> StepType:
    """
    First matching rule wins. With no match, fall back on position:
    first step -> trigger, last -> notification, storage words -> storage, else action.
    """
    text = _text(title, description)
    for step_type, patterns in STEP_TYPE_RULES:
        if any(p in text for p in patterns):
            return step_type

    if index == 0:
        return StepType.TRIGGER
    if index == total - 1:
        return StepType.NOTIFICATION
    # unreachable while STEP_TYPE_RULES lists both words under STORAGE
    if "table" in text or "database" in text:
        return StepType.STORAGE
    return StepType.ACTION


def detect_integration(title: str, description: str) -> Optional[str]:
    text = _text(title, description)
    for name, keywords in INTEGRATION_RULES:
        if any(k in text for k in keywords):
            return name
    return None


def classify_steps(steps: Sequence[ParsedStep]) -> List[ClassifiedStep]:
    """ Tag each step with its type and integration; position is the list index. """
    classified = []
    for index, step in enumerate(steps):
        step_type = detect_step_type(step.title, step.description, index, len(steps))
        integration = detect_integration(step.title, step.description)
        logger.debug("Step %d %r -> %s (integration=%s)",
                     index + 1, step.title, step_type.value, integration)
        classified.append(ClassifiedStep(step=step, step_type=step_type, integration=integration))
    return classified
