"""
Split a numbered prose description into ordered step records.

    1. OAuth Connection: Connects via webhook.
       - Exchange the code for tokens
       Continuation text is appended to the description.
    2. Store Record: Saves to the table.
"""

import logging
import re
from typing import List, Optional

from ..workflow.models import ParsedStep

logger = logging.getLogger(__name__)

# "<n>. <title>: <optional text>" - the colon is optional, title stops at the first colon
_STEP_HEADER = re.compile(r"^(\d+)\.\s*([^:]+):?\s*(.*)$")
_SUB_STEP_MARKERS = ("- ", "• ")


def parse_description(text: str) -> List[ParsedStep]:
    """
    Segment `text` into ParsedSteps. Lines before the first numbered header are
    dropped; an empty or header-less text yields [].
    """
    steps: List[ParsedStep] = []
    current: Optional[ParsedStep] = None

    for line in (text or "").splitlines():
        stripped = line.strip()
        if not stripped:
            continue

        header = _STEP_HEADER.match(stripped)
        if header:
            current = ParsedStep(
                number=int(header.group(1)),
                title=header.group(2).strip(),
                description=header.group(3).strip(),
            )
            steps.append(current)
            continue

        if current is None:
            logger.debug("Skipping line before first step: %r", stripped)
            continue

        marker = next((m for m in _SUB_STEP_MARKERS if stripped.startswith(m)), None)
        if marker:
            current.sub_steps.append(stripped[len(marker):].strip())
        elif current.description:
            current.description = f"{current.description} {stripped}"
        else:
            current.description = stripped

    return steps
