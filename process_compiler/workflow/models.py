""" Data models for parse artifacts (prose steps and diagram shapes) """

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from .schema import JsonSchemaLike


class StepType(str, Enum):
    # declaration order is the classifier's match order
    TRIGGER = "trigger"
    ACTION = "action"
    CONDITION = "condition"
    TRANSFORM = "transform"
    EXTERNAL_CALL = "external_call"
    STORAGE = "storage"
    NOTIFICATION = "notification"


class ShapeType(str, Enum):
    START = "start"
    END = "end"
    PROCESS = "process"
    DECISION = "decision"
    DATA = "data"
    DEFAULT = "default"


@dataclass
class ParsedStep:
    number: int     # as written in the prose, never renumbered
    title: str
    description: str = ""
    sub_steps: List[str] = field(default_factory=list)


@dataclass
class MermaidNode:
    id: str
    label: str
    shape_type: ShapeType = ShapeType.DEFAULT
    section: Optional[str] = None


@dataclass
class MermaidEdge:
    from_id: str
    to_id: str
    label: Optional[str] = None


@dataclass
class ParsedDiagram:
    nodes: List[MermaidNode] = field(default_factory=list)
    edges: List[MermaidEdge] = field(default_factory=list)
    sections: Dict[str, str] = field(default_factory=dict)  # subgraph id -> label


@dataclass
class ClassifiedStep:
    """ A parsed step after classification; schemas are filled in by the synthesizer. """
    step: ParsedStep
    step_type: StepType
    integration: Optional[str] = None
    input_schema: Optional["JsonSchemaLike"] = None
    output_schema: Optional["JsonSchemaLike"] = None
