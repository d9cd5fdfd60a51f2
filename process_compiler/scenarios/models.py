""" Canvas workflow graph (trigger/condition/action nodes) and generated test scenarios. """

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CanvasNode(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str  # "trigger" | "condition" | "action" | "router"
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def label(self) -> str:
        return str(self.data.get("label") or self.type.capitalize())


class CanvasEdge(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    source: str
    target: str


class CanvasWorkflow(BaseModel):
    name: str = ""
    nodes: List[CanvasNode] = Field(default_factory=list)
    edges: List[CanvasEdge] = Field(default_factory=list)

    def trigger(self) -> Optional[CanvasNode]:
        return next((n for n in self.nodes if n.type == "trigger"), None)

    def conditions(self) -> List[CanvasNode]:
        return [n for n in self.nodes if n.type == "condition"]


@dataclass
class TestScenario:
    __test__ = False  # not a pytest class

    id: str
    name: str
    description: str
    test_data: Dict[str, Any] = field(default_factory=dict)
    expected_outcome: str = "pass"  # pass | fail | partial
    category: str = "pass"          # pass | fail | edge
