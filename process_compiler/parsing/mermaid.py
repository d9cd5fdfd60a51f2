"""
Line-oriented lexer/parser for the flowchart subset of Mermaid.

Supported:
  subgraph <id> ["<label>"] ... end      section scoping
  A((Start))  A[[End]]  A{Decision}  A[(Data)]  A[Process]  A>Async]
  A --> B   A ==> B   A -.-> B          each optionally with |label|

Edge patterns are tried before node patterns; an edge line may carry inline
shape definitions for its endpoints. Anything else is ignored - there is no
notion of an invalid diagram.
"""

import logging
import re
from typing import List, Optional, Pattern, Set, Tuple

from ..workflow.models import MermaidEdge, MermaidNode, ParsedDiagram, ShapeType

logger = logging.getLogger(__name__)

# Ordered: double forms must be tried before their single-bracket prefixes.
_SHAPES: List[Tuple[str, ShapeType]] = [
    (r"\(\((?P<label>.*?)\)\)", ShapeType.START),
    (r"\[\[(?P<label>.*?)\]\]", ShapeType.END),
    (r"\{(?P<label>.*?)\}", ShapeType.DECISION),
    (r"\[\((?P<label>.*?)\)\]", ShapeType.DATA),
    (r"\[(?P<label>.*?)\]", ShapeType.PROCESS),
    (r">(?P<label>.*?)\]", ShapeType.PROCESS),
]

_SHAPE_PATTERNS: List[Tuple[Pattern, ShapeType]] = [
    (re.compile(pattern), shape) for pattern, shape in _SHAPES
]
_NODE_PATTERNS: List[Tuple[Pattern, ShapeType]] = [
    (re.compile(r"^(?P<id>\w+)\s*" + pattern), shape) for pattern, shape in _SHAPES
]

_ANY_SHAPE = "|".join(re.sub(r"\(\?P<label>", "(?:", pattern) for pattern, _ in _SHAPES)
_SRC = rf"(?P<src>\w+)\s*(?P<src_shape>{_ANY_SHAPE})?"
_DST = rf"(?P<dst>\w+)\s*(?P<dst_shape>{_ANY_SHAPE})?"
_LABEL = r"\|(?P<label>[^|]*)\|"


def _edge_patterns() -> List[Pattern]:
    patterns = []
    for arrow in ("-->", "==>", "-.->"):
        arrow = re.escape(arrow)
        patterns.append(re.compile(rf"^{_SRC}\s*{arrow}\s*{_LABEL}\s*{_DST}"))
        patterns.append(re.compile(rf"^{_SRC}\s*{arrow}\s*{_DST}"))
    return patterns


_EDGE_PATTERNS = _edge_patterns()
_SUBGRAPH = re.compile(r'^subgraph\s+(?P<id>\w+)(?:\s*\[\s*"?(?P<label>[^"\]]*)"?\s*\])?')


def _clean_label(raw: Optional[str]) -> str:
    label = (raw or "").strip()
    if len(label) >= 2 and label[0] == label[-1] and label[0] in "\"'":
        label = label[1:-1]
    return label.strip()


def _match_shape(shape_text: str) -> Tuple[Optional[str], ShapeType]:
    for pattern, shape in _SHAPE_PATTERNS:
        match = pattern.fullmatch(shape_text)
        if match:
            return match.group("label"), shape
    return None, ShapeType.DEFAULT


def _register_node(nodes: List[MermaidNode], seen: Set[str], node_id: str,
                   raw_label: Optional[str], shape: ShapeType, section: Optional[str]) -> None:
    if node_id in seen:
        return
    label = _clean_label(raw_label)
    if not label or label == node_id:
        return
    seen.add(node_id)
    nodes.append(MermaidNode(id=node_id, label=label, shape_type=shape, section=section))


def _parse_edge(line: str) -> Optional[Tuple[re.Match, Optional[str]]]:
    for pattern in _EDGE_PATTERNS:
        match = pattern.match(line)
        if match:
            label = match.groupdict().get("label")
            return match, (_clean_label(label) or None) if label is not None else None
    return None


def parse_mermaid(source: str) -> ParsedDiagram:
    """
    Parse Mermaid flowchart source into nodes, edges and subgraph sections.
    Section and seen-id state live only for the duration of this call.
    """
    diagram = ParsedDiagram()
    seen: Set[str] = set()
    section: Optional[str] = None

    for raw in (source or "").splitlines():
        line = raw.strip().rstrip(";").strip()
        if not line or line.startswith("%%"):
            continue

        subgraph = _SUBGRAPH.match(line)
        if subgraph:
            section_id = subgraph.group("id")
            section = _clean_label(subgraph.group("label")) or section_id
            diagram.sections[section_id] = section
            continue
        if line == "end":
            section = None
            continue

        edge = _parse_edge(line)
        if edge:
            match, label = edge
            for end in ("src", "dst"):
                shape_text = match.group(f"{end}_shape")
                if shape_text:
                    node_label, shape = _match_shape(shape_text)
                    _register_node(diagram.nodes, seen, match.group(end), node_label, shape, section)
            diagram.edges.append(MermaidEdge(from_id=match.group("src"), to_id=match.group("dst"), label=label))
            continue

        for pattern, shape in _NODE_PATTERNS:
            match = pattern.match(line)
            if match:
                _register_node(diagram.nodes, seen, match.group("id"), match.group("label"), shape, section)
                break
        else:
            logger.debug("Ignoring unrecognized diagram line: %r", line)

    return diagram
