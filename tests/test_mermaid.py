"""Tests for the Mermaid flowchart lexer/parser."""

from process_compiler.parsing.mermaid import parse_mermaid
from process_compiler.workflow.models import MermaidEdge, ShapeType


def test_labelled_edge_with_inline_nodes():
    diagram = parse_mermaid("A[Start Process] --> |success| B[Save Data]")

    assert diagram.edges == [MermaidEdge(from_id="A", to_id="B", label="success")]
    assert [(n.id, n.label, n.shape_type) for n in diagram.nodes] == [
        ("A", "Start Process", ShapeType.PROCESS),
        ("B", "Save Data", ShapeType.PROCESS),
    ]


def test_all_arrow_forms():
    source = """
flowchart TD
    A --> B
    B -->|yes| C
    C ==> D
    D ==>|strong| E
    E -.-> F
    F -.->|maybe| G
"""
    diagram = parse_mermaid(source)

    assert [(e.from_id, e.to_id, e.label) for e in diagram.edges] == [
        ("A", "B", None),
        ("B", "C", "yes"),
        ("C", "D", None),
        ("D", "E", "strong"),
        ("E", "F", None),
        ("F", "G", "maybe"),
    ]
    assert diagram.nodes == []


def test_node_shapes():
    source = """
    s((Begin))
    e[[Done]]
    d{Is valid?}
    db[(Contacts)]
    p[Process it]
    a>Async job]
"""
    shapes = {n.id: n.shape_type for n in parse_mermaid(source).nodes}

    assert shapes == {
        "s": ShapeType.START,
        "e": ShapeType.END,
        "d": ShapeType.DECISION,
        "db": ShapeType.DATA,
        "p": ShapeType.PROCESS,
        "a": ShapeType.PROCESS,
    }


def test_subgraph_sections_are_scoped():
    source = """
subgraph intake ["Lead Intake"]
    a[Receive lead]
end
subgraph scoring
    b[Score lead]
end
c[Notify rep]
"""
    diagram = parse_mermaid(source)
    sections = {n.id: n.section for n in diagram.nodes}

    assert sections == {"a": "Lead Intake", "b": "scoring", "c": None}
    assert diagram.sections == {"intake": "Lead Intake", "scoring": "scoring"}


def test_first_definition_wins():
    diagram = parse_mermaid("a[First]\na[Second]\na --> b[Third]")
    assert [(n.id, n.label) for n in diagram.nodes] == [("a", "First"), ("b", "Third")]


def test_label_equal_to_id_or_empty_is_skipped():
    diagram = parse_mermaid('x[x]\ny[]\nz["Real label"]')
    assert [(n.id, n.label) for n in diagram.nodes] == [("z", "Real label")]


def test_unrecognized_lines_are_ignored():
    source = "%% comment\nclassDef hot fill:#f00\nthis is not mermaid\n```\n"
    diagram = parse_mermaid(source)
    assert diagram.nodes == [] and diagram.edges == []


def test_empty_source():
    diagram = parse_mermaid("")
    assert diagram.nodes == [] and diagram.edges == [] and diagram.sections == {}


def test_parse_is_repeatable():
    source = "subgraph s1 [\"One\"]\na((Go)) -->|ok| b{Check}\nend\nb -.-> c[(Store)]"
    assert parse_mermaid(source) == parse_mermaid(source)
