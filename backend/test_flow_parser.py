"""Tests for the flow parser: collection shapes, decision handles and node colours"""

from textwrap import dedent

import pytest

from cryml.ir.errors import DiagramParseError
from cryml.parsers import parse_flow
from cryml.visual.edge_rules import decision_handle, source_handle_for


CHECKOUT = dedent("""
    diagram_type: flow
    metadata:
      name: Checkout
    groups:
      - id: payments
        label: Payments
        color: purple
        nodes: [pay]
    nodes:
      - {id: start, type: start, label: Start}
      - {id: valid, type: decision, label: "Valid?"}
      - {id: pay, type: process, label: Take payment, group: payments}
      - {id: reject, type: end, label: 404}
      - {id: done, type: end, label: Done, description: All good}
    edges:
      - {source: start, target: valid}
      - {id: to-pay, source: valid, target: pay, label: "Yes"}
      - {source: valid, target: reject, label: no}
      - {source: valid, target: valid, label: retry}
      - {source: valid, target: done, label: maybe}
      - {from: pay, to: done, label: "yes"}
""")


def test_nodes_and_groups():
    diagram = parse_flow(CHECKOUT)

    assert [n.id for n in diagram.nodes] == ["start", "valid", "pay", "reject", "done"]
    assert diagram.get_node("reject").label == "404"
    assert diagram.get_node("done").description == "All good"
    assert diagram.groups[0].nodes == ["pay"]
    assert [n.id for n in diagram.start_nodes()] == ["start"]


def test_edge_ids_and_endpoints():
    diagram = parse_flow(CHECKOUT)

    assert [e.id for e in diagram.edges] == ["edge-0", "to-pay", "edge-2", "edge-3", "edge-4", "edge-5"]
    assert (diagram.edges[5].source, diagram.edges[5].target) == ("pay", "done")


def test_decision_source_handles():
    diagram = parse_flow(CHECKOUT)
    handles = {e.id: e.source_handle for e in diagram.edges}

    assert handles == {
        "edge-0": None,
        "to-pay": "yes",
        "edge-2": "no",
        "edge-3": "bottom",
        "edge-4": None,
        # only edges leaving a decision are routed
        "edge-5": None,
    }


def test_handle_rules():
    assert decision_handle("  OK ") == "yes"
    assert decision_handle(True) == "yes"
    assert decision_handle(False) == "no"
    assert decision_handle("Damaged") == "no"
    assert decision_handle("continue") == "bottom"
    assert decision_handle("later") is None
    assert source_handle_for("decision", None) is None
    assert source_handle_for("process", "yes") is None


def test_boolean_label_from_yaml():
    text = CHECKOUT.replace('label: "Yes"', "label: yes")
    edge = next(e for e in parse_flow(text).edges if e.id == "to-pay")

    assert edge.label == "true"
    assert edge.source_handle == "yes"


def test_node_colors():
    diagram = parse_flow(CHECKOUT)

    assert diagram.get_node("pay").color == "#8b5cf6"
    assert diagram.get_node("start").color == "#3b82f6"

    styled = parse_flow(CHECKOUT + "style:\n  default_color: green\n")
    assert {n.color for n in styled.nodes} == {"#10b981"}


def test_mapping_nodes_and_positions():
    text = dedent("""
        diagram_type: flow
        metadata:
          name: Positioned
        nodes:
          begin:
            type: start
            label: Begin
            position: {x: "120", y: 40.5}
          finish:
            type: end
            label: Finish
        edges:
          - {from: begin, to: finish}
    """)
    diagram = parse_flow(text)
    begin = diagram.get_node("begin")

    assert (begin.position.x, begin.position.y) == (120.0, 40.5)
    assert diagram.get_node("finish").position is None
    assert diagram.has_manual_positions()
    assert diagram.edges[0].id == "edge-0"


def test_edges_are_optional():
    diagram = parse_flow("diagram_type: flow\nmetadata:\n  name: Solo\nnodes:\n  - {id: s, type: start, label: S}\n")

    assert diagram.edges == []


def test_parse_errors():
    with pytest.raises(DiagramParseError) as excinfo:
        parse_flow(CHECKOUT.replace("diagram_type: flow", "diagram_type: sequence"))
    assert excinfo.value.path == "diagram_type"

    with pytest.raises(DiagramParseError) as excinfo:
        parse_flow("diagram_type: flow\nmetadata:\n  name: Empty\n")
    assert excinfo.value.path == "nodes"

    with pytest.raises(DiagramParseError) as excinfo:
        parse_flow(CHECKOUT.replace("{from: pay, to: done", "{from: pay"))
    assert excinfo.value.path == "edges[5]"


if __name__ == "__main__":
    test_decision_source_handles()
    test_node_colors()
    print("✅ Flow parser tests complete!")
