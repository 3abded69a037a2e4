"""Tests for the sequence parser"""

from textwrap import dedent

import pytest

from cryml.ir.errors import DiagramParseError
from cryml.parsers import parse_diagram, parse_sequence
from cryml.ir.sequence_ir import SequenceDiagram


LOGIN = dedent("""
    diagram_type: sequence
    metadata:
      name: Login
      version: 2
    participants:
      db: {type: database, label: Users DB, order: 3}
      user: {type: actor, label: User, order: 1, color: teal}
      api: {type: participant, label: API, order: 2}
    messages:
      - id: m2
        from: api
        to: db
        label: SELECT user
        type: sync
        sequence_order: "2"
      - id: m1
        from: user
        to: api
        label: 42
        type: async
        sequence_order: 1
        return_message: token
      - from: db
        to: api
        label: row
        type: sync
        sequence_order: 3
        arrow_type: dashed
    blocks:
      - id: retry
        type: loop
        condition: until success
        messages: [m1, m2]
    notes:
      - text: Password is hashed
        attached_to: m1
        position: right
""")


def test_participants_keyed_and_ordered():
    diagram = parse_sequence(LOGIN)

    assert [p.id for p in diagram.participants] == ["db", "user", "api"]
    assert [p.id for p in diagram.ordered_participants()] == ["user", "api", "db"]
    assert diagram.get_participant("db").label == "Users DB"
    assert diagram.get_participant("user").color == "#14b8a6"
    assert diagram.get_participant("db").color is None
    assert diagram.metadata.version == "2"


def test_messages():
    diagram = parse_sequence(LOGIN)
    by_id = {m.id: m for m in diagram.messages}

    assert [m.id for m in diagram.ordered_messages()] == ["m1", "m2", "message-2"]
    assert by_id["m2"].sequence_order == 2
    assert by_id["m1"].label == "42"
    assert by_id["m1"].return_message == "token"
    assert (by_id["m1"].source, by_id["m1"].target) == ("user", "api")
    assert by_id["m2"].arrow_type == "solid"
    assert by_id["message-2"].arrow_type == "dashed"


def test_blocks_and_notes():
    diagram = parse_sequence(LOGIN)

    assert diagram.blocks[0].condition == "until success"
    assert diagram.blocks[0].messages == ["m1", "m2"]
    assert diagram.notes[0].id == "note-0"
    assert diagram.notes[0].attached_to == ["m1"]


def test_dispatch():
    assert isinstance(parse_diagram(LOGIN), SequenceDiagram)


def test_parse_errors():
    with pytest.raises(DiagramParseError) as excinfo:
        parse_sequence(LOGIN.replace('sequence_order: "2"', "sequence_order: soon"))
    assert excinfo.value.path == "messages[0].sequence_order"

    with pytest.raises(DiagramParseError) as excinfo:
        parse_sequence(LOGIN.replace("sequence_order: 1\n", "sequence_order: true\n"))
    assert excinfo.value.path == "messages[1].sequence_order"

    with pytest.raises(DiagramParseError) as excinfo:
        parse_sequence("diagram_type: sequence\nmetadata:\n  name: Empty\n")
    assert excinfo.value.path == "participants"


if __name__ == "__main__":
    test_participants_keyed_and_ordered()
    test_messages()
    print("✅ Sequence parser tests complete!")
