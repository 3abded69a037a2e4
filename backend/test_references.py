"""Tests for the reference phase: cross-entity identifiers must resolve"""

from cryml.ir.diagram import DiagramKind
from cryml.validation import validate_references


def fk_field(table, column="id"):
    return {"field_type": "Int", "attributes": {"foreign_key": {"table": table, "column": column}}}


def test_fk_table_and_column():
    doc = {
        "models": {
            "User": {"fields": {"id": {"field_type": "Int"}}},
            "Post": {
                "fields": {
                    "author_id": fk_field("User"),
                    "editor_id": fk_field("User", "uuid"),
                    "org_id": fk_field("Org", "uuid"),
                },
            },
        },
    }
    issues = validate_references(doc, DiagramKind.ERD)

    assert [(i.code, i.path) for i in issues] == [
        ("FK_COLUMN_NOT_FOUND", "models.Post.fields.editor_id.attributes.foreign_key.column"),
        ("FK_TABLE_NOT_FOUND", "models.Post.fields.org_id.attributes.foreign_key.table"),
    ]


def test_camel_case_fk_path():
    doc = {
        "models": {
            "User": {"fields": {"id": {"type": "Int"}}},
            "Post": {"fields": {"authorId": {"type": "Int", "attributes": {"foreignKey": {"table": "Usr", "column": "id"}}}}},
        },
    }
    issues = validate_references(doc, DiagramKind.ERD)

    assert [i.path for i in issues] == ["models.Post.fields.authorId.attributes.foreignKey.table"]


def test_flow_edges_and_groups():
    doc = {
        "nodes": [
            {"id": "start", "type": "start", "label": "Start"},
            {"id": "done", "type": "end", "label": "Done"},
        ],
        "edges": [
            {"source": "start", "target": "done"},
            {"from": "start", "to": "missing"},
        ],
        "groups": [{"id": "g", "label": "G", "nodes": ["done", "nowhere"]}],
    }
    issues = validate_references(doc, DiagramKind.FLOW)

    assert [(i.code, i.path) for i in issues] == [
        ("NODE_NOT_FOUND", "edges[1].to"),
        ("NODE_NOT_FOUND", "groups[0].nodes[1]"),
    ]


def test_flow_mapping_nodes_resolve_by_key():
    doc = {
        "nodes": {"a": {"type": "start", "label": "A"}, "b": {"type": "end", "label": "B"}},
        "edges": [{"source": "a", "target": "b"}],
    }

    assert validate_references(doc, DiagramKind.FLOW) == []


def test_sequence_references():
    doc = {
        "participants": [{"id": "user"}, {"id": "api"}],
        "messages": [
            {"id": "m1", "from": "user", "to": "api"},
            {"id": "m2", "from": "api", "to": "db"},
        ],
        "blocks": [
            {"id": "outer", "type": "loop", "messages": ["m1"]},
            {"id": "inner", "type": "opt", "messages": ["m2", "m9"], "parent_block": "outer"},
            {"id": "stray", "type": "par", "messages": [], "parent_block": "nope"},
        ],
        "notes": [
            {"id": "n1", "text": "on a participant", "attached_to": "user"},
            {"id": "n2", "text": "on a message", "attached_to": ["m1", "m7"]},
        ],
    }
    issues = validate_references(doc, DiagramKind.SEQUENCE)

    assert [(i.code, i.path) for i in issues] == [
        ("PARTICIPANT_NOT_FOUND", "messages[1].to"),
        ("MESSAGE_NOT_FOUND", "blocks[1].messages[1]"),
        ("BLOCK_NOT_FOUND", "blocks[2].parent_block"),
        ("NOTE_TARGET_NOT_FOUND", "notes[1].attached_to[1]"),
    ]


if __name__ == "__main__":
    test_fk_table_and_column()
    test_flow_edges_and_groups()
    test_sequence_references()
    print("✅ Reference tests complete!")
