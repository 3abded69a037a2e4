"""Tests for best-practice warnings"""

from cryml import config
from cryml.ir.diagram import DiagramKind
from cryml.validation import ValidationSeverity, validate_best_practices


PK = {"field_type": "Int", "attributes": {"primary_key": True}}


def flow_doc(nodes, edges=()):
    return {"nodes": list(nodes), "edges": list(edges)}


def node(node_id, node_type="process"):
    return {"id": node_id, "type": node_type, "label": node_id}


# ============================================================
# ERD
# ============================================================

def test_missing_primary_key():
    doc = {"models": {"Log": {"fields": {"message": {"field_type": "String"}}}}}
    warnings = validate_best_practices(doc, DiagramKind.ERD)

    assert [(w.code, w.path) for w in warnings] == [("MISSING_PRIMARY_KEY", "models.Log")]
    assert all(w.severity == ValidationSeverity.WARNING for w in warnings)


def test_fk_without_index():
    fk = {"field_type": "Int", "attributes": {"foreign_key": {"table": "User", "column": "id"}}}
    doc = {
        "models": {
            "User": {"fields": {"id": PK}},
            "Post": {"fields": {"id": PK, "author_id": fk, "editor_id": fk},
                     "indexes": [{"index_name": "by_author", "columns": ["author_id"]}]},
        },
    }
    warnings = validate_best_practices(doc, DiagramKind.ERD)

    assert [(w.code, w.path) for w in warnings] == [("FK_WITHOUT_INDEX", "models.Post.fields.editor_id")]


def test_fk_index_check_needs_declared_indexes():
    fk = {"field_type": "Int", "attributes": {"foreign_key": {"table": "User", "column": "id"}}}
    doc = {"models": {"User": {"fields": {"id": PK}}, "Post": {"fields": {"id": PK, "author_id": fk}}}}

    assert validate_best_practices(doc, DiagramKind.ERD) == []

    doc["models"]["Post"]["indexes"] = []
    warnings = validate_best_practices(doc, DiagramKind.ERD)
    assert [(w.code, w.path) for w in warnings] == [("FK_WITHOUT_INDEX", "models.Post.fields.author_id")]


def test_ambiguous_relation():
    doc = {
        "models": {
            "User": {"fields": {"id": PK}},
            "Post": {
                "fields": {
                    "id": PK,
                    "author": {"field_type": "User"},
                    "editor": {"field_type": "User"},
                    "reviewer": {"field_type": "User", "attributes": {"relation_name": "Reviews"}},
                },
            },
        },
    }
    warnings = validate_best_practices(doc, DiagramKind.ERD)

    assert [w.code for w in warnings] == ["AMBIGUOUS_RELATION"]
    assert "Post -> User via author, editor" in warnings[0].message


def test_clean_erd_has_no_warnings():
    doc = {"models": {"User": {"fields": {"id": PK, "manager": {"field_type": "User"}}}}}

    assert validate_best_practices(doc, DiagramKind.ERD) == []


# ============================================================
# Flow
# ============================================================

def test_fork_join_mismatch():
    doc = flow_doc([node("s", "start"), node("f", "fork"), node("e", "end")])

    assert [w.code for w in validate_best_practices(doc, DiagramKind.FLOW)] == ["FORK_JOIN_MISMATCH"]

    doc["nodes"].append(node("j", "join"))
    assert validate_best_practices(doc, DiagramKind.FLOW) == []


def test_complex_diagram_threshold(monkeypatch):
    monkeypatch.setattr(config, "COMPLEX_FLOW_THRESHOLD", 3)
    doc = flow_doc([node("s", "start")] + [node(f"n{i}") for i in range(3)])

    assert [w.code for w in validate_best_practices(doc, DiagramKind.FLOW)] == ["COMPLEX_DIAGRAM"]

    doc["nodes"].pop()
    assert validate_best_practices(doc, DiagramKind.FLOW) == []


def test_decision_branch_without_condition():
    doc = flow_doc(
        [node("s", "start"), node("d", "decision"), node("a"), node("b")],
        [
            {"source": "s", "target": "d"},
            {"source": "d", "target": "a", "condition": "amount > 100"},
            {"source": "d", "target": "b"},
        ],
    )
    warnings = validate_best_practices(doc, DiagramKind.FLOW)

    assert [(w.code, w.path) for w in warnings] == [("MISSING_CONDITION", "nodes[1]")]

    doc["edges"][2]["label"] = "No"
    assert validate_best_practices(doc, DiagramKind.FLOW) == []


# ============================================================
# Sequence
# ============================================================

def test_unused_participant():
    doc = {
        "participants": {"user": {"type": "actor"}, "api": {"type": "participant"}, "cache": {"type": "database"}},
        "messages": [{"id": "m1", "from": "user", "to": "api"}],
    }
    warnings = validate_best_practices(doc, DiagramKind.SEQUENCE)

    assert [(w.code, w.path) for w in warnings] == [("UNUSED_PARTICIPANT", "participants.cache")]


if __name__ == "__main__":
    test_ambiguous_relation()
    test_decision_branch_without_condition()
    print("✅ Best practice tests complete!")
