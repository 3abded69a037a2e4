"""Tests for the HTTP API"""

from textwrap import dedent

from fastapi.testclient import TestClient

from cryml.main import app


client = TestClient(app)

FLOW = dedent("""
    diagram_type: flow
    metadata:
      name: Checkout
    nodes:
      - {id: start, type: start, label: Start}
      - {id: pay, type: process, label: Pay}
      - {id: done, type: end, label: Done}
    edges:
      - {source: start, target: pay}
      - {source: pay, target: done}
""")

PRISMA = """
model User {
  id    Int    @id
  posts Post[]
}

model Post {
  id       Int  @id
  author   User @relation(fields: [authorId], references: [id])
  authorId Int
}
"""


def test_health():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_validate_valid_document():
    response = client.post("/validate", json={"content": FLOW})
    body = response.json()

    assert response.status_code == 200
    assert body["status"] == "success"
    assert body["is_valid"] is True
    assert body["diagram_kind"] == "flow"
    assert body["summary"].startswith("Valid FLOW diagram")


def test_validate_reports_yaml_errors():
    response = client.post("/validate", json={"content": "nodes: [broken"})
    body = response.json()

    assert response.status_code == 200
    assert body["status"] == "invalid"
    assert [e["code"] for e in body["errors"]] == ["YAML_PARSE_ERROR"]


def test_validate_strict_mode():
    lenient = client.post("/validate", json={"content": FLOW.replace("type: end", "type: join")}).json()
    strict = client.post(
        "/validate", json={"content": FLOW.replace("type: end", "type: join"), "strict": True},
    ).json()

    assert lenient["is_valid"] is True
    assert [w["code"] for w in lenient["warnings"]] == ["FORK_JOIN_MISMATCH"]
    assert strict["is_valid"] is False


def test_parse_returns_model():
    response = client.post("/parse", json={"content": FLOW})
    body = response.json()

    assert response.status_code == 200
    assert body["diagram_kind"] == "flow"
    assert [n["id"] for n in body["diagram"]["nodes"]] == ["start", "pay", "done"]
    assert body["diagram"]["edges"][0]["id"] == "edge-0"
    assert body["warnings"] == []


def test_parse_rejects_invalid_documents():
    response = client.post("/parse", json={"content": FLOW.replace("target: done", "target: ghost")})
    assert response.status_code == 422
    assert [e["code"] for e in response.json()["detail"]["errors"]] == ["NODE_NOT_FOUND", "UNREACHABLE_NODE"]

    response = client.post("/parse", json={"content": "nodes: [broken"})
    assert response.status_code == 400

    bad_indexes = "diagram_type: erd\nmetadata: {name: Bad}\nmodels:\n  User:\n    fields: {id: {field_type: Int}}\n    indexes: 5\n"
    response = client.post("/parse", json={"content": bad_indexes})
    assert response.status_code == 400
    assert response.json()["detail"]["path"] == "models.User.indexes"


def test_parse_prisma():
    response = client.post("/parse/prisma", json={"content": PRISMA, "name": "Blog"})
    body = response.json()

    assert response.status_code == 200
    assert body["diagram_kind"] == "erd"
    assert body["diagram"]["metadata"]["name"] == "Blog"
    assert [m["name"] for m in body["diagram"]["models"]] == ["User", "Post"]

    response = client.post("/parse/prisma", json={"content": "model User {\n  id Int @id\n"})
    assert response.status_code == 400


def test_layout():
    response = client.post("/layout", json={"content": FLOW, "columns": 3, "spacing": 200})
    body = response.json()

    assert response.status_code == 200
    assert body["diagram_kind"] == "flow"
    assert [(n["x"], n["y"]) for n in body["graph"]["nodes"]] == [(50, 50), (250, 50), (450, 50)]
