"""Tests for the validation orchestrator: phase ordering, short-circuit and result shape"""

from textwrap import dedent

import pytest

from cryml.ir.diagram import DiagramKind
from cryml.validation import (
    DiagramValidationError,
    DiagramValidator,
    get_validation_summary,
    raise_on_errors,
    validate_diagram,
)


BLOG_ERD = dedent("""
    diagram_type: erd
    metadata:
      name: Blog
    models:
      User:
        fields:
          id:
            field_type: Int
            attributes:
              primary_key: true
          posts:
            field_type: Post
            attributes:
              virtual: true
              is_list: true
              relation_name: Posts
      Post:
        fields:
          id:
            field_type: Int
            attributes:
              primary_key: true
          author_id:
            field_type: Int
            constraints:
              not_null: true
            attributes:
              foreign_key:
                table: User
                column: id
        indexes:
          - index_name: post_author_idx
            columns: [author_id]
""")


BLOG_ERD_UNINDEXED = BLOG_ERD.replace("columns: [author_id]", "columns: [id]")


def codes(issues):
    return [i.code for i in issues]


def test_valid_erd_has_no_issues():
    result = validate_diagram(BLOG_ERD)

    print(f"[TEST] {result.get_summary()}")
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []
    assert result.diagram_kind == DiagramKind.ERD


def test_missing_diagram_type_defaults_to_erd():
    text = BLOG_ERD.replace("diagram_type: erd\n", "")
    result = validate_diagram(text)

    assert result.diagram_kind == DiagramKind.ERD
    assert result.is_valid


def test_yaml_syntax_error_is_single_error():
    result = validate_diagram("metadata: [unclosed\n  name: x")

    assert not result.is_valid
    assert codes(result.errors) == ["YAML_PARSE_ERROR"]
    assert result.warnings == []
    assert result.diagram_kind is None


def test_non_mapping_document():
    result = validate_diagram("- just\n- a list\n")

    assert codes(result.errors) == ["INVALID_DOCUMENT"]


def test_unknown_diagram_type_is_immediate_error():
    result = validate_diagram("diagram_type: pie\nmetadata:\n  name: x\n")

    assert codes(result.errors) == ["INVALID_DIAGRAM_TYPE"]
    assert result.diagram_kind is None
    assert result.errors[0].path == "diagram_type"


def test_structural_failure_short_circuits_later_phases():
    text = dedent("""
        metadata:
          name: Broken
        models:
          User:
            table_name: users
          Post:
            fields:
              author_id:
                field_type: Int
                attributes:
                  foreign_key:
                    table: Nope
                    column: id
    """)
    result = validate_diagram(text)

    assert not result.is_valid
    assert codes(result.errors) == ["MISSING_FIELD"]
    assert result.errors[0].path == "models.User.fields"
    assert result.warnings == []


def test_fk_table_not_found():
    text = BLOG_ERD.replace("table: User", "table: Account")
    result = validate_diagram(text)

    assert "FK_TABLE_NOT_FOUND" in codes(result.errors)
    assert "FK_COLUMN_NOT_FOUND" not in codes(result.errors)
    assert result.errors[0].path == "models.Post.fields.author_id.attributes.foreign_key.table"


def test_fk_column_not_found():
    text = BLOG_ERD.replace("column: id", "column: uuid")
    result = validate_diagram(text)

    assert codes(result.errors) == ["FK_COLUMN_NOT_FOUND"]
    assert "User.uuid" in result.errors[0].message


def test_reference_and_layout_errors_accumulate():
    text = dedent("""
        diagram_type: flow
        metadata:
          name: Checkout
        nodes:
          - {id: start, type: start, label: Start}
          - {id: a, type: process, label: Pay}
          - {id: orphan, type: process, label: Lost}
        edges:
          - {source: start, target: a}
          - {source: a, target: ghost}
    """)
    result = validate_diagram(text)

    assert sorted(codes(result.errors)) == ["NODE_NOT_FOUND", "UNREACHABLE_NODE"]


def test_warnings_do_not_affect_validity():
    text = BLOG_ERD_UNINDEXED
    result = validate_diagram(text)

    assert result.is_valid
    assert codes(result.warnings) == ["FK_WITHOUT_INDEX"]


def test_strict_mode_treats_warnings_as_invalid():
    text = BLOG_ERD_UNINDEXED

    assert DiagramValidator().validate(text).is_valid
    assert not DiagramValidator(strict_mode=True).validate(text).is_valid


def test_result_to_dict_shape():
    result = validate_diagram("diagram_type: pie\nmetadata:\n  name: x\n")
    payload = result.to_dict()

    assert payload["is_valid"] is False
    assert payload["diagram_kind"] is None
    assert payload["error_count"] == 1
    assert payload["warning_count"] == 0
    issue = payload["errors"][0]
    assert set(issue) == {"level", "code", "message", "path", "suggestion"}
    assert issue["level"] == "error"
    assert issue["suggestion"]


def test_summary_and_raise_on_errors():
    assert get_validation_summary(BLOG_ERD).startswith("Valid ERD diagram")

    assert raise_on_errors(BLOG_ERD).is_valid
    with pytest.raises(DiagramValidationError) as excinfo:
        raise_on_errors(BLOG_ERD.replace("table: User", "table: Account"))
    assert "FK_TABLE_NOT_FOUND" in str(excinfo.value)
    assert excinfo.value.result.error_count == 1


def test_validation_is_repeatable():
    text = BLOG_ERD.replace("column: id", "column: uuid")

    assert validate_diagram(text).to_dict() == validate_diagram(text).to_dict()


if __name__ == "__main__":
    test_valid_erd_has_no_issues()
    test_structural_failure_short_circuits_later_phases()
    print("✅ Validator tests complete!")
