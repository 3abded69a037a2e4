"""Tests for the Prisma schema parser"""

import pytest

from cryml.ir.errors import DiagramParseError
from cryml.parsers import parse_prisma_schema
from cryml.parsers.prisma_parser import parse_prisma_field


SCHEMA = """
datasource db {
  provider = "postgresql"
  url      = env("DATABASE_URL")
}

generator client {
  provider = "prisma-client-js"
}

// Accounts
model User {
  id        Int      @id @default(autoincrement())
  email     String   @unique
  name      String?
  role      Role     @default(USER)
  posts     Post[]   @relation("UserPosts")
  touchedAt String   @updatedAt

  @@map("users")
}

model Post {
  id       Int    @id @default(autoincrement())
  title    String @db.VarChar(255)
  author   User   @relation("UserPosts", fields: [authorId], references: [id], onDelete: Cascade)
  authorId Int

  @@index([authorId])
  @@unique([title, authorId], name: "post_title_author")
}

enum Role {
  USER
  ADMIN // full access
}
"""


def test_models_and_fields():
    diagram = parse_prisma_schema(SCHEMA, name="Blog")
    user = diagram.get_model("User")
    post = diagram.get_model("Post")

    print(f"[TEST] models={diagram.model_names()} enums={diagram.enum_names()}")
    assert diagram.metadata.name == "Blog"
    assert diagram.model_names() == ["User", "Post"]
    assert user.table_name == "users"

    assert user.fields["id"].is_id
    assert user.fields["id"].default_value == "autoincrement()"
    assert user.fields["email"].is_unique
    assert user.fields["email"].is_required
    assert not user.fields["name"].is_required
    assert user.fields["role"].is_enum
    assert user.fields["role"].default_value == "USER"
    assert user.fields["touchedAt"].type == "DateTime"
    assert post.fields["title"].db_type == "VarChar"


def test_relations():
    diagram = parse_prisma_schema(SCHEMA)
    posts = diagram.get_model("User").fields["posts"]
    author = diagram.get_model("Post").fields["author"]

    assert posts.is_list
    assert posts.relation_name == "UserPosts"
    assert posts.relation_to_model == "Post"

    assert author.is_foreign_key
    assert author.references_field == "id"
    assert author.on_delete == "Cascade"
    assert author.relation_to_model == "User"


def test_block_attributes():
    post = parse_prisma_schema(SCHEMA).get_model("Post")

    assert post.indexes[0].columns == ["authorId"]
    assert post.unique_constraints[0].name == "post_title_author"
    assert post.unique_constraints[0].columns == ["title", "authorId"]


def test_enums_and_styles():
    diagram = parse_prisma_schema(SCHEMA)

    assert [v.name for v in diagram.enums[0].values] == ["USER", "ADMIN"]
    assert (diagram.get_model("User").color, diagram.get_model("User").group) == ("yellow", "Authentication")
    assert (diagram.get_model("Post").color, diagram.get_model("Post").group) == ("red", "Content")
    assert (diagram.enums[0].color, diagram.enums[0].group) == ("yellow", "Authentication")


def test_non_field_lines():
    assert parse_prisma_field("@@index([a])") is None
    assert parse_prisma_field("tags String[]").is_list


def test_unclosed_block():
    with pytest.raises(DiagramParseError) as excinfo:
        parse_prisma_schema("model User {\n  id Int @id\n")
    assert "User" in excinfo.value.message


if __name__ == "__main__":
    test_models_and_fields()
    test_relations()
    print("✅ Prisma parser tests complete!")
