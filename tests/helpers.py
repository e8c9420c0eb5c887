"""Shared test helpers for schemadoc tests."""

from schemadoc.schema.models import Column, Index, Schema, Table


def make_column(
    name: str,
    col_type: str = "text",
    nullable: bool = True,
    default: str | None = None,
    comment: str = "",
) -> Column:
    """Create a Column with defaults."""
    return Column(
        name=name, type=col_type, nullable=nullable, default=default, comment=comment
    )


def make_table(name: str, *column_names: str, comment: str = "") -> Table:
    """Create a Table whose columns are all of type text."""
    return Table(
        name=name,
        columns=[make_column(c) for c in column_names],
        comment=comment,
    )


def make_blog_schema() -> Schema:
    """users(id, email) and posts(id, user_id, title) with no relations."""
    return Schema(
        name="blog",
        tables=[
            Table(
                name="users",
                columns=[
                    make_column("id", "integer", nullable=False),
                    make_column("email", "varchar(255)", nullable=False),
                ],
                indexes=[Index(name="users_pkey", definition="PRIMARY KEY (id)")],
            ),
            Table(
                name="posts",
                columns=[
                    make_column("id", "integer", nullable=False),
                    make_column("user_id", "integer", nullable=False),
                    make_column("title", "text", default="''"),
                ],
            ),
        ],
    )


BLOG_RELATION_YAML = """
relations:
  - table: posts
    columns: [user_id]
    parentTable: users
    parentColumns: [id]
"""
