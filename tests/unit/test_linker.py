"""Tests for relation linking."""

import pytest

from schemadoc.exceptions import RelationShapeError
from schemadoc.schema.linker import (
    link_child_column,
    link_parent_column,
    link_relation,
)
from schemadoc.schema.models import Relation
from tests.helpers import make_blog_schema


def _posts_to_users(schema):
    posts = schema.find_table_by_name("posts")
    users = schema.find_table_by_name("users")
    return Relation(
        table=posts,
        parent_table=users,
        columns=[posts.find_column_by_name("user_id")],
        parent_columns=[users.find_column_by_name("id")],
        definition="FOREIGN KEY (user_id) REFERENCES users(id)",
    )


class TestLinkRelation:
    def test_registers_relation_and_back_references(self):
        schema = make_blog_schema()
        relation = link_relation(schema, _posts_to_users(schema))

        assert schema.relations == [relation]
        assert relation.id is not None
        user_id = schema.find_table_by_name("posts").find_column_by_name("user_id")
        users_id = schema.find_table_by_name("users").find_column_by_name("id")
        assert user_id.parent_relations == [relation.id]
        assert users_id.child_relations == [relation.id]
        assert schema.parent_relations_of(user_id) == [relation]
        assert schema.child_relations_of(users_id) == [relation]

    def test_no_deduplication(self):
        """Linking the same declaration twice yields two relations."""
        schema = make_blog_schema()
        first = link_relation(schema, _posts_to_users(schema))
        second = link_relation(schema, _posts_to_users(schema))

        assert len(schema.relations) == 2
        assert first.id != second.id
        users_id = schema.find_table_by_name("users").find_column_by_name("id")
        assert users_id.child_relations == [first.id, second.id]

    def test_shape_mismatch_raises_without_side_effects(self):
        schema = make_blog_schema()
        relation = _posts_to_users(schema)
        relation.parent_columns = []

        with pytest.raises(RelationShapeError, match="1 column"):
            link_relation(schema, relation)

        assert schema.relations == []
        user_id = schema.find_table_by_name("posts").find_column_by_name("user_id")
        assert user_id.parent_relations == []

    def test_keeps_existing_id(self):
        schema = make_blog_schema()
        relation = _posts_to_users(schema)
        relation.id = schema.next_relation_id()
        expected = relation.id

        link_relation(schema, relation)

        assert relation.id == expected


class TestColumnLinking:
    def test_link_parent_and_child_columns_preserve_order(self):
        schema = make_blog_schema()
        posts = schema.find_table_by_name("posts")
        users = schema.find_table_by_name("users")
        relation = Relation(table=posts, parent_table=users, id=schema.next_relation_id())

        link_parent_column(relation, posts.find_column_by_name("id"))
        link_parent_column(relation, posts.find_column_by_name("user_id"))
        link_child_column(relation, users.find_column_by_name("id"))

        assert [c.name for c in relation.columns] == ["id", "user_id"]
        assert [c.name for c in relation.parent_columns] == ["id"]
        assert posts.find_column_by_name("user_id").parent_relations == [relation.id]
        assert users.find_column_by_name("id").child_relations == [relation.id]

    def test_link_without_id_raises(self):
        schema = make_blog_schema()
        posts = schema.find_table_by_name("posts")
        relation = Relation(table=posts, parent_table=posts)
        with pytest.raises(RelationShapeError, match="no id"):
            link_parent_column(relation, posts.columns[0])
