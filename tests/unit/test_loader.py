"""Tests for schema snapshot loader."""

import json

import pytest

from schemadoc.exceptions import SchemaLoadError
from schemadoc.schema.loader import load_schema, schema_from_dict

SNAPSHOT = {
    "name": "blog",
    "tables": [
        {
            "name": "users",
            "type": "BASE TABLE",
            "comment": "Registered users",
            "columns": [
                {"name": "id", "type": "integer", "nullable": False, "default": None},
                {"name": "email", "type": "varchar(255)", "nullable": False},
            ],
            "indexes": [{"name": "users_pkey", "def": "PRIMARY KEY (id)"}],
            "constraints": [
                {"name": "users_pkey", "type": "PRIMARY KEY", "def": "PRIMARY KEY (id)"}
            ],
            "triggers": [],
            "def": "CREATE TABLE users (...)",
        },
        {
            "name": "posts",
            "columns": [
                {"name": "id", "type": "integer", "nullable": False},
                {"name": "user_id", "type": "integer", "default": "0"},
            ],
        },
    ],
    "relations": [
        {
            "table": "posts",
            "columns": ["user_id"],
            "parent_table": "users",
            "parent_columns": ["id"],
            "def": "FOREIGN KEY (user_id) REFERENCES users(id)",
            "is_additional": False,
        }
    ],
}


def test_loader_snapshot_golden(tmp_path):
    """Snapshot loads tables, columns and metadata."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SNAPSHOT))

    schema = load_schema(path)

    assert schema.name == "blog"
    assert schema.table_names() == ["users", "posts"]
    users = schema.find_table_by_name("users")
    assert users.comment == "Registered users"
    assert users.definition == "CREATE TABLE users (...)"
    assert users.indexes[0].definition == "PRIMARY KEY (id)"
    assert users.constraints[0].type == "PRIMARY KEY"
    assert users.find_column_by_name("id").nullable is False

    posts = schema.find_table_by_name("posts")
    assert posts.type == "BASE TABLE"
    assert posts.find_column_by_name("user_id").default == "0"
    assert posts.find_column_by_name("id").default is None


def test_loader_relinks_back_references():
    schema = schema_from_dict(SNAPSHOT)

    assert len(schema.relations) == 1
    relation = schema.relations[0]
    assert relation.is_additional is False
    user_id = schema.find_table_by_name("posts").find_column_by_name("user_id")
    users_id = schema.find_table_by_name("users").find_column_by_name("id")
    assert relation.columns == [user_id]
    assert relation.parent_columns == [users_id]
    assert user_id.parent_relations == [relation.id]
    assert users_id.child_relations == [relation.id]


def test_loader_missing_file_raises_SchemaLoadError(tmp_path):
    with pytest.raises(SchemaLoadError, match="does not exist"):
        load_schema(tmp_path / "missing.json")


def test_loader_invalid_json_raises_SchemaLoadError(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text("{not json")
    with pytest.raises(SchemaLoadError, match="Invalid JSON"):
        load_schema(path)


def test_loader_missing_table_name_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="missing 'name' field"):
        schema_from_dict({"tables": [{"columns": []}]})


def test_loader_missing_column_type_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="'users.id' missing 'type'"):
        schema_from_dict({"tables": [{"name": "users", "columns": [{"name": "id"}]}]})


def test_loader_unknown_field_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="Unknown field.*primary_key"):
        schema_from_dict({"tables": [{"name": "users", "primary_key": ["id"]}]})


def test_loader_duplicate_table_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="Duplicate table name 'users'"):
        schema_from_dict({"tables": [{"name": "users"}, {"name": "users"}]})


def test_loader_duplicate_column_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="Duplicate column name 'id'"):
        schema_from_dict(
            {
                "tables": [
                    {
                        "name": "users",
                        "columns": [
                            {"name": "id", "type": "integer"},
                            {"name": "id", "type": "bigint"},
                        ],
                    }
                ]
            }
        )


def test_loader_unresolved_relation_raises_SchemaLoadError():
    data = json.loads(json.dumps(SNAPSHOT))
    data["relations"][0]["parent_columns"] = ["uuid"]
    with pytest.raises(SchemaLoadError, match="not found column 'users.uuid'"):
        schema_from_dict(data)


def test_loader_relation_shape_mismatch_raises_SchemaLoadError():
    data = json.loads(json.dumps(SNAPSHOT))
    data["relations"][0]["parent_columns"] = []
    with pytest.raises(SchemaLoadError, match="Invalid relation"):
        schema_from_dict(data)


def test_loader_non_string_default_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="'posts.user_id' default must be a string or null"):
        schema_from_dict(
            {
                "tables": [
                    {
                        "name": "posts",
                        "columns": [{"name": "user_id", "type": "integer", "default": 0}],
                    }
                ]
            }
        )


def test_loader_non_mapping_table_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="Table definition must be an object"):
        schema_from_dict({"tables": ["users"]})


def test_loader_non_list_columns_raises_SchemaLoadError():
    with pytest.raises(SchemaLoadError, match="'users.columns' must be a list"):
        schema_from_dict({"tables": [{"name": "users", "columns": {"id": "integer"}}]})


def test_loader_null_tables_and_relations_load_empty():
    schema = schema_from_dict({"name": "empty", "tables": None, "relations": None})
    assert schema.tables == []
    assert schema.relations == []


def test_loader_invalid_utf8_raises_SchemaLoadError(tmp_path):
    path = tmp_path / "schema.json"
    path.write_bytes(b'{"name": "\xff\xfe"}')
    with pytest.raises(SchemaLoadError, match="Invalid JSON"):
        load_schema(path)
