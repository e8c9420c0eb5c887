"""Load schema snapshots from JSON files."""

import json
from pathlib import Path

from schemadoc.exceptions import NotFoundError, RelationShapeError, SchemaLoadError
from schemadoc.schema.linker import link_relation
from schemadoc.schema.models import (
    Column,
    Constraint,
    Index,
    Relation,
    Schema,
    Table,
    Trigger,
)

VALID_SCHEMA_FIELDS = {"name", "tables", "relations"}

VALID_TABLE_FIELDS = {
    "name",
    "type",
    "comment",
    "columns",
    "indexes",
    "constraints",
    "triggers",
    "def",
}

VALID_COLUMN_FIELDS = {"name", "type", "nullable", "default", "comment"}

VALID_RELATION_FIELDS = {
    "table",
    "columns",
    "parent_table",
    "parent_columns",
    "def",
    "is_additional",
}


def load_schema(schema_path: Path) -> Schema:
    """Load a schema snapshot written by introspection or by the exporter."""
    if not schema_path.is_file():
        raise SchemaLoadError(f"Schema path does not exist: {schema_path}")

    try:
        data = json.loads(schema_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"Invalid JSON in {schema_path}: {e}") from e

    if data is None:
        raise SchemaLoadError(f"Empty schema file: {schema_path}")
    return schema_from_dict(data)


def schema_from_dict(data: dict) -> Schema:
    """Build a Schema from a dictionary and link its relations."""
    if not isinstance(data, dict):
        raise SchemaLoadError("Schema document must be an object")
    _check_fields(data, VALID_SCHEMA_FIELDS, "schema")

    tables = [_parse_table(t) for t in _as_list(data.get("tables"), "tables")]
    seen = set()
    for table in tables:
        if table.name in seen:
            raise SchemaLoadError(f"Duplicate table name '{table.name}'")
        seen.add(table.name)

    schema = Schema(name=data.get("name", ""), tables=tables)
    for relation_data in _as_list(data.get("relations"), "relations"):
        relation = _parse_relation(schema, relation_data)
        try:
            link_relation(schema, relation)
        except RelationShapeError as e:
            raise SchemaLoadError(f"Invalid relation: {e}") from e
    return schema


def _check_fields(data: dict, valid: set[str], where: str) -> None:
    unknown_fields = set(data.keys()) - valid
    if unknown_fields:
        raise SchemaLoadError(
            f"Unknown field(s) in {where} definition: {', '.join(sorted(unknown_fields))}"
        )


def _as_list(value, where: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SchemaLoadError(f"'{where}' must be a list")
    return value


def _require_mapping(data, where: str) -> None:
    if not isinstance(data, dict):
        raise SchemaLoadError(f"{where} must be an object, got {data!r}")


def _parse_table(data: dict) -> Table:
    """Parse a table definition from a dictionary."""
    _require_mapping(data, "Table definition")
    _check_fields(data, VALID_TABLE_FIELDS, "table")

    name = data.get("name")
    if not name:
        raise SchemaLoadError("Table definition missing 'name' field")
    if not isinstance(name, str):
        raise SchemaLoadError(f"Table name must be a string, got {name!r}")

    columns = [
        _parse_column(col, name) for col in _as_list(data.get("columns"), f"{name}.columns")
    ]

    seen = set()
    for col in columns:
        if col.name in seen:
            raise SchemaLoadError(f"Duplicate column name '{col.name}' in table '{name}'")
        seen.add(col.name)

    return Table(
        name=name,
        type=data.get("type", "BASE TABLE"),
        comment=data.get("comment") or "",
        columns=columns,
        indexes=[
            Index(name=_require_name(i, "index"), definition=i.get("def", ""))
            for i in _as_list(data.get("indexes"), f"{name}.indexes")
        ],
        constraints=[
            Constraint(
                name=_require_name(c, "constraint"),
                type=c.get("type", ""),
                definition=c.get("def", ""),
            )
            for c in _as_list(data.get("constraints"), f"{name}.constraints")
        ],
        triggers=[
            Trigger(name=_require_name(t, "trigger"), definition=t.get("def", ""))
            for t in _as_list(data.get("triggers"), f"{name}.triggers")
        ],
        definition=data.get("def") or "",
    )


def _parse_column(data: dict, table_name: str) -> Column:
    """Parse a column definition from a dictionary."""
    _require_mapping(data, f"Column definition in table '{table_name}'")
    _check_fields(data, VALID_COLUMN_FIELDS, "column")

    name = data.get("name")
    if not name:
        raise SchemaLoadError(f"Column definition in table '{table_name}' missing 'name' field")
    if not isinstance(name, str):
        raise SchemaLoadError(f"Column name in table '{table_name}' must be a string, got {name!r}")

    col_type = data.get("type")
    if not col_type:
        raise SchemaLoadError(f"Column '{table_name}.{name}' missing 'type' field")

    default = data.get("default")
    if default is not None and not isinstance(default, str):
        raise SchemaLoadError(f"Column '{table_name}.{name}' default must be a string or null")

    return Column(
        name=name,
        type=col_type,
        nullable=data.get("nullable", True),
        default=default,
        comment=data.get("comment") or "",
    )


def _parse_relation(schema: Schema, data: dict) -> Relation:
    """Resolve a relation's table and column names against ``schema``."""
    _require_mapping(data, "Relation definition")
    _check_fields(data, VALID_RELATION_FIELDS, "relation")
    for key in ("table", "parent_table"):
        if key not in data:
            raise SchemaLoadError(f"Relation definition missing '{key}' field")

    try:
        table = schema.find_table_by_name(data["table"])
        parent_table = schema.find_table_by_name(data["parent_table"])
        columns = [
            table.find_column_by_name(c)
            for c in _as_list(data.get("columns"), "relation columns")
        ]
        parent_columns = [
            parent_table.find_column_by_name(c)
            for c in _as_list(data.get("parent_columns"), "relation parent_columns")
        ]
    except NotFoundError as e:
        raise SchemaLoadError(f"Invalid relation: {e}") from e

    return Relation(
        table=table,
        parent_table=parent_table,
        columns=columns,
        parent_columns=parent_columns,
        definition=data.get("def") or "",
        is_additional=data.get("is_additional", False),
    )


def _require_name(data: dict, where: str) -> str:
    _require_mapping(data, f"{where.capitalize()} definition")
    name = data.get("name")
    if not name:
        raise SchemaLoadError(f"{where.capitalize()} definition missing 'name' field")
    return name
