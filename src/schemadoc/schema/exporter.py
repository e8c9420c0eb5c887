"""Export schema models to JSON documents."""

import json
from pathlib import Path
from typing import Any

from schemadoc.schema.models import Column, Relation, Schema, Table


def schema_to_dict(schema: Schema) -> dict[str, Any]:
    """Convert a Schema to a JSON-compatible dictionary.

    Column back-references are omitted; they can be rebuilt from the
    relations, which refer to tables and columns by name.
    """
    return {
        "name": schema.name,
        "tables": [table_to_dict(table) for table in schema.tables],
        "relations": [relation_to_dict(r) for r in schema.relations],
    }


def table_to_dict(table: Table) -> dict[str, Any]:
    """Convert a Table model to a dictionary."""
    return {
        "name": table.name,
        "type": table.type,
        "comment": table.comment,
        "columns": [_column_to_dict(col) for col in table.columns],
        "indexes": [{"name": i.name, "def": i.definition} for i in table.indexes],
        "constraints": [
            {"name": c.name, "type": c.type, "def": c.definition}
            for c in table.constraints
        ],
        "triggers": [{"name": t.name, "def": t.definition} for t in table.triggers],
        "def": table.definition,
    }


def _column_to_dict(col: Column) -> dict[str, Any]:
    """Convert a Column model to a dictionary. An absent default becomes None."""
    return {
        "name": col.name,
        "type": col.type,
        "nullable": col.nullable,
        "default": col.default,
        "comment": col.comment,
    }


def relation_to_dict(relation: Relation) -> dict[str, Any]:
    """Convert a Relation to a dictionary of table and column names."""
    return {
        "table": relation.table.name,
        "columns": [c.name for c in relation.columns],
        "parent_table": relation.parent_table.name,
        "parent_columns": [c.name for c in relation.parent_columns],
        "def": relation.definition,
        "is_additional": relation.is_additional,
    }


def export_schema_json(schema: Schema, indent: int = 2) -> str:
    """Export a schema to a JSON string."""
    return json.dumps(schema_to_dict(schema), indent=indent, ensure_ascii=False)


def write_schema_json(schema: Schema, output_path: Path) -> Path:
    """Write a schema as JSON to ``output_path``, creating parent directories.

    Returns the written path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(export_schema_json(schema) + "\n", encoding="utf-8")
    return output_path
