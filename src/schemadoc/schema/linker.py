"""Link relations to the columns they touch.

Columns keep back-references as relation ids; the relation objects
themselves are owned by ``Schema.relations``.
"""

from schemadoc.exceptions import RelationShapeError
from schemadoc.schema.models import Column, Relation, Schema


def _require_id(relation: Relation) -> int:
    if relation.id is None:
        raise RelationShapeError(
            f"Relation '{relation.table.name}' -> '{relation.parent_table.name}' has no id"
        )
    return relation.id


def link_parent_column(relation: Relation, column: Column) -> None:
    """Add a referencing column to ``relation`` and back-reference it."""
    relation_id = _require_id(relation)
    relation.columns.append(column)
    column.parent_relations.append(relation_id)


def link_child_column(relation: Relation, column: Column) -> None:
    """Add a referenced column to ``relation`` and back-reference it."""
    relation_id = _require_id(relation)
    relation.parent_columns.append(column)
    column.child_relations.append(relation_id)


def link_relation(schema: Schema, relation: Relation) -> Relation:
    """Register a resolved relation in ``schema``.

    The relation's ``columns`` and ``parent_columns`` must already be set.
    Appends the relation to ``schema.relations`` and its id to each column's
    back-reference list. No deduplication: linking the same declaration twice
    yields two relations.

    Raises:
        RelationShapeError: If the two column lists differ in length.
    """
    if len(relation.columns) != len(relation.parent_columns):
        raise RelationShapeError(
            f"Relation '{relation.table.name}' -> '{relation.parent_table.name}' "
            f"has {len(relation.columns)} column(s) but "
            f"{len(relation.parent_columns)} parent column(s)"
        )
    if relation.id is None:
        relation.id = schema.next_relation_id()

    schema.relations.append(relation)
    for column in relation.columns:
        column.parent_relations.append(relation.id)
    for column in relation.parent_columns:
        column.child_relations.append(relation.id)
    return relation
