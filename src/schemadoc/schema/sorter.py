"""Deterministic ordering of a schema graph before serialization."""

from schemadoc.schema.models import Schema


def sort_schema(schema: Schema) -> None:
    """Sort every collection in ``schema`` in place.

    Columns, indexes, constraints, triggers and tables sort by name. Relations
    and column back-references sort by the relation's owning table name, with
    the remaining relation names as tie-breakers. All sorts are stable, so
    running this twice gives the same result as running it once.

    Back-references to ids the schema does not own (left behind by a failed
    non-atomic merge) sort after the known ones and keep their relative
    order. Sorting never fails.
    """
    relation_keys = {r.id: r.sort_key() for r in schema.relations}

    def back_reference_key(relation_id: int) -> tuple:
        if relation_id not in relation_keys:
            return (1,)
        return (0, relation_keys[relation_id])

    for table in schema.tables:
        for column in table.columns:
            column.parent_relations.sort(key=back_reference_key)
            column.child_relations.sort(key=back_reference_key)
        table.columns.sort(key=lambda c: c.name)
        table.indexes.sort(key=lambda i: i.name)
        table.constraints.sort(key=lambda c: c.name)
        table.triggers.sort(key=lambda t: t.name)

    schema.tables.sort(key=lambda t: t.name)
    schema.relations.sort(key=lambda r: r.sort_key())
