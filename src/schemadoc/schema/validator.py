"""Schema validation: check the graph invariants of a loaded or merged schema."""

from collections import Counter
from dataclasses import dataclass
from typing import Literal, Optional

from schemadoc.schema.models import Column, Relation, Schema, Table


@dataclass
class ValidationIssue:
    """A single invariant violation found in a schema."""

    table: Optional[str]
    column: Optional[str]
    kind: Literal[
        "duplicate_table",
        "duplicate_column",
        "missing_table",
        "missing_column",
        "shape_mismatch",
        "dangling_reference",
        "missing_back_reference",
    ]
    message: str


@dataclass
class ValidationResult:
    """Result of schema validation.

    ok is True iff issues is empty. CLI uses this flag for exit code (0 if ok, 1 otherwise).
    """

    ok: bool
    issues: list[ValidationIssue]


class SchemaValidator:
    """Validate that a schema is safe to sort and render.

    Checks name uniqueness, that every relation points at tables and columns
    owned by the schema, and that column back-references agree with
    ``Schema.relations`` in both directions.
    """

    def validate(self, schema: Schema) -> ValidationResult:
        issues: list[ValidationIssue] = []

        for name, count in Counter(schema.table_names()).items():
            if count > 1:
                issues.append(
                    ValidationIssue(
                        table=name,
                        column=None,
                        kind="duplicate_table",
                        message=f"Table '{name}' is defined {count} times",
                    )
                )

        for table in schema.tables:
            for name, count in Counter(table.column_names()).items():
                if count > 1:
                    issues.append(
                        ValidationIssue(
                            table=table.name,
                            column=name,
                            kind="duplicate_column",
                            message=f"Column '{name}' is defined {count} times in table '{table.name}'",
                        )
                    )

        for relation in schema.relations:
            issues.extend(self._check_relation(schema, relation))

        issues.extend(self._check_back_references(schema))
        return ValidationResult(ok=len(issues) == 0, issues=issues)

    def _check_relation(self, schema: Schema, relation: Relation) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        label = f"{relation.table.name} -> {relation.parent_table.name}"

        if len(relation.columns) != len(relation.parent_columns):
            issues.append(
                ValidationIssue(
                    table=relation.table.name,
                    column=None,
                    kind="shape_mismatch",
                    message=(
                        f"Relation '{label}' has {len(relation.columns)} column(s) "
                        f"but {len(relation.parent_columns)} parent column(s)"
                    ),
                )
            )

        for table, columns in (
            (relation.table, relation.columns),
            (relation.parent_table, relation.parent_columns),
        ):
            if not any(t is table for t in schema.tables):
                issues.append(
                    ValidationIssue(
                        table=table.name,
                        column=None,
                        kind="missing_table",
                        message=f"Relation '{label}' refers to table '{table.name}' not in schema",
                    )
                )
                continue
            for column in columns:
                if not _owns(table, column):
                    issues.append(
                        ValidationIssue(
                            table=table.name,
                            column=column.name,
                            kind="missing_column",
                            message=f"Relation '{label}' refers to column '{column.name}' not in table '{table.name}'",
                        )
                    )
        return issues

    def _check_back_references(self, schema: Schema) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        expected_parent: dict[int, Counter] = {}
        expected_child: dict[int, Counter] = {}
        for relation in schema.relations:
            for column in relation.columns:
                expected_parent.setdefault(id(column), Counter())[relation.id] += 1
            for column in relation.parent_columns:
                expected_child.setdefault(id(column), Counter())[relation.id] += 1

        for table in schema.tables:
            for column in table.columns:
                for side, actual, expected in (
                    ("parent", column.parent_relations, expected_parent),
                    ("child", column.child_relations, expected_child),
                ):
                    want = expected.get(id(column), Counter())
                    have = Counter(actual)
                    for relation_id in have - want:
                        issues.append(
                            ValidationIssue(
                                table=table.name,
                                column=column.name,
                                kind="dangling_reference",
                                message=f"Column '{table.name}.{column.name}' has {side} reference to relation #{relation_id} that does not name it",
                            )
                        )
                    for relation_id in want - have:
                        issues.append(
                            ValidationIssue(
                                table=table.name,
                                column=column.name,
                                kind="missing_back_reference",
                                message=f"Column '{table.name}.{column.name}' is missing {side} reference to relation #{relation_id}",
                            )
                        )
        return issues


def _owns(table: Table, column: Column) -> bool:
    return any(c is column for c in table.columns)
