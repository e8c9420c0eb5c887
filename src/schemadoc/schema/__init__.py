"""Schema graph model, additional-data merging and deterministic ordering."""

from schemadoc.schema.additional import (
    DEFAULT_ADDITIONAL_RELATION_DEF,
    AdditionalComment,
    AdditionalData,
    AdditionalRelation,
    add_additional_data,
    load_additional_data,
    merge_additional_data,
    parse_additional_data,
)
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
from schemadoc.schema.sorter import sort_schema
from schemadoc.schema.validator import (
    SchemaValidator,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "DEFAULT_ADDITIONAL_RELATION_DEF",
    "AdditionalComment",
    "AdditionalData",
    "AdditionalRelation",
    "Column",
    "Constraint",
    "Index",
    "Relation",
    "Schema",
    "SchemaValidator",
    "Table",
    "Trigger",
    "ValidationIssue",
    "ValidationResult",
    "add_additional_data",
    "link_relation",
    "load_additional_data",
    "merge_additional_data",
    "parse_additional_data",
    "sort_schema",
]
