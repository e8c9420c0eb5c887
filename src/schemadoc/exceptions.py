"""Exception classes for schemadoc."""

__all__ = [
    "SchemadocError",
    "NotFoundError",
    "TableNotFoundError",
    "ColumnNotFoundError",
    "RelationNotFoundError",
    "RelationShapeError",
    "DecodeError",
    "AdditionalDataIOError",
    "AdditionalDataError",
    "SchemaLoadError",
    "ConfigError",
]


class SchemadocError(Exception):
    """Base exception for schemadoc."""


class NotFoundError(SchemadocError):
    """Lookup of a schema entity by name failed.

    Args:
        context: Identifier of the missing entity, e.g. "users" or "users.id"
        message: Human-readable description
    """

    def __init__(self, context: str, message: str):
        self.context = context
        super().__init__(message)


class TableNotFoundError(NotFoundError):
    """No table with the given name exists in the schema."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(table, f"not found table '{table}'")


class ColumnNotFoundError(NotFoundError):
    """No column with the given name exists in the table."""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        context = f"{table}.{column}"
        super().__init__(context, f"not found column '{context}'")


class RelationNotFoundError(NotFoundError):
    """A back-reference points at a relation id the schema does not own."""

    def __init__(self, relation_id: int):
        self.relation_id = relation_id
        super().__init__(str(relation_id), f"not found relation #{relation_id}")


class RelationShapeError(SchemadocError):
    """Relation has a different number of referencing and referenced columns."""


class DecodeError(SchemadocError):
    """Additional data could not be parsed into the expected document shape."""


class AdditionalDataIOError(SchemadocError):
    """Additional data file could not be resolved or read."""


class AdditionalDataError(SchemadocError):
    """Failure while merging additional data, labelled with the failing stage.

    The original exception is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")


class SchemaLoadError(SchemadocError):
    """Error loading a schema snapshot."""


class ConfigError(SchemadocError):
    """Error in configuration."""
