"""Schema representation classes."""

from dataclasses import dataclass, field
from typing import Optional

from schemadoc.exceptions import (
    ColumnNotFoundError,
    RelationNotFoundError,
    TableNotFoundError,
)
from schemadoc.types import RelationId


@dataclass(frozen=True)
class Index:
    """Table index."""

    name: str
    definition: str = ""


@dataclass(frozen=True)
class Constraint:
    """Table constraint (PRIMARY KEY, FOREIGN KEY, UNIQUE, CHECK, ...)."""

    name: str
    type: str = ""
    definition: str = ""


@dataclass(frozen=True)
class Trigger:
    """Table trigger."""

    name: str
    definition: str = ""


@dataclass
class Column:
    """Column definition.

    ``default`` is None when the column has no default. An empty string is a
    present default and is kept distinct from None.

    ``parent_relations`` holds ids of relations in which this column is on the
    referencing side; ``child_relations`` holds ids of relations in which it
    is referenced. Both resolve through the owning Schema.
    """

    name: str
    type: str
    nullable: bool = True
    default: Optional[str] = None
    comment: str = ""
    parent_relations: list[RelationId] = field(default_factory=list)
    child_relations: list[RelationId] = field(default_factory=list)

    @property
    def has_default(self) -> bool:
        return self.default is not None


@dataclass
class Table:
    """Table or view definition."""

    name: str
    columns: list[Column] = field(default_factory=list)
    type: str = "BASE TABLE"
    comment: str = ""
    indexes: list[Index] = field(default_factory=list)
    constraints: list[Constraint] = field(default_factory=list)
    triggers: list[Trigger] = field(default_factory=list)
    definition: str = ""

    def find_column_by_name(self, name: str) -> Column:
        """Get a column by name. First match wins.

        Raises:
            ColumnNotFoundError: If no column has that name.
        """
        for col in self.columns:
            if col.name == name:
                return col
        raise ColumnNotFoundError(self.name, name)

    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]


@dataclass(eq=False)
class Relation:
    """Directed edge from referencing columns to referenced (parent) columns.

    Compared by identity: two relations declared with the same names are
    still two distinct relations.
    """

    table: Table
    parent_table: Table
    columns: list[Column] = field(default_factory=list)
    parent_columns: list[Column] = field(default_factory=list)
    definition: str = ""
    is_additional: bool = False
    id: Optional[RelationId] = None

    def sort_key(self) -> tuple:
        """Ordering key: owning table name first, then the remaining names."""
        return (
            self.table.name,
            [c.name for c in self.columns],
            self.parent_table.name,
            [c.name for c in self.parent_columns],
            self.definition,
        )


@dataclass
class Schema:
    """Complete schema definition.

    ``relations`` is the single owner of Relation objects.
    """

    name: str = ""
    tables: list[Table] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)
    _last_relation_id: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._last_relation_id = max(
            (r.id for r in self.relations if r.id is not None), default=0
        )
        for relation in self.relations:
            if relation.id is None:
                relation.id = self.next_relation_id()

    def next_relation_id(self) -> RelationId:
        """Allocate a relation id not yet used in this schema."""
        self._last_relation_id += 1
        return self._last_relation_id

    def find_table_by_name(self, name: str) -> Table:
        """Get a table by name. First match wins.

        Raises:
            TableNotFoundError: If no table has that name.
        """
        for table in self.tables:
            if table.name == name:
                return table
        raise TableNotFoundError(name)

    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def get_relation(self, relation_id: RelationId) -> Relation:
        """Resolve a back-reference id to the relation it names."""
        for relation in self.relations:
            if relation.id == relation_id:
                return relation
        raise RelationNotFoundError(relation_id)

    def parent_relations_of(self, column: Column) -> list[Relation]:
        """Relations in which ``column`` is a referencing column."""
        return [self.get_relation(rid) for rid in column.parent_relations]

    def child_relations_of(self, column: Column) -> list[Relation]:
        """Relations in which ``column`` is a referenced column."""
        return [self.get_relation(rid) for rid in column.child_relations]
