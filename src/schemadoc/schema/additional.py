"""Merge additional relations and comments from YAML into a schema.

Additional data is declared outside of database introspection, e.g.:

    relations:
      - table: posts
        columns: [user_id]
        parentTable: users
        parentColumns: [id]
        def: posts.user_id -> users.id
    comments:
      - table: users
        tableComment: Registered users
        columnComments:
          email: Login address
"""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

import yaml

from schemadoc.exceptions import (
    AdditionalDataError,
    AdditionalDataIOError,
    DecodeError,
    RelationShapeError,
    SchemadocError,
)
from schemadoc.schema.linker import link_child_column, link_parent_column
from schemadoc.schema.models import Relation, Schema

logger = logging.getLogger(__name__)

DEFAULT_ADDITIONAL_RELATION_DEF = "Additional Relation"

VALID_DOCUMENT_FIELDS = {"relations", "comments"}

VALID_RELATION_FIELDS = {"table", "columns", "parentTable", "parentColumns", "def"}

VALID_COMMENT_FIELDS = {"table", "tableComment", "columnComments"}


@dataclass
class AdditionalRelation:
    """Relation declared in additional data."""

    table: str
    columns: list[str] = field(default_factory=list)
    parent_table: str = ""
    parent_columns: list[str] = field(default_factory=list)
    definition: str = ""


@dataclass
class AdditionalComment:
    """Table and column comments declared in additional data."""

    table: str
    table_comment: str = ""
    column_comments: dict[str, str] = field(default_factory=dict)


@dataclass
class AdditionalData:
    """Decoded additional-data document."""

    relations: list[AdditionalRelation] = field(default_factory=list)
    comments: list[AdditionalComment] = field(default_factory=list)


def parse_additional_data(buf: Union[bytes, str]) -> AdditionalData:
    """Decode a YAML additional-data document.

    An empty document decodes to an empty AdditionalData. Unknown keys are an
    error, so a misspelled field is reported rather than dropped.

    Raises:
        DecodeError: If the YAML is malformed or does not match the document shape.
    """
    try:
        data = yaml.safe_load(buf)
    except yaml.YAMLError as e:
        raise DecodeError(f"Invalid YAML in additional data: {e}") from e

    if data is None:
        return AdditionalData()
    if not isinstance(data, dict):
        raise DecodeError("Additional data must be a mapping")
    _check_fields(data, VALID_DOCUMENT_FIELDS, "additional data")

    relations = [_parse_relation(r) for r in _as_list(data.get("relations"), "relations")]
    comments = [_parse_comment(c) for c in _as_list(data.get("comments"), "comments")]
    return AdditionalData(relations=relations, comments=comments)


def _check_fields(data: dict, valid: set[str], where: str) -> None:
    """Reject keys outside ``valid`` instead of silently ignoring them."""
    unknown_fields = set(data.keys()) - valid
    if unknown_fields:
        raise DecodeError(
            f"Unknown field(s) in {where}: {', '.join(sorted(map(str, unknown_fields)))}"
        )


def _as_list(value: Any, where: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"'{where}' must be a list")
    return value


def _as_str(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise DecodeError(f"'{where}' must be a string, got {value!r} (quote it)")
    return str(value)


def _as_str_list(value: Any, where: str) -> list[str]:
    return [_as_str(v, where) for v in _as_list(value, where)]


def _parse_relation(data: Any) -> AdditionalRelation:
    if not isinstance(data, dict):
        raise DecodeError("Relation entry must be a mapping")
    _check_fields(data, VALID_RELATION_FIELDS, "relation")
    return AdditionalRelation(
        table=_as_str(data.get("table"), "table"),
        columns=_as_str_list(data.get("columns"), "columns"),
        parent_table=_as_str(data.get("parentTable"), "parentTable"),
        parent_columns=_as_str_list(data.get("parentColumns"), "parentColumns"),
        definition=_as_str(data.get("def"), "def"),
    )


def _parse_comment(data: Any) -> AdditionalComment:
    if not isinstance(data, dict):
        raise DecodeError("Comment entry must be a mapping")
    _check_fields(data, VALID_COMMENT_FIELDS, "comment")

    column_comments = data.get("columnComments") or {}
    if not isinstance(column_comments, dict):
        raise DecodeError("'columnComments' must be a mapping")

    return AdditionalComment(
        table=_as_str(data.get("table"), "table"),
        table_comment=_as_str(data.get("tableComment"), "tableComment"),
        column_comments={
            _as_str(name, "columnComments"): _as_str(comment, "columnComments")
            for name, comment in column_comments.items()
        },
    )


def load_additional_data(
    schema: Schema, path: Union[str, Path], *, atomic: bool = False
) -> None:
    """Read an additional-data YAML file and merge it into ``schema``.

    Raises:
        AdditionalDataError: Stage "failed to load additional data", wrapping
            AdditionalDataIOError, DecodeError or a merge failure.
    """
    try:
        full_path = Path(path).resolve()
        buf = full_path.read_bytes()
    except (OSError, RuntimeError) as e:
        io_error = AdditionalDataIOError(f"Cannot read additional data '{path}': {e}")
        io_error.__cause__ = e
        raise AdditionalDataError("failed to load additional data", io_error) from io_error

    logger.debug(f"Loading additional data from {full_path}")
    try:
        add_additional_data(schema, buf, atomic=atomic)
    except SchemadocError as e:
        raise AdditionalDataError("failed to load additional data", e) from e


def add_additional_data(
    schema: Schema, buf: Union[bytes, str], *, atomic: bool = False
) -> None:
    """Decode YAML additional data and merge it into ``schema``.

    Raises:
        DecodeError: If the document cannot be decoded.
        AdditionalDataError: If a declared table or column does not exist.
    """
    data = parse_additional_data(buf)
    merge_additional_data(schema, data, atomic=atomic)


def merge_additional_data(
    schema: Schema, data: AdditionalData, *, atomic: bool = False
) -> None:
    """Merge decoded additional data into ``schema`` in place.

    Relations are applied first, then comments, each in input order. The
    first unresolved name aborts the call. Without ``atomic`` the schema keeps
    everything applied before the failure, including back-references already
    linked by the failing relation. With ``atomic`` the merge is rehearsed on
    a copy first and the schema is only touched if the rehearsal succeeds.

    Raises:
        AdditionalDataError: Labelled with the failing stage.
    """
    if atomic:
        _merge(copy.deepcopy(schema), data)
    _merge(schema, data)
    logger.info(
        f"Merged {len(data.relations)} additional relation(s) and "
        f"{len(data.comments)} comment record(s) into schema '{schema.name}'"
    )


def _merge(schema: Schema, data: AdditionalData) -> None:
    _add_additional_relations(schema, data.relations)
    _add_additional_comments(schema, data.comments)


def _add_additional_relations(
    schema: Schema, relations: list[AdditionalRelation]
) -> None:
    for r in relations:
        try:
            relation = _build_relation(schema, r)
        except SchemadocError as e:
            raise AdditionalDataError("failed to add relation", e) from e
        schema.relations.append(relation)


def _build_relation(schema: Schema, r: AdditionalRelation) -> Relation:
    if len(r.columns) != len(r.parent_columns):
        raise RelationShapeError(
            f"Relation '{r.table}' -> '{r.parent_table}' has "
            f"{len(r.columns)} column(s) but "
            f"{len(r.parent_columns)} parent column(s)"
        )

    table = schema.find_table_by_name(r.table)
    relation = Relation(
        table=table,
        parent_table=table,
        definition=r.definition or DEFAULT_ADDITIONAL_RELATION_DEF,
        is_additional=True,
        id=schema.next_relation_id(),
    )
    for name in r.columns:
        link_parent_column(relation, table.find_column_by_name(name))

    relation.parent_table = schema.find_table_by_name(r.parent_table)
    for name in r.parent_columns:
        link_child_column(relation, relation.parent_table.find_column_by_name(name))
    return relation


def _add_additional_comments(
    schema: Schema, comments: list[AdditionalComment]
) -> None:
    for c in comments:
        try:
            table = schema.find_table_by_name(c.table)
        except SchemadocError as e:
            raise AdditionalDataError("failed to add table comment", e) from e
        if c.table_comment:
            table.comment = c.table_comment
        for name, comment in c.column_comments.items():
            try:
                column = table.find_column_by_name(name)
            except SchemadocError as e:
                raise AdditionalDataError("failed to add column comment", e) from e
            column.comment = comment

