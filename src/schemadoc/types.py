"""Core type definitions for schemadoc."""

from typing import TypeAlias

RelationId: TypeAlias = int

__all__ = [
    "RelationId",
]
