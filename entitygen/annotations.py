# File: entitygen/annotations.py
"""
EntityGen - Relational Annotation Provider
===========================================
Answers the schema-fact questions the emitter asks about an entity, its
model, or one of its properties.  Each answer is the effective value: an
explicit annotation when the input carries one, otherwise the convention.

    table_name     explicit table name, else the entity's set name
    schema         explicit schema, else the model's default schema
    default_schema model default schema (None for a detached entity)
    column_name    explicit column name, else the property name
    column_type    explicit store type only
    max_length     declared maximum length
    is_nullable    explicit nullability, else what the CLR type allows

Absent facts are ``None``, never a sentinel.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from entitygen.models import EntityInfo, ModelInfo, PropertyInfo

logger: logging.Logger = logging.getLogger("entitygen.annotations")


class RelationalAnnotationProvider:
    """Reads effective relational facts off the metadata models."""

    def table_name(self, entity: EntityInfo) -> Optional[str]:
        return entity.table_name or entity.set_name

    def schema(self, entity: EntityInfo) -> Optional[str]:
        if entity.schema_name:
            return entity.schema_name
        return self.default_schema(entity.model)

    def default_schema(self, model: Optional[ModelInfo]) -> Optional[str]:
        if model is None:
            return None
        return model.default_schema

    def column_name(self, prop: PropertyInfo) -> Optional[str]:
        return prop.column_name or prop.name

    def column_type(self, prop: PropertyInfo) -> Optional[str]:
        return prop.column_type

    def max_length(self, prop: PropertyInfo) -> Optional[int]:
        return prop.max_length

    def is_nullable(self, prop: PropertyInfo) -> bool:
        return prop.is_nullable


__all__: List[str] = ["RelationalAnnotationProvider"]
