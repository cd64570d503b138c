# File: entitygen/emitter.py
"""
EntityGen - Entity Class Emitter
=================================
Generates the C# source of one entity class:

    using lines
    namespace <ns>
    {
        [Table(...)]                     (markup, only when needed)
        public partial class <Entity>
        {
            constructor                  (only with collection navigations)
            scalar properties            (ascending column ordinal)

            navigation properties        (dependent→principal first,
                                          references before collections)
        }
    }

Attributes (data annotations) are emitted only when they add information
that the naming conventions would not infer: a table name that is not the
set name, a non-default schema, a column name that is not the property name,
``[Required]`` on a type that could otherwise hold null, and so on.

Each phase appends to the ``IndentedStringBuilder`` it is given; a fresh
builder is created per ``generate`` call and no state survives between
calls, so one emitter may serve any number of callers.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Set

from entitygen.annotations import RelationalAnnotationProvider
from entitygen.csharp import CSharpFormatter
from entitygen.markup import MarkupBuilder
from entitygen.models import EntityInfo, NavigationInfo, PropertyInfo
from entitygen.utils import IndentedStringBuilder

logger: logging.Logger = logging.getLogger("entitygen.emitter")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BASE_NAMESPACES: List[str] = ["System", "System.Collections.Generic"]

_ANNOTATION_NAMESPACES: List[str] = [
    "System.ComponentModel.DataAnnotations",
    "System.ComponentModel.DataAnnotations.Schema",
]

TABLE_ATTRIBUTE: str = "TableAttribute"
COLUMN_ATTRIBUTE: str = "ColumnAttribute"
REQUIRED_ATTRIBUTE: str = "RequiredAttribute"
STRING_LENGTH_ATTRIBUTE: str = "StringLengthAttribute"
MAX_LENGTH_ATTRIBUTE: str = "MaxLengthAttribute"
FOREIGN_KEY_ATTRIBUTE: str = "ForeignKeyAttribute"
INVERSE_PROPERTY_ATTRIBUTE: str = "InversePropertyAttribute"


class ClassEmitter:
    """
    Renders one entity into a complete C# compilation unit.

    Args:
        formatter: Renders CLR type names and string/number literals.
        annotations: Answers table/schema/column facts.
        indent_size: Spaces per indentation level.
    """

    def __init__(
        self,
        formatter: Optional[Any] = None,
        annotations: Optional[Any] = None,
        indent_size: int = 4,
    ) -> None:
        self._formatter: Any = formatter if formatter is not None else CSharpFormatter()
        self._annotations: Any = (
            annotations if annotations is not None else RelationalAnnotationProvider()
        )
        self._indent_size: int = indent_size

    def generate(self, entity: EntityInfo, namespace: str, emit_markup: bool) -> str:
        """Return the source text for *entity* inside *namespace*."""
        if entity is None:
            raise ValueError("entity is required.")
        if not namespace:
            raise ValueError("namespace must be a non-empty string.")

        sb: IndentedStringBuilder = IndentedStringBuilder(self._indent_size)
        self._generate_file(sb, entity, namespace, emit_markup)
        return sb.build()

    # -----------------------------------------------------------------
    # File & class skeleton
    # -----------------------------------------------------------------

    def _generate_file(
        self,
        sb: IndentedStringBuilder,
        entity: EntityInfo,
        namespace: str,
        emit_markup: bool,
    ) -> None:
        for ns in _BASE_NAMESPACES:
            sb.append_line(f"using {ns};")

        if emit_markup:
            for ns in _ANNOTATION_NAMESPACES:
                sb.append_line(f"using {ns};")

        for ns in self._property_namespaces(entity):
            sb.append_line(f"using {ns};")

        sb.append_line()
        sb.append_line(f"namespace {namespace}")
        sb.append_line("{")
        with sb.indent():
            self._generate_class(sb, entity, emit_markup)
        sb.append_line("}")

    @staticmethod
    def _property_namespaces(entity: EntityInfo) -> List[str]:
        # first-seen order over the entity's own property order
        seen: Set[str] = set(_BASE_NAMESPACES)
        result: List[str] = []
        for prop in entity.properties:
            ns: Optional[str] = prop.clr_type.namespace
            if ns and ns not in seen:
                seen.add(ns)
                result.append(ns)
        return result

    def _generate_class(
        self, sb: IndentedStringBuilder, entity: EntityInfo, emit_markup: bool
    ) -> None:
        if emit_markup:
            self._generate_table_attribute(sb, entity)

        sb.append_line(f"public partial class {entity.name}")
        sb.append_line("{")
        with sb.indent():
            self._generate_constructor(sb, entity)
            self._generate_properties(sb, entity, emit_markup)
            self._generate_navigation_properties(sb, entity, emit_markup)
        sb.append_line("}")

    # -----------------------------------------------------------------
    # Class-level markup
    # -----------------------------------------------------------------

    def _generate_table_attribute(
        self, sb: IndentedStringBuilder, entity: EntityInfo
    ) -> None:
        table_name: Optional[str] = self._annotations.table_name(entity)
        schema: Optional[str] = self._annotations.schema(entity)
        default_schema: Optional[str] = self._annotations.default_schema(entity.model)

        schema_parameter_needed: bool = schema is not None and schema != default_schema
        table_attribute_needed: bool = schema_parameter_needed or (
            table_name is not None and table_name != entity.set_name
        )
        if not table_attribute_needed:
            return

        # table name always fills the first slot, even when only the schema differs
        attribute: MarkupBuilder = MarkupBuilder(TABLE_ATTRIBUTE)
        attribute.add_parameter(self._formatter.delimit_string(table_name or entity.set_name))
        if schema_parameter_needed:
            attribute.add_parameter(f"Schema = {self._formatter.delimit_string(schema)}")
        sb.append_line(attribute.render())

    # -----------------------------------------------------------------
    # Constructor
    # -----------------------------------------------------------------

    def _generate_constructor(self, sb: IndentedStringBuilder, entity: EntityInfo) -> None:
        collections: List[NavigationInfo] = [
            nav for nav in entity.navigations if nav.is_collection
        ]
        if not collections:
            return

        sb.append_line(f"public {entity.name}()")
        sb.append_line("{")
        with sb.indent():
            for nav in collections:
                sb.append_line(f"{nav.name} = new HashSet<{nav.target}>();")
        sb.append_line("}")
        sb.append_line()

    # -----------------------------------------------------------------
    # Scalar properties
    # -----------------------------------------------------------------

    def _generate_properties(
        self, sb: IndentedStringBuilder, entity: EntityInfo, emit_markup: bool
    ) -> None:
        for prop in sorted(entity.properties, key=lambda p: p.column_ordinal):
            if emit_markup:
                self._generate_required_attribute(sb, prop)
                self._generate_column_attribute(sb, prop)
                self._generate_max_length_attribute(sb, prop)

            type_name: str = self._formatter.type_name(prop.clr_type)
            sb.append_line(f"public {type_name} {prop.name} {{ get; set; }}")

    def _generate_required_attribute(
        self, sb: IndentedStringBuilder, prop: PropertyInfo
    ) -> None:
        # only when NOT NULL comes from the schema, not from the type
        if not self._annotations.is_nullable(prop) and prop.clr_type.can_be_null:
            sb.append_line(MarkupBuilder(REQUIRED_ATTRIBUTE).render())

    def _generate_column_attribute(
        self, sb: IndentedStringBuilder, prop: PropertyInfo
    ) -> None:
        column_name: Optional[str] = self._annotations.column_name(prop)
        column_type: Optional[str] = self._annotations.column_type(prop)

        delimited_name: Optional[str] = (
            self._formatter.delimit_string(column_name)
            if column_name is not None and column_name != prop.name
            else None
        )
        delimited_type: Optional[str] = (
            self._formatter.delimit_string(column_type) if column_type is not None else None
        )
        if delimited_name is None and delimited_type is None:
            return

        attribute: MarkupBuilder = MarkupBuilder(COLUMN_ATTRIBUTE)
        if delimited_name is not None:
            attribute.add_parameter(delimited_name)
        if delimited_type is not None:
            attribute.add_parameter(f"TypeName = {delimited_type}")
        sb.append_line(attribute.render())

    def _generate_max_length_attribute(
        self, sb: IndentedStringBuilder, prop: PropertyInfo
    ) -> None:
        max_length: Optional[int] = self._annotations.max_length(prop)
        if max_length is None:
            return

        attribute: MarkupBuilder = MarkupBuilder(
            STRING_LENGTH_ATTRIBUTE if prop.clr_type.is_string else MAX_LENGTH_ATTRIBUTE
        )
        attribute.add_parameter(self._formatter.literal(max_length))
        sb.append_line(attribute.render())

    # -----------------------------------------------------------------
    # Navigation properties
    # -----------------------------------------------------------------

    def _generate_navigation_properties(
        self, sb: IndentedStringBuilder, entity: EntityInfo, emit_markup: bool
    ) -> None:
        if not entity.navigations:
            return

        # sorted() is stable, so ties keep declaration order
        ordered: List[NavigationInfo] = sorted(
            entity.navigations,
            key=lambda n: (
                0 if n.is_dependent_to_principal else 1,
                1 if n.is_collection else 0,
            ),
        )

        sb.append_line()
        for nav in ordered:
            if emit_markup:
                self._generate_foreign_key_attribute(sb, nav)
                self._generate_inverse_property_attribute(sb, entity, nav)

            nav_type: str = f"ICollection<{nav.target}>" if nav.is_collection else nav.target
            sb.append_line(f"public {nav_type} {nav.name} {{ get; set; }}")

    def _generate_foreign_key_attribute(
        self, sb: IndentedStringBuilder, nav: NavigationInfo
    ) -> None:
        if not (nav.is_dependent_to_principal and nav.foreign_key.references_primary_key):
            return

        attribute: MarkupBuilder = MarkupBuilder(FOREIGN_KEY_ATTRIBUTE)
        attribute.add_parameter(
            self._formatter.delimit_string(",".join(nav.foreign_key.properties))
        )
        sb.append_line(attribute.render())

    def _generate_inverse_property_attribute(
        self, sb: IndentedStringBuilder, entity: EntityInfo, nav: NavigationInfo
    ) -> None:
        if not nav.foreign_key.references_primary_key or nav.inverse is None:
            return
        if not self._inverse_exists(entity, nav):
            return

        attribute: MarkupBuilder = MarkupBuilder(INVERSE_PROPERTY_ATTRIBUTE)
        attribute.add_parameter(self._formatter.delimit_string(nav.inverse))
        sb.append_line(attribute.render())

    @staticmethod
    def _inverse_exists(entity: EntityInfo, nav: NavigationInfo) -> bool:
        # a detached entity has no target to check; its inverse name is trusted
        if entity.model is None:
            return True
        target: Optional[EntityInfo] = entity.model.get_entity(nav.target)
        return target is not None and target.get_navigation(nav.inverse) is not None


__all__: List[str] = [
    "ClassEmitter",
    "TABLE_ATTRIBUTE",
    "COLUMN_ATTRIBUTE",
    "REQUIRED_ATTRIBUTE",
    "STRING_LENGTH_ATTRIBUTE",
    "MAX_LENGTH_ATTRIBUTE",
    "FOREIGN_KEY_ATTRIBUTE",
    "INVERSE_PROPERTY_ATTRIBUTE",
]
