# File: entitygen/models.py
"""
EntityGen - Core Data Models
=============================
Pydantic V2 models describing the reverse-engineered relational model that
drives class generation: CLR value types, scalar properties, foreign keys,
navigations, entities and the owning model, plus the generation settings.

These models are read-only inputs to the emitter.  They are built once (from
a schema file or in memory), validated here, and never mutated by
generation.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    computed_field,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Multiplicity(str, Enum):
    """How many target entities a navigation refers to."""

    REFERENCE = "reference"
    COLLECTION = "collection"


class NavigationDirection(str, Enum):
    """Which side of the relationship the navigation is declared on."""

    DEPENDENT_TO_PRINCIPAL = "dependent_to_principal"
    PRINCIPAL_TO_DEPENDENT = "principal_to_dependent"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

# C# keyword aliases -> (namespace, CLR name, is_value_type)
_CLR_ALIASES: Dict[str, Tuple[str, str, bool]] = {
    "bool": ("System", "Boolean", True),
    "byte": ("System", "Byte", True),
    "sbyte": ("System", "SByte", True),
    "char": ("System", "Char", True),
    "decimal": ("System", "Decimal", True),
    "double": ("System", "Double", True),
    "float": ("System", "Single", True),
    "int": ("System", "Int32", True),
    "uint": ("System", "UInt32", True),
    "long": ("System", "Int64", True),
    "ulong": ("System", "UInt64", True),
    "short": ("System", "Int16", True),
    "ushort": ("System", "UInt16", True),
    "object": ("System", "Object", False),
    "string": ("System", "String", False),
}

# Well-known System structs that may be written without a namespace
_SYSTEM_VALUE_TYPES: Set[str] = {
    "Boolean", "Byte", "SByte", "Char", "Decimal", "Double", "Single",
    "Int16", "Int32", "Int64", "UInt16", "UInt32", "UInt64",
    "DateTime", "DateTimeOffset", "DateOnly", "TimeOnly", "TimeSpan", "Guid",
}

_TYPE_TEXT_RE: re.Pattern[str] = re.compile(
    r"^(?P<name>[A-Za-z_][A-Za-z0-9_.]*)(?P<array>\[\])?(?P<nullable>\?)?$"
)


# ---------------------------------------------------------------------------
# CLR types
# ---------------------------------------------------------------------------


class ClrType(BaseModel):
    """
    Semantic value type of a scalar property.

    ``is_nullable`` marks a ``Nullable<T>`` wrapper around a value type;
    reference types and arrays can always hold null.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Simple CLR type name, e.g. 'Int32'.")
    namespace: Optional[str] = Field(
        default="System", description="Namespace declaring the type."
    )
    is_value_type: bool = Field(
        default=True, description="CLR struct? Derived from the name when omitted."
    )
    is_nullable: bool = Field(
        default=False, description="Nullable<T> wrapper over a value type."
    )
    is_array: bool = Field(default=False, description="Single-dimension array of `name`.")

    @computed_field  # type: ignore[misc]
    @property
    def can_be_null(self) -> bool:
        return self.is_array or not self.is_value_type or self.is_nullable

    @computed_field  # type: ignore[misc]
    @property
    def is_string(self) -> bool:
        return (
            self.name == "String"
            and self.namespace == "System"
            and not self.is_array
        )

    @property
    def full_name(self) -> str:
        base: str = f"{self.namespace}.{self.name}" if self.namespace else self.name
        if self.is_array:
            return f"{base}[]"
        if self.is_nullable:
            return f"{base}?"
        return base

    @model_validator(mode="before")
    @classmethod
    def _default_value_type(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "name" not in data:
            return data
        data = dict(data)
        namespace: Optional[str] = data.get("namespace", "System")
        if namespace == "System" and data["name"] in _CLR_ALIASES:
            data["name"] = _CLR_ALIASES[data["name"]][1]
        if "is_value_type" not in data:
            # only well-known System structs are value types
            data["is_value_type"] = (
                namespace == "System"
                and data["name"] in _SYSTEM_VALUE_TYPES
                and not data.get("is_array", False)
            )
        return data

    @model_validator(mode="after")
    def _validate_nullable_wrapper(self) -> "ClrType":
        if self.is_nullable and (not self.is_value_type or self.is_array):
            raise ValueError(
                f"Type '{self.name}' is not a value type and cannot be wrapped "
                f"in Nullable<T>."
            )
        return self

    @classmethod
    def parse(cls, text: str) -> "ClrType":
        """
        Build a ``ClrType`` from C# shorthand.

        Examples:
            >>> ClrType.parse("int?").is_nullable
            True
            >>> ClrType.parse("byte[]").can_be_null
            True
            >>> ClrType.parse("NetTopologySuite.Geometries.Point").namespace
            'NetTopologySuite.Geometries'

        Unqualified names that are neither keywords nor well-known System
        structs are treated as reference types with no namespace.
        """
        match = _TYPE_TEXT_RE.match(text.strip())
        if match is None:
            raise ValueError(f"Cannot parse CLR type from '{text}'.")

        raw_name: str = match.group("name")
        is_array: bool = match.group("array") is not None
        is_nullable: bool = match.group("nullable") is not None

        namespace: Optional[str]
        name: str
        is_value_type: bool
        if raw_name in _CLR_ALIASES:
            namespace, name, is_value_type = _CLR_ALIASES[raw_name]
        elif "." in raw_name:
            namespace, _, name = raw_name.rpartition(".")
            is_value_type = namespace == "System" and name in _SYSTEM_VALUE_TYPES
        else:
            is_value_type = raw_name in _SYSTEM_VALUE_TYPES
            namespace = "System" if is_value_type else None
            name = raw_name

        if is_array:
            # T[]? is the same reference type as T[]
            return cls(name=name, namespace=namespace, is_value_type=False, is_array=True)

        return cls(
            name=name,
            namespace=namespace,
            is_value_type=is_value_type,
            is_nullable=is_nullable and is_value_type,
        )

    def __repr__(self) -> str:
        return f"<ClrType {self.full_name}>"


# ---------------------------------------------------------------------------
# Scalar properties
# ---------------------------------------------------------------------------


class PropertyInfo(BaseModel):
    """A scalar column mapping on an entity."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Property name.")
    clr_type: ClrType = Field(..., alias="type", description="Semantic value type.")
    nullable: Optional[bool] = Field(
        default=None,
        description="Schema nullability; None means 'whatever the type allows'.",
    )
    column_ordinal: int = Field(..., ge=0, description="Declared column position.")
    max_length: Optional[int] = Field(default=None, ge=1, description="Maximum length.")
    column_name: Optional[str] = Field(default=None, description="Explicit column name.")
    column_type: Optional[str] = Field(default=None, description="Explicit store type.")

    @field_validator("clr_type", mode="before")
    @classmethod
    def _parse_type_text(cls, v: Any) -> Any:
        if isinstance(v, str):
            return ClrType.parse(v)
        return v

    @property
    def is_nullable(self) -> bool:
        if self.nullable is None:
            return self.clr_type.can_be_null
        return self.nullable

    @model_validator(mode="after")
    def _validate_nullability(self) -> "PropertyInfo":
        if self.nullable and not self.clr_type.can_be_null:
            raise ValueError(
                f"Property '{self.name}' is marked nullable but its type "
                f"'{self.clr_type.full_name}' cannot hold null."
            )
        return self

    def __repr__(self) -> str:
        null_flag: str = " NULL" if self.is_nullable else " NOT NULL"
        return f"<Property {self.name} {self.clr_type.full_name}{null_flag} #{self.column_ordinal}>"


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------


class ForeignKeyInfo(BaseModel):
    """The foreign key a navigation is built on."""

    model_config = _SHARED_CONFIG

    properties: List[str] = Field(
        ..., min_length=1, description="Dependent-side property names, in key order."
    )
    references_primary_key: bool = Field(
        default=True, description="Does the FK target the principal's primary key?"
    )


class NavigationInfo(BaseModel):
    """A relationship property pointing at another entity."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Navigation property name.")
    target: str = Field(..., min_length=1, description="Target entity name.")
    multiplicity: Multiplicity = Field(
        default=Multiplicity.REFERENCE, description="Single or collection valued."
    )
    direction: NavigationDirection = Field(
        ..., description="Dependent-to-principal or principal-to-dependent."
    )
    foreign_key: ForeignKeyInfo = Field(..., description="Underlying foreign key.")
    inverse: Optional[str] = Field(
        default=None, description="Inverse navigation name on the target entity."
    )

    @property
    def is_collection(self) -> bool:
        return self.multiplicity == Multiplicity.COLLECTION

    @property
    def is_dependent_to_principal(self) -> bool:
        return self.direction == NavigationDirection.DEPENDENT_TO_PRINCIPAL

    def __repr__(self) -> str:
        many: str = "*" if self.is_collection else "1"
        return f"<Navigation {self.name} → {self.target} [{many}, {self.direction.value}]>"


# ---------------------------------------------------------------------------
# Entity
# ---------------------------------------------------------------------------


class EntityInfo(BaseModel):
    """
    One generated class, derived from one table.

    Property order is kept as given; the emitter sorts by ``column_ordinal``
    and uses the given order only for import discovery.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Class name.")
    db_set_name: Optional[str] = Field(
        default=None, description="Conventional set name (defaults to `name`)."
    )
    table_name: Optional[str] = Field(default=None, description="Explicit table name.")
    schema_name: Optional[str] = Field(default=None, description="Explicit schema.")
    properties: List[PropertyInfo] = Field(default_factory=list)
    navigations: List[NavigationInfo] = Field(default_factory=list)

    _model: Optional["ModelInfo"] = PrivateAttr(default=None)

    @model_validator(mode="before")
    @classmethod
    def _default_ordinals(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        props: Any = data.get("properties")
        if not isinstance(props, list):
            return data
        filled: List[Any] = []
        for position, prop in enumerate(props):
            if isinstance(prop, dict) and prop.get("column_ordinal") is None:
                prop = {**prop, "column_ordinal": position}
            filled.append(prop)
        return {**data, "properties": filled}

    @model_validator(mode="after")
    def _validate_member_names(self) -> "EntityInfo":
        names: List[str] = [p.name for p in self.properties] + [
            n.name for n in self.navigations
        ]
        dupes: List[str] = sorted(n for n, c in Counter(names).items() if c > 1)
        if dupes:
            raise ValueError(
                f"Entity '{self.name}' declares duplicate member names: {dupes}"
            )
        return self

    @model_validator(mode="after")
    def _warn_duplicate_ordinals(self) -> "EntityInfo":
        counts: Counter = Counter(p.column_ordinal for p in self.properties)
        clashes: List[int] = sorted(o for o, c in counts.items() if c > 1)
        if clashes:
            logger.warning(
                "Entity '%s' has duplicate column ordinals %s; declaration "
                "order breaks the tie.",
                self.name,
                clashes,
            )
        return self

    @property
    def set_name(self) -> str:
        return self.db_set_name or self.name

    @property
    def model(self) -> Optional["ModelInfo"]:
        """The owning model, once attached by ``ModelInfo``."""
        return self._model

    def get_property(self, name: str) -> Optional[PropertyInfo]:
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_navigation(self, name: str) -> Optional[NavigationInfo]:
        for nav in self.navigations:
            if nav.name == name:
                return nav
        return None

    def __repr__(self) -> str:
        return (
            f"<Entity {self.name} "
            f"({len(self.properties)} props, {len(self.navigations)} navs)>"
        )


# ---------------------------------------------------------------------------
# Model (top-level container)
# ---------------------------------------------------------------------------


class ModelInfo(BaseModel):
    """
    The whole reverse-engineered model.

    Invariant: after validation every entity's ``model`` points back here and
    every navigation resolves (target, inverse, foreign-key properties).
    """

    model_config = _SHARED_CONFIG

    default_schema: Optional[str] = Field(
        default=None, description="Schema assumed when an entity names none."
    )
    entities: List[EntityInfo] = Field(default_factory=list)

    _entity_map: Dict[str, EntityInfo] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _validate_unique_entity_names(self) -> "ModelInfo":
        names: List[str] = [e.name for e in self.entities]
        dupes: List[str] = sorted(n for n, c in Counter(names).items() if c > 1)
        if dupes:
            raise ValueError(f"Duplicate entity names: {dupes}")
        return self

    @model_validator(mode="after")
    def _attach_entities(self) -> "ModelInfo":
        self._entity_map = {e.name: e for e in self.entities}
        for entity in self.entities:
            entity._model = self
        return self

    @model_validator(mode="after")
    def _validate_navigations(self) -> "ModelInfo":
        for entity in self.entities:
            for nav in entity.navigations:
                target: Optional[EntityInfo] = self._entity_map.get(nav.target)
                if target is None:
                    raise ValueError(
                        f"Navigation '{entity.name}.{nav.name}' targets unknown "
                        f"entity '{nav.target}'."
                    )
                if nav.inverse is not None and target.get_navigation(nav.inverse) is None:
                    raise ValueError(
                        f"Navigation '{entity.name}.{nav.name}' names inverse "
                        f"'{nav.inverse}' which does not exist on '{target.name}'."
                    )
                dependent: EntityInfo = entity if nav.is_dependent_to_principal else target
                missing: List[str] = [
                    p for p in nav.foreign_key.properties
                    if dependent.get_property(p) is None
                ]
                if missing:
                    raise ValueError(
                        f"Foreign key of '{entity.name}.{nav.name}' references "
                        f"properties {missing} missing on '{dependent.name}'."
                    )
        return self

    def get_entity(self, name: str) -> Optional[EntityInfo]:
        """O(1) entity lookup."""
        return self._entity_map.get(name)

    @property
    def entity_names(self) -> List[str]:
        return [e.name for e in self.entities]

    def __repr__(self) -> str:
        return f"<ModelInfo {len(self.entities)} entities, default_schema={self.default_schema!r}>"


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """Settings for one generation run."""

    model_config = _SHARED_CONFIG

    namespace: str = Field(..., min_length=1, description="Namespace of generated classes.")
    use_data_annotations: bool = Field(
        default=False, description="Emit validation/schema attributes on members."
    )
    indent_size: int = Field(default=4, ge=2, le=8, description="Indentation width.")
    file_extension: str = Field(default=".cs", description="Extension of generated files.")
    generate_manifest: bool = Field(
        default=True, description="Write a JSON manifest beside the generated files."
    )
    overwrite_existing: bool = Field(
        default=False, description="Replace files that already exist."
    )

    @field_validator("file_extension")
    @classmethod
    def _dotted_extension(cls, v: str) -> str:
        if v and not v.startswith("."):
            return f".{v}"
        return v


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "Multiplicity",
    "NavigationDirection",
    "ClrType",
    "PropertyInfo",
    "ForeignKeyInfo",
    "NavigationInfo",
    "EntityInfo",
    "ModelInfo",
    "GenerationConfig",
]

logger.debug("entitygen.models loaded — %d public symbols.", len(__all__))
