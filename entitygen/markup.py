# File: entitygen/markup.py
"""
EntityGen - Attribute Markup Builder
=====================================
Renders one C# attribute line: a name plus positional/named parameter
expressions, e.g. ``[Table("Blogs", Schema = "dbo")]``.

Parameters are added already formatted (literals quoted by the caller) and
rendered in insertion order.  A trailing ``Attribute`` on the name is dropped,
so ``MarkupBuilder("RequiredAttribute")`` renders as ``[Required]``.
"""

from __future__ import annotations

import logging
from typing import List

logger: logging.Logger = logging.getLogger("entitygen.markup")

ATTRIBUTE_SUFFIX: str = "Attribute"


def strip_suffix(name: str, suffix: str = ATTRIBUTE_SUFFIX) -> str:
    """
    Drop *suffix* from the end of *name* if present (case-sensitive).

    Examples:
        >>> strip_suffix("TableAttribute")
        'Table'
        >>> strip_suffix("Table")
        'Table'
    """
    if suffix and name.endswith(suffix):
        return name[: -len(suffix)]
    return name


class MarkupBuilder:
    """A single attribute: name plus ordered parameter expressions."""

    __slots__ = ("_name", "_parameters")

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("Attribute name must be a non-empty string.")
        self._name: str = name
        self._parameters: List[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def parameters(self) -> List[str]:
        return list(self._parameters)

    def add_parameter(self, parameter: str) -> "MarkupBuilder":
        if not parameter:
            raise ValueError(
                f"Parameter for attribute '{self._name}' must be a non-empty string."
            )
        self._parameters.append(parameter)
        return self

    def render(self) -> str:
        name: str = strip_suffix(self._name)
        if not self._parameters:
            return f"[{name}]"
        return f"[{name}({', '.join(self._parameters)})]"

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"<MarkupBuilder {self.render()}>"


__all__: List[str] = [
    "ATTRIBUTE_SUFFIX",
    "MarkupBuilder",
    "strip_suffix",
]
