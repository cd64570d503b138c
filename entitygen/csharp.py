# File: entitygen/csharp.py
"""
EntityGen - C# Name & Literal Formatting
=========================================
Turns ``ClrType`` values into the type names that appear in generated C#
source, and Python values into C# literal expressions.

    ClrType(Int32)                    →  int
    ClrType(Int32, is_nullable=True)  →  int?
    ClrType(Byte, is_array=True)      →  byte[]
    ClrType(Point, NetTopologySuite…) →  Point       (namespace is imported)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from entitygen.models import ClrType

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("entitygen.csharp")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# System type name -> C# keyword
_BUILTIN_KEYWORDS: Dict[str, str] = {
    "Boolean": "bool",
    "Byte": "byte",
    "SByte": "sbyte",
    "Char": "char",
    "Decimal": "decimal",
    "Double": "double",
    "Single": "float",
    "Int32": "int",
    "UInt32": "uint",
    "Int64": "long",
    "UInt64": "ulong",
    "Int16": "short",
    "UInt16": "ushort",
    "Object": "object",
    "String": "string",
}

_STRING_ESCAPES: Dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\t": "\\t",
    "\0": "\\0",
}


class CSharpFormatter:
    """Stateless C# type-name and literal renderer."""

    def type_name(self, clr_type: ClrType) -> str:
        """Return the C# spelling of *clr_type* as used in a member declaration."""
        if clr_type.namespace == "System" and clr_type.name in _BUILTIN_KEYWORDS:
            base: str = _BUILTIN_KEYWORDS[clr_type.name]
        else:
            base = clr_type.name

        if clr_type.is_array:
            return f"{base}[]"
        if clr_type.is_nullable:
            return f"{base}?"
        return base

    def delimit_string(self, value: str) -> str:
        """
        Quote *value* as a C# string literal.

        Values spanning several lines use a verbatim ``@"..."`` literal with
        doubled quotes; everything else is a regular escaped literal.
        """
        if "\n" in value or "\r" in value:
            return '@"' + value.replace('"', '""') + '"'
        return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in value) + '"'

    def literal(self, value: Any) -> str:
        """Render a Python ``bool``, ``int`` or ``str`` as a C# literal."""
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return self.delimit_string(value)
        raise ValueError(
            f"Cannot render a C# literal for value of type {type(value).__name__}."
        )


__all__: List[str] = ["CSharpFormatter"]

logger.debug("entitygen.csharp loaded.")
