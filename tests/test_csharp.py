"""
tests/test_csharp.py
Unit tests for entitygen.csharp (type names and literals).
"""

from __future__ import annotations

import pytest

from entitygen.csharp import CSharpFormatter
from entitygen.models import ClrType


@pytest.fixture()
def formatter() -> CSharpFormatter:
    return CSharpFormatter()


class TestTypeName:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("int", "int"),
            ("int?", "int?"),
            ("long", "long"),
            ("bool?", "bool?"),
            ("string", "string"),
            ("byte[]", "byte[]"),
            ("decimal", "decimal"),
            ("float", "float"),
            ("DateTime", "DateTime"),
            ("DateTime?", "DateTime?"),
            ("System.Guid", "Guid"),
            ("NetTopologySuite.Geometries.Point", "Point"),
        ],
    )
    def test_type_names(self, formatter: CSharpFormatter, text: str, expected: str) -> None:
        assert formatter.type_name(ClrType.parse(text)) == expected

    def test_keyword_only_for_system_types(self, formatter: CSharpFormatter) -> None:
        custom = ClrType(name="String", namespace="My.Types", is_value_type=False)
        assert formatter.type_name(custom) == "String"


class TestDelimitString:
    def test_plain(self, formatter: CSharpFormatter) -> None:
        assert formatter.delimit_string("Blogs") == '"Blogs"'

    def test_escapes_quotes_and_backslashes(self, formatter: CSharpFormatter) -> None:
        assert formatter.delimit_string('a"b\\c') == '"a\\"b\\\\c"'

    def test_multiline_uses_verbatim_literal(self, formatter: CSharpFormatter) -> None:
        assert formatter.delimit_string('line1\nsay "hi"') == '@"line1\nsay ""hi"""'

    def test_empty(self, formatter: CSharpFormatter) -> None:
        assert formatter.delimit_string("") == '""'


class TestLiteral:
    def test_int(self, formatter: CSharpFormatter) -> None:
        assert formatter.literal(200) == "200"

    def test_bool(self, formatter: CSharpFormatter) -> None:
        assert formatter.literal(True) == "true"
        assert formatter.literal(False) == "false"

    def test_str(self, formatter: CSharpFormatter) -> None:
        assert formatter.literal("x") == '"x"'

    def test_unsupported(self, formatter: CSharpFormatter) -> None:
        with pytest.raises(ValueError):
            formatter.literal(1.5)
