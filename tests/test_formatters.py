"""Tests for styleenforcer output formatters."""
from __future__ import annotations

import json
from types import MappingProxyType

from styleenforcer.constants import OutputFormat, Severity
from styleenforcer.diagnostics import Diagnostic, DiagnosticCollection, Location
from styleenforcer.formatters import (
    JsonFormatter,
    TextFormatter,
    format_summary,
    get_formatter,
)
from styleenforcer.syntax import TextSpan
from styleenforcer.types import StyleConfig


def _make_diagnostic(
    *,
    document: str = "trees/foo.json",
    span: TextSpan = TextSpan(40, 1),
    line: int = 1,
    column: int = 1,
    code: str = "ClosingBraceMustHaveComment",
    message: str = "Closing brace must be followed by the comment '// End Foo class'",
    severity: Severity = Severity.ERROR,
    source_line: str | None = None,
    properties: dict[str, str] | None = None,
) -> Diagnostic:
    return Diagnostic(
        descriptor_id=code,
        location=Location(document=document, span=span, line=line, column=column),
        message=message,
        severity=severity,
        properties=MappingProxyType(properties or {}),
        source_line=source_line,
    )


class TestTextFormatter:
    def test_single_diagnostic(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(line=5, column=5))
        config: StyleConfig = StyleConfig(show_source=False)
        result: str = TextFormatter().format(diagnostics=collection, config=config)
        assert result == (
            "trees/foo.json:5:5: ERROR [ClosingBraceMustHaveComment] "
            "Closing brace must be followed by the comment '// End Foo class'"
        )

    def test_multiple_diagnostics(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(line=5))
        collection.add(diagnostic=_make_diagnostic(
            line=10, code="FileMustEndInNewLine", severity=Severity.WARNING,
        ))
        config: StyleConfig = StyleConfig(show_source=False)
        result: str = TextFormatter().format(diagnostics=collection, config=config)
        assert "ERROR [ClosingBraceMustHaveComment]" in result
        assert "WARNING [FileMustEndInNewLine]" in result

    def test_with_source_line(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(line=5, column=5, source_line="    }"))
        config: StyleConfig = StyleConfig(show_source=True)
        result: str = TextFormatter().format(diagnostics=collection, config=config)
        lines: list[str] = result.split("\n")
        assert lines[1] == "        }"
        assert lines[2] == "        ^"

    def test_underline_covers_span(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(
            column=6, span=TextSpan(5, 5), source_line="enum Color",
        ))
        result: str = TextFormatter().format(
            diagnostics=collection, config=StyleConfig(show_source=True),
        )
        assert result.split("\n")[2] == "         ^^^^^"

    def test_empty_span_past_line_end_gets_one_caret(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(
            column=2, span=TextSpan(40, 0), source_line="}",
        ))
        result: str = TextFormatter().format(
            diagnostics=collection, config=StyleConfig(show_source=True),
        )
        assert result.split("\n")[2] == "     ^"

    def test_properties_shown_with_source(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(
            line=5, column=5, source_line="    }",
            properties={"TargetComment": "// End Foo class"},
        ))
        result: str = TextFormatter().format(
            diagnostics=collection, config=StyleConfig(show_source=True),
        )
        assert result.split("\n")[1:4] == [
            "        }",
            "        ^",
            "    TargetComment: // End Foo class",
        ]

    def test_properties_hidden_without_source(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(
            properties={"TargetComment": "// End Foo class"},
        ))
        result: str = TextFormatter().format(
            diagnostics=collection, config=StyleConfig(show_source=False),
        )
        assert "TargetComment" not in result

    def test_without_source(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(source_line="class Foo"))
        config: StyleConfig = StyleConfig(show_source=False)
        result: str = TextFormatter().format(diagnostics=collection, config=config)
        assert "class Foo" not in result

    def test_empty_collection(self) -> None:
        result: str = TextFormatter().format(
            diagnostics=DiagnosticCollection(), config=StyleConfig(),
        )
        assert result == ""


class TestJsonFormatter:
    def test_single_diagnostic(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(
            line=5, column=5, properties={"TargetComment": "// End Foo class"},
        ))
        config: StyleConfig = StyleConfig(show_source=False)
        result: str = JsonFormatter().format(diagnostics=collection, config=config)
        data: list[dict[str, object]] = json.loads(result)
        assert data == [{
            "document": "trees/foo.json",
            "line": 5,
            "column": 5,
            "start": 40,
            "length": 1,
            "code": "ClosingBraceMustHaveComment",
            "severity": "error",
            "message": "Closing brace must be followed by the comment '// End Foo class'",
            "properties": {"TargetComment": "// End Foo class"},
        }]

    def test_source_line_included_when_show_source(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(source_line="    }"))
        result: str = JsonFormatter().format(
            diagnostics=collection, config=StyleConfig(show_source=True),
        )
        assert json.loads(result)[0]["source_line"] == "    }"

    def test_empty_collection(self) -> None:
        result: str = JsonFormatter().format(
            diagnostics=DiagnosticCollection(), config=StyleConfig(),
        )
        assert json.loads(result) == []


class TestGetFormatter:
    def test_text(self) -> None:
        assert isinstance(get_formatter(output_format=OutputFormat.TEXT), TextFormatter)

    def test_json(self) -> None:
        assert isinstance(get_formatter(output_format=OutputFormat.JSON), JsonFormatter)


class TestFormatSummary:
    def test_errors_only(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(severity=Severity.ERROR))
        assert format_summary(diagnostics=collection) == "Found 1 error."

    def test_mixed(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(severity=Severity.ERROR))
        collection.add(diagnostic=_make_diagnostic(severity=Severity.ERROR))
        collection.add(diagnostic=_make_diagnostic(severity=Severity.WARNING))
        collection.add(diagnostic=_make_diagnostic(severity=Severity.INFO))
        assert format_summary(diagnostics=collection) == "Found 2 errors, 1 warning, 1 message."

    def test_empty(self) -> None:
        assert format_summary(diagnostics=DiagnosticCollection()) == "No issues found."

    def test_plural(self) -> None:
        collection: DiagnosticCollection = DiagnosticCollection()
        collection.add(diagnostic=_make_diagnostic(severity=Severity.HIDDEN))
        collection.add(diagnostic=_make_diagnostic(severity=Severity.INFO))
        assert format_summary(diagnostics=collection) == "Found 2 messages."
