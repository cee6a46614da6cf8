"""Output formatters for styleenforcer diagnostics."""
from __future__ import annotations

import json
from typing import Protocol

from styleenforcer.constants import OutputFormat
from styleenforcer.diagnostics import Diagnostic, DiagnosticCollection
from styleenforcer.types import StyleConfig


class Formatter(Protocol):
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: StyleConfig,
    ) -> str: ...


def _underline(diagnostic: Diagnostic, source_line: str) -> str:
    """Carets under the part of *source_line* the diagnostic's span covers.

    Spans running past the end of the line are cut there; empty spans, such
    as the end-of-file position, still get one caret.
    """
    start: int = max(0, diagnostic.location.column - 1)
    width: int = min(diagnostic.location.span.length, len(source_line) - start)
    return " " * start + "^" * max(1, width)


class TextFormatter:
    """Plain-text lines; ``show_source`` adds the source line and properties."""

    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: StyleConfig,
    ) -> str:
        lines: list[str] = []

        for diag in diagnostics.sorted:
            severity_str: str = diag.severity.value.upper()
            lines.append(
                f"{diag.location.document}:{diag.location.line}:{diag.location.column}: "
                f"{severity_str} [{diag.code}] {diag.message}"
            )
            if not config.show_source:
                continue

            details: list[str] = []
            if diag.source_line is not None:
                details.append(diag.source_line)
                details.append(_underline(diag, diag.source_line))
            # e.g. TargetComment
            details.extend(f"{key}: {value}" for key, value in sorted(diag.properties.items()))
            if details:
                lines.extend(f"    {detail}" for detail in details)
                lines.append("")

        return "\n".join(lines)


class JsonFormatter:
    def format(
        self,
        *,
        diagnostics: DiagnosticCollection,
        config: StyleConfig,
    ) -> str:
        items: list[dict[str, object]] = []

        for diag in diagnostics.sorted:
            item: dict[str, object] = {
                "document": diag.location.document,
                "line": diag.location.line,
                "column": diag.location.column,
                "start": diag.location.span.start,
                "length": diag.location.span.length,
                "code": diag.code,
                "severity": diag.severity.value,
                "message": diag.message,
                "properties": dict(diag.properties),
            }
            if config.show_source:
                item["source_line"] = diag.source_line
            items.append(item)

        return json.dumps(items, indent=2)


def get_formatter(*, output_format: OutputFormat) -> Formatter:
    if output_format == OutputFormat.JSON:
        return JsonFormatter()
    return TextFormatter()


def format_summary(*, diagnostics: DiagnosticCollection) -> str:
    error_count: int = diagnostics.error_count
    warning_count: int = diagnostics.warning_count
    info_count: int = diagnostics.info_count

    parts: list[str] = []
    if error_count > 0:
        parts.append(f"{error_count} error{'s' if error_count != 1 else ''}")
    if warning_count > 0:
        parts.append(f"{warning_count} warning{'s' if warning_count != 1 else ''}")
    if info_count > 0:
        parts.append(f"{info_count} message{'s' if info_count != 1 else ''}")

    if not parts:
        return "No issues found."

    return f"Found {', '.join(parts)}."
