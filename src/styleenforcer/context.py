"""Per-invocation contexts handed to rules by the host driver."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from styleenforcer.constants import Severity
from styleenforcer.diagnostics import Diagnostic, Location, line_and_column, source_line_at
from styleenforcer.syntax import Node, Path, TextSpan
from styleenforcer.types import StyleConfig
from styleenforcer.workspace import Document, Solution

if TYPE_CHECKING:
    from styleenforcer.descriptors import DiagnosticDescriptor
    from styleenforcer.registry import Registry
    from styleenforcer.symbols import NamedTypeSymbol, SymbolTable


def create_diagnostic(
    *,
    descriptor: DiagnosticDescriptor,
    document: Document,
    span: TextSpan,
    config: StyleConfig,
    properties: Mapping[str, str] | None = None,
) -> Diagnostic:
    """Build a diagnostic for *descriptor* at *span* of *document*."""
    line, column = line_and_column(document.text, span.start)
    severity: Severity = config.get_severity(descriptor.id, descriptor.default_severity)
    return Diagnostic(
        descriptor_id=descriptor.id,
        location=Location(document=document.id, span=span, line=line, column=column),
        message=descriptor.message_format,
        severity=severity,
        properties=MappingProxyType(dict(properties or {})),
        source_line=source_line_at(document.text, line),
    )


@dataclass(frozen=True, slots=True)
class SyntaxNodeContext:
    """A node reached by the tree walk, with everything enclosing it."""

    document: Document
    node: Node
    path: Path
    full_start: int
    # Enclosing nodes, innermost first; empty for the root.
    ancestors: tuple[Node, ...]
    registry: Registry
    config: StyleConfig

    def ancestors_and_self(self) -> tuple[Node, ...]:
        return (self.node, *self.ancestors)

    def create_diagnostic(
        self,
        rule_id: str,
        span: TextSpan,
        *,
        properties: Mapping[str, str] | None = None,
    ) -> Diagnostic:
        return create_diagnostic(
            descriptor=self.registry.get_descriptor(rule_id),
            document=self.document,
            span=span,
            config=self.config,
            properties=properties,
        )


@dataclass(frozen=True, slots=True)
class SymbolContext:
    """A named-type symbol offered to symbol rules."""

    solution: Solution
    symbol: NamedTypeSymbol
    symbols: SymbolTable
    registry: Registry
    config: StyleConfig

    def create_diagnostic(self, rule_id: str, location: Location) -> Diagnostic:
        return create_diagnostic(
            descriptor=self.registry.get_descriptor(rule_id),
            document=self.solution.get_document(location.document),
            span=location.span,
            config=self.config,
        )
