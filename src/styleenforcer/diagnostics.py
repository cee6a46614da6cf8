"""Diagnostic data model for styleenforcer."""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from styleenforcer.constants import Severity
from styleenforcer.syntax import TextSpan


@dataclass(frozen=True, slots=True)
class Location:
    """Position of a diagnostic. ``line`` and ``column`` are 1-based."""

    document: str
    span: TextSpan
    line: int
    column: int


def line_and_column(text: str, position: int) -> tuple[int, int]:
    """Convert an offset into *text* to a 1-based line and column."""
    position = max(0, min(position, len(text)))
    line: int = text.count("\n", 0, position) + 1
    line_start: int = text.rfind("\n", 0, position) + 1
    return line, position - line_start + 1


def source_line_at(text: str, line: int) -> str | None:
    lines: list[str] = text.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single rule violation. Never mutated after creation."""

    descriptor_id: str
    location: Location
    message: str
    severity: Severity
    properties: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    source_line: str | None = None

    @property
    def code(self) -> str:
        return self.descriptor_id


@dataclass(slots=True)
class DiagnosticCollection:
    """Mutable collection of diagnostics with sorting and counting."""

    _diagnostics: list[Diagnostic] = field(default_factory=list)

    def add(self, *, diagnostic: Diagnostic) -> None:
        """Add a single diagnostic."""
        self._diagnostics.append(diagnostic)

    def add_all(self, *, diagnostics: list[Diagnostic]) -> None:
        """Add multiple diagnostics."""
        self._diagnostics.extend(diagnostics)

    @property
    def sorted(self) -> list[Diagnostic]:
        """Return diagnostics sorted by document, line, column."""
        return sorted(
            self._diagnostics,
            key=lambda d: (d.location.document, d.location.line, d.location.column),
        )

    @property
    def has_errors(self) -> bool:
        """Return True if any diagnostic has ERROR severity."""
        return any(d.severity == Severity.ERROR for d in self._diagnostics)

    @property
    def error_count(self) -> int:
        return sum(1 for d in self._diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self._diagnostics if d.severity == Severity.WARNING)

    @property
    def info_count(self) -> int:
        return sum(
            1 for d in self._diagnostics if d.severity in (Severity.INFO, Severity.HIDDEN)
        )

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)
