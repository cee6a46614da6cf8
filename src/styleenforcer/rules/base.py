"""Rule protocols for styleenforcer."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from styleenforcer.context import SymbolContext, SyntaxNodeContext
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.syntax import SyntaxKind


@runtime_checkable
class SyntaxRule(Protocol):
    """Structural interface for rules run on nodes of given kinds."""

    @property
    def code(self) -> str: ...

    @property
    def kinds(self) -> frozenset[SyntaxKind]: ...

    def check(self, *, context: SyntaxNodeContext) -> list[Diagnostic]: ...


@runtime_checkable
class SymbolRule(Protocol):
    """Structural interface for rules run on named-type symbols."""

    @property
    def code(self) -> str: ...

    def check(self, *, context: SymbolContext) -> list[Diagnostic]: ...
