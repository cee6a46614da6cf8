"""EnumsMustEndInS: enum type names are plural."""
from __future__ import annotations

from styleenforcer.constants import ENUMS_MUST_END_IN_S
from styleenforcer.context import SymbolContext
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.scope import is_in_scope
from styleenforcer.symbols import NamedTypeSymbol, TypeKind


class EnumsMustEndInSRule:
    """Detect enum definitions whose name does not end in ``s``."""

    @property
    def code(self) -> str:
        return ENUMS_MUST_END_IN_S

    def check(self, *, context: SymbolContext) -> list[Diagnostic]:
        symbol: NamedTypeSymbol = context.symbol
        if not symbol.is_definition or symbol.type_kind is not TypeKind.ENUM:
            return []
        if symbol.name.lower().endswith("s"):
            return []
        if not symbol.declarations:
            return []
        if context.config.is_scoped(self.code) and not is_in_scope(
            symbol.declarations[0].namespaces, context.config.scope,
        ):
            return []

        # Partial declarations each get their own diagnostic.
        return [
            context.create_diagnostic(self.code, location)
            for location in symbol.locations
        ]
