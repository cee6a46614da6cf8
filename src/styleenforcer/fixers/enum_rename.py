"""Fix for EnumsMustEndInS: rename the enum to its plural everywhere."""
from __future__ import annotations

import logging

from styleenforcer.diagnostics import Diagnostic
from styleenforcer.errors import SymbolResolutionError
from styleenforcer.fixers._util import enclosing_paths, token_at
from styleenforcer.symbols import NamedTypeSymbol, SymbolTable, build_symbol_table, rename_symbol
from styleenforcer.syntax import Node, Path, SyntaxKind, TokenLocation, ancestors
from styleenforcer.workspace import CancellationToken, Document, Solution

logger: logging.Logger = logging.getLogger(__name__)


def _enum_declaration_path(document: Document, diagnostic: Diagnostic) -> Path | None:
    found: TokenLocation | None = token_at(document, diagnostic)
    if found is None:
        return None
    nodes: list[Node] = ancestors(document.root, found.path)
    for node, path in zip(nodes, enclosing_paths(found.path)):
        if node.kind is SyntaxKind.ENUM_DECLARATION:
            return path
    return None


async def pluralize_enum_name(
    *,
    document: Document,
    diagnostic: Diagnostic,
    solution: Solution,
    cancellation: CancellationToken,
) -> Solution:
    """Rename the enum declared at *diagnostic* to ``name + "s"``.

    Raises:
        SymbolResolutionError: No enum symbol is declared at the location.
        OperationCancelledError: If *cancellation* fires.
    """
    cancellation.raise_if_cancelled()
    path: Path | None = _enum_declaration_path(document, diagnostic)
    if path is None:
        raise SymbolResolutionError(
            f"No enum declaration encloses {document.id} at offset "
            f"{diagnostic.location.span.start}"
        )

    table: SymbolTable = build_symbol_table(solution, cancellation)
    symbol: NamedTypeSymbol | None = table.declared_symbol(document.id, path)
    if symbol is None:
        raise SymbolResolutionError(
            f"Could not resolve the enum declared in {document.id} at path {path}"
        )

    new_name: str = symbol.name + "s"
    logger.debug("Renaming %s to %s", symbol.qualified_name, new_name)
    return await rename_symbol(solution, symbol, new_name, cancellation)
