"""Named-type symbols, declaration lookup and whole-program rename.

Binding is purely name-based. A simple name binds to the type with that
name whose container is the longest prefix of the reference's own
container chain; failing that, to the single candidate made visible by a
``using`` directive; failing that, to the only type with that name in the
whole solution. A qualified name binds its rightmost segment when its
qualifier resolves to the type's container; see :meth:`SymbolTable.bind_qualified`.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final

from styleenforcer.diagnostics import Location, line_and_column
from styleenforcer.errors import SymbolResolutionError
from styleenforcer.scope import namespace_name
from styleenforcer.syntax import (
    Node,
    Path,
    SyntaxKind,
    Token,
    TextSpan,
    child_positions,
    element_at,
    node_text,
    replace_element,
)
from styleenforcer.workspace import NEVER_CANCELLED, CancellationToken, Document, Solution

logger: logging.Logger = logging.getLogger(__name__)

_CANCELLATION_INTERVAL: Final[int] = 256


class TypeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"


_TYPE_KINDS: Final[dict[SyntaxKind, TypeKind]] = {
    SyntaxKind.CLASS_DECLARATION: TypeKind.CLASS,
    SyntaxKind.INTERFACE_DECLARATION: TypeKind.INTERFACE,
    SyntaxKind.STRUCT_DECLARATION: TypeKind.STRUCT,
    SyntaxKind.ENUM_DECLARATION: TypeKind.ENUM,
}


@dataclass(frozen=True, slots=True)
class DeclarationReference:
    """Where one (possibly partial) declaration of a type lives."""

    document: str
    path: Path
    namespaces: tuple[str, ...]
    identifier_index: int
    location: Location


@dataclass(frozen=True, slots=True)
class NamedTypeSymbol:
    name: str
    container: str
    type_kind: TypeKind
    declarations: tuple[DeclarationReference, ...]
    is_definition: bool = True

    @property
    def qualified_name(self) -> str:
        return f"{self.container}.{self.name}" if self.container else self.name

    @property
    def locations(self) -> tuple[Location, ...]:
        return tuple(decl.location for decl in self.declarations)


def _identifier(node: Node) -> tuple[int, Token] | None:
    for index, child in enumerate(node.children):
        if isinstance(child, Token) and child.kind is SyntaxKind.IDENTIFIER_TOKEN:
            return index, child
    return None


def _join(containers: tuple[str, ...]) -> str:
    return ".".join(containers)


def _is_prefix(container: str, chain: str) -> bool:
    return not container or chain == container or chain.startswith(container + ".")


@dataclass(frozen=True, slots=True)
class _Visit:
    """One node reached by the declaration walk."""

    node: Node
    path: Path
    full_start: int
    parent: Node | None
    containers: tuple[str, ...]
    namespaces: tuple[str, ...]


def _walk(document: Document) -> Iterator[_Visit]:
    stack: list[_Visit] = [_Visit(document.root, (), 0, None, (), ())]
    while stack:
        visit: _Visit = stack.pop()
        yield visit
        node: Node = visit.node
        containers: tuple[str, ...] = visit.containers
        namespaces: tuple[str, ...] = visit.namespaces
        ns_name: str | None = namespace_name(node)
        if ns_name is not None:
            containers = (*containers, ns_name)
            namespaces = (*namespaces, ns_name)
        elif node.kind in _TYPE_KINDS:
            found: tuple[int, Token] | None = _identifier(node)
            if found is not None:
                containers = (*containers, found[1].text)
        children: list[_Visit] = [
            _Visit(child, (*visit.path, index), start, node, containers, namespaces)
            for index, child, start in child_positions(node, visit.full_start)
            if isinstance(child, Node)
        ]
        stack.extend(reversed(children))


def _usings(document: Document) -> tuple[str, ...]:
    names: list[str] = []
    for child in document.root.children:
        if isinstance(child, Node) and child.kind is SyntaxKind.USING_DIRECTIVE:
            for part in child.children:
                if isinstance(part, Node):
                    names.append(node_text(part))
    return tuple(names)


class SymbolTable:
    """All named types declared across a solution."""

    def __init__(self, symbols: list[NamedTypeSymbol]) -> None:
        self._symbols: tuple[NamedTypeSymbol, ...] = tuple(symbols)
        self._by_qualified_name: dict[str, NamedTypeSymbol] = {
            s.qualified_name: s for s in symbols
        }
        self._by_simple_name: dict[str, list[NamedTypeSymbol]] = {}
        self._by_declaration: dict[tuple[str, Path], NamedTypeSymbol] = {}
        for symbol in symbols:
            self._by_simple_name.setdefault(symbol.name, []).append(symbol)
            for decl in symbol.declarations:
                self._by_declaration[(decl.document, decl.path)] = symbol

    def named_types(self) -> tuple[NamedTypeSymbol, ...]:
        return self._symbols

    def get(self, qualified_name: str) -> NamedTypeSymbol | None:
        return self._by_qualified_name.get(qualified_name)

    def declared_symbol(self, document_id: str, path: Path) -> NamedTypeSymbol | None:
        """The symbol declared by the node at *path*, if it declares one."""
        return self._by_declaration.get((document_id, path))

    def bind(
        self,
        simple_name: str,
        *,
        containers: tuple[str, ...],
        usings: tuple[str, ...] = (),
    ) -> NamedTypeSymbol | None:
        candidates: list[NamedTypeSymbol] = self._by_simple_name.get(simple_name, [])
        if not candidates:
            return None

        chain: str = _join(containers)
        enclosing: list[NamedTypeSymbol] = [
            c for c in candidates if _is_prefix(c.container, chain)
        ]
        if enclosing:
            longest: int = max(len(c.container) for c in enclosing)
            best: list[NamedTypeSymbol] = [c for c in enclosing if len(c.container) == longest]
            return best[0] if len(best) == 1 else None

        imported: list[NamedTypeSymbol] = [c for c in candidates if c.container in usings]
        if len(imported) == 1:
            return imported[0]

        if len(candidates) == 1:
            return candidates[0]
        return None

    def bind_qualified(
        self,
        qualifier: str,
        simple_name: str,
        *,
        containers: tuple[str, ...],
        usings: tuple[str, ...] = (),
    ) -> NamedTypeSymbol | None:
        """Resolve ``qualifier.simple_name`` written inside *containers*.

        The qualifier is tried under each enclosing container, innermost
        first, then as written, then under each ``using`` namespace. The first
        qualified name declared in the solution wins.
        """
        segments: list[str] = _join(containers).split(".") if containers else []
        prefixes: list[str] = [
            ".".join(segments[:depth]) for depth in range(len(segments), -1, -1)
        ]
        prefixes.extend(usings)
        dotted: str = f"{qualifier}.{simple_name}"
        for prefix in prefixes:
            symbol: NamedTypeSymbol | None = self._by_qualified_name.get(
                f"{prefix}.{dotted}" if prefix else dotted
            )
            if symbol is not None:
                return symbol
        return None


def build_symbol_table(
    solution: Solution,
    cancellation: CancellationToken = NEVER_CANCELLED,
) -> SymbolTable:
    """Collect every class, interface, struct and enum declaration."""
    order: list[str] = []
    found: dict[str, tuple[str, str, TypeKind, list[DeclarationReference]]] = {}

    for document in solution:
        cancellation.raise_if_cancelled()
        for visit in _walk(document):
            type_kind: TypeKind | None = _TYPE_KINDS.get(visit.node.kind)
            if type_kind is None:
                continue
            ident_at: tuple[int, Token] | None = _identifier(visit.node)
            if ident_at is None:
                continue
            index, ident = ident_at
            # Tokens before the identifier determine its offset within the node.
            start: int = visit.full_start + sum(
                child.full_width for child in visit.node.children[:index]
            ) + ident.leading_width
            line, column = line_and_column(document.text, start)
            decl: DeclarationReference = DeclarationReference(
                document=document.id,
                path=visit.path,
                namespaces=visit.namespaces,
                identifier_index=index,
                location=Location(
                    document=document.id,
                    span=TextSpan(start, len(ident.text)),
                    line=line,
                    column=column,
                ),
            )
            container: str = _join(visit.containers)
            key: str = f"{container}.{ident.text}" if container else ident.text
            if key not in found:
                order.append(key)
                found[key] = (ident.text, container, type_kind, [])
            found[key][3].append(decl)

    symbols: list[NamedTypeSymbol] = [
        NamedTypeSymbol(
            name=found[key][0],
            container=found[key][1],
            type_kind=found[key][2],
            declarations=tuple(found[key][3]),
        )
        for key in order
    ]
    logger.debug("Built symbol table with %d named types", len(symbols))
    return SymbolTable(symbols)


def _reference_sites(
    document: Document,
    table: SymbolTable,
    target: NamedTypeSymbol,
    cancellation: CancellationToken,
) -> list[Path]:
    """Paths of identifier tokens in *document* that refer to *target*."""
    usings: tuple[str, ...] = _usings(document)
    sites: list[Path] = []
    for count, visit in enumerate(_walk(document)):
        if count % _CANCELLATION_INTERVAL == 0:
            cancellation.raise_if_cancelled()
        parent: Node | None = visit.parent
        if parent is None or parent.kind in (
            SyntaxKind.NAMESPACE_DECLARATION,
            SyntaxKind.USING_DIRECTIVE,
            SyntaxKind.QUALIFIED_NAME,
        ):
            continue
        node: Node = visit.node
        if node.kind is SyntaxKind.IDENTIFIER_NAME:
            if node_text(node) != target.name:
                continue
            bound: NamedTypeSymbol | None = table.bind(
                target.name, containers=visit.containers, usings=usings,
            )
            if bound is target:
                sites.append((*visit.path, 0))
        elif node.kind is SyntaxKind.QUALIFIED_NAME:
            right: Node | Token = node.children[-1]
            if not isinstance(right, Node) or node_text(right) != target.name:
                continue
            resolved: NamedTypeSymbol | None = table.bind_qualified(
                node_text(node.children[0]),
                target.name,
                containers=visit.containers,
                usings=usings,
            )
            if resolved is target:
                sites.append((*visit.path, len(node.children) - 1, 0))
    return sites


async def rename_symbol(
    solution: Solution,
    symbol: NamedTypeSymbol,
    new_name: str,
    cancellation: CancellationToken = NEVER_CANCELLED,
) -> Solution:
    """Rename *symbol* and every reference to it across *solution*.

    Raises:
        SymbolResolutionError: If *symbol* is not declared in *solution*.
        OperationCancelledError: If *cancellation* fires; nothing is returned.
    """
    table: SymbolTable = build_symbol_table(solution, cancellation)
    target: NamedTypeSymbol | None = table.get(symbol.qualified_name)
    if target is None:
        raise SymbolResolutionError(
            f"Symbol {symbol.qualified_name!r} is not declared in the solution"
        )

    renamed: Solution = solution
    for document in solution:
        cancellation.raise_if_cancelled()
        sites: list[Path] = [
            (*decl.path, decl.identifier_index)
            for decl in target.declarations
            if decl.document == document.id
        ]
        sites.extend(_reference_sites(document, table, target, cancellation))
        if sites:
            root: Node = document.root
            for site in sites:
                old: Node | Token = element_at(root, site)
                if not isinstance(old, Token):
                    raise SymbolResolutionError(f"Rename site {site} is not a token")
                root = replace_element(root, site, replace(old, text=new_name))
            renamed = renamed.with_document(document.with_root(root))
            logger.debug(
                "Renamed %d occurrence(s) of %s in %s", len(sites), target.qualified_name, document.id,
            )
        await asyncio.sleep(0)

    cancellation.raise_if_cancelled()
    return renamed
