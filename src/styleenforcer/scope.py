"""Scope gate: restrict analysis to code inside matching namespaces."""
from __future__ import annotations

from collections.abc import Iterable

from styleenforcer.syntax import Node, SyntaxKind, node_text


def namespace_name(node: Node) -> str | None:
    """Return the declared name of a namespace declaration, else ``None``."""
    if node.kind is not SyntaxKind.NAMESPACE_DECLARATION:
        return None
    for child in node.children:
        if isinstance(child, Node) and child.kind in (
            SyntaxKind.IDENTIFIER_NAME,
            SyntaxKind.QUALIFIED_NAME,
        ):
            return node_text(child)
    return None


def namespace_names(nodes: Iterable[Node]) -> list[str]:
    """Names of the namespace declarations among *nodes*, in order."""
    names: list[str] = []
    for node in nodes:
        found: str | None = namespace_name(node)
        if found is not None:
            names.append(found)
    return names


def is_in_scope(names: Iterable[str], marker: str) -> bool:
    """True if any namespace name contains *marker*, ignoring case.

    An empty marker disables gating.
    """
    if not marker:
        return True
    needle: str = marker.casefold()
    return any(needle in name.casefold() for name in names)
