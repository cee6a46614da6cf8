"""JSON (de)serialization of syntax trees.

A tree file holds ``{"version": 1, "root": <element>}`` where an element is
one of::

    {"kind": "ClassDeclaration", "children": [...]}
    {"kind": "IdentifierToken", "text": "Foo", "leading": [...], "trailing": [...]}
    {"kind": "WhitespaceTrivia", "text": " "}

Loading only rebuilds a tree somebody else produced; nothing here reads
source text.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Final

from styleenforcer.errors import TreeFormatError
from styleenforcer.syntax import (
    NODE_KINDS,
    TOKEN_KINDS,
    TRIVIA_KINDS,
    Element,
    Node,
    SyntaxKind,
    Token,
    Trivia,
)
from styleenforcer.workspace import Document

FORMAT_VERSION: Final[int] = 1


def _kind(data: dict[str, Any], allowed: frozenset[SyntaxKind], *, what: str) -> SyntaxKind:
    raw: Any = data.get("kind")
    if not isinstance(raw, str):
        raise TreeFormatError(f"{what} is missing a string 'kind'")
    try:
        kind: SyntaxKind = SyntaxKind(raw)
    except ValueError:
        raise TreeFormatError(f"Unknown {what} kind: {raw!r}") from None
    if kind not in allowed:
        raise TreeFormatError(f"{raw!r} is not a {what} kind")
    return kind


def _text(data: dict[str, Any], *, what: str) -> str:
    text: Any = data.get("text", "")
    if not isinstance(text, str):
        raise TreeFormatError(f"{what} 'text' must be a string")
    return text


def _trivia_list(value: Any, *, field_name: str) -> tuple[Trivia, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise TreeFormatError(f"Token '{field_name}' must be a list")
    result: list[Trivia] = []
    for item in value:
        if not isinstance(item, dict):
            raise TreeFormatError(f"Trivia must be an object, got {type(item).__name__}")
        result.append(Trivia(_kind(item, TRIVIA_KINDS, what="trivia"), _text(item, what="trivia")))
    return tuple(result)


def element_from_dict(data: Any) -> Element:
    """Rebuild a node or token from its JSON-compatible form.

    Raises:
        TreeFormatError: On an unknown kind or a malformed element.
    """
    if not isinstance(data, dict):
        raise TreeFormatError(f"Element must be an object, got {type(data).__name__}")
    if "children" in data:
        kind: SyntaxKind = _kind(data, NODE_KINDS, what="node")
        children: Any = data["children"]
        if not isinstance(children, list):
            raise TreeFormatError(f"{kind.value} 'children' must be a list")
        return Node(kind=kind, children=tuple(element_from_dict(c) for c in children))

    kind = _kind(data, TOKEN_KINDS, what="token")
    return Token(
        kind=kind,
        text=_text(data, what="token"),
        leading=_trivia_list(data.get("leading"), field_name="leading"),
        trailing=_trivia_list(data.get("trailing"), field_name="trailing"),
    )


def element_to_dict(element: Element) -> dict[str, Any]:
    if isinstance(element, Node):
        return {
            "kind": element.kind.value,
            "children": [element_to_dict(child) for child in element.children],
        }
    data: dict[str, Any] = {"kind": element.kind.value, "text": element.text}
    if element.leading:
        data["leading"] = [{"kind": t.kind.value, "text": t.text} for t in element.leading]
    if element.trailing:
        data["trailing"] = [{"kind": t.kind.value, "text": t.text} for t in element.trailing]
    return data


def loads_document(text: str, *, document_id: str) -> Document:
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise TreeFormatError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(data, dict):
        raise TreeFormatError("Tree file must contain a JSON object")
    version: Any = data.get("version")
    if version != FORMAT_VERSION:
        raise TreeFormatError(f"Unsupported tree format version: {version!r}")

    root: Element = element_from_dict(data.get("root"))
    if not isinstance(root, Node):
        raise TreeFormatError("Tree root must be a node")
    return Document(id=document_id, root=root)


def dumps_document(document: Document) -> str:
    data: dict[str, Any] = {"version": FORMAT_VERSION, "root": element_to_dict(document.root)}
    return json.dumps(data, indent=2) + "\n"


def load_document(path: Path) -> Document:
    """Read a tree file. The document id is the path as given.

    Raises:
        TreeFormatError: If the file cannot be read or is not a valid tree.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TreeFormatError(f"Cannot read {path}: {e}") from e
    return loads_document(text, document_id=str(path))


def dump_document(document: Document, path: Path) -> None:
    path.write_text(dumps_document(document), encoding="utf-8")
