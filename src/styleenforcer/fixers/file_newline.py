"""Fix for FileMustEndInNewLine: terminate the last line."""
from __future__ import annotations

from styleenforcer.diagnostics import Diagnostic
from styleenforcer.factory import end_of_line
from styleenforcer.syntax import (
    Element,
    Node,
    SyntaxKind,
    Token,
    trailing_trivia,
    with_trailing_trivia,
)
from styleenforcer.workspace import CancellationToken, Document, Solution


async def add_final_newline(
    *,
    document: Document,
    diagnostic: Diagnostic,
    solution: Solution,
    cancellation: CancellationToken,
) -> Document:
    """Append a line break to the trailing trivia of the unit's content.

    The end-of-file marker never carries trailing trivia, so the break goes
    on the last element before it. A unit without that shape is returned
    unchanged.
    """
    cancellation.raise_if_cancelled()
    root: Node = document.root
    if len(root.children) < 2:
        return document
    end_of_file: Element = root.children[-1]
    if not isinstance(end_of_file, Token) or end_of_file.kind is not SyntaxKind.END_OF_FILE_TOKEN:
        return document

    content: Element = root.children[-2]
    fixed: Element = with_trailing_trivia(content, (*trailing_trivia(content), end_of_line()))
    children: list[Element] = list(root.children)
    children[-2] = fixed
    return document.with_root(root.with_children(tuple(children)))
