"""FileMustEndInNewLine: the last line of a unit must be terminated."""
from __future__ import annotations

from styleenforcer.constants import FILE_MUST_END_IN_NEW_LINE
from styleenforcer.context import SyntaxNodeContext
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.scope import is_in_scope, namespace_names
from styleenforcer.syntax import (
    Element,
    Node,
    SyntaxKind,
    TextSpan,
    Token,
    Trivia,
    trailing_trivia,
)


class FileMustEndInNewLineRule:
    """Detect units whose final content is not followed by a line break."""

    @property
    def code(self) -> str:
        return FILE_MUST_END_IN_NEW_LINE

    @property
    def kinds(self) -> frozenset[SyntaxKind]:
        return frozenset({SyntaxKind.COMPILATION_UNIT})

    def check(self, *, context: SyntaxNodeContext) -> list[Diagnostic]:
        root: Node = context.node
        if context.config.is_scoped(self.code) and not is_in_scope(
            namespace_names(root.child_nodes()), context.config.scope,
        ):
            return []

        children: tuple[Element, ...] = root.children
        if len(children) < 2:
            return []
        end_of_file: Element = children[-1]
        if not isinstance(end_of_file, Token) or end_of_file.kind is not SyntaxKind.END_OF_FILE_TOKEN:
            return []

        trailing: tuple[Trivia, ...] = trailing_trivia(children[-2])
        if trailing and trailing[-1].kind is SyntaxKind.END_OF_LINE_TRIVIA:
            return []

        start: int = (
            context.full_start + root.full_width - end_of_file.full_width + end_of_file.leading_width
        )
        return [context.create_diagnostic(self.code, TextSpan(start, 0))]
