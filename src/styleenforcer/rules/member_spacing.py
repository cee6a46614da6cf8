"""MembersMustBePrecededByEmptyLine: blank line between container members."""
from __future__ import annotations

from typing import Final

from styleenforcer.constants import MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE
from styleenforcer.context import SyntaxNodeContext
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.scope import is_in_scope, namespace_names
from styleenforcer.syntax import (
    SyntaxKind,
    TextSpan,
    Token,
    Trivia,
    child_positions,
    leading_trivia,
)

_SPACED_MEMBER_KINDS: Final[frozenset[SyntaxKind]] = frozenset({
    SyntaxKind.INTERFACE_DECLARATION,
    SyntaxKind.CLASS_DECLARATION,
    SyntaxKind.ENUM_DECLARATION,
    SyntaxKind.NAMESPACE_DECLARATION,
    SyntaxKind.METHOD_DECLARATION,
})


def has_blank_line(leading: tuple[Trivia, ...]) -> bool:
    """True if *leading* contains at least one fully blank line.

    The previous token's trailing trivia ends its line, so the start of the
    leading trivia counts as a line start.
    """
    if not leading:
        return False
    if leading[0].kind is SyntaxKind.END_OF_LINE_TRIVIA:
        return True
    for index in range(-1, len(leading) - 1):
        if index >= 0 and leading[index].kind is not SyntaxKind.END_OF_LINE_TRIVIA:
            continue
        for trivia in leading[index + 1:]:
            if trivia.kind is SyntaxKind.END_OF_LINE_TRIVIA:
                return True
            if trivia.kind is not SyntaxKind.WHITESPACE_TRIVIA:
                break
    return False


class MembersMustBePrecededByEmptyLineRule:
    """Detect members that directly follow the previous member's last line."""

    @property
    def code(self) -> str:
        return MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE

    @property
    def kinds(self) -> frozenset[SyntaxKind]:
        return frozenset({
            SyntaxKind.NAMESPACE_DECLARATION,
            SyntaxKind.CLASS_DECLARATION,
            SyntaxKind.INTERFACE_DECLARATION,
        })

    def check(self, *, context: SyntaxNodeContext) -> list[Diagnostic]:
        if context.config.is_scoped(self.code) and not is_in_scope(
            namespace_names(context.ancestors_and_self()), context.config.scope,
        ):
            return []

        diagnostics: list[Diagnostic] = []
        found_open_brace: bool = False
        found_first_member: bool = False
        for _, child, start in child_positions(context.node, context.full_start):
            if not found_open_brace:
                found_open_brace = child.kind is SyntaxKind.OPEN_BRACE_TOKEN
                continue
            if isinstance(child, Token):
                continue
            # The first member may sit directly under the brace.
            if not found_first_member:
                found_first_member = True
                continue
            if child.kind not in _SPACED_MEMBER_KINDS:
                continue
            if has_blank_line(leading_trivia(child)):
                continue

            first: Token | None = child.first_token()
            if first is None:
                continue
            span: TextSpan = TextSpan(start + first.leading_width, len(first.text))
            diagnostics.append(context.create_diagnostic(self.code, span))
        return diagnostics
