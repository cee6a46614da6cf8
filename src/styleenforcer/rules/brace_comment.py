"""ClosingBraceMustHaveComment: label the closing brace of containers."""
from __future__ import annotations

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    TARGET_COMMENT_PROPERTY,
    CommentLabel,
)
from styleenforcer.context import SyntaxNodeContext
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.scope import is_in_scope, namespace_name, namespace_names
from styleenforcer.syntax import (
    DECLARATION_KEYWORD_KINDS,
    Node,
    SyntaxKind,
    TextSpan,
    Token,
    Trivia,
)


def _first_token_of(node: Node, kinds: frozenset[SyntaxKind]) -> Token | None:
    for child in node.children:
        if isinstance(child, Token) and child.kind in kinds:
            return child
    return None


def expected_comment(node: Node, *, label: CommentLabel) -> str | None:
    """The comment expected after *node*'s closing brace, or ``None``."""
    if label is CommentLabel.KIND:
        return f"// End {node.kind.value.removesuffix('Declaration')}"

    keyword: Token | None = _first_token_of(node, DECLARATION_KEYWORD_KINDS)
    declared: str | None
    match node.kind:
        case SyntaxKind.NAMESPACE_DECLARATION:
            declared = namespace_name(node)
        case (
            SyntaxKind.CLASS_DECLARATION
            | SyntaxKind.INTERFACE_DECLARATION
            | SyntaxKind.STRUCT_DECLARATION
            | SyntaxKind.ENUM_DECLARATION
        ):
            ident: Token | None = _first_token_of(
                node, frozenset({SyntaxKind.IDENTIFIER_TOKEN}),
            )
            declared = ident.text if ident is not None else None
        case _:
            return None

    if declared is None or keyword is None:
        return None
    return f"// End {declared} {keyword.text}"


class ClosingBraceMustHaveCommentRule:
    """Detect closing braces not followed by their ``// End ...`` comment."""

    @property
    def code(self) -> str:
        return CLOSING_BRACE_MUST_HAVE_COMMENT

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

        node: Node = context.node
        close_brace: Token | None = node.last_token()
        if close_brace is None or close_brace.kind is not SyntaxKind.CLOSE_BRACE_TOKEN:
            return []

        target: str | None = expected_comment(
            node, label=context.config.rules.closing_brace.label,
        )
        if target is None:
            return []

        if close_brace.trailing:
            first: Trivia = close_brace.trailing[0]
            if (
                first.kind is SyntaxKind.SINGLE_LINE_COMMENT_TRIVIA
                and first.text.casefold() == target.casefold()
            ):
                return []

        start: int = (
            context.full_start
            + node.full_width
            - close_brace.full_width
            + close_brace.leading_width
        )
        return [
            context.create_diagnostic(
                self.code,
                TextSpan(start, len(close_brace.text)),
                properties={TARGET_COMMENT_PROPERTY: target},
            ),
        ]
