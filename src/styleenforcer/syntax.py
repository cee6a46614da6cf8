"""Immutable syntax tree model: nodes, tokens and trivia.

Trees are built once (by a host, by :mod:`styleenforcer.factory` or by
:mod:`styleenforcer.serde`) and never mutated. Edits go through
:func:`replace_element`, which rebuilds the spine from the root down to the
replaced element and shares every untouched subtree.

Positions are offsets into the full text of the tree, that is the
concatenation of every token's leading trivia, text and trailing trivia.
"""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum
from functools import cached_property
from typing import Final, TypeAlias


class SyntaxKind(Enum):
    """Closed kind taxonomy for nodes, tokens and trivia."""

    # Nodes
    COMPILATION_UNIT = "CompilationUnit"
    USING_DIRECTIVE = "UsingDirective"
    NAMESPACE_DECLARATION = "NamespaceDeclaration"
    CLASS_DECLARATION = "ClassDeclaration"
    INTERFACE_DECLARATION = "InterfaceDeclaration"
    STRUCT_DECLARATION = "StructDeclaration"
    ENUM_DECLARATION = "EnumDeclaration"
    ENUM_MEMBER_DECLARATION = "EnumMemberDeclaration"
    METHOD_DECLARATION = "MethodDeclaration"
    FIELD_DECLARATION = "FieldDeclaration"
    PROPERTY_DECLARATION = "PropertyDeclaration"
    PARAMETER_LIST = "ParameterList"
    PARAMETER = "Parameter"
    BLOCK = "Block"
    ATTRIBUTE_LIST = "AttributeList"
    IDENTIFIER_NAME = "IdentifierName"
    QUALIFIED_NAME = "QualifiedName"
    PREDEFINED_TYPE = "PredefinedType"

    # Tokens
    NAMESPACE_KEYWORD = "NamespaceKeyword"
    CLASS_KEYWORD = "ClassKeyword"
    INTERFACE_KEYWORD = "InterfaceKeyword"
    STRUCT_KEYWORD = "StructKeyword"
    ENUM_KEYWORD = "EnumKeyword"
    USING_KEYWORD = "UsingKeyword"
    MODIFIER_KEYWORD = "ModifierKeyword"
    PREDEFINED_TYPE_KEYWORD = "PredefinedTypeKeyword"
    IDENTIFIER_TOKEN = "IdentifierToken"
    OPEN_BRACE_TOKEN = "OpenBraceToken"
    CLOSE_BRACE_TOKEN = "CloseBraceToken"
    OPEN_PAREN_TOKEN = "OpenParenToken"
    CLOSE_PAREN_TOKEN = "CloseParenToken"
    OPEN_BRACKET_TOKEN = "OpenBracketToken"
    CLOSE_BRACKET_TOKEN = "CloseBracketToken"
    SEMICOLON_TOKEN = "SemicolonToken"
    COMMA_TOKEN = "CommaToken"
    DOT_TOKEN = "DotToken"
    EQUALS_TOKEN = "EqualsToken"
    NUMERIC_LITERAL_TOKEN = "NumericLiteralToken"
    END_OF_FILE_TOKEN = "EndOfFileToken"

    # Trivia
    WHITESPACE_TRIVIA = "WhitespaceTrivia"
    END_OF_LINE_TRIVIA = "EndOfLineTrivia"
    SINGLE_LINE_COMMENT_TRIVIA = "SingleLineCommentTrivia"
    MULTI_LINE_COMMENT_TRIVIA = "MultiLineCommentTrivia"
    DOCUMENTATION_COMMENT_TRIVIA = "DocumentationCommentTrivia"


TRIVIA_KINDS: Final[frozenset[SyntaxKind]] = frozenset({
    SyntaxKind.WHITESPACE_TRIVIA,
    SyntaxKind.END_OF_LINE_TRIVIA,
    SyntaxKind.SINGLE_LINE_COMMENT_TRIVIA,
    SyntaxKind.MULTI_LINE_COMMENT_TRIVIA,
    SyntaxKind.DOCUMENTATION_COMMENT_TRIVIA,
})

TOKEN_KINDS: Final[frozenset[SyntaxKind]] = frozenset({
    kind for kind in SyntaxKind if kind.value.endswith(("Token", "Keyword"))
})

NODE_KINDS: Final[frozenset[SyntaxKind]] = frozenset(
    set(SyntaxKind) - TRIVIA_KINDS - TOKEN_KINDS
)

TYPE_DECLARATION_KINDS: Final[frozenset[SyntaxKind]] = frozenset({
    SyntaxKind.CLASS_DECLARATION,
    SyntaxKind.INTERFACE_DECLARATION,
    SyntaxKind.STRUCT_DECLARATION,
    SyntaxKind.ENUM_DECLARATION,
})

DECLARATION_KEYWORD_KINDS: Final[frozenset[SyntaxKind]] = frozenset({
    SyntaxKind.NAMESPACE_KEYWORD,
    SyntaxKind.CLASS_KEYWORD,
    SyntaxKind.INTERFACE_KEYWORD,
    SyntaxKind.STRUCT_KEYWORD,
    SyntaxKind.ENUM_KEYWORD,
})


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Half-open range ``[start, start + length)`` over a tree's full text."""

    start: int
    length: int = 0

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end


@dataclass(frozen=True, slots=True)
class Trivia:
    """Formatting material attached to a token."""

    kind: SyntaxKind
    text: str


@dataclass(frozen=True, slots=True)
class Token:
    """A leaf carrying its own leading and trailing trivia."""

    kind: SyntaxKind
    text: str
    leading: tuple[Trivia, ...] = ()
    trailing: tuple[Trivia, ...] = ()

    @property
    def leading_width(self) -> int:
        return sum(len(t.text) for t in self.leading)

    @property
    def full_width(self) -> int:
        return (
            self.leading_width
            + len(self.text)
            + sum(len(t.text) for t in self.trailing)
        )

    def with_leading(self, trivia: tuple[Trivia, ...]) -> Token:
        return replace(self, leading=tuple(trivia))

    def with_trailing(self, trivia: tuple[Trivia, ...]) -> Token:
        return replace(self, trailing=tuple(trivia))


@dataclass(frozen=True)
class Node:
    """An interior element with ordered child nodes and tokens."""

    kind: SyntaxKind
    children: tuple[Node | Token, ...] = ()

    @cached_property
    def full_width(self) -> int:
        return sum(child.full_width for child in self.children)

    def child_nodes(self) -> list[Node]:
        return [child for child in self.children if isinstance(child, Node)]

    def tokens(self) -> Iterator[Token]:
        """Yield every token under this node, in text order."""
        for child in self.children:
            if isinstance(child, Token):
                yield child
            else:
                yield from child.tokens()

    def first_token(self) -> Token | None:
        return next(self.tokens(), None)

    def last_token(self) -> Token | None:
        for child in reversed(self.children):
            if isinstance(child, Token):
                return child
            token: Token | None = child.last_token()
            if token is not None:
                return token
        return None

    def with_children(self, children: tuple[Node | Token, ...]) -> Node:
        return Node(kind=self.kind, children=tuple(children))


Element: TypeAlias = Node | Token
Path: TypeAlias = tuple[int, ...]


@dataclass(frozen=True, slots=True)
class TokenLocation:
    """A token together with where it sits in its tree."""

    token: Token
    path: Path
    full_start: int

    @property
    def span(self) -> TextSpan:
        return TextSpan(self.full_start + self.token.leading_width, len(self.token.text))


def full_text(element: Element) -> str:
    """Return the element's text including all trivia."""
    tokens: Iterator[Token] = iter((element,)) if isinstance(element, Token) else element.tokens()
    parts: list[str] = []
    for token in tokens:
        parts.extend(t.text for t in token.leading)
        parts.append(token.text)
        parts.extend(t.text for t in token.trailing)
    return "".join(parts)


def node_text(element: Element) -> str:
    """Return the element's token text with all trivia stripped."""
    if isinstance(element, Token):
        return element.text
    return "".join(token.text for token in element.tokens())


def leading_trivia(element: Element) -> tuple[Trivia, ...]:
    token: Token | None = element if isinstance(element, Token) else element.first_token()
    return token.leading if token is not None else ()


def trailing_trivia(element: Element) -> tuple[Trivia, ...]:
    token: Token | None = element if isinstance(element, Token) else element.last_token()
    return token.trailing if token is not None else ()


def element_span(element: Element, full_start: int) -> TextSpan:
    """Span of an element's text, excluding its outer leading/trailing trivia."""
    width: int = element.full_width
    start: int = full_start + sum(len(t.text) for t in leading_trivia(element))
    end: int = full_start + width - sum(len(t.text) for t in trailing_trivia(element))
    return TextSpan(start, max(0, end - start))


def child_positions(node: Node, full_start: int) -> Iterator[tuple[int, Element, int]]:
    """Yield ``(index, child, child_full_start)`` for each direct child."""
    position: int = full_start
    for index, child in enumerate(node.children):
        yield index, child, position
        position += child.full_width


def iter_tokens(root: Node, *, _path: Path = (), _start: int = 0) -> Iterator[TokenLocation]:
    """Yield every token of *root* with its path and full start."""
    for index, child, position in child_positions(root, _start):
        child_path: Path = (*_path, index)
        if isinstance(child, Token):
            yield TokenLocation(child, child_path, position)
        else:
            yield from iter_tokens(child, _path=child_path, _start=position)


def find_token(root: Node, position: int) -> TokenLocation | None:
    """Return the token whose full span contains *position*.

    A position at the very end of the tree maps to the last token.
    """
    if position < 0 or position > root.full_width:
        return None
    node: Node = root
    path: Path = ()
    start: int = 0
    while True:
        chosen: tuple[int, Element, int] | None = None
        for index, child, child_start in child_positions(node, start):
            if child.full_width == 0:
                continue
            if child_start <= position < child_start + child.full_width:
                chosen = (index, child, child_start)
                break
            chosen = (index, child, child_start)
        if chosen is None:
            return None
        index, child, start = chosen
        path = (*path, index)
        if isinstance(child, Token):
            return TokenLocation(child, path, start)
        node = child


def element_at(root: Node, path: Path) -> Element:
    element: Element = root
    for index in path:
        if not isinstance(element, Node):
            raise IndexError(f"path {path} descends into a token")
        element = element.children[index]
    return element


def ancestors(root: Node, path: Path) -> list[Node]:
    """Return the nodes enclosing the element at *path*, innermost first."""
    chain: list[Node] = [root]
    node: Node = root
    for index in path[:-1]:
        child: Element = node.children[index]
        if not isinstance(child, Node):
            raise IndexError(f"path {path} descends into a token")
        chain.append(child)
        node = child
    chain.reverse()
    return chain


def position_of(root: Node, path: Path) -> int:
    """Full start of the element at *path*."""
    node: Node = root
    start: int = 0
    for depth, index in enumerate(path):
        for child_index, child, child_start in child_positions(node, start):
            if child_index == index:
                start = child_start
                if depth < len(path) - 1:
                    if not isinstance(child, Node):
                        raise IndexError(f"path {path} descends into a token")
                    node = child
                break
    return start


def replace_element(root: Node, path: Path, new: Element) -> Node:
    """Return a copy of *root* with the element at *path* replaced by *new*."""
    if not path:
        if not isinstance(new, Node):
            raise TypeError("the root can only be replaced by a node")
        return new
    index: int = path[0]
    child: Element = root.children[index]
    if len(path) > 1:
        if not isinstance(child, Node):
            raise IndexError(f"path {path} descends into a token")
        new = replace_element(child, path[1:], new)
    children: list[Element] = list(root.children)
    children[index] = new
    return root.with_children(tuple(children))


def with_trailing_trivia(element: Element, trivia: tuple[Trivia, ...]) -> Element:
    """Replace the trailing trivia of *element*'s last token."""
    if isinstance(element, Token):
        return element.with_trailing(trivia)
    for index in range(len(element.children) - 1, -1, -1):
        child: Element = element.children[index]
        if isinstance(child, Token) or child.last_token() is not None:
            children: list[Element] = list(element.children)
            children[index] = with_trailing_trivia(child, trivia)
            return element.with_children(tuple(children))
    return element
