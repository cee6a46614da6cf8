"""Constructors for trivia, tokens and declaration nodes.

The declaration builders lay their output out in the conventional
brace-on-its-own-line style: every declaration starts on a fresh line at
``indent``, braces sit at ``indent`` and members are expected to carry their
own (deeper) indentation.
"""
from __future__ import annotations

from functools import partial
from typing import Final

from styleenforcer.syntax import Node, SyntaxKind, Token, Trivia

_DECLARATION_KEYWORDS: Final[dict[SyntaxKind, tuple[SyntaxKind, str]]] = {
    SyntaxKind.NAMESPACE_DECLARATION: (SyntaxKind.NAMESPACE_KEYWORD, "namespace"),
    SyntaxKind.CLASS_DECLARATION: (SyntaxKind.CLASS_KEYWORD, "class"),
    SyntaxKind.INTERFACE_DECLARATION: (SyntaxKind.INTERFACE_KEYWORD, "interface"),
    SyntaxKind.STRUCT_DECLARATION: (SyntaxKind.STRUCT_KEYWORD, "struct"),
    SyntaxKind.ENUM_DECLARATION: (SyntaxKind.ENUM_KEYWORD, "enum"),
}

PREDEFINED_TYPES: Final[frozenset[str]] = frozenset({
    "bool", "byte", "char", "decimal", "double", "float", "int", "long",
    "object", "short", "string", "void",
})


def whitespace(text: str = " ") -> Trivia:
    return Trivia(SyntaxKind.WHITESPACE_TRIVIA, text)


def end_of_line(text: str = "\n") -> Trivia:
    return Trivia(SyntaxKind.END_OF_LINE_TRIVIA, text)


def comment(text: str) -> Trivia:
    """Build a comment trivia item, picking its kind from the delimiter."""
    if text.startswith("///"):
        return Trivia(SyntaxKind.DOCUMENTATION_COMMENT_TRIVIA, text)
    if text.startswith("/*"):
        return Trivia(SyntaxKind.MULTI_LINE_COMMENT_TRIVIA, text)
    return Trivia(SyntaxKind.SINGLE_LINE_COMMENT_TRIVIA, text)


def token(
    kind: SyntaxKind,
    text: str,
    *,
    leading: tuple[Trivia, ...] = (),
    trailing: tuple[Trivia, ...] = (),
) -> Token:
    return Token(kind=kind, text=text, leading=tuple(leading), trailing=tuple(trailing))


def identifier(
    text: str,
    *,
    leading: tuple[Trivia, ...] = (),
    trailing: tuple[Trivia, ...] = (),
) -> Token:
    return token(SyntaxKind.IDENTIFIER_TOKEN, text, leading=leading, trailing=trailing)


def identifier_name(
    text: str,
    *,
    leading: tuple[Trivia, ...] = (),
    trailing: tuple[Trivia, ...] = (),
) -> Node:
    return Node(
        SyntaxKind.IDENTIFIER_NAME,
        (identifier(text, leading=leading, trailing=trailing),),
    )


def name(
    dotted: str,
    *,
    leading: tuple[Trivia, ...] = (),
    trailing: tuple[Trivia, ...] = (),
) -> Node:
    """Build an ``IdentifierName`` or a left-nested ``QualifiedName``."""
    parts: list[str] = dotted.split(".")
    if len(parts) == 1:
        return identifier_name(dotted, leading=leading, trailing=trailing)
    result: Node = identifier_name(parts[0], leading=leading)
    for index, part in enumerate(parts[1:], start=1):
        is_last: bool = index == len(parts) - 1
        result = Node(
            SyntaxKind.QUALIFIED_NAME,
            (
                result,
                token(SyntaxKind.DOT_TOKEN, "."),
                identifier_name(part, trailing=trailing if is_last else ()),
            ),
        )
    return result


def type_reference(
    text: str,
    *,
    leading: tuple[Trivia, ...] = (),
    trailing: tuple[Trivia, ...] = (),
) -> Node:
    if text in PREDEFINED_TYPES:
        return Node(
            SyntaxKind.PREDEFINED_TYPE,
            (token(SyntaxKind.PREDEFINED_TYPE_KEYWORD, text, leading=leading, trailing=trailing),),
        )
    return name(text, leading=leading, trailing=trailing)


def end_of_file(*, leading: tuple[Trivia, ...] = ()) -> Token:
    return token(SyntaxKind.END_OF_FILE_TOKEN, "", leading=leading)


def compilation_unit(*members: Node, eof: Token | None = None) -> Node:
    return Node(
        SyntaxKind.COMPILATION_UNIT,
        (*members, eof if eof is not None else end_of_file()),
    )


def line_start(indent: str = "", *, blank_line: bool = False) -> tuple[Trivia, ...]:
    """Leading trivia for an element starting a new line at *indent*."""
    trivia: list[Trivia] = []
    if blank_line:
        trivia.append(end_of_line())
    if indent:
        trivia.append(whitespace(indent))
    return tuple(trivia)


def _prefix_tokens(
    keyword_kind: SyntaxKind,
    keyword_text: str,
    modifiers: tuple[str, ...],
    leading: tuple[Trivia, ...],
) -> list[Token]:
    tokens: list[Token] = []
    for modifier in modifiers:
        tokens.append(token(
            SyntaxKind.MODIFIER_KEYWORD,
            modifier,
            leading=leading if not tokens else (),
            trailing=(whitespace(),),
        ))
    tokens.append(token(
        keyword_kind,
        keyword_text,
        leading=leading if not tokens else (),
        trailing=(whitespace(),),
    ))
    return tokens


def _braces(indent: str, close_trailing: tuple[Trivia, ...]) -> tuple[Token, Token]:
    open_brace: Token = token(
        SyntaxKind.OPEN_BRACE_TOKEN,
        "{",
        leading=line_start(indent),
        trailing=(end_of_line(),),
    )
    close_brace: Token = token(
        SyntaxKind.CLOSE_BRACE_TOKEN,
        "}",
        leading=line_start(indent),
        trailing=close_trailing,
    )
    return open_brace, close_brace


def using_directive(dotted: str, *, leading: tuple[Trivia, ...] = ()) -> Node:
    return Node(
        SyntaxKind.USING_DIRECTIVE,
        (
            token(SyntaxKind.USING_KEYWORD, "using", leading=leading, trailing=(whitespace(),)),
            name(dotted),
            token(SyntaxKind.SEMICOLON_TOKEN, ";", trailing=(end_of_line(),)),
        ),
    )


def namespace_declaration(
    dotted: str,
    members: tuple[Node, ...] = (),
    *,
    indent: str = "",
    blank_line: bool = False,
    leading: tuple[Trivia, ...] | None = None,
    close_trailing: tuple[Trivia, ...] = (end_of_line(),),
) -> Node:
    first: tuple[Trivia, ...] = (
        leading if leading is not None else line_start(indent, blank_line=blank_line)
    )
    open_brace, close_brace = _braces(indent, close_trailing)
    return Node(
        SyntaxKind.NAMESPACE_DECLARATION,
        (
            *_prefix_tokens(SyntaxKind.NAMESPACE_KEYWORD, "namespace", (), first),
            name(dotted, trailing=(end_of_line(),)),
            open_brace,
            *members,
            close_brace,
        ),
    )


def type_declaration(
    kind: SyntaxKind,
    identifier_text: str,
    members: tuple[Node | Token, ...] = (),
    *,
    modifiers: tuple[str, ...] = (),
    indent: str = "",
    blank_line: bool = False,
    leading: tuple[Trivia, ...] | None = None,
    close_trailing: tuple[Trivia, ...] = (end_of_line(),),
) -> Node:
    """Build a class, interface, struct or enum declaration."""
    keyword_kind, keyword_text = _DECLARATION_KEYWORDS[kind]
    first: tuple[Trivia, ...] = (
        leading if leading is not None else line_start(indent, blank_line=blank_line)
    )
    open_brace, close_brace = _braces(indent, close_trailing)
    return Node(
        kind,
        (
            *_prefix_tokens(keyword_kind, keyword_text, modifiers, first),
            identifier(identifier_text, trailing=(end_of_line(),)),
            open_brace,
            *members,
            close_brace,
        ),
    )


class_declaration = partial(type_declaration, SyntaxKind.CLASS_DECLARATION)
interface_declaration = partial(type_declaration, SyntaxKind.INTERFACE_DECLARATION)
struct_declaration = partial(type_declaration, SyntaxKind.STRUCT_DECLARATION)


def enum_declaration(
    identifier_text: str,
    member_names: tuple[str, ...] = (),
    *,
    modifiers: tuple[str, ...] = (),
    indent: str = "",
    blank_line: bool = False,
    leading: tuple[Trivia, ...] | None = None,
    close_trailing: tuple[Trivia, ...] = (end_of_line(),),
) -> Node:
    """Build an enum with one member per line, comma separated."""
    member_indent: str = indent + "    "
    children: list[Node | Token] = []
    for index, member in enumerate(member_names):
        is_last: bool = index == len(member_names) - 1
        children.append(Node(
            SyntaxKind.ENUM_MEMBER_DECLARATION,
            (identifier(
                member,
                leading=line_start(member_indent),
                trailing=(end_of_line(),) if is_last else (),
            ),),
        ))
        if not is_last:
            children.append(token(SyntaxKind.COMMA_TOKEN, ",", trailing=(end_of_line(),)))
    return type_declaration(
        SyntaxKind.ENUM_DECLARATION,
        identifier_text,
        tuple(children),
        modifiers=modifiers,
        indent=indent,
        blank_line=blank_line,
        leading=leading,
        close_trailing=close_trailing,
    )


def method_declaration(
    identifier_text: str,
    *,
    return_type: str = "void",
    modifiers: tuple[str, ...] = (),
    indent: str = "",
    blank_line: bool = False,
    leading: tuple[Trivia, ...] | None = None,
) -> Node:
    """Build ``<modifiers> <return_type> Name()`` with an empty block body."""
    first: tuple[Trivia, ...] = (
        leading if leading is not None else line_start(indent, blank_line=blank_line)
    )
    prefix: list[Token] = [
        token(
            SyntaxKind.MODIFIER_KEYWORD,
            modifier,
            leading=first if index == 0 else (),
            trailing=(whitespace(),),
        )
        for index, modifier in enumerate(modifiers)
    ]
    open_brace, close_brace = _braces(indent, (end_of_line(),))
    return Node(
        SyntaxKind.METHOD_DECLARATION,
        (
            *prefix,
            type_reference(
                return_type,
                leading=first if not prefix else (),
                trailing=(whitespace(),),
            ),
            identifier(identifier_text),
            Node(
                SyntaxKind.PARAMETER_LIST,
                (
                    token(SyntaxKind.OPEN_PAREN_TOKEN, "("),
                    token(SyntaxKind.CLOSE_PAREN_TOKEN, ")", trailing=(end_of_line(),)),
                ),
            ),
            Node(SyntaxKind.BLOCK, (open_brace, close_brace)),
        ),
    )


def field_declaration(
    type_text: str,
    identifier_text: str,
    *,
    modifiers: tuple[str, ...] = (),
    indent: str = "",
    blank_line: bool = False,
    leading: tuple[Trivia, ...] | None = None,
) -> Node:
    first: tuple[Trivia, ...] = (
        leading if leading is not None else line_start(indent, blank_line=blank_line)
    )
    prefix: list[Token] = [
        token(
            SyntaxKind.MODIFIER_KEYWORD,
            modifier,
            leading=first if index == 0 else (),
            trailing=(whitespace(),),
        )
        for index, modifier in enumerate(modifiers)
    ]
    return Node(
        SyntaxKind.FIELD_DECLARATION,
        (
            *prefix,
            type_reference(
                type_text,
                leading=first if not prefix else (),
                trailing=(whitespace(),),
            ),
            identifier(identifier_text),
            token(SyntaxKind.SEMICOLON_TOKEN, ";", trailing=(end_of_line(),)),
        ),
    )
