"""Tests for MembersMustBePrecededByEmptyLine."""
from __future__ import annotations

from styleenforcer.constants import MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.factory import (
    class_declaration,
    comment,
    compilation_unit,
    end_of_line,
    enum_declaration,
    field_declaration,
    interface_declaration,
    method_declaration,
    namespace_declaration,
    whitespace,
)
from styleenforcer.registry import Registry, get_registry
from styleenforcer.rules.member_spacing import has_blank_line
from styleenforcer.runner import analyze_document
from styleenforcer.syntax import Node, Trivia
from styleenforcer.types import StyleConfig
from styleenforcer.workspace import Document

CONFIG: StyleConfig = StyleConfig()
REGISTRY: Registry = get_registry()
MEMBER_INDENT: str = "        "


def _check(root: Node) -> list[Diagnostic]:
    diags: list[Diagnostic] = analyze_document(
        Document(id="foo.cs", root=root), config=CONFIG, registry=REGISTRY,
    )
    return [d for d in diags if d.descriptor_id == MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE]


def _in_class(*members: Node, namespace: str = "VusrCore.Tools") -> Node:
    return compilation_unit(namespace_declaration(
        namespace,
        (class_declaration("Foo", members, indent="    "),),
    ))


class TestHasBlankLine:
    def test_empty_leading_trivia(self) -> None:
        assert has_blank_line(()) is False

    def test_starts_with_line_break(self) -> None:
        assert has_blank_line((end_of_line(), whitespace(MEMBER_INDENT))) is True

    def test_indentation_only(self) -> None:
        assert has_blank_line((whitespace(MEMBER_INDENT),)) is False

    def test_whitespace_only_line(self) -> None:
        assert has_blank_line((whitespace("  "), end_of_line(), whitespace(MEMBER_INDENT))) is True

    def test_comment_then_single_break(self) -> None:
        leading: tuple[Trivia, ...] = (
            whitespace(MEMBER_INDENT), comment("// note"), end_of_line(), whitespace(MEMBER_INDENT),
        )
        assert has_blank_line(leading) is False

    def test_comment_then_blank_line(self) -> None:
        leading: tuple[Trivia, ...] = (
            whitespace(MEMBER_INDENT),
            comment("// note"),
            end_of_line(),
            whitespace("    "),
            end_of_line(),
            whitespace(MEMBER_INDENT),
        )
        assert has_blank_line(leading) is True


class TestMemberSpacingDetection:
    def test_separated_members_pass(self) -> None:
        root: Node = _in_class(
            method_declaration("A", indent=MEMBER_INDENT),
            method_declaration("B", indent=MEMBER_INDENT, blank_line=True),
            method_declaration("C", indent=MEMBER_INDENT, blank_line=True),
        )
        assert _check(root) == []

    def test_missing_blank_line_reported_at_second_member(self) -> None:
        root: Node = _in_class(
            method_declaration("A", indent=MEMBER_INDENT),
            method_declaration("B", indent=MEMBER_INDENT),
        )
        diags: list[Diagnostic] = _check(root)
        assert len(diags) == 1
        assert diags[0].location.line == 8
        assert diags[0].location.column == 9
        assert diags[0].source_line == "        void B()"

    def test_first_member_is_exempt(self) -> None:
        root: Node = _in_class(method_declaration("A", indent=MEMBER_INDENT))
        assert _check(root) == []

    def test_fields_are_not_checked(self) -> None:
        root: Node = _in_class(
            field_declaration("int", "count", indent=MEMBER_INDENT),
            field_declaration("int", "total", indent=MEMBER_INDENT),
        )
        assert _check(root) == []

    def test_method_after_field_is_checked(self) -> None:
        root: Node = _in_class(
            field_declaration("int", "count", indent=MEMBER_INDENT),
            method_declaration("A", indent=MEMBER_INDENT),
        )
        assert len(_check(root)) == 1

    def test_location_includes_modifiers(self) -> None:
        root: Node = _in_class(
            method_declaration("A", indent=MEMBER_INDENT),
            method_declaration("B", modifiers=("public",), indent=MEMBER_INDENT),
        )
        diag: Diagnostic = _check(root)[0]
        assert diag.location.span.length == len("public")
        assert diag.location.column == 9

    def test_namespace_members(self) -> None:
        root: Node = compilation_unit(namespace_declaration(
            "VusrCore.Tools",
            (
                class_declaration("Foo", indent="    "),
                interface_declaration("IFoo", indent="    "),
                enum_declaration("Colors", ("Red",), indent="    ", blank_line=True),
            ),
        ))
        diags: list[Diagnostic] = _check(root)
        assert len(diags) == 1
        assert diags[0].source_line == "    interface IFoo"

    def test_interface_members(self) -> None:
        root: Node = compilation_unit(namespace_declaration(
            "VusrCore.Tools",
            (interface_declaration(
                "IFoo",
                (
                    method_declaration("A", indent=MEMBER_INDENT),
                    method_declaration("B", indent=MEMBER_INDENT),
                ),
                indent="    ",
            ),),
        ))
        assert len(_check(root)) == 1

    def test_out_of_scope_container_skipped(self) -> None:
        root: Node = _in_class(
            method_declaration("A", indent=MEMBER_INDENT),
            method_declaration("B", indent=MEMBER_INDENT),
            namespace="Contoso.Tools",
        )
        assert _check(root) == []
