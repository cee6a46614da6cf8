"""Tests for FileMustEndInNewLine and its fix."""
from __future__ import annotations

import asyncio
from types import MappingProxyType

from styleenforcer.constants import FILE_MUST_END_IN_NEW_LINE
from styleenforcer.descriptors import CodeAction
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.factory import (
    class_declaration,
    comment,
    compilation_unit,
    end_of_file,
    end_of_line,
    namespace_declaration,
    whitespace,
)
from styleenforcer.registry import Registry, get_registry
from styleenforcer.runner import analyze_document
from styleenforcer.syntax import Node, SyntaxKind
from styleenforcer.types import RuleConfig, StyleConfig
from styleenforcer.workspace import NEVER_CANCELLED, Document, Solution

CONFIG: StyleConfig = StyleConfig()
REGISTRY: Registry = get_registry()


def _unit(namespace: str = "VusrCore.Tools", *, terminated: bool) -> Node:
    return compilation_unit(namespace_declaration(
        namespace,
        (class_declaration("Foo", indent="    "),),
        close_trailing=(end_of_line(),) if terminated else (),
    ))


def _check(root: Node, config: StyleConfig = CONFIG) -> list[Diagnostic]:
    diags: list[Diagnostic] = analyze_document(
        Document(id="tools.cs", root=root), config=config, registry=REGISTRY,
    )
    return [d for d in diags if d.descriptor_id == FILE_MUST_END_IN_NEW_LINE]


def _fix(document: Document, diagnostic: Diagnostic) -> Document:
    actions: list[CodeAction] = REGISTRY.dispatch_fixes(
        [diagnostic], solution=Solution.of(document),
    )
    fixed = asyncio.run(actions[0].apply(NEVER_CANCELLED))
    assert isinstance(fixed, Document)
    return fixed


class TestFileNewlineDetection:
    def test_terminated_file_passes(self) -> None:
        assert _check(_unit(terminated=True)) == []

    def test_unterminated_file_reported_once(self) -> None:
        diags: list[Diagnostic] = _check(_unit(terminated=False))
        assert len(diags) == 1

    def test_located_at_end_of_file_marker(self) -> None:
        root: Node = _unit(terminated=False)
        diag: Diagnostic = _check(root)[0]
        text: str = Document(id="tools.cs", root=root).text
        assert diag.location.span.start == len(text)
        assert diag.location.span.length == 0
        assert diag.location.line == 6
        assert diag.location.column == 2

    def test_trailing_comment_without_break_reported(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.Tools", close_trailing=(whitespace(), comment("// End VusrCore.Tools namespace")),
        ))
        assert len(_check(unit)) == 1

    def test_break_before_comment_does_not_count(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.Tools", close_trailing=(end_of_line(), comment("// trailing")),
        ))
        assert len(_check(unit)) == 1

    def test_trivia_on_end_of_file_marker_is_ignored(self) -> None:
        unit: Node = compilation_unit(
            namespace_declaration("VusrCore.Tools", close_trailing=()),
            eof=end_of_file(leading=(end_of_line(),)),
        )
        # The break belongs to the marker, not to the preceding element.
        assert len(_check(unit)) == 1

    def test_empty_unit_not_applicable(self) -> None:
        assert _check(compilation_unit()) == []

    def test_missing_end_of_file_marker_not_applicable(self) -> None:
        unit: Node = Node(
            SyntaxKind.COMPILATION_UNIT,
            (namespace_declaration("VusrCore.Tools", close_trailing=()),),
        )
        assert _check(unit) == []


class TestFileNewlineScope:
    def test_out_of_scope_unit_skipped(self) -> None:
        assert _check(_unit("Contoso.Tools", terminated=False)) == []

    def test_scope_match_ignores_case(self) -> None:
        assert len(_check(_unit("vusrcore.tools", terminated=False))) == 1

    def test_empty_scope_checks_everything(self) -> None:
        config: StyleConfig = StyleConfig(scope="")
        assert len(_check(_unit("Contoso.Tools", terminated=False), config)) == 1

    def test_unscoped_rule_checks_everything(self) -> None:
        config: StyleConfig = StyleConfig(rules=RuleConfig(
            scoped=MappingProxyType({FILE_MUST_END_IN_NEW_LINE: False}),
        ))
        assert len(_check(_unit("Contoso.Tools", terminated=False), config)) == 1


class TestFileNewlineFix:
    def test_fix_appends_line_break(self) -> None:
        document: Document = Document(id="tools.cs", root=_unit(terminated=False))
        fixed: Document = _fix(document, _check(document.root)[0])
        assert fixed.text == document.text + "\n"

    def test_recheck_after_fix_is_clean(self) -> None:
        document: Document = Document(id="tools.cs", root=_unit(terminated=False))
        fixed: Document = _fix(document, _check(document.root)[0])
        assert _check(fixed.root) == []

    def test_fix_keeps_existing_trailing_trivia(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.Tools", close_trailing=(whitespace(), comment("// End VusrCore.Tools namespace")),
        ))
        document: Document = Document(id="tools.cs", root=unit)
        fixed: Document = _fix(document, _check(unit)[0])
        assert fixed.text.endswith("} // End VusrCore.Tools namespace\n")

    def test_fix_shares_untouched_subtrees(self) -> None:
        document: Document = Document(id="tools.cs", root=_unit(terminated=False))
        fixed: Document = _fix(document, _check(document.root)[0])
        assert fixed.root.children[-1] is document.root.children[-1]
        namespace = fixed.root.children[0]
        assert isinstance(namespace, Node)
        assert namespace.children[3] is document.root.child_nodes()[0].children[3]
