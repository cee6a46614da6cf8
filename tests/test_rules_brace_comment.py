"""Tests for ClosingBraceMustHaveComment and its fix."""
from __future__ import annotations

import asyncio
from dataclasses import replace
from types import MappingProxyType

import pytest

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    TARGET_COMMENT_PROPERTY,
    CommentLabel,
)
from styleenforcer.descriptors import CodeAction
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.errors import MissingDiagnosticPropertyError
from styleenforcer.factory import (
    class_declaration,
    comment,
    compilation_unit,
    end_of_line,
    enum_declaration,
    interface_declaration,
    namespace_declaration,
    whitespace,
)
from styleenforcer.fixers.brace_comment import add_end_comment
from styleenforcer.registry import Registry, get_registry
from styleenforcer.rules.brace_comment import expected_comment
from styleenforcer.runner import analyze_document, fix_solution
from styleenforcer.syntax import Node, Trivia
from styleenforcer.types import ClosingBraceOptions, RuleConfig, StyleConfig
from styleenforcer.workspace import NEVER_CANCELLED, Document, Solution

CONFIG: StyleConfig = StyleConfig()
KIND_CONFIG: StyleConfig = StyleConfig(
    rules=RuleConfig(closing_brace=ClosingBraceOptions(label=CommentLabel.KIND)),
)
REGISTRY: Registry = get_registry()


def _check(root: Node, config: StyleConfig = CONFIG) -> list[Diagnostic]:
    diags: list[Diagnostic] = analyze_document(
        Document(id="foo.cs", root=root), config=config, registry=REGISTRY,
    )
    return [d for d in diags if d.descriptor_id == CLOSING_BRACE_MUST_HAVE_COMMENT]


def _targets(diags: list[Diagnostic]) -> list[str]:
    return [d.properties[TARGET_COMMENT_PROPERTY] for d in diags]


def _labelled(text: str) -> tuple[Trivia, ...]:
    return (comment(text), end_of_line())


class TestExpectedComment:
    def test_namespace_uses_dotted_name(self) -> None:
        node: Node = namespace_declaration("VusrCore.X")
        assert expected_comment(node, label=CommentLabel.NAME) == "// End VusrCore.X namespace"

    def test_class_uses_identifier_and_keyword(self) -> None:
        node: Node = class_declaration("Foo", modifiers=("public", "sealed"))
        assert expected_comment(node, label=CommentLabel.NAME) == "// End Foo class"

    def test_interface(self) -> None:
        node: Node = interface_declaration("IFoo")
        assert expected_comment(node, label=CommentLabel.NAME) == "// End IFoo interface"

    def test_kind_label(self) -> None:
        assert expected_comment(namespace_declaration("A"), label=CommentLabel.KIND) == "// End Namespace"
        assert expected_comment(class_declaration("Foo"), label=CommentLabel.KIND) == "// End Class"

    def test_other_kinds_not_applicable(self) -> None:
        assert expected_comment(compilation_unit(), label=CommentLabel.NAME) is None


class TestBraceCommentDetection:
    def test_namespace_and_class_scenario(self, unlabelled_unit: Node) -> None:
        diags: list[Diagnostic] = _check(unlabelled_unit)
        assert _targets(diags) == ["// End VusrCore.X namespace", "// End Foo class"]

    def test_located_at_close_brace(self, unlabelled_unit: Node) -> None:
        diags: list[Diagnostic] = _check(unlabelled_unit)
        namespace_diag, class_diag = diags
        assert (namespace_diag.location.line, namespace_diag.location.column) == (6, 1)
        assert (class_diag.location.line, class_diag.location.column) == (5, 5)
        assert class_diag.location.span.length == 1
        assert class_diag.source_line == "    }"

    def test_kind_label_targets(self, unlabelled_unit: Node) -> None:
        diags: list[Diagnostic] = _check(unlabelled_unit, KIND_CONFIG)
        assert _targets(diags) == ["// End Namespace", "// End Class"]

    def test_matching_comments_pass(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X",
            (class_declaration("Foo", indent="    ", close_trailing=_labelled("// End Foo class")),),
            close_trailing=_labelled("// End VusrCore.X namespace"),
        ))
        assert _check(unit) == []

    def test_comparison_ignores_case(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X", close_trailing=_labelled("// end vusrcore.x NAMESPACE"),
        ))
        assert _check(unit) == []

    def test_wrong_comment_reported(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X", close_trailing=_labelled("// End Bar namespace"),
        ))
        assert _targets(_check(unit)) == ["// End VusrCore.X namespace"]

    def test_comment_must_be_first_trailing_trivia(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X",
            close_trailing=(whitespace(), comment("// End VusrCore.X namespace"), end_of_line()),
        ))
        assert len(_check(unit)) == 1

    def test_multi_line_comment_does_not_count(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X", close_trailing=_labelled("/* End VusrCore.X namespace */"),
        ))
        assert len(_check(unit)) == 1

    def test_interface_reported(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X",
            (interface_declaration("IFoo", indent="    "),),
            close_trailing=_labelled("// End VusrCore.X namespace"),
        ))
        assert _targets(_check(unit)) == ["// End IFoo interface"]

    def test_enums_are_not_checked(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore.X",
            (enum_declaration("Colors", ("Red",), indent="    "),),
            close_trailing=_labelled("// End VusrCore.X namespace"),
        ))
        assert _check(unit) == []

    def test_out_of_scope_skipped(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "Contoso.X", (class_declaration("Foo", indent="    "),),
        ))
        assert _check(unit) == []

    def test_unscoped_rule_checks_everything(self) -> None:
        config: StyleConfig = StyleConfig(rules=RuleConfig(
            scoped=MappingProxyType({CLOSING_BRACE_MUST_HAVE_COMMENT: False}),
        ))
        unit: Node = compilation_unit(namespace_declaration("Contoso.X"))
        assert _targets(_check(unit, config)) == ["// End Contoso.X namespace"]

    def test_nested_namespace_inherits_scope(self) -> None:
        unit: Node = compilation_unit(namespace_declaration(
            "VusrCore",
            (namespace_declaration("Inner", indent="    "),),
            close_trailing=_labelled("// End VusrCore namespace"),
        ))
        assert _targets(_check(unit)) == ["// End Inner namespace"]


class TestBraceCommentFix:
    def test_fix_inserts_comment_before_existing_trivia(self, unlabelled_unit: Node) -> None:
        document: Document = Document(id="foo.cs", root=unlabelled_unit)
        class_diag: Diagnostic = _check(unlabelled_unit)[1]
        actions: list[CodeAction] = REGISTRY.dispatch_fixes(
            [class_diag], solution=Solution.of(document),
        )
        fixed = asyncio.run(actions[0].apply(NEVER_CANCELLED))

        assert isinstance(fixed, Document)
        assert "    }// End Foo class\n\n}" in fixed.text
        assert _targets(_check(fixed.root)) == ["// End VusrCore.X namespace"]

    def test_fix_sets_trailing_trivia_when_absent(self) -> None:
        unit: Node = compilation_unit(namespace_declaration("VusrCore.X", close_trailing=()))
        document: Document = Document(id="foo.cs", root=unit)
        actions: list[CodeAction] = REGISTRY.dispatch_fixes(
            _check(unit), solution=Solution.of(document),
        )
        fixed = asyncio.run(actions[0].apply(NEVER_CANCELLED))

        assert isinstance(fixed, Document)
        assert fixed.text.endswith("}// End VusrCore.X namespace\n")

    def test_fix_requires_target_comment(self, unlabelled_unit: Node) -> None:
        document: Document = Document(id="foo.cs", root=unlabelled_unit)
        bare: Diagnostic = replace(_check(unlabelled_unit)[0], properties=MappingProxyType({}))

        with pytest.raises(MissingDiagnosticPropertyError) as exc_info:
            asyncio.run(add_end_comment(
                document=document,
                diagnostic=bare,
                solution=Solution.of(document),
                cancellation=NEVER_CANCELLED,
            ))
        assert exc_info.value.rule_id == CLOSING_BRACE_MUST_HAVE_COMMENT
        assert exc_info.value.property_name == TARGET_COMMENT_PROPERTY

    def test_fix_loop_leaves_no_violations(self, unlabelled_unit: Node) -> None:
        document: Document = Document(id="foo.cs", root=unlabelled_unit)
        fixed: Solution = fix_solution(Solution.of(document), config=CONFIG, registry=REGISTRY)
        assert _check(fixed.get_document("foo.cs").root) == []

    def test_fix_uses_kind_label(self, unlabelled_unit: Node) -> None:
        document: Document = Document(id="foo.cs", root=unlabelled_unit)
        fixed: Solution = fix_solution(Solution.of(document), config=KIND_CONFIG, registry=REGISTRY)
        text: str = fixed.get_document("foo.cs").text
        assert "}// End Class" in text
        assert "}// End Namespace" in text
