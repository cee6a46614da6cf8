"""Rule documentation for the ``styleenforcer explain`` command.

Titles, descriptions and fix titles come from the registry; this module only
adds the before/after examples and the configuration snippet per rule.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    ENUMS_MUST_END_IN_S,
    FILE_MUST_END_IN_NEW_LINE,
    MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE,
)
from styleenforcer.descriptors import DiagnosticDescriptor
from styleenforcer.registry import Registry


@dataclass(frozen=True, slots=True)
class RuleExamples:
    bad_example: str
    good_example: str
    config_options: str = ""


RULE_EXAMPLES: Final[dict[str, RuleExamples]] = {
    ENUMS_MUST_END_IN_S: RuleExamples(
        bad_example="enum Color { Red, Green }",
        good_example="enum Colors { Red, Green }",
    ),
    FILE_MUST_END_IN_NEW_LINE: RuleExamples(
        bad_example="}// End Foo class<EOF>",
        good_example="}// End Foo class\\n<EOF>",
    ),
    MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE: RuleExamples(
        bad_example="void A() { }\nvoid B() { }",
        good_example="void A() { }\n\nvoid B() { }",
    ),
    CLOSING_BRACE_MUST_HAVE_COMMENT: RuleExamples(
        bad_example="class Foo\n{\n}",
        good_example="class Foo\n{\n}// End Foo class",
        config_options=(
            "[tool.styleenforcer.rules.ClosingBraceMustHaveComment]\n"
            "label = \"name\"  # \"name\": // End Foo class, \"kind\": // End Class"
        ),
    ),
}

_SCOPE_NOTE: Final[str] = (
    "[tool.styleenforcer]\n"
    "scope = \"VusrCore\"  # only namespaces containing this text; \"\" for all"
)


def _fix_titles(registry: Registry, rule_id: str) -> list[str]:
    return [
        registry.fix_bindings_by_id[fix_id].title
        for fix_id in registry.fix_ids_by_descriptor_id.get(rule_id, ())
    ]


def format_rule_detail(*, registry: Registry, rule_id: str, severity: str) -> str:
    """Format a single rule's full documentation."""
    descriptor: DiagnosticDescriptor = registry.get_descriptor(rule_id)
    fixes: list[str] = _fix_titles(registry, rule_id)
    lines: list[str] = [
        f"{descriptor.id}: {descriptor.title}",
        f"Category: {descriptor.category.value} | Severity: {severity}"
        f" | Autofix: {'Yes' if fixes else 'No'}",
    ]
    if descriptor.custom_tags:
        lines.append(f"Tags: {', '.join(sorted(descriptor.custom_tags))}")

    if descriptor.description:
        lines.append("")
        lines.extend(f"  {line}" for line in descriptor.description.splitlines())

    examples: RuleExamples | None = RULE_EXAMPLES.get(rule_id)
    if examples is not None:
        lines.extend(["", "  Bad:"])
        lines.extend(f"    {line}" for line in examples.bad_example.splitlines())
        lines.extend(["  Good:"])
        lines.extend(f"    {line}" for line in examples.good_example.splitlines())

    for title in fixes:
        lines.extend(["", f"  Fix: {title}"])

    config_options: str = examples.config_options if examples is not None else ""
    for block in (config_options, _SCOPE_NOTE):
        if block:
            lines.extend(["", f"  Config: {block.splitlines()[0]}"])
            for opt_line in block.splitlines()[1:]:
                lines.append(f"          {opt_line}")

    if descriptor.help_link:
        lines.extend(["", f"  See: {descriptor.help_link}"])

    return "\n".join(lines)


def format_rule_table(*, registry: Registry, severities: dict[str, str]) -> str:
    """Format all rules as a summary table."""
    lines: list[str] = [
        f"{'RULE':<34} {'SEVERITY':<10} {'TITLE':<45} {'FIX':<4}",
        "-" * 96,
    ]
    for descriptor in registry.list_supported_descriptors():
        severity: str = severities.get(descriptor.id, "off")
        fix_marker: str = "Yes" if _fix_titles(registry, descriptor.id) else "-"
        lines.append(
            f"{descriptor.id:<34} {severity:<10} {descriptor.title:<45} {fix_marker:<4}"
        )
    return "\n".join(lines)
