"""Static rule registration table.

Order here is registration order: it fixes the order of
``list_supported_descriptors`` and of diagnostics within a node.
"""
from __future__ import annotations

from typing import Final

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    ENUMS_MUST_END_IN_S,
    FILE_MUST_END_IN_NEW_LINE,
    MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE,
)
from styleenforcer.descriptors import DiagnosticDescriptor, RuleDefinition
from styleenforcer.rules.brace_comment import ClosingBraceMustHaveCommentRule
from styleenforcer.rules.enum_suffix import EnumsMustEndInSRule
from styleenforcer.rules.file_newline import FileMustEndInNewLineRule
from styleenforcer.rules.member_spacing import MembersMustBePrecededByEmptyLineRule

RULE_DEFINITIONS: Final[tuple[RuleDefinition, ...]] = (
    RuleDefinition(
        descriptor=DiagnosticDescriptor.create(
            ENUMS_MUST_END_IN_S,
            title="Enum names must end in 's'",
            message_format="Enum name should be plural (end in 's')",
            description=(
                "Enum type names are plural so that a flags-style value reads\n"
                "naturally. Every declaration of a partial type is reported."
            ),
            custom_tags=frozenset({"Naming"}),
        ),
        rule=EnumsMustEndInSRule(),
    ),
    RuleDefinition(
        descriptor=DiagnosticDescriptor.create(
            FILE_MUST_END_IN_NEW_LINE,
            title="File must end in a new line",
            message_format="File should end with a line break",
            description=(
                "The last line of every file is terminated by a line break so\n"
                "that concatenation and line-based tools behave predictably."
            ),
            custom_tags=frozenset({"Formatting"}),
        ),
        rule=FileMustEndInNewLineRule(),
    ),
    RuleDefinition(
        descriptor=DiagnosticDescriptor.create(
            MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE,
            title="Members must be preceded by an empty line",
            message_format="Member should be preceded by an empty line",
            description=(
                "Namespaces, types and methods inside a container are separated\n"
                "by at least one blank line. The first member after the opening\n"
                "brace is exempt."
            ),
            custom_tags=frozenset({"Formatting"}),
        ),
        rule=MembersMustBePrecededByEmptyLineRule(),
        fixable=False,
    ),
    RuleDefinition(
        descriptor=DiagnosticDescriptor.create(
            CLOSING_BRACE_MUST_HAVE_COMMENT,
            title="Closing brace must have a comment",
            message_format="Closing brace should be followed by its end comment",
            description=(
                "The closing brace of a namespace, class or interface is followed\n"
                "by a comment naming what it closes, e.g. '// End Foo class'."
            ),
            custom_tags=frozenset({"Formatting"}),
        ),
        rule=ClosingBraceMustHaveCommentRule(),
    ),
)
