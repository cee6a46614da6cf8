"""Declarative records for rules and fixes."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, TypeAlias

from styleenforcer.constants import DEFAULT_SEVERITY, Category, Severity
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.workspace import CancellationToken, Document, Solution

if TYPE_CHECKING:
    from styleenforcer.rules.base import SymbolRule, SyntaxRule


@dataclass(frozen=True, slots=True)
class DiagnosticDescriptor:
    """Immutable metadata for one rule. Identity is ``id``."""

    id: str
    title: str
    message_format: str
    category: Category = Category.STYLE
    default_severity: Severity = DEFAULT_SEVERITY
    is_enabled_by_default: bool = True
    description: str = ""
    help_link: str = ""
    custom_tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        rule_id: str,
        *,
        title: str | None = None,
        message_format: str | None = None,
        category: Category = Category.STYLE,
        default_severity: Severity = DEFAULT_SEVERITY,
        is_enabled_by_default: bool = True,
        description: str = "",
        help_link: str = "",
        custom_tags: frozenset[str] = frozenset(),
    ) -> DiagnosticDescriptor:
        """Build a descriptor whose title and message default to its id."""
        return cls(
            id=rule_id,
            title=title if title is not None else rule_id,
            message_format=message_format if message_format is not None else rule_id,
            category=category,
            default_severity=default_severity,
            is_enabled_by_default=is_enabled_by_default,
            description=description,
            help_link=help_link,
            custom_tags=custom_tags,
        )


FixOutcome: TypeAlias = Document | Solution


class FixAction(Protocol):
    def __call__(
        self,
        *,
        document: Document,
        diagnostic: Diagnostic,
        solution: Solution,
        cancellation: CancellationToken,
    ) -> Awaitable[FixOutcome]: ...


@dataclass(frozen=True, slots=True)
class RuleDefinition:
    """A rule's descriptor bound to its detection entry point.

    ``fixable=False`` declares that the rule deliberately ships no fix.
    """

    descriptor: DiagnosticDescriptor
    rule: SyntaxRule | SymbolRule
    fixable: bool = True

    @property
    def id(self) -> str:
        return self.descriptor.id


@dataclass(frozen=True, slots=True)
class FixBinding:
    """A fix callable bound to the id of the rule it repairs."""

    id: str
    title: str
    target_descriptor_id: str
    action: FixAction


@dataclass(frozen=True, slots=True)
class CodeAction:
    """One proposed fix for one diagnostic, ready to run."""

    fix_id: str
    title: str
    diagnostic: Diagnostic
    apply: Callable[[CancellationToken], Awaitable[FixOutcome]]
