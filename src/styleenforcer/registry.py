"""Descriptor registry: rules, their descriptors and the fixes bound to them.

The process-wide registry is built once from the static tables in
:mod:`styleenforcer.rules.registry` and :mod:`styleenforcer.fixers.registry`
and is read-only afterwards, so concurrent readers need no locking.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable, Iterable, Sequence
from types import MappingProxyType

from styleenforcer.constants import Severity
from styleenforcer.descriptors import (
    CodeAction,
    DiagnosticDescriptor,
    FixBinding,
    FixOutcome,
    RuleDefinition,
)
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.errors import MissingFixBindingError, RegistryError, UnknownRuleError
from styleenforcer.fixers.registry import FIX_BINDINGS
from styleenforcer.rules.base import SymbolRule, SyntaxRule
from styleenforcer.rules.registry import RULE_DEFINITIONS
from styleenforcer.types import StyleConfig
from styleenforcer.workspace import CancellationToken, Document, Solution

logger: logging.Logger = logging.getLogger(__name__)


class Registry:
    """Immutable maps from rule ids to descriptors and fixes."""

    def __init__(
        self,
        *,
        rules: Sequence[RuleDefinition],
        fixes: Sequence[FixBinding],
    ) -> None:
        definitions: dict[str, RuleDefinition] = {}
        for definition in rules:
            if definition.id in definitions:
                raise RegistryError(f"Duplicate rule id: {definition.id}")
            if definition.rule.code != definition.id:
                raise RegistryError(
                    f"Rule {definition.rule.code!r} registered under id {definition.id!r}"
                )
            definitions[definition.id] = definition

        bindings: dict[str, FixBinding] = {}
        fix_ids: dict[str, list[str]] = {rule_id: [] for rule_id in definitions}
        for binding in fixes:
            if binding.id in bindings:
                raise RegistryError(f"Duplicate fix id: {binding.id}")
            if binding.target_descriptor_id not in definitions:
                raise UnknownRuleError(binding.target_descriptor_id)
            bindings[binding.id] = binding
            fix_ids[binding.target_descriptor_id].append(binding.id)

        self._definitions: MappingProxyType[str, RuleDefinition] = MappingProxyType(definitions)
        self.descriptors_by_id: MappingProxyType[str, DiagnosticDescriptor] = MappingProxyType(
            {rule_id: d.descriptor for rule_id, d in definitions.items()}
        )
        self.fix_ids_by_descriptor_id: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
            {rule_id: tuple(ids) for rule_id, ids in fix_ids.items()}
        )
        self.fix_bindings_by_id: MappingProxyType[str, FixBinding] = MappingProxyType(bindings)

        logger.debug(
            "Registry built: %d rules, %d fixes", len(definitions), len(bindings),
        )

    def get_descriptor(self, rule_id: str) -> DiagnosticDescriptor:
        try:
            return self.descriptors_by_id[rule_id]
        except KeyError:
            raise UnknownRuleError(rule_id) from None

    def get_definition(self, rule_id: str) -> RuleDefinition:
        try:
            return self._definitions[rule_id]
        except KeyError:
            raise UnknownRuleError(rule_id) from None

    def list_supported_descriptors(self) -> tuple[DiagnosticDescriptor, ...]:
        """All descriptors, in registration order."""
        return tuple(self.descriptors_by_id.values())

    def fixable_descriptor_ids(self) -> tuple[str, ...]:
        return tuple(
            rule_id for rule_id, ids in self.fix_ids_by_descriptor_id.items() if ids
        )

    def effective_severity(self, rule_id: str, *, config: StyleConfig) -> Severity:
        """Configured severity, or the descriptor default (OFF if disabled by default)."""
        descriptor: DiagnosticDescriptor = self.get_descriptor(rule_id)
        default: Severity = (
            descriptor.default_severity if descriptor.is_enabled_by_default else Severity.OFF
        )
        return config.get_severity(rule_id, default)

    def enabled_rules(self, *, config: StyleConfig) -> list[RuleDefinition]:
        """Rule definitions that are not OFF under *config*."""
        return [
            definition
            for definition in self._definitions.values()
            if self.effective_severity(definition.id, config=config) is not Severity.OFF
        ]

    def syntax_rules(self, *, config: StyleConfig) -> list[SyntaxRule]:
        return [
            d.rule for d in self.enabled_rules(config=config) if isinstance(d.rule, SyntaxRule)
        ]

    def symbol_rules(self, *, config: StyleConfig) -> list[SymbolRule]:
        return [
            d.rule
            for d in self.enabled_rules(config=config)
            if not isinstance(d.rule, SyntaxRule)
        ]

    def dispatch_fixes(
        self,
        diagnostics: Iterable[Diagnostic],
        *,
        solution: Solution,
    ) -> list[CodeAction]:
        """Resolve the code actions offered for *diagnostics*.

        Raises:
            UnknownRuleError: A diagnostic names an unregistered rule.
            MissingFixBindingError: A fixable rule has no bound fix.
        """
        actions: list[CodeAction] = []
        for diagnostic in diagnostics:
            definition: RuleDefinition = self.get_definition(diagnostic.descriptor_id)
            fix_ids: tuple[str, ...] = self.fix_ids_by_descriptor_id[definition.id]
            if not fix_ids:
                if definition.fixable:
                    raise MissingFixBindingError(definition.id)
                continue

            document: Document = solution.get_document(diagnostic.location.document)
            for fix_id in fix_ids:
                binding: FixBinding = self.fix_bindings_by_id[fix_id]
                actions.append(CodeAction(
                    fix_id=binding.id,
                    title=binding.title,
                    diagnostic=diagnostic,
                    apply=_bind(
                        binding,
                        document=document,
                        diagnostic=diagnostic,
                        solution=solution,
                    ),
                ))
        return actions


def _bind(
    binding: FixBinding,
    *,
    document: Document,
    diagnostic: Diagnostic,
    solution: Solution,
) -> Callable[[CancellationToken], Awaitable[FixOutcome]]:
    def apply(cancellation: CancellationToken) -> Awaitable[FixOutcome]:
        cancellation.raise_if_cancelled()
        return binding.action(
            document=document,
            diagnostic=diagnostic,
            solution=solution,
            cancellation=cancellation,
        )

    return apply


_registry: Registry | None = None
_registry_lock: threading.Lock = threading.Lock()


def get_registry() -> Registry:
    """Return the process-wide registry, building it on first use."""
    global _registry
    registry: Registry | None = _registry
    if registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = Registry(rules=RULE_DEFINITIONS, fixes=FIX_BINDINGS)
            registry = _registry
    return registry
