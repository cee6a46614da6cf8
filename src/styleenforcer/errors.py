"""Error taxonomy for the rule and fix engine."""
from __future__ import annotations


class StyleEnforcerError(Exception):
    """Base class for engine errors."""


class RegistryError(StyleEnforcerError):
    """The static rule/fix tables are inconsistent."""


class UnknownRuleError(RegistryError, KeyError):
    """A descriptor or fix lookup named an unregistered id."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id: str = rule_id
        super().__init__(f"Unknown rule id: {rule_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class MissingFixBindingError(RegistryError):
    """A fixable rule has no fix bound to it."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id: str = rule_id
        super().__init__(f"Missing fix for diagnostic: {rule_id}")


class MissingDiagnosticPropertyError(RegistryError):
    """A diagnostic lacks a property its bound fix reads."""

    def __init__(self, rule_id: str, property_name: str) -> None:
        self.rule_id: str = rule_id
        self.property_name: str = property_name
        super().__init__(f"{rule_id} diagnostic has no {property_name!r} property")


class SymbolResolutionError(StyleEnforcerError):
    """A fix could not resolve the symbol it was asked to change."""


class OperationCancelledError(StyleEnforcerError):
    """Cooperative cancellation was observed mid-operation."""


class TreeFormatError(StyleEnforcerError, ValueError):
    """A serialized tree does not have the expected shape."""
