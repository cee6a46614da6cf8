"""Configuration types for styleenforcer."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from styleenforcer.constants import (
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDE,
    DEFAULT_MAX_FIX_PASSES,
    DEFAULT_SCOPE,
    CommentLabel,
    OutputFormat,
    Severity,
)


@dataclass(frozen=True, slots=True)
class ClosingBraceOptions:
    """Options for the ClosingBraceMustHaveComment rule."""

    label: CommentLabel = CommentLabel.NAME


@dataclass(frozen=True, slots=True)
class RuleConfig:
    """Per-rule overrides. Rules absent from a mapping use their defaults."""

    severities: MappingProxyType[str, Severity] = field(
        default_factory=lambda: MappingProxyType({})
    )
    scoped: MappingProxyType[str, bool] = field(
        default_factory=lambda: MappingProxyType({})
    )
    closing_brace: ClosingBraceOptions = field(default_factory=ClosingBraceOptions)


@dataclass(frozen=True, slots=True)
class StyleConfig:
    """Complete styleenforcer configuration."""

    config_path: Path | None = None
    scope: str = DEFAULT_SCOPE
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    output_format: OutputFormat = OutputFormat.TEXT
    show_source: bool = True
    max_fix_passes: int = DEFAULT_MAX_FIX_PASSES
    rules: RuleConfig = field(default_factory=RuleConfig)

    def get_severity(self, rule_id: str, default: Severity) -> Severity:
        """Get the configured severity for a rule, falling back to *default*."""
        return self.rules.severities.get(rule_id, default)

    def is_scoped(self, rule_id: str) -> bool:
        """Check if a rule only runs inside the configured scope."""
        return self.rules.scoped.get(rule_id, True)


class ConfigError(Exception):
    """Error during configuration loading or validation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        self.path: Path | None = path
        super().__init__(message)
