"""Configuration loading and validation for styleenforcer."""
from __future__ import annotations

import tomllib
from pathlib import Path
from types import MappingProxyType
from typing import Any

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    DEFAULT_EXCLUDES,
    DEFAULT_INCLUDE,
    DEFAULT_MAX_FIX_PASSES,
    DEFAULT_SCOPE,
    RULE_IDS,
    CommentLabel,
    OutputFormat,
    Severity,
)
from styleenforcer.types import (
    ClosingBraceOptions,
    ConfigError,
    RuleConfig,
    StyleConfig,
)

_RULE_IDS_BY_KEY: dict[str, str] = {rule_id.lower(): rule_id for rule_id in RULE_IDS}


class ConfigLoader:
    """Loads and validates styleenforcer configuration."""

    @staticmethod
    def find_config_file(start_path: Path | None = None) -> Path | None:
        """
        Find pyproject.toml by walking up from start_path.

        Args:
            start_path: Directory to start searching from. Defaults to cwd.

        Returns:
            Path to pyproject.toml if found, None otherwise.
        """
        if start_path is None:
            start_path = Path.cwd()

        start_path = start_path.resolve()

        for directory in [start_path, *start_path.parents]:
            config_path: Path = directory / "pyproject.toml"
            if config_path.is_file():
                return config_path

        return None

    @staticmethod
    def load(path: Path | None = None) -> StyleConfig:
        """
        Load configuration from pyproject.toml.

        Args:
            path: Explicit path to pyproject.toml. If None, searches upward.

        Returns:
            Validated StyleConfig instance.

        Raises:
            ConfigError: If configuration is invalid.
        """
        if path is None:
            path = ConfigLoader.find_config_file()

        if path is None:
            return StyleConfig()

        try:
            with open(path, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML: {e}", path=path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {e}", path=path) from e

        tool_config: dict[str, Any] = data.get("tool", {}).get("styleenforcer", {})

        return ConfigLoader._parse_config(tool_config, config_path=path)

    @staticmethod
    def _parse_config(
        data: dict[str, Any],
        *,
        config_path: Path | None = None,
    ) -> StyleConfig:
        """Parse and validate configuration dictionary."""
        errors: list[str] = []

        scope: str = data.get("scope", DEFAULT_SCOPE)
        if not isinstance(scope, str):
            errors.append(f"scope must be a string, got {type(scope).__name__}")
            scope = DEFAULT_SCOPE

        include: tuple[str, ...] = DEFAULT_INCLUDE
        raw_include: Any = data.get("include", DEFAULT_INCLUDE)
        if isinstance(raw_include, list):
            include = tuple(raw_include)
        elif not isinstance(raw_include, tuple):
            errors.append(f"include must be a list, got {type(raw_include).__name__}")

        exclude: tuple[str, ...] = DEFAULT_EXCLUDES
        raw_exclude: Any = data.get("exclude", DEFAULT_EXCLUDES)
        if isinstance(raw_exclude, list):
            exclude = tuple(raw_exclude)
        elif not isinstance(raw_exclude, tuple):
            errors.append(f"exclude must be a list, got {type(raw_exclude).__name__}")

        output_format: OutputFormat = OutputFormat.TEXT
        if "output_format" in data:
            try:
                output_format = OutputFormat(data["output_format"])
            except ValueError:
                valid: list[str] = [f.value for f in OutputFormat]
                errors.append(f"output_format must be one of {valid}")

        show_source: bool = data.get("show_source", True)
        if not isinstance(show_source, bool):
            errors.append("show_source must be a boolean")
            show_source = True

        max_fix_passes: int = data.get("max_fix_passes", DEFAULT_MAX_FIX_PASSES)
        if (
            not isinstance(max_fix_passes, int)
            or isinstance(max_fix_passes, bool)
            or max_fix_passes < 1
        ):
            errors.append("max_fix_passes must be a positive integer")
            max_fix_passes = DEFAULT_MAX_FIX_PASSES

        rules: RuleConfig = ConfigLoader._parse_rules(data.get("rules", {}), errors)

        if errors:
            error_msg: str = "Configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            raise ConfigError(error_msg, path=config_path)

        return StyleConfig(
            config_path=config_path,
            scope=scope,
            include=include,
            exclude=exclude,
            output_format=output_format,
            show_source=show_source,
            max_fix_passes=max_fix_passes,
            rules=rules,
        )

    @staticmethod
    def _parse_severity(value: Any, *, key: str, errors: list[str]) -> Severity | None:
        if isinstance(value, str):
            try:
                return Severity(value.lower())
            except ValueError:
                pass
        valid: list[str] = [s.value for s in Severity]
        errors.append(f"rules.{key} must be one of {valid}")
        return None

    @staticmethod
    def _parse_rules(data: dict[str, Any], errors: list[str]) -> RuleConfig:
        """Parse rules configuration."""
        if not isinstance(data, dict):
            errors.append("rules must be a table")
            return RuleConfig()

        severities: dict[str, Severity] = {}
        scoped: dict[str, bool] = {}
        closing_brace: ClosingBraceOptions = ClosingBraceOptions()

        for key, value in data.items():
            rule_id: str | None = _RULE_IDS_BY_KEY.get(key.lower())
            if rule_id is None:
                errors.append(f"rules.{key} is not a known rule id")
                continue

            if not isinstance(value, dict):
                severity: Severity | None = ConfigLoader._parse_severity(
                    value, key=key, errors=errors,
                )
                if severity is not None:
                    severities[rule_id] = severity
                continue

            if "severity" in value:
                severity = ConfigLoader._parse_severity(
                    value["severity"], key=f"{key}.severity", errors=errors,
                )
                if severity is not None:
                    severities[rule_id] = severity

            if "scoped" in value:
                if isinstance(value["scoped"], bool):
                    scoped[rule_id] = value["scoped"]
                else:
                    errors.append(f"rules.{key}.scoped must be a boolean")

            if "label" in value:
                if rule_id != CLOSING_BRACE_MUST_HAVE_COMMENT:
                    errors.append(f"rules.{key}.label is not a valid option")
                    continue
                try:
                    closing_brace = ClosingBraceOptions(label=CommentLabel(value["label"]))
                except ValueError:
                    valid: list[str] = [c.value for c in CommentLabel]
                    errors.append(f"rules.{key}.label must be one of {valid}")

        return RuleConfig(
            severities=MappingProxyType(severities),
            scoped=MappingProxyType(scoped),
            closing_brace=closing_brace,
        )


def load_config(path: Path | None = None) -> StyleConfig:
    """
    Convenience function to load configuration.

    Args:
        path: Optional explicit path to pyproject.toml.

    Returns:
        Validated configuration.
    """
    return ConfigLoader.load(path)
