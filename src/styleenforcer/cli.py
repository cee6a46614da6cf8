"""Command-line interface for styleenforcer using Click."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Final

import click

from styleenforcer.config import load_config
from styleenforcer.constants import OutputFormat, __version__
from styleenforcer.explain import format_rule_detail, format_rule_table
from styleenforcer.registry import Registry, get_registry
from styleenforcer.runner import FixResult, fix_paths, format_diff, format_results, lint_paths
from styleenforcer.serde import dump_document
from styleenforcer.types import ConfigError, StyleConfig


def _severities(*, registry: Registry, config: StyleConfig) -> dict[str, str]:
    return {
        descriptor.id: registry.effective_severity(descriptor.id, config=config).value
        for descriptor in registry.list_supported_descriptors()
    }


def format_config_text(*, config: StyleConfig, registry: Registry) -> str:
    """Format configuration as human-readable text."""
    lines: list[str] = [
        "styleenforcer Configuration",
        "=" * 40,
        "",
        f"Config file: {config.config_path or '(defaults)'}",
        f"Scope: {config.scope or '(all namespaces)'}",
        "",
        "File Discovery:",
        f"  Include: {', '.join(config.include)}",
        f"  Exclude: {', '.join(config.exclude[:5])}{'...' if len(config.exclude) > 5 else ''}",
        "",
        "Output:",
        f"  Format: {config.output_format.value}",
        f"  Show source: {config.show_source}",
        "",
        "Fixing:",
        f"  Max passes: {config.max_fix_passes}",
        "",
        "Rules:",
    ]

    for rule_id, severity in _severities(registry=registry, config=config).items():
        scoped: str = "scoped" if config.is_scoped(rule_id) else "unscoped"
        lines.append(f"  {rule_id}: {severity.upper()} ({scoped})")

    lines.extend([
        "",
        "ClosingBraceMustHaveComment:",
        f"  Label: {config.rules.closing_brace.label.value}",
    ])

    return "\n".join(lines)


def format_config_json(*, config: StyleConfig, registry: Registry) -> str:
    """Format configuration as JSON."""
    data: dict[str, Any] = {
        "config_path": str(config.config_path) if config.config_path else None,
        "scope": config.scope,
        "include": list(config.include),
        "exclude": list(config.exclude),
        "output_format": config.output_format.value,
        "show_source": config.show_source,
        "max_fix_passes": config.max_fix_passes,
        "rules": {
            "severities": _severities(registry=registry, config=config),
            "scoped": {
                descriptor.id: config.is_scoped(descriptor.id)
                for descriptor in registry.list_supported_descriptors()
            },
            "ClosingBraceMustHaveComment": {
                "label": config.rules.closing_brace.label.value,
            },
        },
    }
    return json.dumps(data, indent=2)


class ConfigType(click.ParamType):
    """Custom Click parameter type for config path."""

    name: str = "path"

    def convert(
        self,
        value: str | Path | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> Path | None:
        if value is None:
            return None
        return Path(value)


CONFIG_TYPE: Final[ConfigType] = ConfigType()


@click.group()
@click.version_option(version=__version__, prog_name="styleenforcer")
@click.option(
    "--config",
    "config_path",
    type=CONFIG_TYPE,
    default=None,
    help="Path to pyproject.toml (default: search upward from current directory)",
)
@click.option("--verbose", is_flag=True, help="Show progress and timing")
@click.option("--debug", is_flag=True, help="Show detailed trace")
@click.pass_context
def cli(
    ctx: click.Context,
    *,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
) -> None:
    """styleenforcer - Style rules and fixes for brace-delimited syntax trees."""
    level: int = (
        logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    try:
        cfg: StyleConfig = load_config(path=config_path)
        ctx.obj["config"] = cfg
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        if e.path:
            click.echo(f"  in: {e.path}", err=True)
        ctx.exit(1)


@cli.command()
@click.option("--validate", is_flag=True, help="Only validate configuration, don't print")
@click.option("--json", "as_json", is_flag=True, help="Output configuration as JSON")
@click.pass_context
def config(ctx: click.Context, *, validate: bool, as_json: bool) -> None:
    """Show or validate configuration."""
    cfg: StyleConfig = ctx.obj["config"]

    if validate:
        click.echo(f"Configuration valid: {cfg.config_path or '(defaults)'}")
        return

    registry: Registry = get_registry()
    if as_json:
        click.echo(format_config_json(config=cfg, registry=registry))
    else:
        click.echo(format_config_text(config=cfg, registry=registry))


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Output format (overrides config)",
)
@click.option("--show-source/--no-show-source", default=None, help="Show source code snippets")
@click.pass_context
def lint(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    output_format: str | None,
    show_source: bool | None,
) -> None:
    """Check syntax tree files for style violations."""
    cfg: StyleConfig = ctx.obj["config"]

    # Apply CLI overrides
    overrides: dict[str, Any] = {}
    if output_format is not None:
        overrides["output_format"] = OutputFormat(output_format)
    if show_source is not None:
        overrides["show_source"] = show_source

    if overrides:
        cfg = replace(cfg, **overrides)

    if not paths:
        paths = (Path("."),)

    result = lint_paths(paths=paths, config=cfg)
    output: str = format_results(result=result, config=cfg)
    if output:
        click.echo(output)
    ctx.exit(result.exit_code)


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option("--diff", "show_diff", is_flag=True, help="Print unified diff, don't write files")
@click.option("--check", "check_only", is_flag=True, help="Exit 1 if any file would change")
@click.pass_context
def fix(
    ctx: click.Context,
    paths: tuple[Path, ...],
    *,
    show_diff: bool,
    check_only: bool,
) -> None:
    """Apply fixes to syntax tree files until no fixable violation remains."""
    cfg: StyleConfig = ctx.obj["config"]

    if not paths:
        paths = (Path("."),)

    result: FixResult = fix_paths(paths=paths, config=cfg)
    for skipped in result.skipped:
        click.echo(f"Skipped {skipped.location.document}: {skipped.message}", err=True)

    if show_diff:
        for path in sorted(result.changes):
            old, new = result.changes[path]
            click.echo(format_diff(path=path, old=old, new=new), nl=False)
        suffix: str = "s" if result.files_changed != 1 else ""
        click.echo(f"{result.files_changed} file{suffix} would be changed.")
        return

    if check_only:
        suffix = "s" if result.files_changed != 1 else ""
        if result.files_changed > 0:
            click.echo(f"{result.files_changed} file{suffix} would be changed.")
            ctx.exit(1)
        else:
            click.echo("No changes needed.")
        return

    # Default: write changed trees in-place
    for path, (_, new) in result.changes.items():
        dump_document(new, path)

    suffix = "s" if result.files_changed != 1 else ""
    click.echo(f"Fixed {result.files_changed} file{suffix}.")


@cli.command()
@click.argument("rule_id", required=False, default=None)
@click.option("--all", "show_all", is_flag=True, help="List all rules with summaries")
@click.pass_context
def explain(ctx: click.Context, rule_id: str | None, *, show_all: bool) -> None:
    """Show rule documentation and examples."""
    cfg: StyleConfig = ctx.obj["config"]
    registry: Registry = get_registry()
    severities: dict[str, str] = _severities(registry=registry, config=cfg)

    if show_all:
        click.echo(format_rule_table(registry=registry, severities=severities))
        return

    if rule_id is None:
        click.echo("Usage: styleenforcer explain <RULE_ID> or styleenforcer explain --all")
        ctx.exit(1)
        return

    known: dict[str, str] = {key.lower(): key for key in registry.descriptors_by_id}
    resolved: str | None = known.get(rule_id.lower())
    if resolved is None:
        click.echo(f"Error: Unknown rule '{rule_id}'.", err=True)
        ctx.exit(1)
        return

    click.echo(format_rule_detail(
        registry=registry,
        rule_id=resolved,
        severity=severities[resolved],
    ))


def main() -> None:
    """Main entry point for styleenforcer CLI."""
    cli()


if __name__ == "__main__":
    main()
