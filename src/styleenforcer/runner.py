"""Host driver: runs rules over documents and applies fixes until clean."""
from __future__ import annotations

import asyncio
import difflib
import logging
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from styleenforcer.constants import INVALID_TREE_CODE, Severity
from styleenforcer.context import SymbolContext, SyntaxNodeContext
from styleenforcer.descriptors import CodeAction, FixOutcome
from styleenforcer.diagnostics import Diagnostic, DiagnosticCollection, Location
from styleenforcer.errors import TreeFormatError
from styleenforcer.formatters import Formatter, format_summary, get_formatter
from styleenforcer.registry import Registry, get_registry
from styleenforcer.rules.base import SymbolRule, SyntaxRule
from styleenforcer.scanner import scan_files
from styleenforcer.serde import load_document
from styleenforcer.symbols import SymbolTable, build_symbol_table
from styleenforcer.syntax import Node, Path as NodePath, SyntaxKind, TextSpan, child_positions
from styleenforcer.types import StyleConfig
from styleenforcer.workspace import NEVER_CANCELLED, CancellationToken, Document, Solution

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LintResult:
    diagnostics: DiagnosticCollection
    files_checked: int
    exit_code: int


@dataclass(frozen=True, slots=True)
class FixResult:
    """Documents the fix loop changed, keyed by file, as ``(old, new)``."""

    changes: dict[Path, tuple[Document, Document]] = field(
        default_factory=lambda: dict[Path, tuple[Document, Document]]()
    )
    # Tree files that could not be loaded and were left alone.
    skipped: list[Diagnostic] = field(default_factory=lambda: list[Diagnostic]())

    @property
    def files_changed(self) -> int:
        return len(self.changes)


@dataclass(frozen=True, slots=True)
class _NodeVisit:
    node: Node
    path: NodePath
    full_start: int
    ancestors: tuple[Node, ...]


def _walk_nodes(root: Node) -> Iterator[_NodeVisit]:
    """Pre-order walk over every node, with its enclosing nodes innermost first."""
    stack: list[_NodeVisit] = [_NodeVisit(root, (), 0, ())]
    while stack:
        visit: _NodeVisit = stack.pop()
        yield visit
        enclosing: tuple[Node, ...] = (visit.node, *visit.ancestors)
        children: list[_NodeVisit] = [
            _NodeVisit(child, (*visit.path, index), start, enclosing)
            for index, child, start in child_positions(visit.node, visit.full_start)
            if isinstance(child, Node)
        ]
        stack.extend(reversed(children))


def analyze_document(
    document: Document,
    *,
    config: StyleConfig,
    registry: Registry,
) -> list[Diagnostic]:
    """Run every enabled syntax rule over *document*'s nodes."""
    rules_by_kind: dict[SyntaxKind, list[SyntaxRule]] = {}
    for rule in registry.syntax_rules(config=config):
        for kind in rule.kinds:
            rules_by_kind.setdefault(kind, []).append(rule)

    diagnostics: list[Diagnostic] = []
    for visit in _walk_nodes(document.root):
        rules: list[SyntaxRule] | None = rules_by_kind.get(visit.node.kind)
        if not rules:
            continue
        context: SyntaxNodeContext = SyntaxNodeContext(
            document=document,
            node=visit.node,
            path=visit.path,
            full_start=visit.full_start,
            ancestors=visit.ancestors,
            registry=registry,
            config=config,
        )
        for rule in rules:
            diagnostics.extend(rule.check(context=context))
    return diagnostics


def analyze_solution(
    solution: Solution,
    *,
    config: StyleConfig,
    registry: Registry,
    cancellation: CancellationToken = NEVER_CANCELLED,
) -> list[Diagnostic]:
    """Run syntax rules over every document, then symbol rules over every type."""
    diagnostics: list[Diagnostic] = []
    for document in solution:
        cancellation.raise_if_cancelled()
        logger.debug("Analyzing %s", document.id)
        diagnostics.extend(analyze_document(document, config=config, registry=registry))

    symbol_rules: list[SymbolRule] = registry.symbol_rules(config=config)
    if symbol_rules:
        table: SymbolTable = build_symbol_table(solution, cancellation)
        for symbol in table.named_types():
            context: SymbolContext = SymbolContext(
                solution=solution,
                symbol=symbol,
                symbols=table,
                registry=registry,
                config=config,
            )
            for rule in symbol_rules:
                diagnostics.extend(rule.check(context=context))
    logger.debug("Found %d diagnostic(s) in %d document(s)", len(diagnostics), len(solution))
    return diagnostics


def _merge(solution: Solution, result: FixOutcome) -> Solution:
    if isinstance(result, Document):
        return solution.with_document(result)
    return result


def _fix_order(diagnostic: Diagnostic) -> tuple[str, int]:
    return diagnostic.location.document, -diagnostic.location.span.start


async def _apply_pass(
    current: Solution,
    diagnostics: list[Diagnostic],
    *,
    registry: Registry,
    pass_number: int,
    cancellation: CancellationToken,
) -> Solution:
    """Commit one fix per non-overlapping diagnostic.

    Each document is fixed from its last diagnostic to its first, so spans
    earlier in the text still point at the same tokens. A fix that returns a
    whole solution is only committed as the first change of a pass, and it
    ends the pass.
    """
    updated: Solution = current
    floors: dict[str, int] = {}
    for diagnostic in sorted(diagnostics, key=_fix_order):
        span: TextSpan = diagnostic.location.span
        floor: int | None = floors.get(diagnostic.location.document)
        if floor is not None and (span.start >= floor or span.end > floor):
            continue

        for action in registry.dispatch_fixes([diagnostic], solution=updated):
            outcome: FixOutcome = await action.apply(cancellation)
            candidate: Solution = _merge(updated, outcome)
            if not updated.changed_documents(candidate):
                continue
            if isinstance(outcome, Solution) and updated is not current:
                break
            logger.debug(
                "Pass %d: applied %s at %s:%d:%d",
                pass_number,
                action.fix_id,
                diagnostic.location.document,
                diagnostic.location.line,
                diagnostic.location.column,
            )
            updated = candidate
            if isinstance(outcome, Solution):
                return updated
            floors[diagnostic.location.document] = span.start
            break
    return updated


async def apply_fixes(
    solution: Solution,
    *,
    config: StyleConfig,
    registry: Registry,
    cancellation: CancellationToken = NEVER_CANCELLED,
) -> Solution:
    """Apply fixes pass by pass until nothing fixable remains.

    Each pass re-analyzes the current solution and commits a fix for every
    diagnostic that does not overlap one already fixed in that pass. The
    loop stops when a pass changes nothing or after
    ``config.max_fix_passes`` passes.

    Raises:
        MissingFixBindingError: A fixable rule reported a diagnostic but has
            no fix bound to it.
        OperationCancelledError: If *cancellation* fires.
    """
    current: Solution = solution
    pass_number: int = 0
    while True:
        cancellation.raise_if_cancelled()
        diagnostics: list[Diagnostic] = analyze_solution(
            current, config=config, registry=registry, cancellation=cancellation,
        )
        actions: list[CodeAction] = registry.dispatch_fixes(diagnostics, solution=current)
        if not actions:
            logger.debug("No fixable diagnostics after %d pass(es)", pass_number)
            return current

        fixable: list[Diagnostic] = list(
            {id(action.diagnostic): action.diagnostic for action in actions}.values()
        )
        if pass_number == config.max_fix_passes:
            logger.warning(
                "Stopped after %d fix passes with %d fixable diagnostic(s) remaining",
                pass_number,
                len(fixable),
            )
            return current

        pass_number += 1
        updated: Solution = await _apply_pass(
            current,
            fixable,
            registry=registry,
            pass_number=pass_number,
            cancellation=cancellation,
        )
        if updated is current:
            logger.warning(
                "%d fixable diagnostic(s) remain but no fix changes the code",
                len(fixable),
            )
            return current
        current = updated


def fix_solution(
    solution: Solution,
    *,
    config: StyleConfig,
    registry: Registry,
    cancellation: CancellationToken = NEVER_CANCELLED,
) -> Solution:
    """Synchronous entry point for :func:`apply_fixes`."""
    return asyncio.run(
        apply_fixes(solution, config=config, registry=registry, cancellation=cancellation)
    )


def _invalid_tree_to_diagnostic(*, file: Path, error: TreeFormatError) -> Diagnostic:
    return Diagnostic(
        descriptor_id=INVALID_TREE_CODE,
        location=Location(document=str(file), span=TextSpan(0, 0), line=1, column=1),
        message=str(error),
        severity=Severity.ERROR,
    )


def _load_solution(
    *,
    files: list[Path],
) -> tuple[Solution, list[Diagnostic]]:
    documents: list[Document] = []
    failures: list[Diagnostic] = []
    for file in files:
        try:
            documents.append(load_document(file))
        except TreeFormatError as e:
            logger.debug("Cannot load %s: %s", file, e)
            failures.append(_invalid_tree_to_diagnostic(file=file, error=e))
    return Solution.of(*documents), failures


def lint_paths(
    *,
    paths: tuple[Path, ...],
    config: StyleConfig,
    registry: Registry | None = None,
) -> LintResult:
    started: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    logger.info("Found %d tree files", len(files))

    solution, failures = _load_solution(files=files)
    collection: DiagnosticCollection = DiagnosticCollection()
    collection.add_all(diagnostics=failures)
    collection.add_all(diagnostics=analyze_solution(
        solution, config=config, registry=registry or get_registry(),
    ))

    logger.info("Completed in %.2fs", time.perf_counter() - started)
    exit_code: int = 1 if collection.has_errors else 0
    return LintResult(
        diagnostics=collection,
        files_checked=len(files),
        exit_code=exit_code,
    )


def fix_paths(
    *,
    paths: tuple[Path, ...],
    config: StyleConfig,
    registry: Registry | None = None,
) -> FixResult:
    """Fix every tree file under *paths*. Nothing is written to disk."""
    started: float = time.perf_counter()
    files: list[Path] = scan_files(paths=paths, config=config)
    logger.info("Found %d tree files", len(files))

    solution, failures = _load_solution(files=files)
    for failure in failures:
        logger.warning("Skipping %s: %s", failure.location.document, failure.message)

    fixed: Solution = fix_solution(
        solution, config=config, registry=registry or get_registry(),
    )
    changes: dict[Path, tuple[Document, Document]] = {
        Path(doc_id): (solution.get_document(doc_id), fixed.get_document(doc_id))
        for doc_id in solution.changed_documents(fixed)
    }

    logger.info("Completed in %.2fs", time.perf_counter() - started)
    return FixResult(changes=changes, skipped=failures)


def format_results(*, result: LintResult, config: StyleConfig) -> str:
    formatter: Formatter = get_formatter(output_format=config.output_format)
    output: str = formatter.format(diagnostics=result.diagnostics, config=config)

    summary: str = format_summary(diagnostics=result.diagnostics)
    suffix: str = "s" if result.files_checked != 1 else ""
    file_count: str = f"Checked {result.files_checked} file{suffix}."

    parts: list[str] = []
    if output:
        parts.append(output)
    parts.append(summary)
    parts.append(file_count)

    return "\n".join(parts)


def format_diff(*, path: Path, old: Document, new: Document) -> str:
    """Unified diff of the source text the two trees spell out."""
    return "".join(difflib.unified_diff(
        old.text.splitlines(keepends=True),
        new.text.splitlines(keepends=True),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
    ))
