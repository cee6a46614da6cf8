"""Shared utilities for fixer modules."""
from __future__ import annotations

from styleenforcer.diagnostics import Diagnostic
from styleenforcer.syntax import Path, TokenLocation, find_token
from styleenforcer.workspace import Document


def token_at(document: Document, diagnostic: Diagnostic) -> TokenLocation | None:
    """Return the token at the start of *diagnostic*'s span, or ``None``."""
    return find_token(document.root, diagnostic.location.span.start)


def enclosing_paths(path: Path) -> list[Path]:
    """Paths of the nodes enclosing *path*, innermost first.

    Pairs index-for-index with :func:`styleenforcer.syntax.ancestors`.
    """
    return [path[:depth] for depth in range(len(path) - 1, -1, -1)]
