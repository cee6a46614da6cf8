"""Fix for ClosingBraceMustHaveComment: append the expected end comment."""
from __future__ import annotations

import logging

from styleenforcer.constants import TARGET_COMMENT_PROPERTY
from styleenforcer.diagnostics import Diagnostic
from styleenforcer.errors import MissingDiagnosticPropertyError
from styleenforcer.factory import comment, end_of_line
from styleenforcer.fixers._util import token_at
from styleenforcer.syntax import SyntaxKind, Token, TokenLocation, Trivia, replace_element
from styleenforcer.workspace import CancellationToken, Document, Solution

logger: logging.Logger = logging.getLogger(__name__)


async def add_end_comment(
    *,
    document: Document,
    diagnostic: Diagnostic,
    solution: Solution,
    cancellation: CancellationToken,
) -> Document:
    """Insert ``TargetComment`` and a line break after the closing brace.

    The new trivia goes in front of any trailing trivia the brace already
    has. Returns *document* unchanged when the diagnostic no longer points
    at a closing brace.

    Raises:
        MissingDiagnosticPropertyError: The diagnostic carries no
            ``TargetComment``.
        OperationCancelledError: If *cancellation* fires.
    """
    cancellation.raise_if_cancelled()
    target: str | None = diagnostic.properties.get(TARGET_COMMENT_PROPERTY)
    if not target:
        raise MissingDiagnosticPropertyError(diagnostic.descriptor_id, TARGET_COMMENT_PROPERTY)

    found: TokenLocation | None = token_at(document, diagnostic)
    if found is None or found.token.kind is not SyntaxKind.CLOSE_BRACE_TOKEN:
        logger.debug("No closing brace at %s:%d", document.id, diagnostic.location.span.start)
        return document

    brace: Token = found.token
    inserted: tuple[Trivia, ...] = (comment(target), end_of_line())
    fixed: Token = brace.with_trailing((*inserted, *brace.trailing))
    return document.with_root(replace_element(document.root, found.path, fixed))
