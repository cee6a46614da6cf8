"""Constants and enums for styleenforcer configuration."""
from __future__ import annotations

from enum import Enum
from typing import Final

__version__: Final[str] = "0.1.0"


class Severity(Enum):
    """Diagnostic severity levels. ``OFF`` only appears in configuration."""

    HIDDEN = "hidden"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    OFF = "off"


class Category(Enum):
    """Descriptor categories."""

    STYLE = "Style"


class OutputFormat(Enum):
    """Output format options."""

    TEXT = "text"
    JSON = "json"


class CommentLabel(Enum):
    """How the expected closing-brace comment is labelled."""

    NAME = "name"
    KIND = "kind"


FILE_MUST_END_IN_NEW_LINE: Final[str] = "FileMustEndInNewLine"
MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE: Final[str] = "MembersMustBePrecededByEmptyLine"
CLOSING_BRACE_MUST_HAVE_COMMENT: Final[str] = "ClosingBraceMustHaveComment"
ENUMS_MUST_END_IN_S: Final[str] = "EnumsMustEndInS"

RULE_IDS: Final[tuple[str, ...]] = (
    FILE_MUST_END_IN_NEW_LINE,
    MEMBERS_MUST_BE_PRECEDED_BY_EMPTY_LINE,
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    ENUMS_MUST_END_IN_S,
)

# Property a ClosingBraceMustHaveComment diagnostic carries for its fix.
TARGET_COMMENT_PROPERTY: Final[str] = "TargetComment"

DEFAULT_SEVERITY: Final[Severity] = Severity.ERROR
DEFAULT_SCOPE: Final[str] = "VusrCore"
DEFAULT_MAX_FIX_PASSES: Final[int] = 100

INVALID_TREE_CODE: Final[str] = "InvalidSyntaxTree"

TREE_FILE_SUFFIX: Final[str] = ".json"

DEFAULT_INCLUDE: Final[tuple[str, ...]] = ("**/*.json",)

DEFAULT_EXCLUDES: Final[tuple[str, ...]] = (
    "**/.*",
    "**/.git/**",
    "**/.venv/**",
    "**/node_modules/**",
    "build/**",
    "dist/**",
)
