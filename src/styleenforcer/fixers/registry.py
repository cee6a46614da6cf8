"""Static fix registration table."""
from __future__ import annotations

from typing import Final

from styleenforcer.constants import (
    CLOSING_BRACE_MUST_HAVE_COMMENT,
    ENUMS_MUST_END_IN_S,
    FILE_MUST_END_IN_NEW_LINE,
)
from styleenforcer.descriptors import FixBinding
from styleenforcer.fixers.brace_comment import add_end_comment
from styleenforcer.fixers.enum_rename import pluralize_enum_name
from styleenforcer.fixers.file_newline import add_final_newline

FIX_BINDINGS: Final[tuple[FixBinding, ...]] = (
    FixBinding(
        id="PluralizeEnumName",
        title="Add 's' to the enum name",
        target_descriptor_id=ENUMS_MUST_END_IN_S,
        action=pluralize_enum_name,
    ),
    FixBinding(
        id="AddFinalNewLine",
        title="Add a line break at the end of the file",
        target_descriptor_id=FILE_MUST_END_IN_NEW_LINE,
        action=add_final_newline,
    ),
    FixBinding(
        id="AddEndComment",
        title="Add the closing brace comment",
        target_descriptor_id=CLOSING_BRACE_MUST_HAVE_COMMENT,
        action=add_end_comment,
    ),
)
