"""Pytest fixtures for styleenforcer tests."""
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from styleenforcer.factory import (
    class_declaration,
    comment,
    compilation_unit,
    end_of_line,
    namespace_declaration,
)
from styleenforcer.serde import dump_document
from styleenforcer.syntax import Node
from styleenforcer.workspace import Document


@pytest.fixture
def temp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.styleenforcer]
scope = "Acme"
include = ["trees/**/*.json"]
exclude = ["**/generated/**"]
output_format = "json"
show_source = false
max_fix_passes = 10

[tool.styleenforcer.rules]
FileMustEndInNewLine = "warning"
membersmustbeprecededbyemptyline = "off"

[tool.styleenforcer.rules.ClosingBraceMustHaveComment]
severity = "info"
scoped = false
label = "kind"
"""
    )
    return config_path


@pytest.fixture
def empty_pyproject(tmp_path: Path) -> Path:
    """Create a pyproject.toml without [tool.styleenforcer] section."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[project]
name = "test-project"
version = "0.1.0"
"""
    )
    return config_path


@pytest.fixture
def invalid_toml(tmp_path: Path) -> Path:
    """Create an invalid TOML file."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text("invalid [ toml content")
    return config_path


@pytest.fixture
def invalid_config(tmp_path: Path) -> Path:
    """Create a pyproject.toml with invalid styleenforcer config."""
    config_path: Path = tmp_path / "pyproject.toml"
    config_path.write_text(
        """
[tool.styleenforcer]
output_format = "invalid_format"
max_fix_passes = 0

[tool.styleenforcer.rules]
FileMustEndInNewLine = "super_error"
NoSuchRule = "error"

[tool.styleenforcer.rules.EnumsMustEndInS]
label = "kind"
"""
    )
    return config_path


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[str, Node], Path]:
    """Serialize a tree to ``tmp_path / relative`` and return the file path."""

    def write(relative: str, root: Node) -> Path:
        path: Path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        dump_document(Document(id=str(path), root=root), path)
        return path

    return write


@pytest.fixture
def unlabelled_unit() -> Node:
    """``namespace VusrCore.X { class Foo { } }`` with no end comments."""
    return compilation_unit(
        namespace_declaration(
            "VusrCore.X",
            (class_declaration("Foo", indent="    "),),
        ),
    )


@pytest.fixture
def labelled_unit() -> Node:
    """The same unit with both end comments in place; no rule fires on it."""
    return compilation_unit(
        namespace_declaration(
            "VusrCore.X",
            (class_declaration(
                "Foo",
                indent="    ",
                close_trailing=(comment("// End Foo class"), end_of_line()),
            ),),
            close_trailing=(comment("// End VusrCore.X namespace"), end_of_line()),
        ),
    )
