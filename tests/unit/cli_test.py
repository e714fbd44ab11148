"""Tests for the template inspection CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from codegen_templates.cli.app import app

runner = CliRunner()

_REPLACE_SOURCE = "#region TEMPLATE REPLACE(`VALUE`, $v)\nvalue = VALUE;\n#endregion\n"


@pytest.fixture
def replace_file(tmp_path: Path) -> Path:
    path = tmp_path / "Replace.cs"
    path.write_text(_REPLACE_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def defined_file(tmp_path: Path, defined_templates_source: str) -> Path:
    path = tmp_path / "Defined.cs"
    path.write_text(defined_templates_source, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "args",
    [[], ["check"], ["ranges"], ["markers"], ["tree"], ["preview"]],
    ids=["root", "check", "ranges", "markers", "tree", "preview"],
)
def test_short_help_flag(args: list[str]) -> None:
    result = runner.invoke(app, [*args, "-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_check_reports_valid_template(replace_file: Path) -> None:
    result = runner.invoke(app, ["check", str(replace_file)])

    assert result.exit_code == 0
    assert "OK" in result.output
    assert "1 replace ranges" in result.output


def test_check_reports_each_defined_template(defined_file: Path) -> None:
    result = runner.invoke(app, ["check", str(defined_file), "--named"])

    assert result.exit_code == 0
    assert "Template 'Method'" in result.output
    assert "Template 'Field'" in result.output


def test_check_fails_on_invalid_template(tmp_path: Path) -> None:
    path = tmp_path / "Broken.cs"
    path.write_text("a\n#endregion\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(path)])

    assert result.exit_code == 1
    assert "Validation error: 2:1: Unmatched #endregion" in result.output


def test_check_fails_on_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["check", str(tmp_path / "missing.cs")])

    assert result.exit_code == 1
    assert "Template file not found" in result.output


def test_preview_shows_placeholders(replace_file: Path) -> None:
    result = runner.invoke(app, ["preview", str(replace_file)])

    assert result.exit_code == 0
    assert "value = [$v];" in result.output


def test_ranges_lists_each_range(replace_file: Path) -> None:
    result = runner.invoke(app, ["ranges", str(replace_file)])

    assert result.exit_code == 0
    assert "match" in result.output
    assert "(3 rows)" in result.output


def test_markers_lists_begin_and_end(replace_file: Path) -> None:
    result = runner.invoke(app, ["markers", str(replace_file)])

    assert result.exit_code == 0
    assert "begin" in result.output
    assert "replace" in result.output
    assert "(2 rows)" in result.output


def test_tree_shows_regions(tmp_path: Path, nested_regions_source: str) -> None:
    path = tmp_path / "Nested.cs"
    path.write_text(nested_regions_source, encoding="utf-8")

    result = runner.invoke(app, ["tree", str(path)])

    assert result.exit_code == 0
    assert "FOREACH $item : $items" in result.output
    assert "REPLACE -> $item.name" in result.output
    assert "INSERT $tail" in result.output


def test_name_selects_one_template(defined_file: Path) -> None:
    result = runner.invoke(app, ["preview", str(defined_file), "--named", "--name", "Field"])

    assert result.exit_code == 0
    assert "int [$field.name];" in result.output
    assert "void M()" not in result.output


def test_unknown_name_fails(defined_file: Path) -> None:
    result = runner.invoke(app, ["preview", str(defined_file), "--named", "--name", "Nope"])

    assert result.exit_code == 1
    assert "No template named 'Nope'" in result.output
