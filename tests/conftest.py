"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared template sources
# ---------------------------------------------------------------------------


@pytest.fixture
def defined_templates_source() -> str:
    """A C# file with two named templates, indented inside a class."""
    return (
        "class Sample\n"
        "{\n"
        '    #region TEMPLATE DEFINE("Method")\n'
        "    void M()\n"
        "    {\n"
        "        return;\n"
        "    }\n"
        "    #endregion\n"
        "\n"
        '    #region TEMPLATE DEFINE("Field") REPLACE(`Count`, $field.name)\n'
        "    int Count;\n"
        "    #endregion\n"
        "}\n"
    )


@pytest.fixture
def nested_regions_source() -> str:
    """A single template with a foreach wrapping a replace, followed by an insert."""
    return (
        "#region TEMPLATE FOREACH($item : $items)\n"
        "#region TEMPLATE REPLACE(`NAME`, $item.name)\n"
        "NAME();\n"
        "#endregion\n"
        "#endregion\n"
        "#region TEMPLATE INSERT($tail)\n"
        "#endregion\n"
    )
