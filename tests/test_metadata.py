"""Package metadata and PEP 561 marker tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, cast

import pytest
import rtoml

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PYPROJECT_PATH = PROJECT_ROOT / "pyproject.toml"


def _load_pyproject() -> dict[str, Any]:
    return rtoml.load(PYPROJECT_PATH)


def _wheel_table() -> dict[str, Any]:
    tool_table = cast(dict[str, Any], _load_pyproject().get("tool", {}))
    hatch_table = cast(dict[str, Any], tool_table.get("hatch", {}))
    targets_table = cast(dict[str, Any], cast(dict[str, Any], hatch_table.get("build", {})).get("targets", {}))
    return cast(dict[str, Any], targets_table.get("wheel", {}))


def _get_package_dir() -> Path:
    for package_entry in cast(list[Any], _wheel_table().get("packages", [])):
        candidate = PROJECT_ROOT / package_entry
        if candidate.is_dir():
            return candidate
    raise AssertionError("Unable to locate package directory")


@pytest.mark.os_agnostic
def test_print_info_outputs_metadata(capsys: pytest.CaptureFixture[str]) -> None:
    from scholarsite_mail import print_info

    print_info()

    captured = capsys.readouterr().out
    assert "Info for scholarsite_mail:" in captured
    assert "version" in captured


@pytest.mark.os_agnostic
def test_metadata_matches_pyproject() -> None:
    from scholarsite_mail import __init__conf__

    project = cast(dict[str, Any], _load_pyproject()["project"])
    assert __init__conf__.version == project["version"]
    assert __init__conf__.name == project["name"].replace("-", "_")
    assert __init__conf__.shell_command in cast(dict[str, Any], project["scripts"])


@pytest.mark.os_agnostic
def test_py_typed_marker_exists_and_ships() -> None:
    assert (_get_package_dir() / "py.typed").is_file()
    assert any("py.typed" in entry for entry in cast(list[str], _wheel_table().get("include", [])))


@pytest.mark.os_agnostic
def test_default_config_ships_with_wheel() -> None:
    includes = cast(list[str], _wheel_table().get("include", []))

    assert any(entry.endswith("defaultconfig.toml") for entry in includes)
    assert (_get_package_dir() / "adapters" / "config" / "defaultconfig.toml").is_file()
