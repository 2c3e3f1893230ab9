"""Behaviour tests for decorating a package manual with project metadata.

The feature file ``package_metadata.feature`` builds the manual for a small
project checkout through :func:`manual_pages.collate.collate_package`. Version
and repository lookups are stubbed: ``importlib.metadata.version`` and
``subprocess.run`` are replaced with ``pytest-mock`` so the scenarios need
neither an installed distribution nor git.

Usage
-----
Run ``pytest tests/bdd/test_package_metadata.py -v`` after installing the test
extra (``pip install -e .[test]``).
"""

from __future__ import annotations

import subprocess
import typing as typ
from importlib import metadata as importlib_metadata
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from manual_pages.collate import collate_package

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

FEATURE_FILE = (
    Path(__file__).resolve().parents[2] / "features" / "package_metadata.feature"
)
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _page(scenario_state: dict[str, object]) -> BeautifulSoup:
    page = typ.cast("Path", scenario_state["page"])
    return BeautifulSoup(page.read_text(encoding="utf-8"), "html.parser")


@given("a project checkout with one documentation page")
def given_project(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    """Create ``proj/doc/index.md`` inside ``tmp_path``."""
    project_dir = tmp_path / "proj"
    doc_dir = project_dir / "doc"
    doc_dir.mkdir(parents=True)
    (doc_dir / "index.md").write_text("# Welcome\n\nHello.\n", encoding="utf-8")
    scenario_state["project_dir"] = project_dir


@given("the package version and repository URL cannot be found")
def given_no_metadata(mocker: MockerFixture) -> None:
    """Make both lookups fail."""
    mocker.patch(
        "manual_pages.package_meta.importlib_metadata.version",
        side_effect=importlib_metadata.PackageNotFoundError("proj"),
    )
    mocker.patch(
        "manual_pages.package_meta.subprocess.run",
        side_effect=subprocess.CalledProcessError(1, ["git"]),
    )


@given(
    parsers.parse("the package is installed as version {version} from {remote}")
)
def given_metadata(mocker: MockerFixture, version: str, remote: str) -> None:
    """Stub a successful version lookup and git remote."""
    mocker.patch(
        "manual_pages.package_meta.importlib_metadata.version", return_value=version
    )
    mocker.patch(
        "manual_pages.package_meta.subprocess.run",
        return_value=subprocess.CompletedProcess(
            args=["git"], returncode=0, stdout=f"git@{remote}\n"
        ),
    )


@when("I build the package manual")
def when_build(scenario_state: dict[str, object]) -> None:
    """Collate the project's doc directory."""
    project_dir = typ.cast("Path", scenario_state["project_dir"])
    result = collate_package(project_dir)
    scenario_state["result"] = result
    scenario_state["page"] = result.written[0]


@then("the page is written to doc/html")
def then_written(scenario_state: dict[str, object]) -> None:
    """The single page lands in the project's ``doc/html`` directory."""
    project_dir = typ.cast("Path", scenario_state["project_dir"])
    page = typ.cast("Path", scenario_state["page"])
    assert page == project_dir / "doc" / "html" / "index.html"
    assert page.is_file(), "expected the page to be written"


@then("the page shows no version or repository link")
def then_undecorated(scenario_state: dict[str, object]) -> None:
    """Absent metadata leaves the sidebar header without those details."""
    soup = _page(scenario_state)
    assert soup.select_one(".manual-version") is None
    assert soup.select_one(".manual-project a") is None
    assert soup.select_one(".manual-project").get_text(strip=True) == "proj"


@then(parsers.parse('the page shows version "{version}" linking to "{url}"'))
def then_decorated(scenario_state: dict[str, object], version: str, url: str) -> None:
    """Found metadata is rendered in the sidebar header."""
    soup = _page(scenario_state)
    assert soup.select_one(".manual-version").get_text(strip=True) == version
    assert soup.select_one(".manual-project a")["href"] == url
