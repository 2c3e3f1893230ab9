"""Shared fixtures for manual_pages tests."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture
def doc_dir(tmp_path: Path) -> Path:
    """Return an empty documentation directory inside ``tmp_path``."""
    path = tmp_path / "doc"
    path.mkdir()
    return path


@pytest.fixture
def write_doc(doc_dir: Path) -> cabc.Callable[[str, str], Path]:
    """Return a helper writing dedented ``text`` to ``doc_dir / filename``."""

    def _write(filename: str, text: str) -> Path:
        path = doc_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def manual_sources(write_doc: cabc.Callable[[str, str], Path]) -> list[Path]:
    """Write a small manual: an ungrouped introduction and a guide part."""
    intro = write_doc(
        "intro.md",
        """
        ---
        title: Introduction
        ---
        # Overview

        Welcome.

        ## Installing

        Steps.

        ### Too Deep

        Hidden from the contents.
        """,
    )
    advanced = write_doc(
        "advanced.md",
        """
        ---
        title: Advanced
        part: Guide
        order: 1
        ---
        # Tuning

        Details.
        """,
    )
    basics = write_doc(
        "basics.md",
        """
        ---
        title: Basics
        part: Guide
        order: 3
        ---
        # First Steps
        """,
    )
    return [intro, advanced, basics]
