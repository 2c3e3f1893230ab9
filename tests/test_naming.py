"""Unit tests for document naming and heading anchors.

These tests cover :func:`manual_pages.naming.section_id`, which turns heading
text into the anchors linked from the table of contents, and
:func:`manual_pages.naming.choose_document_name`, which keys each source file
and names its output page.

Usage
-----
Run ``pytest tests/test_naming.py -v``. No fixtures are required.
"""

from __future__ import annotations

import re

import pytest

from manual_pages.naming import choose_document_name, document_format, section_id

HEADINGS = [
    "Introduction",
    "Getting Started",
    "What is this?",
    "Input / Output",
    "  Tabs\tand\nnewlines  ",
    "Already-lower-case",
    "",
]


@pytest.mark.parametrize("heading", HEADINGS)
def test_section_id_is_lowercase_without_separators(heading: str) -> None:
    """Section ids contain no whitespace, slashes or question marks."""
    anchor = section_id(heading)
    assert anchor == anchor.lower(), f"expected lowercase id, got {anchor!r}"
    assert not re.search(r"[\s/?]", anchor), (
        f"expected no whitespace, '/' or '?' in {anchor!r}"
    )


@pytest.mark.parametrize("heading", HEADINGS)
def test_section_id_is_idempotent(heading: str) -> None:
    """Applying section_id twice gives the same id as applying it once."""
    once = section_id(heading)
    assert section_id(once) == once


def test_section_id_collapses_runs_into_single_hyphen() -> None:
    """A run of mixed separators becomes one hyphen."""
    assert section_id("A / ? B") == "a-b"


def test_section_id_of_empty_text_is_empty() -> None:
    """Empty heading text yields an empty id."""
    assert section_id("") == ""


def test_section_id_only_lowercases_plain_text() -> None:
    """Text without separators is returned lower-cased and otherwise intact."""
    assert section_id("API.Reference_v2!") == "api.reference_v2!"


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("readme.rst", "readme"),
        ("doc/guide.md", "guide"),
        ("paper.tex", "paper"),
        ("page.html", "page"),
        ("page.htm", "page"),
        ("archive.tar.md", "archive.tar"),
        ("NOTES.MD", "NOTES"),
    ],
)
def test_known_extensions_are_stripped(filename: str, expected: str) -> None:
    """Documentation extensions are removed from the base filename."""
    assert choose_document_name(filename) == expected


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("notes.txt", "notes.txt"),
        ("data.csv", "data.csv"),
        ("LICENSE", "LICENSE"),
        ("dir/Makefile", "Makefile"),
    ],
)
def test_unknown_extensions_keep_full_filename(filename: str, expected: str) -> None:
    """Unrecognised or missing extensions never drop part of the filename."""
    assert choose_document_name(filename) == expected


def test_document_format_reports_known_formats() -> None:
    """Formats are reported for recognised extensions only."""
    assert document_format("readme.rst") == "rst"
    assert document_format("guide.md") == "markdown"
    assert document_format("notes.txt") is None
