r"""Derive document names and heading anchors.

Both helpers are pure functions: the collation driver uses
:func:`choose_document_name` to key documents and name output files, while
:func:`section_id` produces the anchors shared by the table-of-contents links
and the heading ids emitted by the weaver.

Example
-------
>>> from manual_pages.naming import choose_document_name, section_id
>>> choose_document_name("doc/readme.rst")
'readme'
>>> section_id("What is / this?")
'what-is-this-'
"""

from __future__ import annotations

import re
from pathlib import PurePath

from ._constants import DOC_FORMATS, FILE_EXTENSION_PATTERN

SECTION_ID_PATTERN = re.compile(r"[\s/?]+")


def section_id(section: str) -> str:
    """Turn a heading's display text into a lowercase URL fragment id."""
    return SECTION_ID_PATTERN.sub("-", section).lower()


def document_format(filename: str | PurePath) -> str | None:
    """Return the documentation format implied by ``filename``, if recognised."""
    match = FILE_EXTENSION_PATTERN.match(PurePath(filename).name)
    if match is None:
        return None
    return DOC_FORMATS.get(match.group(2).lower())


def choose_document_name(filename: str | PurePath) -> str:
    """Return the canonical document name for a source file path.

    Parameters
    ----------
    filename : str or PurePath
        Path to the documentation source file.

    Returns
    -------
    str
        The base filename without its extension when the extension names a
        known documentation format (markdown, restructured text, LaTeX or
        HTML); otherwise the full base filename, extension included.
    """
    basename = PurePath(filename).name
    match = FILE_EXTENSION_PATTERN.match(basename)
    if match is None or match.group(2).lower() not in DOC_FORMATS:
        return basename
    return match.group(1)


__all__ = ["choose_document_name", "document_format", "section_id"]
