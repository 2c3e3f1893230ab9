"""Collate project documentation into a linked multi-page HTML manual.

Source files are woven twice: a dry run discovers each document's title,
part, order and headings, and a render pass writes ``<name>.html`` pages that
all embed the same manual-wide table of contents.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``collate``: Collate explicit source files.
- ``collate_package``: Collate the ``doc`` directory of a project checkout.

Examples
--------
>>> from manual_pages import collate
>>> collate(["doc/intro.md"], outdir="doc/html")  # doctest: +SKIP
CollationResult(written=(PosixPath('doc/html/intro.html'),), ...)
>>> from manual_pages import app
>>> "manual" in app.name
True
"""

from __future__ import annotations

from .cli import app, main
from .collate import Collator, collate, collate_package

__all__ = ["Collator", "app", "collate", "collate_package", "main"]
