"""Find documentation source files under a project directory."""

from __future__ import annotations

from pathlib import Path

from ._constants import DOC_EXTENSION_PATTERN


def is_doc_file(path: Path) -> bool:
    """Return ``True`` when ``path`` has a documentation file extension."""
    return DOC_EXTENSION_PATTERN.search(path.name) is not None


def find_documents(doc_dir: Path) -> list[Path]:
    """Return every documentation file below ``doc_dir`` in a stable order.

    Files whose names end in ``.md``, ``.txt`` or ``.rst`` (any case) are
    returned, sorted by their path relative to ``doc_dir``. A missing
    directory yields an empty list.
    """
    if not doc_dir.is_dir():
        return []
    found = [
        path for path in doc_dir.rglob("*") if path.is_file() and is_doc_file(path)
    ]
    return sorted(found, key=lambda path: path.relative_to(doc_dir).as_posix())


__all__ = ["find_documents", "is_doc_file"]
