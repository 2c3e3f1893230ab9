"""Dataclasses shared by the collation pipeline."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import math
import typing as typ

from ._constants import ORDER_KEY, PART_KEY, TITLE_KEY
from .errors import DocumentMetadataError
from .toc import TocEntry

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .toc import Heading, TableOfContents


@dc.dataclass(frozen=True, slots=True)
class SourceDocument:
    """A documentation source file after declaration expansion.

    Attributes
    ----------
    name : str
        Canonical document name derived from the file name.
    path : Path
        Path the text was read from.
    text : str
        Expanded source text handed to the weaver.
    """

    name: str
    path: Path
    text: str


@dc.dataclass(frozen=True, slots=True)
class DocumentMetadata:
    """Metadata a document declares about its place in the manual.

    Attributes
    ----------
    title : str or None
        Display title; the document name is used when absent.
    part : str or None
        Part grouping the document; ``None`` places it in the ungrouped part.
    order : int or float
        Sort key within the part, ``0`` by default.
    """

    title: str | None = None
    part: str | None = None
    order: int | float = 0

    @classmethod
    def from_mapping(
        cls, name: str, metadata: cabc.Mapping[str, str]
    ) -> DocumentMetadata:
        """Build metadata from the loose mapping returned by a weaver.

        Only the ``title``, ``part`` and ``order`` keys are read. Blank values
        count as absent.

        Raises
        ------
        DocumentMetadataError
            If ``order`` is present but not a finite number.
        """
        title = str(metadata.get(TITLE_KEY) or "").strip() or None
        part = str(metadata.get(PART_KEY) or "").strip() or None
        return cls(title=title, part=part, order=_parse_order(name, metadata))

    def resolved_title(self, name: str) -> str:
        """Return the display title, falling back to the document name."""
        return self.title or name


def _parse_order(name: str, metadata: cabc.Mapping[str, str]) -> int | float:
    raw = metadata.get(ORDER_KEY)
    if raw is None:
        return 0
    if isinstance(raw, int | float):
        order = raw
    else:
        text = str(raw).strip()
        if not text:
            return 0
        try:
            order = int(text)
        except ValueError:
            try:
                order = float(text)
            except ValueError:
                msg = f"order must be a number, got {text!r}"
                raise DocumentMetadataError(name, "discovery", msg) from None
    if not math.isfinite(order):
        msg = f"order must be a finite number, got {raw!r}"
        raise DocumentMetadataError(name, "discovery", msg)
    return order


@dc.dataclass(frozen=True, slots=True)
class DiscoveredDocument:
    """Outcome of the discovery pass for one document."""

    source: SourceDocument
    metadata: DocumentMetadata
    sections: tuple[Heading, ...]

    @property
    def name(self) -> str:
        """Return the canonical document name."""
        return self.source.name

    @property
    def title(self) -> str:
        """Return the resolved display title."""
        return self.metadata.resolved_title(self.source.name)

    def toc_entry(self) -> tuple[str | None, TocEntry]:
        """Return the ``(part, entry)`` pair this document contributes."""
        entry = TocEntry(
            order=self.metadata.order,
            name=self.name,
            title=self.title,
            sections=self.sections,
        )
        return self.metadata.part, entry


@dc.dataclass(frozen=True, slots=True)
class CollationResult:
    """Pages written by a collation run and the table they share."""

    written: tuple[Path, ...]
    toc: TableOfContents


__all__ = [
    "CollationResult",
    "DiscoveredDocument",
    "DocumentMetadata",
    "SourceDocument",
]
