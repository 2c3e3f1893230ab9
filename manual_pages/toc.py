"""Build and render the manual-wide table of contents.

The table of contents is assembled once, after every document has been
discovered, as an immutable :class:`TableOfContents`. Each rendered page then
asks :func:`render_table_of_contents` for a fresh HTML fragment in which only
the page's own entry is marked as current.

Documents are grouped by their declared *part*. Parts are ordered by the
smallest ``order`` value among their documents, ties keeping the order in
which the parts were first encountered; documents inside a part are ordered
by ``(order, name)``. Documents without a part form the ungrouped part,
keyed by ``None``, which is rendered without a header.

Example
-------
>>> from manual_pages.toc import TableOfContents, TocEntry
>>> toc = TableOfContents.from_entries(
...     [
...         ("Guide", TocEntry(order=1, name="advanced", title="Advanced")),
...         (None, TocEntry(order=0, name="intro", title="Introduction")),
...     ]
... )
>>> [part for part, _entries in toc.ordered_parts()]
[None, 'Guide']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import types
import typing as typ

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup

from ._constants import DEFAULT_MAX_LEVEL, PAGE_FILENAME_TEMPLATE
from .naming import section_id

Heading = tuple[int, str]
Order = int | float

_ENV = Environment(
    loader=PackageLoader("manual_pages", "fragments"),
    autoescape=select_autoescape(["html", "xml", "jinja"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dc.dataclass(frozen=True, slots=True)
class TocEntry:
    """One document's row in the table of contents.

    Attributes
    ----------
    order : int or float
        Sort key within the document's part.
    name : str
        Canonical document name; the page lives at ``<name>.html``.
    title : str
        Display title for the navigation link.
    sections : tuple[tuple[int, str], ...]
        Headings of the document as ``(level, text)`` pairs in source order.
    """

    order: Order
    name: str
    title: str
    sections: tuple[Heading, ...] = ()

    @property
    def href(self) -> str:
        """Return the relative link to the rendered page."""
        return PAGE_FILENAME_TEMPLATE.format(name=self.name)


def _entry_sort_key(entry: TocEntry) -> tuple[Order, str]:
    return (entry.order, entry.name)


@dc.dataclass(frozen=True, slots=True)
class TableOfContents:
    """Immutable mapping from part key to its ordered document entries."""

    parts: cabc.Mapping[str | None, tuple[TocEntry, ...]]

    def __post_init__(self) -> None:
        frozen = {part: tuple(entries) for part, entries in self.parts.items()}
        object.__setattr__(self, "parts", types.MappingProxyType(frozen))

    @classmethod
    def from_entries(
        cls, entries: cabc.Iterable[tuple[str | None, TocEntry]]
    ) -> TableOfContents:
        """Fold discovered ``(part, entry)`` pairs into a sorted table.

        Parameters
        ----------
        entries : Iterable[tuple[str | None, TocEntry]]
            Discovered entries in input order. The first time a part is seen
            fixes its position among parts sharing the same minimum order.

        Returns
        -------
        TableOfContents
            Table whose per-part entries are sorted by ``(order, name)``.
        """
        grouped: dict[str | None, list[TocEntry]] = {}
        for part, entry in entries:
            grouped.setdefault(part, []).append(entry)
        return cls(
            {
                part: tuple(sorted(items, key=_entry_sort_key))
                for part, items in grouped.items()
            }
        )

    def ordered_parts(self) -> list[tuple[str | None, tuple[TocEntry, ...]]]:
        """Return non-empty parts sorted by their minimum document order."""
        keyed = [
            (min(entry.order for entry in entries), index, part, entries)
            for index, (part, entries) in enumerate(self.parts.items())
            if entries
        ]
        keyed.sort(key=lambda item: (item[0], item[1]))
        return [(part, entries) for _order, _index, part, entries in keyed]

    def entries(self) -> cabc.Iterator[TocEntry]:
        """Yield every entry in display order."""
        for _part, entries in self.ordered_parts():
            yield from entries

    def get(self, name: str) -> TocEntry | None:
        """Return the entry for document ``name`` if present."""
        return next((entry for entry in self.entries() if entry.name == name), None)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.parts.values())


def render_section_list(
    name: str,
    sections: cabc.Sequence[Heading],
    *,
    max_level: int = DEFAULT_MAX_LEVEL,
) -> str:
    """Render a document's headings as table-of-contents list items.

    Parameters
    ----------
    name : str
        Canonical name of the document owning the headings.
    sections : Sequence[tuple[int, str]]
        ``(level, text)`` pairs in source order.
    max_level : int, optional
        Deepest heading level to list. Deeper headings are skipped entirely.

    Returns
    -------
    str
        ``<li>`` entries linking to ``<name>.html#<section-id>`` and indented
        by heading level, or an empty string when nothing is listed.
    """
    visible = [
        {"level": level, "text": text, "anchor": section_id(text)}
        for level, text in sections
        if level <= max_level
    ]
    if not visible:
        return ""
    template = _ENV.get_template("section_list.jinja")
    return template.render(
        href=PAGE_FILENAME_TEMPLATE.format(name=name), entries=visible
    )


def _is_current(
    entry: TocEntry, selected_name: str | None, selected_title: str | None
) -> bool:
    if selected_name is not None:
        return entry.name == selected_name
    return selected_title is not None and entry.title == selected_title


def render_table_of_contents(
    toc: TableOfContents,
    selected_title: str | None = None,
    *,
    selected_name: str | None = None,
    max_level: int = DEFAULT_MAX_LEVEL,
) -> str:
    """Render the whole manual's navigation as an HTML list.

    Parameters
    ----------
    toc : TableOfContents
        Table assembled after discovery. It is only read.
    selected_title : str, optional
        Title of the page being rendered; used to flag the current entry
        when ``selected_name`` is not given.
    selected_name : str, optional
        Canonical name of the page being rendered. Takes precedence over
        ``selected_title`` so documents sharing a title stay distinguishable.
    max_level : int, optional
        Deepest heading level listed under each document.

    Returns
    -------
    str
        A ``<ul class="toc list">`` fragment. Named parts get a separator
        header; the ungrouped part does not.
    """
    parts: list[dict[str, typ.Any]] = []
    for part, entries in toc.ordered_parts():
        documents = [
            {
                "href": entry.href,
                "title": entry.title,
                "current": _is_current(entry, selected_name, selected_title),
                "sections_html": Markup(
                    render_section_list(
                        entry.name, entry.sections, max_level=max_level
                    )
                ),
            }
            for entry in entries
        ]
        parts.append({"label": part, "documents": documents})
    template = _ENV.get_template("table_of_contents.jinja")
    return template.render(parts=parts)


__all__ = [
    "Heading",
    "TableOfContents",
    "TocEntry",
    "render_section_list",
    "render_table_of_contents",
]
