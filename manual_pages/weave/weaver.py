"""The rendering capability used by the collation driver.

A *weaver* turns one document's source text into ``(metadata, sections)``.
In dry-run mode it only reports what the document declares and which
headings it contains; in full mode it also renders the page through a Jinja
template and writes the HTML to an output stream.

:class:`Weaver` describes the contract; :class:`MarkdownWeaver` implements it
with Python-Markdown, Pygments and Jinja.
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from manual_pages._constants import (
    PKGNAME_KEY,
    PKGURL_KEY,
    PKGVER_KEY,
    TITLE_KEY,
    TOC_KEY,
)
from manual_pages.naming import section_id

from .frontmatter import parse_front_matter
from .renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from jinja2 import Template

    from manual_pages.toc import Heading

WeaveResult = tuple[dict[str, str], list["Heading"]]


class Weaver(typ.Protocol):
    """Render a single document, or inspect it without writing anything."""

    def weave(
        self,
        text: str,
        out: typ.TextIO | None = None,
        *,
        dryrun: bool = False,
        name: str | None = None,
        template: Path | None = None,
        toc: bool = False,
        outdir: Path | None = None,
        keyvals: cabc.Mapping[str, str] | None = None,
        renderer_args: cabc.Sequence[str] | None = None,
    ) -> WeaveResult:
        """Return the document's metadata and headings, writing HTML unless dry."""
        ...


@functools.lru_cache(maxsize=8)
def _page_environment(template_dir: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def load_page_template(template: Path) -> Template:
    """Return the Jinja template stored at ``template``."""
    return _page_environment(template.parent).get_template(template.name)


class MarkdownWeaver:
    """Weave markdown (and setext-titled plain text) into themed HTML pages."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.renderer = HtmlContentRenderer(pygments_style)

    def weave(
        self,
        text: str,
        out: typ.TextIO | None = None,
        *,
        dryrun: bool = False,
        name: str | None = None,
        template: Path | None = None,
        toc: bool = False,
        outdir: Path | None = None,
        keyvals: cabc.Mapping[str, str] | None = None,
        renderer_args: cabc.Sequence[str] | None = None,
    ) -> WeaveResult:
        """Parse ``text`` and, unless ``dryrun`` is set, render it to ``out``.

        Parameters
        ----------
        text : str
            Document source, optionally starting with a metadata block.
        out : TextIO, optional
            Stream receiving the rendered page. Required unless ``dryrun``.
        dryrun : bool, optional
            When ``True`` nothing is rendered to a page or written anywhere.
        name : str, optional
            Canonical document name, used as the fallback title.
        template : Path, optional
            Jinja page template. Required unless ``dryrun``.
        toc : bool, optional
            Provide the page's own heading list to the template.
        outdir : Path, optional
            Directory the page is written into; exposed to the template.
        keyvals : Mapping[str, str], optional
            Shared project metadata, including the table-of-contents fragment.
        renderer_args : Sequence[str], optional
            Extra Python-Markdown extension names for this document.

        Returns
        -------
        tuple[dict[str, str], list[tuple[int, str]]]
            The document's metadata mapping and its ``(level, text)``
            headings in source order.

        Raises
        ------
        ValueError
            If a full render is requested without ``out`` or ``template``.
        """
        parsed = parse_front_matter(text)
        body_html, sections = self.renderer.convert(parsed.body, renderer_args or ())
        if dryrun:
            return parsed.metadata, sections
        if out is None or template is None:
            msg = "A full weave needs both an output stream and a page template."
            raise ValueError(msg)

        shared = dict(keyvals or {})
        title = parsed.metadata.get(TITLE_KEY) or name or ""
        page_toc = (
            [
                {"level": level, "text": heading, "anchor": section_id(heading)}
                for level, heading in sections
            ]
            if toc
            else []
        )
        html = load_page_template(template).render(
            name=name,
            title=title,
            body=Markup(body_html),
            metadata=parsed.metadata,
            keyvals=shared,
            table_of_contents=Markup(shared.get(TOC_KEY, "")),
            pkgname=shared.get(PKGNAME_KEY),
            pkgver=shared.get(PKGVER_KEY),
            pkgurl=shared.get(PKGURL_KEY),
            page_toc=page_toc,
            outdir=outdir,
            pygments_css=Markup(self.renderer.stylesheet),
        )
        out.write(html)
        return parsed.metadata, sections


__all__ = ["MarkdownWeaver", "WeaveResult", "Weaver", "load_page_template"]
