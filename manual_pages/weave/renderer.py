"""Render markdown to HTML while collecting the document's headings."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
from html import escape, unescape

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE, HTML_PLACEHOLDER_RE
from pygments.formatters.html import HtmlFormatter

from manual_pages.naming import section_id

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from manual_pages.toc import Heading
else:  # pragma: no cover - type-checking fallback
    Element = typ.Any
    Heading = tuple[int, str]

CODE_BLOCK_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
HEADING_TAG_PATTERN = re.compile(r"h([1-6])")
HTML_TAG_PATTERN = re.compile(r"<[^>]+>")

BASE_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


class HeadingAnchorExtension(Extension):
    """Record headings and give each heading element its section id.

    Collected headings are appended to ``headings`` as ``(level, text)``
    pairs in document order. The id written on the element is
    :func:`~manual_pages.naming.section_id` of the heading text, matching the
    links generated for the table of contents.
    """

    def __init__(self, headings: list[Heading]) -> None:
        super().__init__()
        self.headings = headings

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the heading treeprocessor after inline and unescape passes."""
        processor = HeadingAnchorTreeprocessor(md, self.headings)
        md.treeprocessors.register(processor, "manual_heading_anchors", -5)


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Collect ``h1``-``h6`` elements and stamp anchor ids on them."""

    def __init__(self, md: Markdown, headings: list[Heading]) -> None:
        super().__init__(md)
        self.headings = headings

    def run(self, root: Element) -> Element:
        """Walk the parsed tree in document order, recording each heading."""
        for element in root.iter():
            if not isinstance(element.tag, str):
                continue
            match = HEADING_TAG_PATTERN.fullmatch(element.tag)
            if match is None:
                continue
            text = self.heading_text(element)
            self.headings.append((int(match.group(1)), text))
            if "id" not in element.attrib:
                element.set("id", section_id(text))
        return root

    def heading_text(self, element: Element) -> str:
        """Return the plain display text of a heading element.

        Inline HTML and entities are held in the HTML stash until the tree
        is serialized, so their placeholders are restored here before tags
        are stripped and entities decoded.
        """
        stash = self.md.htmlStash.rawHtmlBlocks

        def _restore(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index >= len(stash):
                return ""
            stashed = stash[index]
            return stashed if isinstance(stashed, str) else "".join(stashed.itertext())

        raw = "".join(element.itertext()).replace(AMP_SUBSTITUTE, "&")
        resolved = HTML_PLACEHOLDER_RE.sub(_restore, raw)
        return unescape(HTML_TAG_PATTERN.sub("", resolved)).strip()


class HtmlContentRenderer:
    """Convert document bodies to HTML with consistent code styling."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        extensions: cabc.Sequence[str] = (),
    ) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting.
        extensions : Sequence[str], optional
            Additional Python-Markdown extension names enabled for every
            conversion.
        """
        self.pygments_style = pygments_style
        self.extensions = tuple(extensions)
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def convert(
        self, text: str, extra_extensions: cabc.Sequence[str] = ()
    ) -> tuple[str, list[Heading]]:
        """Render markdown into HTML and return it with the headings found.

        Parameters
        ----------
        text : str
            Markdown body without any metadata block.
        extra_extensions : Sequence[str], optional
            Extension names enabled for this conversion only.

        Returns
        -------
        tuple[str, list[tuple[int, str]]]
            The HTML body and the ``(level, text)`` headings in source order.
            Whitespace-only input yields ``("", [])``.
        """
        normalized = self._normalize_fenced_blocks(text)
        if not normalized.strip():
            return "", []
        headings: list[Heading] = []
        extensions: list[Extension | str] = [
            *BASE_EXTENSIONS,
            *self.extensions,
            *extra_extensions,
            HeadingAnchorExtension(headings),
        ]
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return self._annotate_codehilite(html, normalized), headings

    def _annotate_codehilite(self, html: str, source_markdown: str) -> str:
        """Attach a ``data-language`` attribute to each highlighted block."""
        languages = [
            match.group(1) or "text"
            for match in CODE_BLOCK_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))

    @staticmethod
    def _normalize_fenced_blocks(text: str) -> str:
        without_indent = FENCED_INDENT_PATTERN.sub(r"\1", text)

        def _strip_labels(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_strip_labels, without_indent)


__all__ = [
    "CODE_BLOCK_PATTERN",
    "HeadingAnchorExtension",
    "HeadingAnchorTreeprocessor",
    "HtmlContentRenderer",
]
