r"""Split a document into its metadata block and body.

Two metadata notations are understood: a leading YAML block fenced by ``---``
lines, and a pandoc title line (``% Title``) optionally followed by author
and date lines. Values are returned as strings; ``None`` values are dropped.

Example
-------
>>> from manual_pages.weave.frontmatter import parse_front_matter
>>> parsed = parse_front_matter("---\ntitle: Guide\norder: 2\n---\n# Body\n")
>>> parsed.metadata
{'title': 'Guide', 'order': '2'}
>>> parsed.body
'# Body\n'
"""

from __future__ import annotations

import dataclasses as dc

from ruamel.yaml import YAML

from manual_pages._constants import TITLE_KEY

FENCE = "---"
PANDOC_TITLE_PREFIX = "%"


@dc.dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Metadata mapping and remaining markdown body of a document."""

    metadata: dict[str, str]
    body: str


def _load_yaml_block(block: str) -> dict[str, str] | None:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    loaded = loader.load(block) if block.strip() else None
    if not isinstance(loaded, dict):
        return None
    return {str(key): str(value) for key, value in loaded.items() if value is not None}


def _parse_yaml_front_matter(text: str) -> ParsedDocument | None:
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FENCE:
        return None
    for index in range(1, len(lines)):
        if lines[index].strip() == FENCE:
            metadata = _load_yaml_block("".join(lines[1:index]))
            if metadata is None:
                return None
            body = "".join(lines[index + 1 :]).lstrip("\n")
            return ParsedDocument(metadata=metadata, body=body)
    return None


def _parse_pandoc_title_block(text: str) -> ParsedDocument | None:
    lines = text.splitlines(keepends=True)
    if not lines or not lines[0].startswith(PANDOC_TITLE_PREFIX):
        return None
    consumed = 0
    while consumed < len(lines) and lines[consumed].startswith(PANDOC_TITLE_PREFIX):
        consumed += 1
    title = lines[0][len(PANDOC_TITLE_PREFIX) :].strip()
    metadata = {TITLE_KEY: title} if title else {}
    body = "".join(lines[consumed:]).lstrip("\n")
    return ParsedDocument(metadata=metadata, body=body)


def parse_front_matter(text: str) -> ParsedDocument:
    """Return the metadata and body of ``text``.

    Parameters
    ----------
    text : str
        Full document source.

    Returns
    -------
    ParsedDocument
        Parsed metadata (empty when the document has no metadata block) and
        the body that follows it. An unterminated YAML block, or one that does
        not hold a mapping (such as text between two thematic breaks), is
        treated as ordinary content.

    Raises
    ------
    ruamel.yaml.YAMLError
        If the YAML block is malformed.
    """
    parsed = _parse_yaml_front_matter(text)
    if parsed is None:
        parsed = _parse_pandoc_title_block(text)
    if parsed is None:
        parsed = ParsedDocument(metadata={}, body=text)
    return parsed


__all__ = ["ParsedDocument", "parse_front_matter"]
