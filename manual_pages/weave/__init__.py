"""Default rendering capability: metadata parsing, markdown and page templates."""

from .frontmatter import ParsedDocument, parse_front_matter
from .renderer import HtmlContentRenderer
from .weaver import MarkdownWeaver, Weaver, load_page_template

__all__ = [
    "HtmlContentRenderer",
    "MarkdownWeaver",
    "ParsedDocument",
    "Weaver",
    "load_page_template",
    "parse_front_matter",
]
