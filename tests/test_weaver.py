"""Unit tests for the default weaver and its building blocks.

These tests exercise front-matter parsing, heading collection in
``HtmlContentRenderer`` and both modes of ``MarkdownWeaver.weave``: the dry
run used for discovery (which must not write anything) and the full render
through the built-in ``default`` page template.

Usage
-----
Run ``pytest tests/test_weaver.py -v``.
"""

from __future__ import annotations

import io
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from manual_pages.page_templates import page_template_path, resolve_template
from manual_pages.weave import HtmlContentRenderer, MarkdownWeaver, parse_front_matter

SAMPLE = dedent(
    """
    ---
    title: User Guide
    part: Guide
    order: 2
    audience: admins
    ---
    # Getting Started

    Install the `manual` tool.

    ## Why / How?

    ```python
    # not a heading
    print("hi")
    ```

    ### Deep Dive
    """
).lstrip("\n")


@pytest.fixture(scope="module")
def page_template():
    """Return the built-in default page template path."""
    return page_template_path(resolve_template("default"))


def test_front_matter_returns_string_metadata_and_body() -> None:
    """YAML front matter becomes a string mapping; the body follows it."""
    parsed = parse_front_matter(SAMPLE)
    assert parsed.metadata == {
        "title": "User Guide",
        "part": "Guide",
        "order": "2",
        "audience": "admins",
    }
    assert parsed.body.startswith("# Getting Started")


def test_front_matter_drops_null_values() -> None:
    """Keys with empty YAML values are treated as absent."""
    parsed = parse_front_matter("---\ntitle:\npart: Guide\n---\nBody\n")
    assert parsed.metadata == {"part": "Guide"}


def test_pandoc_title_block_provides_title() -> None:
    """A leading ``% Title`` block supplies the title and is stripped."""
    parsed = parse_front_matter("% Reference\n% Jane Doe\n\n# Usage\n")
    assert parsed.metadata == {"title": "Reference"}
    assert parsed.body == "# Usage\n"


def test_text_without_metadata_is_unchanged() -> None:
    """Documents without a metadata block return an empty mapping."""
    parsed = parse_front_matter("# Plain\n\nText.\n")
    assert parsed.metadata == {}
    assert parsed.body == "# Plain\n\nText.\n"


def test_unterminated_front_matter_is_content() -> None:
    """An opening fence without a closing fence is left in the body."""
    text = "---\ntitle: Oops\n# Heading\n"
    parsed = parse_front_matter(text)
    assert parsed.metadata == {}
    assert parsed.body == text


def test_renderer_collects_headings_in_order() -> None:
    """Headings are reported as ``(level, text)`` pairs in source order."""
    renderer = HtmlContentRenderer()
    _html, headings = renderer.convert(parse_front_matter(SAMPLE).body)
    assert headings == [(1, "Getting Started"), (2, "Why / How?"), (3, "Deep Dive")]


def test_renderer_stamps_section_ids_on_headings() -> None:
    """Heading elements carry the same ids the contents links point at."""
    html, _headings = HtmlContentRenderer().convert(parse_front_matter(SAMPLE).body)
    soup = BeautifulSoup(html, "html.parser")
    ids = [tag.get("id") for tag in soup.select("h1, h2, h3")]
    assert ids == ["getting-started", "why-how-", "deep-dive"]


def test_renderer_reads_setext_headings() -> None:
    """Underlined titles, as used by restructured text, count as headings."""
    text = "Manual\n======\n\nSection\n-------\n\nBody.\n"
    _html, headings = HtmlContentRenderer().convert(text)
    assert headings == [(1, "Manual"), (2, "Section")]


def test_renderer_uses_inline_text_for_heading_names() -> None:
    """Inline markup inside headings is flattened to its text."""
    _html, headings = HtmlContentRenderer().convert("# Using `manual` *now*\n")
    assert headings == [(1, "Using manual now")]


def test_renderer_marks_code_language() -> None:
    """Highlighted code blocks carry their fence language."""
    html, _headings = HtmlContentRenderer().convert(parse_front_matter(SAMPLE).body)
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None, "expected a highlighted code block"
    assert block.get("data-language") == "python"


def test_renderer_returns_nothing_for_blank_text() -> None:
    """Whitespace-only bodies produce no HTML and no headings."""
    assert HtmlContentRenderer().convert("  \n\n") == ("", [])


def test_dry_run_writes_nothing() -> None:
    """Discovery mode returns metadata and headings without output."""
    out = io.StringIO()
    metadata, sections = MarkdownWeaver().weave(SAMPLE, out, dryrun=True)
    assert out.getvalue() == ""
    assert metadata["title"] == "User Guide"
    assert sections[0] == (1, "Getting Started")


def test_full_weave_renders_page(page_template) -> None:
    """A full weave writes the page with keyvals and the contents fragment."""
    out = io.StringIO()
    keyvals = {
        "pkgname": "demo",
        "pkgver": "1.2.0",
        "pkgurl": "https://github.com/owner/demo",
        "table-of-contents": '<ul class="toc list"><li>Fixture TOC</li></ul>',
    }
    metadata, sections = MarkdownWeaver().weave(
        SAMPLE,
        out,
        name="guide",
        template=page_template,
        toc=True,
        keyvals=keyvals,
    )
    soup = BeautifulSoup(out.getvalue(), "html.parser")
    assert soup.title is not None
    assert soup.title.get_text() == "demo | User Guide"
    assert soup.select_one("ul.toc li").get_text() == "Fixture TOC"
    assert soup.select_one(".manual-version").get_text() == "v1.2.0"
    assert soup.select_one(".manual-project a")["href"] == keyvals["pkgurl"]
    page_links = [a["href"] for a in soup.select(".manual-page-toc a")]
    assert page_links == ["#getting-started", "#why-how-", "#deep-dive"]
    assert soup.select_one("article h1#getting-started") is not None
    assert metadata["part"] == "Guide"
    assert len(sections) == 3


def test_full_weave_without_own_contents(page_template) -> None:
    """With ``toc`` unset the page carries no per-page heading list."""
    out = io.StringIO()
    MarkdownWeaver().weave("# Solo\n", out, name="solo", template=page_template)
    soup = BeautifulSoup(out.getvalue(), "html.parser")
    assert soup.select(".manual-page-toc") == []
    assert soup.title.get_text() == "solo"


def test_full_weave_requires_output_and_template() -> None:
    """A full weave without a stream or template is rejected."""
    with pytest.raises(ValueError, match="output stream"):
        MarkdownWeaver().weave("# Doc\n")


def test_renderer_args_enable_extensions(page_template) -> None:
    """Renderer arguments name extra Markdown extensions."""
    out = io.StringIO()
    MarkdownWeaver().weave(
        "first line\nsecond line\n",
        out,
        name="lines",
        template=page_template,
        renderer_args=["nl2br"],
    )
    assert "<br" in out.getvalue()


@pytest.mark.parametrize(
    ("source", "heading", "anchor"),
    [
        ("# Q &amp; A\n", "Q & A", "q-&-a"),
        ("# Use <b>x</b> now\n", "Use x now", "use-x-now"),
        ("# Tom &amp; <em>Jerry</em>\n", "Tom & Jerry", "tom-&-jerry"),
    ],
    ids=["entity", "inline-html", "both"],
)
def test_heading_text_resolves_entities_and_inline_html(
    source: str, heading: str, anchor: str
) -> None:
    """Headings are named by their visible text and carry the matching id."""
    html, headings = HtmlContentRenderer().convert(source)
    assert headings == [(1, heading)]
    element = BeautifulSoup(html, "html.parser").select_one("h1")
    assert element is not None
    assert element.get("id") == anchor, f"unexpected anchor in {html!r}"
    assert "\x02" not in html


def test_thematic_breaks_are_not_front_matter() -> None:
    """Text between two leading rules that is not a mapping stays in the body."""
    text = "---\nOverview\n---\n\nBody text.\n"
    parsed = parse_front_matter(text)
    assert parsed.metadata == {}
    assert parsed.body == text
    metadata, sections = MarkdownWeaver().weave(text, dryrun=True)
    assert metadata == {}
    assert sections == [(2, "Overview")]
