"""Collate documentation sources into a cross-linked multi-page manual.

Collation runs in two passes separated by a hard barrier:

1. *Discovery* weaves every document in dry-run mode to learn its title,
   part, order and headings. Nothing is written.
2. Once every document has been discovered, the results are folded into a
   single immutable :class:`~manual_pages.toc.TableOfContents`.
3. *Render* weaves every document again, this time into
   ``<outdir>/<name>.html``, with the shared project metadata and a table of
   contents fragment that marks the page being rendered as current.

Documents are independent within each pass, so both passes may run on a
thread pool (``jobs > 1``) without changing the output.

Example
-------
>>> from pathlib import Path
>>> from manual_pages.collate import collate
>>> result = collate(
...     [Path("doc/intro.md"), Path("doc/advanced.md")],
...     outdir=Path("doc/html"),
...     pkgname="example",
... )  # doctest: +SKIP
>>> [path.name for path in result.written]  # doctest: +SKIP
['advanced.html', 'intro.html']
"""

from __future__ import annotations

import collections.abc as cabc
import contextlib
import dataclasses as dc
import logging
import tempfile
import typing as typ
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ._constants import (
    DEFAULT_MAX_LEVEL,
    DEFAULT_OUTPUT_SUBDIR,
    DEFAULT_TEMPLATE,
    PAGE_FILENAME_TEMPLATE,
    PKGNAME_KEY,
    PKGURL_KEY,
    PKGVER_KEY,
    TOC_KEY,
)
from .config import CollisionPolicy, ManualConfig
from .declarations import (
    expand_declarations,
    generate_declaration_markdown,
    load_declarations,
)
from .errors import (
    CollationError,
    CollationFailedError,
    NameCollisionError,
    RenderError,
    TemplateNotFoundError,
)
from .models import (
    CollationResult,
    DiscoveredDocument,
    DocumentMetadata,
    SourceDocument,
)
from .naming import choose_document_name
from .package_meta import lookup_package_metadata
from .page_templates import (
    copy_template_assets,
    page_template_path,
    resolve_template,
)
from .sources import find_documents
from .toc import TableOfContents, render_table_of_contents
from .weave import MarkdownWeaver

if typ.TYPE_CHECKING:
    from .weave import Weaver

logger = logging.getLogger(__name__)

_T = typ.TypeVar("_T")
_R = typ.TypeVar("_R")


@contextlib.contextmanager
def _atomic_writer(target: Path) -> cabc.Iterator[typ.TextIO]:
    """Yield a temporary file that replaces ``target`` only on success."""
    handle = tempfile.NamedTemporaryFile(  # noqa: SIM115
        "w",
        encoding="utf-8",
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            yield handle
        Path(handle.name).replace(target)
    except BaseException:
        Path(handle.name).unlink(missing_ok=True)
        raise


class Collator:
    """Run the discovery and render passes over a set of source files."""

    def __init__(
        self,
        *,
        template: str | Path = DEFAULT_TEMPLATE,
        outdir: Path | str = Path(),
        weaver: Weaver | None = None,
        declarations: cabc.Mapping[str, typ.Any] | None = None,
        keyvals: cabc.Mapping[str, str] | None = None,
        renderer_args: cabc.Sequence[str] | None = None,
        max_level: int = DEFAULT_MAX_LEVEL,
        jobs: int = 1,
        on_collision: CollisionPolicy = CollisionPolicy.ERROR,
        fail_fast: bool = True,
    ) -> None:
        """Configure a collation run.

        Parameters
        ----------
        template : str or Path, optional
            Template directory or built-in template name.
        outdir : Path, optional
            Directory receiving ``<name>.html`` pages and template assets.
        weaver : Weaver, optional
            Rendering capability; a :class:`MarkdownWeaver` by default.
        declarations : Mapping[str, Any], optional
            Declaration documentation inlined into sources before discovery.
        keyvals : Mapping[str, str], optional
            Shared project metadata passed to every page.
        renderer_args : Sequence[str], optional
            Extra arguments forwarded to the weaver.
        max_level : int, optional
            Deepest heading level listed in the table of contents.
        jobs : int, optional
            Worker threads per pass; ``1`` runs sequentially.
        on_collision : CollisionPolicy, optional
            Handling of source files that resolve to the same name.
        fail_fast : bool, optional
            Abort on the first render failure when ``True``; otherwise render
            every other page and raise :class:`CollationFailedError` at the end.
        """
        self.template = template
        self.outdir = Path(outdir)
        self.weaver = weaver or MarkdownWeaver()
        self.declaration_blocks = generate_declaration_markdown(declarations or {})
        self.keyvals = dict(keyvals or {})
        self.renderer_args = list(renderer_args or [])
        self.max_level = max_level
        self.jobs = max(1, jobs)
        self.on_collision = on_collision
        self.fail_fast = fail_fast

    def run(self, filenames: cabc.Sequence[Path | str]) -> CollationResult:
        """Collate ``filenames`` into the output directory.

        Raises
        ------
        TemplateNotFoundError
            Before any document is read, when the template cannot be found.
        NameCollisionError
            When two files resolve to the same name under the ``error`` policy.
        RenderError
            When discovery fails, or a render fails with ``fail_fast`` set.
        CollationFailedError
            When renders failed and ``fail_fast`` is unset.
        """
        template_dir = resolve_template(self.template)
        page_template = page_template_path(template_dir)
        if not page_template.is_file():
            raise TemplateNotFoundError(str(page_template))

        sources = self.load_sources([Path(name) for name in filenames])
        discovered = self._map(self.discover, sources)
        toc = TableOfContents.from_entries(doc.toc_entry() for doc in discovered)

        self.outdir.mkdir(parents=True, exist_ok=True)
        outcomes = self._map(
            lambda doc: self._attempt_render(doc, toc, page_template), discovered
        )
        failures = [
            outcome for outcome in outcomes if isinstance(outcome, RenderError)
        ]
        written = sorted(
            (outcome for outcome in outcomes if isinstance(outcome, Path)),
            key=lambda path: path.name,
        )
        if failures:
            raise CollationFailedError(failures, written)

        copy_template_assets(template_dir, self.outdir)
        return CollationResult(written=tuple(written), toc=toc)

    def load_sources(self, filenames: cabc.Sequence[Path]) -> list[SourceDocument]:
        """Read and expand each file, resolving duplicate document names."""
        by_name: dict[str, list[Path]] = {}
        for path in filenames:
            by_name.setdefault(choose_document_name(path), []).append(path)

        sources: list[SourceDocument] = []
        for name, paths in by_name.items():
            if len(paths) > 1:
                if self.on_collision == CollisionPolicy.ERROR:
                    raise NameCollisionError(name, paths)
                logger.warning(
                    "%s resolve to %s; keeping %s",
                    ", ".join(str(path) for path in paths),
                    name,
                    paths[-1],
                )
            path = paths[-1]
            text = expand_declarations(
                path.read_text(encoding="utf-8"), self.declaration_blocks
            )
            sources.append(SourceDocument(name=name, path=path, text=text))
        return sources

    def discover(self, source: SourceDocument) -> DiscoveredDocument:
        """Weave ``source`` in dry-run mode and record what it declares."""
        logger.debug("discovering %s", source.name)
        try:
            metadata, sections = self.weaver.weave(
                source.text,
                dryrun=True,
                name=source.name,
                renderer_args=self.renderer_args,
            )
        except CollationError:
            raise
        except Exception as exc:
            raise RenderError(source.name, "discovery", str(exc)) from exc
        return DiscoveredDocument(
            source=source,
            metadata=DocumentMetadata.from_mapping(source.name, metadata),
            sections=tuple(sections),
        )

    def page_keyvals(
        self, doc: DiscoveredDocument, toc: TableOfContents
    ) -> dict[str, str]:
        """Return a fresh shared-metadata mapping for rendering ``doc``."""
        fragment = render_table_of_contents(
            toc, doc.title, selected_name=doc.name, max_level=self.max_level
        )
        return {**self.keyvals, TOC_KEY: fragment}

    def render(
        self, doc: DiscoveredDocument, toc: TableOfContents, page_template: Path
    ) -> Path:
        """Weave ``doc`` into ``<outdir>/<name>.html`` and return the path."""
        logger.info("weaving %s", doc.name)
        target = self.outdir / PAGE_FILENAME_TEMPLATE.format(name=doc.name)
        keyvals = self.page_keyvals(doc, toc)
        try:
            with _atomic_writer(target) as handle:
                self.weaver.weave(
                    doc.source.text,
                    handle,
                    name=doc.name,
                    template=page_template,
                    toc=True,
                    outdir=self.outdir,
                    keyvals=keyvals,
                    renderer_args=self.renderer_args,
                )
        except CollationError:
            raise
        except Exception as exc:
            raise RenderError(doc.name, "render", str(exc)) from exc
        return target

    def _attempt_render(
        self, doc: DiscoveredDocument, toc: TableOfContents, page_template: Path
    ) -> Path | RenderError:
        try:
            return self.render(doc, toc, page_template)
        except RenderError as exc:
            if self.fail_fast:
                raise
            logger.error("%s", exc)  # noqa: TRY400
            return exc

    def _map(
        self, func: cabc.Callable[[_T], _R], items: cabc.Sequence[_T]
    ) -> list[_R]:
        """Apply ``func`` to every item, on a thread pool when ``jobs > 1``."""
        if self.jobs == 1 or len(items) <= 1:
            return [func(item) for item in items]
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            futures = [executor.submit(func, item) for item in items]
            try:
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise


def collate(
    filenames: cabc.Sequence[Path | str],
    *,
    template: str | Path = DEFAULT_TEMPLATE,
    outdir: Path | str = Path(),
    declarations: cabc.Mapping[str, typ.Any] | None = None,
    pkgname: str | None = None,
    pkgver: str | None = None,
    pkgurl: str | None = None,
    renderer_args: cabc.Sequence[str] | None = None,
    weaver: Weaver | None = None,
    max_level: int = DEFAULT_MAX_LEVEL,
    jobs: int = 1,
    on_collision: CollisionPolicy = CollisionPolicy.ERROR,
    fail_fast: bool = True,
) -> CollationResult:
    """Generate a manual from explicit source files.

    ``pkgname``, ``pkgver`` and ``pkgurl`` become the shared ``pkgname``,
    ``pkgver`` and ``pkgurl`` keyvals when not ``None``; otherwise those keys
    are absent. See :class:`Collator` for the remaining parameters.
    """
    keyvals = {
        key: value
        for key, value in (
            (PKGNAME_KEY, pkgname),
            (PKGVER_KEY, pkgver),
            (PKGURL_KEY, pkgurl),
        )
        if value is not None
    }
    collator = Collator(
        template=template,
        outdir=outdir,
        weaver=weaver,
        declarations=declarations,
        keyvals=keyvals,
        renderer_args=renderer_args,
        max_level=max_level,
        jobs=jobs,
        on_collision=on_collision,
        fail_fast=fail_fast,
    )
    return collator.run(filenames)


def collate_files(
    filenames: cabc.Sequence[Path | str],
    config: ManualConfig,
    *,
    weaver: Weaver | None = None,
) -> CollationResult:
    """Collate ``filenames`` using the settings in ``config``."""
    declarations = (
        load_declarations(config.declarations) if config.declarations else None
    )
    return collate(
        filenames,
        template=config.template,
        outdir=config.resolved_output_dir,
        declarations=declarations,
        pkgname=config.project,
        pkgver=config.version,
        pkgurl=config.repo_url,
        renderer_args=config.extensions,
        weaver=weaver or MarkdownWeaver(config.pygments_style),
        max_level=config.max_level,
        jobs=config.jobs,
        on_collision=config.on_collision,
        fail_fast=config.fail_fast,
    )


def collate_package(
    project_dir: Path,
    config: ManualConfig | None = None,
    *,
    weaver: Weaver | None = None,
) -> CollationResult:
    """Generate the manual for the project checked out at ``project_dir``.

    Sources are the documentation files under ``<project_dir>/<doc_dir>``;
    pages go to the configured output directory, ``<doc_dir>/html`` by
    default. The project's installed version and repository URL are looked
    up unless the configuration provides them; lookup failures leave them
    out of the shared metadata.
    """
    config = config or ManualConfig()
    project = config.project or project_dir.resolve().name
    doc_dir = project_dir / config.doc_dir
    outdir = config.output_dir or doc_dir / DEFAULT_OUTPUT_SUBDIR

    found = lookup_package_metadata(
        None if config.version else project,
        None if config.repo_url else project_dir,
    )
    resolved = dc.replace(
        config,
        project=project,
        doc_dir=doc_dir,
        output_dir=outdir,
        version=config.version or found.version,
        repo_url=config.repo_url or found.url,
    )
    filenames = [
        path
        for path in find_documents(doc_dir)
        if not path.resolve().is_relative_to(outdir.resolve())
    ]
    return collate_files(filenames, resolved, weaver=weaver)


__all__ = ["Collator", "collate", "collate_files", "collate_package"]
