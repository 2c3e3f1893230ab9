"""Cyclopts CLI entrypoint for collating documentation into an HTML manual.

The ``manual`` console script defined here renders a set of markdown, text or
restructured-text files into linked ``<name>.html`` pages sharing one table
of contents. ``manual build`` collates explicit files or directories;
``manual package`` collates the ``doc`` directory of a project checkout and
decorates the pages with the project's version and repository URL.

Every option can also be supplied through a ``MANUAL_``-prefixed environment
variable.

Examples
--------
Build the manual for the project in the current directory:

>>> from manual_pages.cli import app
>>> app(["package", "."])  # doctest: +SKIP

Collate two files into ``site``:

>>> app(
...     ["build", "doc/intro.md", "doc/usage.md", "--output-dir", "site"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .collate import collate_files, collate_package
from .config import CollisionPolicy, ManualConfig, ManualConfigError, load_manual_config
from .sources import find_documents

DEFAULT_CONFIG = Path("manual.yaml")

app = App(name="manual", config=cyclopts.config.Env("MANUAL_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _load_config(path: Path | None, fallback: Path) -> ManualConfig:
    """Load ``path``, or ``fallback`` when it exists, or return the defaults."""
    if path is not None:
        return load_manual_config(path)
    if fallback.is_file():
        return load_manual_config(fallback)
    return ManualConfig()


def _apply_overrides(config: ManualConfig, **overrides: typ.Any) -> ManualConfig:
    """Return ``config`` with every override that is not ``None`` applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dc.replace(config, **changes) if changes else config


def _expand_paths(paths: list[Path]) -> list[Path]:
    """Replace directories in ``paths`` with the documentation files they hold."""
    expanded: list[Path] = []
    for path in paths:
        if path.is_dir():
            expanded.extend(find_documents(path))
        else:
            expanded.append(path)
    return expanded


@app.command(help="Collate documentation files into a multi-page HTML manual.")
def build(
    paths: typ.Annotated[
        list[Path] | None,
        Parameter(help="Documentation files or directories to collate"),
    ] = None,
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to manual config", env_var="MANUAL_CONFIG")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Folder receiving the HTML pages")
    ] = None,
    template: typ.Annotated[
        str | None, Parameter(help="Template directory or built-in template name")
    ] = None,
    project: typ.Annotated[
        str | None, Parameter(help="Project name shown on every page")
    ] = None,
    version: typ.Annotated[
        str | None, Parameter(help="Project version shown on every page")
    ] = None,
    repo_url: typ.Annotated[
        str | None, Parameter(help="Source repository URL shown on every page")
    ] = None,
    max_level: typ.Annotated[
        int | None, Parameter(help="Deepest heading level listed in the contents")
    ] = None,
    jobs: typ.Annotated[
        int | None, Parameter(help="Worker threads used per pass")
    ] = None,
    on_collision: typ.Annotated[
        CollisionPolicy | None,
        Parameter(help="How to handle files resolving to the same page name"),
    ] = None,
    keep_going: typ.Annotated[
        bool, Parameter(help="Render remaining pages after a page fails")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log discovery details")] = False,
) -> None:
    """Collate explicit documentation files into an HTML manual.

    Parameters
    ----------
    paths : list[Path] or None, optional
        Source files and directories. Directories contribute every
        ``.md``/``.txt``/``.rst`` file below them. Defaults to the configured
        documentation directory.
    config : Path or None, optional
        Manual configuration file; ``manual.yaml`` is used when present.
    output_dir, template, project, version, repo_url, max_level, jobs, on_collision
        Overrides for the matching configuration values.
    keep_going : bool, optional
        Render every page even if some fail, then report the failures.
    verbose : bool, optional
        Enable debug logging.

    Returns
    -------
    None
        Writes the pages and template assets and prints each written path.

    Raises
    ------
    ManualConfigError
        If no documentation files were found.
    """
    _configure_logging(verbose=verbose)
    manual_config = _apply_overrides(
        _load_config(config, DEFAULT_CONFIG),
        output_dir=output_dir,
        template=template,
        project=project,
        version=version,
        repo_url=repo_url,
        max_level=max_level,
        jobs=jobs,
        on_collision=on_collision,
        fail_fast=False if keep_going else None,
    )
    filenames = _expand_paths(paths or [manual_config.doc_dir])
    if not filenames:
        msg = "No documentation files were found to collate."
        raise ManualConfigError(msg)

    result = collate_files(filenames, manual_config)
    for path in result.written:
        print(f"wrote {_format_path(path)}")


@app.command(help="Collate a project's doc directory into doc/html.")
def package(
    project_dir: typ.Annotated[
        Path, Parameter(help="Project checkout containing a doc directory")
    ] = Path(),
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to manual config", env_var="MANUAL_CONFIG")
    ] = None,
    project: typ.Annotated[
        str | None, Parameter(help="Installed package name for the version lookup")
    ] = None,
    template: typ.Annotated[
        str | None, Parameter(help="Template directory or built-in template name")
    ] = None,
    jobs: typ.Annotated[
        int | None, Parameter(help="Worker threads used per pass")
    ] = None,
    keep_going: typ.Annotated[
        bool, Parameter(help="Render remaining pages after a page fails")
    ] = False,
    verbose: typ.Annotated[bool, Parameter(help="Log discovery details")] = False,
) -> None:
    """Generate the manual for a project checkout.

    The configuration defaults to ``<project_dir>/manual.yaml`` when that file
    exists. Version and repository URL lookups that fail only drop those
    details from the pages.
    """
    _configure_logging(verbose=verbose)
    manual_config = _apply_overrides(
        _load_config(config, project_dir / DEFAULT_CONFIG),
        project=project,
        template=template,
        jobs=jobs,
        fail_fast=False if keep_going else None,
    )
    result = collate_package(project_dir, manual_config)
    for path in result.written:
        print(f"wrote {_format_path(path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``manual`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
