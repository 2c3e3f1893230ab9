"""Typed dataclasses describing a manual build configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
from pathlib import Path

from manual_pages._constants import (
    DEFAULT_DOC_DIR,
    DEFAULT_MAX_LEVEL,
    DEFAULT_OUTPUT_SUBDIR,
    DEFAULT_TEMPLATE,
)
from manual_pages.errors import ConfigurationError


class ManualConfigError(ConfigurationError, ValueError):
    """Raised when the manual configuration is invalid or incomplete."""


class CollisionPolicy(enum.StrEnum):
    """What to do when two sources resolve to the same document name."""

    ERROR = "error"
    OVERWRITE = "overwrite"


@dc.dataclass(slots=True)
class ManualConfig:
    """A fully resolved manual build definition.

    Attributes
    ----------
    project : str or None
        Project name shown in pages and used for the version lookup.
    doc_dir : Path
        Directory searched for documentation sources.
    output_dir : Path or None
        Where pages are written; ``<doc_dir>/html`` when ``None``.
    template : str
        Template directory or built-in template name.
    max_level : int
        Deepest heading level listed in the table of contents.
    jobs : int
        Worker threads used for each pass; ``1`` runs sequentially.
    on_collision : CollisionPolicy
        Handling of duplicate document names.
    fail_fast : bool
        Abort on the first render failure instead of finishing the others.
    declarations : Path or None
        YAML file documenting declarations referenced with ``::: name``.
    pygments_style : str
        Pygments style for code highlighting.
    extensions : list[str]
        Extra Python-Markdown extensions passed to the weaver.
    version : str or None
        Explicit version, skipping the installed-package lookup.
    repo_url : str or None
        Explicit repository URL, skipping the git remote lookup.
    """

    project: str | None = None
    doc_dir: Path = Path(DEFAULT_DOC_DIR)
    output_dir: Path | None = None
    template: str = DEFAULT_TEMPLATE
    max_level: int = DEFAULT_MAX_LEVEL
    jobs: int = 1
    on_collision: CollisionPolicy = CollisionPolicy.ERROR
    fail_fast: bool = True
    declarations: Path | None = None
    pygments_style: str = "monokai"
    extensions: list[str] = dc.field(default_factory=list)
    version: str | None = None
    repo_url: str | None = None

    @property
    def resolved_output_dir(self) -> Path:
        """Return the output directory, defaulting below ``doc_dir``."""
        return self.output_dir or self.doc_dir / DEFAULT_OUTPUT_SUBDIR


__all__ = ["CollisionPolicy", "ManualConfig", "ManualConfigError"]
