"""Locate page templates and copy their static assets.

A template is a directory holding ``template.html`` plus optional ``js`` and
``css`` asset directories. It is named either by an existing directory path
or by the name of a built-in template shipped under
``manual_pages/templates``.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ._constants import PAGE_TEMPLATE_FILENAME, TEMPLATE_ASSET_DIRS
from .errors import TemplateNotFoundError

TEMPLATES_ROOT = Path(__file__).resolve().parent / "templates"

logger = logging.getLogger(__name__)


def resolve_template(template: str | Path, *, root: Path = TEMPLATES_ROOT) -> Path:
    """Return the directory for ``template``.

    Parameters
    ----------
    template : str or Path
        Existing template directory, or the name of a template under ``root``.
    root : Path, optional
        Directory holding the built-in templates.

    Returns
    -------
    Path
        The resolved template directory.

    Raises
    ------
    TemplateNotFoundError
        If neither interpretation names an existing directory.
    """
    candidate = Path(template)
    if candidate.is_dir():
        return candidate
    named = root / str(template)
    if named.is_dir():
        return named
    raise TemplateNotFoundError(str(template))


def page_template_path(template_dir: Path) -> Path:
    """Return the page template file inside ``template_dir``."""
    return template_dir / PAGE_TEMPLATE_FILENAME


def copy_template_assets(template_dir: Path, outdir: Path) -> list[Path]:
    """Copy the template's ``js`` and ``css`` directories into ``outdir``.

    Missing asset directories are skipped. Returns the destination
    directories that were populated.
    """
    copied: list[Path] = []
    for asset_dir in TEMPLATE_ASSET_DIRS:
        source = template_dir / asset_dir
        if not source.is_dir():
            logger.debug("template %s has no %s directory", template_dir, asset_dir)
            continue
        destination = outdir / asset_dir
        shutil.copytree(source, destination, dirs_exist_ok=True)
        copied.append(destination)
    return copied


__all__ = [
    "TEMPLATES_ROOT",
    "copy_template_assets",
    "page_template_path",
    "resolve_template",
]
