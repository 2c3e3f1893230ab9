"""Look up the installed version and source repository of a project.

Both facts are optional decorations for the manual: lookups raise
:class:`~manual_pages.errors.MetadataLookupError` individually, and
:func:`lookup_package_metadata` turns those failures into absent fields.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import subprocess
from importlib import metadata as importlib_metadata
from pathlib import Path

from ._constants import GITHUB_URL_PATTERN
from .errors import MetadataLookupError

GIT_REMOTE_ARGS = ("config", "--get", "remote.origin.url")

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class PackageMetadata:
    """Version string and repository URL, each ``None`` when unknown."""

    version: str | None = None
    url: str | None = None


def normalize_repo_url(remote: str) -> str | None:
    """Return ``https://github.com/<path>`` for a ``.git`` remote URL.

    Examples
    --------
    >>> normalize_repo_url("git@github.com:owner/project.git")
    'https://github.com/owner/project'
    >>> normalize_repo_url("https://example.org/owner/project") is None
    True
    """
    match = GITHUB_URL_PATTERN.search(remote.strip())
    if match is None:
        return None
    return f"https://github.com/{match.group(1)}"


def package_version(project: str) -> str:
    """Return the installed distribution version of ``project``."""
    try:
        return importlib_metadata.version(project)
    except importlib_metadata.PackageNotFoundError as exc:
        msg = f"Package '{project}' is not installed."
        raise MetadataLookupError(msg) from exc


def repository_url(project_dir: Path) -> str:
    """Return the normalized origin URL of the git checkout at ``project_dir``."""
    try:
        completed = subprocess.run(  # noqa: S603
            ["git", "-C", str(project_dir), *GIT_REMOTE_ARGS],  # noqa: S607
            check=True,
            text=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        msg = f"Unable to read the git remote of '{project_dir}'."
        raise MetadataLookupError(msg) from exc
    url = normalize_repo_url(completed.stdout)
    if url is None:
        msg = f"Remote '{completed.stdout.strip()}' is not a hosted .git URL."
        raise MetadataLookupError(msg)
    return url


def lookup_package_metadata(
    project: str | None, project_dir: Path | None = None
) -> PackageMetadata:
    """Return whatever metadata can be found for ``project``.

    Parameters
    ----------
    project : str or None
        Distribution name used for the version lookup; skipped when ``None``.
    project_dir : Path, optional
        Checkout whose git remote provides the repository URL; skipped when
        ``None``.

    Returns
    -------
    PackageMetadata
        Metadata with ``None`` for every field whose lookup failed. Failures
        are logged, never raised.
    """
    version: str | None = None
    url: str | None = None
    if project:
        try:
            version = package_version(project)
        except MetadataLookupError as exc:
            logger.warning("no version for %s: %s", project, exc)
    if project_dir is not None:
        try:
            url = repository_url(project_dir)
        except MetadataLookupError as exc:
            logger.warning("no repository url for %s: %s", project_dir, exc)
    return PackageMetadata(version=version, url=url)


__all__ = [
    "PackageMetadata",
    "lookup_package_metadata",
    "normalize_repo_url",
    "package_version",
    "repository_url",
]
