"""Exception hierarchy raised while collating a manual.

Every error derives from :class:`CollationError` so callers (and the CLI) can
catch collation problems without swallowing unrelated failures.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class CollationError(Exception):
    """Base class for all manual collation failures."""


class ConfigurationError(CollationError):
    """Raised when the run is misconfigured before any document is read."""


class TemplateNotFoundError(ConfigurationError):
    """Raised when a template directory or built-in template name is unknown."""

    def __init__(self, template: str) -> None:
        self.template = template
        super().__init__(f"Can't find template {template}")


class MetadataLookupError(CollationError):
    """Raised when a package version or repository URL cannot be determined."""


class NameCollisionError(CollationError):
    """Raised when two source files resolve to the same document name."""

    def __init__(self, name: str, paths: typ.Sequence[Path]) -> None:
        self.name = name
        self.paths = tuple(paths)
        joined = ", ".join(str(path) for path in self.paths)
        super().__init__(f"Documents {joined} all resolve to the name '{name}'.")


class RenderError(CollationError):
    """Raised when weaving a single document fails."""

    def __init__(self, name: str, phase: str, reason: str) -> None:
        self.name = name
        self.phase = phase
        self.reason = reason
        super().__init__(f"Failed to weave '{name}' during {phase}: {reason}")


class DocumentMetadataError(RenderError):
    """Raised when a document declares metadata that cannot be interpreted."""


class CollationFailedError(CollationError):
    """Raised after an isolated run in which one or more documents failed."""

    def __init__(
        self, failures: typ.Sequence[RenderError], written: typ.Sequence[Path]
    ) -> None:
        self.failures = tuple(failures)
        self.written = tuple(written)
        names = ", ".join(failure.name for failure in self.failures)
        super().__init__(
            f"{len(self.failures)} document(s) failed to render: {names}"
        )


__all__ = [
    "CollationError",
    "CollationFailedError",
    "ConfigurationError",
    "DocumentMetadataError",
    "MetadataLookupError",
    "NameCollisionError",
    "RenderError",
    "TemplateNotFoundError",
]
