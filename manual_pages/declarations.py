r"""Inline API declaration documentation into documentation sources.

Declarations are read from a YAML mapping of declaration name to either a
markdown string or a mapping with ``signature``, ``doc`` and optional
``language`` keys. Each is turned into a markdown block, and any source line
of the form ``::: name`` is replaced by the block for ``name`` before the
document is discovered.

Example
-------
>>> from manual_pages.declarations import (
...     expand_declarations,
...     generate_declaration_markdown,
... )
>>> blocks = generate_declaration_markdown({"greet": "Say hello."})
>>> expand_declarations("Intro\n::: greet\n", blocks)
'Intro\nSay hello.\n'
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import re
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .errors import ConfigurationError

DECLARATION_MARKER_PATTERN = re.compile(r"^:::[ \t]+(\S+)[ \t]*$", re.MULTILINE)

logger = logging.getLogger(__name__)


def load_declarations(path: Path) -> dict[str, typ.Any]:
    """Load declaration documentation from the YAML file at ``path``.

    Raises
    ------
    ConfigurationError
        If the file is missing or its top level is not a mapping.
    """
    if not path.is_file():
        msg = f"Declarations file '{path}' not found."
        raise ConfigurationError(msg)
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Declarations file '{path}' must contain a mapping."
        raise ConfigurationError(msg)
    return {str(key): value for key, value in loaded.items()}


def _declaration_block(payload: object) -> str:
    if isinstance(payload, cabc.Mapping):
        signature = str(payload.get("signature") or "").strip()
        doc = str(payload.get("doc") or "").strip()
        language = str(payload.get("language") or "text")
        parts: list[str] = []
        if signature:
            parts.append(f"```{language}\n{signature}\n```")
        if doc:
            parts.append(doc)
        return "\n\n".join(parts)
    return str(payload or "").strip()


def generate_declaration_markdown(
    declarations: cabc.Mapping[str, typ.Any],
) -> dict[str, str]:
    """Return the markdown block documenting each declaration."""
    return {name: _declaration_block(payload) for name, payload in declarations.items()}


def expand_declarations(text: str, blocks: cabc.Mapping[str, str]) -> str:
    """Replace ``::: name`` lines in ``text`` with the matching block.

    Markers naming an unknown declaration are left untouched and logged.
    """
    if not blocks:
        return text

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        block = blocks.get(name)
        if block is None:
            logger.warning("no documentation for declaration %s", name)
            return match.group(0)
        return block

    return DECLARATION_MARKER_PATTERN.sub(_replace, text)


__all__ = [
    "DECLARATION_MARKER_PATTERN",
    "expand_declarations",
    "generate_declaration_markdown",
    "load_declarations",
]
