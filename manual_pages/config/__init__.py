"""Load and validate manual build configuration.

This subpackage parses a project's ``manual.yaml`` file, applies defaults,
resolves relative paths against the file's directory, and produces a typed
:class:`ManualConfig` for the collation driver and CLI.

Examples
--------
>>> from pathlib import Path
>>> from manual_pages.config import load_manual_config
>>> config = load_manual_config(Path("manual.yaml"))  # doctest: +SKIP
>>> config.resolved_output_dir  # doctest: +SKIP
PosixPath('doc/html')
"""

from .loader import build_manual_config, load_manual_config
from .models import CollisionPolicy, ManualConfig, ManualConfigError

__all__ = [
    "CollisionPolicy",
    "ManualConfig",
    "ManualConfigError",
    "build_manual_config",
    "load_manual_config",
]
