"""Load manual configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .models import CollisionPolicy, ManualConfig, ManualConfigError

_PATH_KEYS = ("doc_dir", "output_dir", "declarations")


def load_manual_config(path: Path) -> ManualConfig:
    """Load the YAML file describing how to build a manual.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (for example,
        ``manual.yaml``).

    Returns
    -------
    ManualConfig
        Parsed configuration with defaults applied. Relative paths are
        resolved against the directory containing ``path``.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ManualConfigError
        If the top level is not a mapping or a value is out of range.
    YAMLError
        If the YAML content cannot be parsed.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_manual_config(Path("manual.yaml"))  # doctest: +SKIP
    >>> config.template  # doctest: +SKIP
    'default'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ManualConfigError(msg)
    return build_manual_config(loaded, base_dir=path.resolve().parent)


def build_manual_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> ManualConfig:
    """Build a ManualConfig from a mapping, validating each value."""
    base = ManualConfig()
    paths = {key: _resolve_path(raw.get(key), base_dir) for key in _PATH_KEYS}
    extensions = raw.get("extensions") or []
    if not isinstance(extensions, list):
        msg = "'extensions' must be a list of Markdown extension names."
        raise ManualConfigError(msg)

    config = ManualConfig(
        project=_optional_str(raw.get("project")),
        doc_dir=paths["doc_dir"] or _resolve_path(str(base.doc_dir), base_dir),
        output_dir=paths["output_dir"],
        template=str(raw.get("template") or base.template),
        max_level=_positive_int(raw, "max_level", base.max_level),
        jobs=_positive_int(raw, "jobs", base.jobs),
        on_collision=_collision_policy(raw.get("on_collision")),
        fail_fast=bool(raw.get("fail_fast", base.fail_fast)),
        declarations=paths["declarations"],
        pygments_style=str(raw.get("pygments_style") or base.pygments_style),
        extensions=[str(name) for name in extensions],
        version=_optional_str(raw.get("version")),
        repo_url=_optional_str(raw.get("repo_url")),
    )
    return config


def _resolve_path(value: object | None, base_dir: Path | None) -> Path | None:
    """Return ``value`` as a Path, anchored at ``base_dir`` when relative."""
    text = _optional_str(value)
    if text is None:
        return None
    path = Path(text).expanduser()
    if base_dir is not None and not path.is_absolute():
        return base_dir / path
    return path


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(raw: typ.Mapping[str, typ.Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    match value:
        case bool():
            pass
        case int() if value >= 1:
            return value
        case str() if value.strip().isdigit() and int(value) >= 1:
            return int(value)
    msg = f"'{key}' must be a positive integer, got {value!r}."
    raise ManualConfigError(msg)


def _collision_policy(value: object | None) -> CollisionPolicy:
    if value is None:
        return CollisionPolicy.ERROR
    try:
        return CollisionPolicy(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(policy.value for policy in CollisionPolicy)
        msg = f"'on_collision' must be one of {choices}, got {value!r}."
        raise ManualConfigError(msg) from exc


__all__ = ["build_manual_config", "load_manual_config"]
