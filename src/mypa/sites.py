"""Authorized sites: the URLs offered in every screen's site picker.

The list is merged from a JSON file (``{"sites": [...]}``) and a
comma-separated environment variable, de-duplicated in first-seen order
and sorted by URL without its ``https://`` prefix.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mypa.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from mypa.config.schema import SitesConfig

logger = logging.getLogger(__name__)


def _strip_scheme(url: str) -> str:
    return url.removeprefix("https://")


def site_label(url: str) -> str:
    """Short label for *url*: the project path on github.io, else the first host label."""
    clean = _strip_scheme(str(url))
    if ".github.io/" in clean:
        segments = [s for s in clean.split("/") if s]
        return segments[-1] if segments else clean
    return clean.split(".")[0] or clean


def merge_unique(*groups: Iterable[str]) -> list[str]:
    """Concatenate *groups*, keeping the first occurrence of each URL."""
    return list(dict.fromkeys(s for group in groups for s in group))


def sort_sites(sites: Iterable[str]) -> list[str]:
    return sorted(sites, key=lambda s: _strip_scheme(str(s)))


def split_env_sites(raw: str) -> list[str]:
    return [s.strip() for s in raw.split(",") if s.strip()]


def read_sites_file(path: str | Path) -> list[str]:
    """Return the ``sites`` array from *path*; errors are logged and yield ``[]``."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("authorized sites file %s unreadable: %s", path, e)
        return []
    sites = data.get("sites") if isinstance(data, dict) else None
    if not isinstance(sites, list):
        return []
    return [str(s) for s in sites]


def load_authorized_sites(
    config: SitesConfig, environ: Mapping[str, str] | None = None
) -> list[str]:
    """Merge the file and environment sources into the sorted site list."""
    env = os.environ if environ is None else environ
    env_sites = split_env_sites(env.get(config.env_var, ""))
    if not env_sites:
        env_sites = list(config.default_sites)
    merged = merge_unique(read_sites_file(config.file), env_sites)
    return sort_sites(merged)


def merge_additional_sites(path: str | Path, raw: str) -> list[str]:
    """Merge the JSON array *raw* into the sites file at *path* and rewrite it.

    Raises:
        ConfigError: If the file or *raw* cannot be read or parsed, or the
            file cannot be written.
    """
    p = Path(path)
    try:
        base: Any = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        msg = f"Error reading {p}: {e}"
        raise ConfigError(msg) from e
    if not isinstance(base, dict):
        base = {"sites": []}

    additional: Any = []
    if raw.strip():
        try:
            additional = json.loads(raw)
        except ValueError as e:
            msg = f"Error parsing additional sites: {e}"
            raise ConfigError(msg) from e
        if not isinstance(additional, list):
            msg = "Additional sites must be a JSON array"
            raise ConfigError(msg)

    base["sites"] = merge_unique(base.get("sites") or [], [str(s) for s in additional])
    try:
        p.write_text(json.dumps(base, indent=2), encoding="utf-8")
    except OSError as e:
        msg = f"Error writing {p}: {e}"
        raise ConfigError(msg) from e
    return base["sites"]
