"""Configuration loading: layered TOML files plus environment settings.

Layers, lowest priority first:
    1. Model defaults
    2. ``$XDG_CONFIG_HOME/mypa/config.toml`` (``~/.config`` when unset)
    3. ``./mypa.toml`` next to where the page is served from
    4. ``$MYPA_CONFIG``, then the explicit path given to ``load_config``
    5. Programmatic overrides
    6. ``$PORT`` for ``server.port``, as the page server has always honoured
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mypa.core.errors import ConfigError

from .schema import MypaConfig

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


def _config_sources(
    path: str | Path | None, environ: Mapping[str, str]
) -> Iterator[Path]:
    """Yield the config files to layer, optional ones only when present."""
    config_home = environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    for optional in (Path(config_home) / "mypa" / "config.toml", Path("mypa.toml")):
        if optional.is_file():
            yield optional

    env_path = environ.get("MYPA_CONFIG")
    if env_path:
        if not Path(env_path).is_file():
            msg = f"MYPA_CONFIG points to non-existent file: {env_path}"
            raise ConfigError(msg)
        yield Path(env_path)

    if path is not None:
        if not Path(path).is_file():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg)
        yield Path(path)


def _read_layer(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise ConfigError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file {path}: {e}"
        raise ConfigError(msg) from e


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    port = environ.get("PORT", "").strip()
    return {"server": {"port": port}} if port else {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *override* layered on top; nested tables merge."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _deep_merge(current, value)
        merged[key] = value
    return merged


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> MypaConfig:
    """Load and validate configuration.

    Raises:
        ConfigError: On invalid TOML, missing files, or validation failure.
    """
    environ = os.environ
    layers = [_read_layer(p) for p in _config_sources(path, environ)]
    layers += [overrides or {}, _env_layer(environ)]

    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _deep_merge(merged, layer)

    try:
        return MypaConfig.model_validate(merged)
    except Exception as e:
        msg = f"Configuration validation failed: {e}"
        raise ConfigError(msg) from e
