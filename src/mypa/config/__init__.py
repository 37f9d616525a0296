"""Configuration loading and validation."""

from mypa.config.loader import load_config
from mypa.config.schema import (
    LayoutConfig,
    LoggingConfig,
    MypaConfig,
    PageConfig,
    ProtocolConfig,
    ServerConfig,
    SitesConfig,
)

__all__ = [
    "LayoutConfig",
    "LoggingConfig",
    "MypaConfig",
    "PageConfig",
    "ProtocolConfig",
    "ServerConfig",
    "SitesConfig",
    "load_config",
]
