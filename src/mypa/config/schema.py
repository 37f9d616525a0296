"""Pydantic models for mypa configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PageConfig(BaseModel):
    """The hosting page itself."""

    base_url: str = "http://localhost:3000/"
    initial_screens: int = 1


class LayoutConfig(BaseModel):
    """Screen grid constraints."""

    allowed_counts: list[int] = Field(default_factory=lambda: [1, 2, 3, 4, 20])
    grid_max: int = 4


class ProtocolConfig(BaseModel):
    """Message discriminants for the controller and child protocols."""

    controller_call_type: str = "MYPA_CALL"
    controller_response_type: str = "MYPA_RESPONSE"
    child_call_type: str = "KIZUNA_CALL"
    child_response_type: str = "KIZUNA_RESPONSE"
    generic_message_type: str = "MYPA_IFRAME_MESSAGE"
    request_id_prefix: str = "MYPA_KZ"
    child_timeout_ms: int = 1500


class SitesConfig(BaseModel):
    """Sources for the authorized site list."""

    file: str = "authorized-sites.json"
    env_var: str = "AUTHORIZED_SITES"
    default_sites: list[str] = Field(
        default_factory=lambda: ["https://hongkoala.com/"]
    )


class ServerConfig(BaseModel):
    """HTTP/WebSocket server settings."""

    host: str = "127.0.0.1"
    port: int = 3000


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""


class MypaConfig(BaseModel):
    """Top-level configuration for mypa."""

    page: PageConfig = Field(default_factory=PageConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    protocol: ProtocolConfig = Field(default_factory=ProtocolConfig)
    sites: SitesConfig = Field(default_factory=SitesConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
