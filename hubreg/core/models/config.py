"""
Configuration sections.

Each section maps to a table in .hubreg/config.toml and to the
HUBREG_<SECTION>__<FIELD> environment variables.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field, field_validator

from .base import HubregBaseModel

LogLevel = Literal["debug", "info", "warning", "error"]

DEFAULT_REGISTRY_URL = "https://www.trackhubregistry.org"


class ConfigBaseModel(HubregBaseModel):
    """Config section: coerces TOML/env strings and ignores keys it does not know."""

    model_config = ConfigDict(extra="ignore")


class RegistryConfig(ConfigBaseModel):
    """[registry] table.

    Attributes:
        url: Registry server, without trailing slash
        user: Account name sent at login and with every post
        password: Account password; only read, never written to disk
        timeout: Socket timeout in seconds for each registry request
    """

    url: Annotated[str, Field(max_length=2048)] | None = DEFAULT_REGISTRY_URL
    user: str | None = None
    password: str | None = None
    timeout: Annotated[float, Field(gt=0)] = 30.0

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, str):
            if not v.startswith(("http://", "https://")):
                raise ValueError("Registry URL must start with http:// or https://")
            return v.rstrip("/")
        return v


class LoggingConfig(ConfigBaseModel):
    """[logging] table for the diagnostic log, not CLI output."""

    level: LogLevel = "warning"
    console: bool = False
    file: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def lowercase_level(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v


class HubregConfig(ConfigBaseModel):
    """All sections together, as written to .hubreg/config.toml."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
