"""
Track hub registration models.

Fixed vocabularies accepted by the Track Hub Registry and the immutable
values a registry session is built from.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any
from urllib.parse import urlsplit

from pydantic import Field, SecretStr, field_validator

from .base import ImmutableModel


class Assembly(str, Enum):
    """Genome assemblies the registry accepts for a track hub."""

    HG38 = "hg38"

    @property
    def accession(self) -> str:
        """INSDC accession the registry expects for this assembly."""
        return ASSEMBLY_ACCESSIONS[self]


# Adding an assembly means adding a member above and a row here.
ASSEMBLY_ACCESSIONS = MappingProxyType(
    {
        Assembly.HG38: "GCA_000001405.21",
    }
)


class TrackhubType(str, Enum):
    """The -omics category a track hub is registered under."""

    GENOMICS = "GENOMICS"
    EPIGENOMICS = "EPIGENOMICS"
    TRANSCRIPTOMICS = "TRANSCRIPTOMICS"
    PROTEOMICS = "PROTEOMICS"


class Visibility(Enum):
    """Whether the hub shows up in registry search results."""

    PUBLIC = 1
    PRIVATE = 0

    @property
    def wire_value(self) -> int:
        return self.value


class RegistryCredentials(ImmutableModel):
    """Registry address and account used to authenticate a session.

    Values are not required to be non-empty here; `RegistrySession.login`
    checks that before contacting the server.
    """

    server: Annotated[str, Field(max_length=2048)] = ""
    user: str = ""
    password: SecretStr = SecretStr("")

    @field_validator("server", mode="before")
    @classmethod
    def normalize_server(cls, v: Any) -> Any:
        """Strip whitespace and trailing slashes, require an http(s) scheme."""
        if not isinstance(v, str):
            return v
        v = v.strip().rstrip("/")
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("Registry server must start with http:// or https://")
        return v

    @property
    def host(self) -> str:
        """Host name the credentials are offered to, without scheme or port."""
        return urlsplit(self.server).hostname or ""


class TrackhubSubmission(ImmutableModel):
    """Description of a hosted track hub to register."""

    url: Annotated[str, Field(min_length=1, max_length=2048)]
    hub_type: TrackhubType
    visibility: Visibility = Visibility.PUBLIC
    assemblies: tuple[Assembly, ...] = ()

    @field_validator("url", mode="before")
    @classmethod
    def validate_url(cls, v: Any) -> Any:
        """Track hubs are served over HTTP(S) or FTP."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if v and not v.startswith(("http://", "https://", "ftp://")):
            raise ValueError("Track hub URL must start with http://, https:// or ftp://")
        return v

    def assembly_accessions(self) -> dict[str, str]:
        """Map each assembly name to its accession, in submission order."""
        return {assembly.value: assembly.accession for assembly in self.assemblies}

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON body for `POST /api/trackhub`.

        `assembliesNames` is left out entirely when no assemblies are set.
        """
        payload: dict[str, Any] = {
            "url": self.url,
            "type": self.hub_type.name,
            "public": self.visibility.wire_value,
        }
        if self.assemblies:
            payload["assembliesNames"] = self.assembly_accessions()
        return payload
