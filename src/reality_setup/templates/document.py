"""Configuration document models."""

import copy
import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentKind(str, Enum):
    """Which side of the tunnel a document configures."""

    SERVER = "server"
    CLIENT = "client"
    GENERIC = "generic"


class ConfigDocument(BaseModel):
    """A parsed JSON configuration document.

    The content is treated as opaque apart from the paths the synthesizer
    rewrites. Key order is preserved through load, copy and serialization.
    """

    model_config = ConfigDict(frozen=True)

    kind: DocumentKind = Field(default=DocumentKind.GENERIC)
    data: dict[str, Any] = Field(default_factory=dict)
    source: str | None = Field(default=None, description="File the document came from")

    def clone_data(self) -> dict[str, Any]:
        """Deep copy of the content, safe to mutate."""
        return copy.deepcopy(self.data)

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON with a trailing newline."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"


class ServerConfig(ConfigDocument):
    """Server-side Xray configuration."""

    kind: DocumentKind = Field(default=DocumentKind.SERVER)


class ClientConfig(ConfigDocument):
    """Client-side Xray configuration."""

    kind: DocumentKind = Field(default=DocumentKind.CLIENT)
