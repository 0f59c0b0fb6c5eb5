"""Identity material models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.utils import validate_short_id
from ..protocol import REALITY_PORT


class KeyPair(BaseModel):
    """X25519 key pair encoded the way ``xray x25519`` prints it."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    private_key: str = Field(..., min_length=1, description="Server-side private half")
    public_key: str = Field(..., min_length=1, description="Client-side public half")


class ProxyCredential(BaseModel):
    """Basic-auth pair for the client's local SOCKS and HTTP listeners."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    user: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    def to_account(self) -> dict[str, str]:
        """Render as an Xray inbound account entry."""
        return {"user": self.user, "pass": self.password}


class IdentityMaterial(BaseModel):
    """Identity shared by the server document, client document and link."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="forbid")

    client_id: str = Field(..., min_length=1, description="VLESS user id (UUID)")
    key_pair: KeyPair
    short_id: str = Field(..., description="REALITY short id (hex)")
    server_name: str = Field(..., min_length=1, description="SNI and camouflage host")
    proxy_credential: ProxyCredential | None = Field(
        default=None, description="Local proxy credential, None for no auth"
    )

    @field_validator("short_id")
    @classmethod
    def check_short_id(cls, v: str) -> str:
        """Short id must be even-length hex."""
        return validate_short_id(v)

    @property
    def dest(self) -> str:
        """Camouflage upstream in ``host:port`` form."""
        return f"{self.server_name}:{REALITY_PORT}"


class IdentityOverrides(BaseModel):
    """User-supplied replacements for generated identity values.

    ``None`` means not supplied. Blank strings are normalized to ``None``.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    client_id: str | None = None
    private_key: str | None = None
    public_key: str | None = None
    short_id: str | None = None
    server_name: str | None = None
    proxy_user: str | None = None
    proxy_password: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat blank strings as absent."""
        if isinstance(v, str) and not v.strip():
            return None
        return v
