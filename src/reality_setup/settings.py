"""Settings models for provisioning runs."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common.utils import validate_server_address
from .identity.generators import DEFAULT_SNI_CANDIDATES
from .identity.models import IdentityOverrides
from .protocol import ProtocolVariant

DEFAULT_DAEMON_CONFIG_PATH = Path("/usr/local/etc/xray/config.json")


class OutputMode(str, Enum):
    """Where the server document is written."""

    LIVE = "live"  # daemon configuration path, then restart the service
    STAGING = "staging"  # staging directory only


class KeyGenerator(str, Enum):
    """Key pair source used when no key pair override is given."""

    X25519 = "x25519"
    XRAY = "xray"


class NodeSelectors(BaseModel):
    """Tags locating the nodes rewritten by synthesis."""

    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, extra="forbid"
    )

    tag_field: str = Field(default="tag", min_length=1, description="Discriminator field")
    server_inbound: str = Field(default="vless-in", min_length=1)
    client_outbound: str = Field(default="proxy", min_length=1)
    socks_inbound: str = Field(default="socks-in", min_length=1)
    http_inbound: str = Field(default="http-in", min_length=1)


class ProvisionSettings(BaseModel):
    """Paths and knobs that stay constant across provisioning runs."""

    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, extra="forbid"
    )

    daemon_config_path: Path = Field(
        default=DEFAULT_DAEMON_CONFIG_PATH, description="Live Xray configuration file"
    )
    staging_dir: Path = Field(default_factory=Path.cwd, description="Local output directory")
    server_output_name: str = Field(default="server_config.json", min_length=1)
    client_output_name: str = Field(default="client_config.json", min_length=1)
    server_template: Path | None = Field(default=None, description="None uses the bundled template")
    client_template: Path | None = Field(default=None, description="None uses the bundled template")
    sni_candidates: tuple[str, ...] = Field(default=DEFAULT_SNI_CANDIDATES, min_length=1)
    service_name: str = Field(default="xray", min_length=1, description="Service manager unit name")
    key_generator: KeyGenerator = Field(default=KeyGenerator.X25519)
    xray_binary: str = Field(default="xray", min_length=1)
    selectors: NodeSelectors = Field(default_factory=NodeSelectors)

    @field_validator("daemon_config_path")
    @classmethod
    def validate_daemon_config_path(cls, v: Path) -> Path:
        """Daemon configuration path must be absolute."""
        if not v.is_absolute():
            raise ValueError("Daemon configuration path must be an absolute path")
        return v

    @field_validator("sni_candidates")
    @classmethod
    def validate_sni_candidates(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Reject blank SNI candidates."""
        cleaned = tuple(candidate.strip() for candidate in v)
        if any(not candidate for candidate in cleaned):
            raise ValueError("SNI candidates cannot be empty strings")
        return cleaned

    @property
    def server_staging_path(self) -> Path:
        return self.staging_dir / self.server_output_name

    @property
    def client_output_path(self) -> Path:
        return self.staging_dir / self.client_output_name

    def server_output_path(self, mode: OutputMode) -> Path:
        """Destination of the server document for ``mode``."""
        if mode is OutputMode.LIVE:
            return self.daemon_config_path
        return self.server_staging_path


class ProvisionRequest(BaseModel):
    """One provisioning request, as parsed from the command line."""

    model_config = ConfigDict(
        str_strip_whitespace=True, validate_assignment=True, extra="forbid"
    )

    server_address: str = Field(..., min_length=1, description="Public IP or domain of the server")
    overrides: IdentityOverrides = Field(default_factory=IdentityOverrides)
    variant: ProtocolVariant = Field(default=ProtocolVariant.NO_FLOW)
    output_mode: OutputMode = Field(default=OutputMode.LIVE)
    proxy_auth: bool = Field(default=True, description="Protect local listeners with a credential")

    @field_validator("server_address")
    @classmethod
    def check_server_address(cls, v: str) -> str:
        """Server address must be a bare host name or IP address."""
        return validate_server_address(v)
