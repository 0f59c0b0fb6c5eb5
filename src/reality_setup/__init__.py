"""Xray VLESS + REALITY provisioning: identity, configs and share links."""

__version__ = "0.1.0"

# High-level API
from .api import ProvisionResult, build_provider, provision

from .client.config import synthesize_client
from .common.exceptions import (
    GenerationFailedError,
    InvalidOverrideError,
    LinkFormatError,
    OutputWriteFailedError,
    RealitySetupError,
    TemplateError,
    TemplateMalformedError,
    TemplateNotFoundError,
    TemplatePathNotFoundError,
)
from .common.logging import get_logger, setup_logging
from .common.query import Match, find_node_by_field

# Identity
from .identity import (
    IdentityMaterial,
    IdentityOverrides,
    IdentityProvider,
    KeyPair,
    ProxyCredential,
    X25519KeyPairSource,
    XrayKeyPairSource,
)
from .link import VlessLink, decode_link, encode_link
from .protocol import ProtocolVariant
from .server.config import synthesize_server
from .server.service import RestartReport, ServiceManager
from .settings import (
    KeyGenerator,
    NodeSelectors,
    OutputMode,
    ProvisionRequest,
    ProvisionSettings,
)
from .templates import ClientConfig, ConfigDocument, ServerConfig, TemplateStore

__all__ = [
    # High-level API
    "provision",
    "build_provider",
    "ProvisionResult",
    "ProvisionRequest",
    "ProvisionSettings",
    "OutputMode",
    "KeyGenerator",
    "NodeSelectors",
    # Identity
    "IdentityProvider",
    "IdentityMaterial",
    "IdentityOverrides",
    "KeyPair",
    "ProxyCredential",
    "X25519KeyPairSource",
    "XrayKeyPairSource",
    # Templates and synthesis
    "TemplateStore",
    "ConfigDocument",
    "ServerConfig",
    "ClientConfig",
    "synthesize_server",
    "synthesize_client",
    "Match",
    "find_node_by_field",
    "ProtocolVariant",
    # Links
    "encode_link",
    "decode_link",
    "VlessLink",
    # Service
    "ServiceManager",
    "RestartReport",
    # Exceptions
    "RealitySetupError",
    "InvalidOverrideError",
    "GenerationFailedError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateMalformedError",
    "TemplatePathNotFoundError",
    "LinkFormatError",
    "OutputWriteFailedError",
    # Logging
    "get_logger",
    "setup_logging",
]
