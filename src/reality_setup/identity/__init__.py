"""Identity material: client id, key pair, short id, SNI and proxy credential."""

from .generators import (
    DEFAULT_SNI_CANDIDATES,
    X25519KeyPairSource,
    XrayKeyPairSource,
    generate_proxy_secret,
    generate_short_id,
    generate_uuid,
    parse_x25519_output,
)
from .interfaces import DerivingKeyPairSource, KeyPairSource
from .models import IdentityMaterial, IdentityOverrides, KeyPair, ProxyCredential
from .provider import IdentityProvider

__all__ = [
    "IdentityProvider",
    "IdentityMaterial",
    "IdentityOverrides",
    "KeyPair",
    "ProxyCredential",
    "KeyPairSource",
    "DerivingKeyPairSource",
    "X25519KeyPairSource",
    "XrayKeyPairSource",
    "DEFAULT_SNI_CANDIDATES",
    "generate_uuid",
    "generate_short_id",
    "generate_proxy_secret",
    "parse_x25519_output",
]
