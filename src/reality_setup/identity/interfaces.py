"""Protocol interfaces for identity material sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import KeyPair


class KeyPairSource(Protocol):
    """Protocol for X25519 key pair generators."""

    def generate(self) -> KeyPair:
        """Generate a fresh key pair."""
        ...


class DerivingKeyPairSource(KeyPairSource, Protocol):
    """Key pair source that can recompute a public key from a private key."""

    def derive_public_key(self, private_key: str) -> str:
        """Return the public half matching ``private_key``."""
        ...
