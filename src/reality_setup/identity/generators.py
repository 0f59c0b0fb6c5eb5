"""Generators for identity material.

Keys use the encoding produced by ``xray x25519``: URL-safe base64 of the
raw 32-byte key, without ``=`` padding.
"""

import base64
import binascii
import re
import secrets
import shutil
import subprocess
import uuid

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from ..common.exceptions import GenerationFailedError
from ..common.logging import get_logger
from .models import KeyPair

logger = get_logger(__name__)

DEFAULT_SNI_CANDIDATES: tuple[str, ...] = (
    "www.microsoft.com",
    "www.apple.com",
    "www.amazon.com",
    "www.cloudflare.com",
    "www.bing.com",
)

SHORT_ID_BYTES = 8
PROXY_SECRET_BYTES = 6
X25519_KEY_LENGTH = 32

_PRIVATE_KEY_LINE = re.compile(r"^\s*private\s*key\s*:\s*(\S+)", re.IGNORECASE | re.MULTILINE)
# newer xray releases print the public half as "Password:"
_PUBLIC_KEY_LINE = re.compile(
    r"^\s*(?:public\s*key|password)\s*:\s*(\S+)", re.IGNORECASE | re.MULTILINE
)


def generate_uuid() -> str:
    """Generate a random (version 4) client id."""
    return str(uuid.uuid4())


def generate_short_id() -> str:
    """Generate a 16 character hex short id."""
    return secrets.token_hex(SHORT_ID_BYTES)


def generate_proxy_secret() -> str:
    """Generate a 12 character hex string for local proxy credentials."""
    return secrets.token_hex(PROXY_SECRET_BYTES)


def encode_key(raw: bytes) -> str:
    """Encode raw key bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_key(encoded: str) -> bytes:
    """Decode an unpadded URL-safe base64 key.

    Raises:
        ValueError: If the value is not valid base64 or not 32 bytes long
    """
    padded = encoded + "=" * (-len(encoded) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Key is not valid base64: {e}") from e
    if len(raw) != X25519_KEY_LENGTH:
        raise ValueError(f"Key must decode to {X25519_KEY_LENGTH} bytes, got {len(raw)}")
    return raw


class X25519KeyPairSource:
    """Generate REALITY key pairs in-process with ``cryptography``."""

    def generate(self) -> KeyPair:
        """Generate a fresh key pair."""
        private_key = X25519PrivateKey.generate()
        key_pair = KeyPair(
            private_key=encode_key(private_key.private_bytes_raw()),
            public_key=encode_key(private_key.public_key().public_bytes_raw()),
        )
        logger.debug("Generated X25519 key pair", public_key=key_pair.public_key)
        return key_pair

    def derive_public_key(self, private_key: str) -> str:
        """Return the public half matching ``private_key``.

        Raises:
            ValueError: If ``private_key`` is not a 32-byte base64 key
        """
        raw = decode_key(private_key)
        return encode_key(X25519PrivateKey.from_private_bytes(raw).public_key().public_bytes_raw())


class XrayKeyPairSource:
    """Generate key pairs by running ``xray x25519``."""

    def __init__(self, binary: str = "xray", timeout: float = 10.0) -> None:
        self.binary = binary
        self.timeout = timeout

    def _find_binary(self) -> str:
        binary_path = shutil.which(self.binary)
        if not binary_path:
            raise GenerationFailedError(f"Xray binary not found: {self.binary}")
        return binary_path

    def generate(self) -> KeyPair:
        """Run ``xray x25519`` and parse its output.

        Raises:
            GenerationFailedError: If xray is missing, fails, or prints no key pair
        """
        binary_path = self._find_binary()
        try:
            result = subprocess.run(
                [binary_path, "x25519"],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            raise GenerationFailedError(f"xray x25519 failed: {e}") from e

        return parse_x25519_output(result.stdout)


def parse_x25519_output(output: str) -> KeyPair:
    """Extract the key pair from ``xray x25519`` output.

    Raises:
        GenerationFailedError: If either half is missing
    """
    private_match = _PRIVATE_KEY_LINE.search(output)
    public_match = _PUBLIC_KEY_LINE.search(output)
    if not private_match or not public_match:
        raise GenerationFailedError("No private/public key pair found in xray x25519 output")
    return KeyPair(private_key=private_match.group(1), public_key=public_match.group(1))
