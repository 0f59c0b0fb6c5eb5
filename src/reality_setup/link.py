"""VLESS + REALITY connection links.

Link layout, with the query keys in this exact order::

    vless://<id>@<address>:443?encryption=none[&flow=...]&security=reality
        &sni=<sni>&fp=chrome&pbk=<public key>&sid=<short id>&type=tcp#<label>

The label is ``<address>_REALITY``, percent-encoded with every reserved
character escaped.
"""

from urllib.parse import parse_qsl, quote, unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from .common.exceptions import LinkFormatError
from .common.logging import get_logger
from .common.utils import validate_server_address
from .identity.models import IdentityMaterial
from .protocol import (
    DEFAULT_FINGERPRINT,
    LABEL_SUFFIX,
    REALITY_PORT,
    ProtocolVariant,
)

logger = get_logger(__name__)

SCHEME = "vless"


def quote_component(value: str) -> str:
    """Percent-encode a URI component, leaving only unreserved characters."""
    return quote(value, safe="")


def format_host(address: str) -> str:
    """Bracket IPv6 literals for use in the authority part."""
    if ":" in address and not address.startswith("["):
        return f"[{address}]"
    return address


def link_label(server_address: str) -> str:
    """Human readable label for a server."""
    return f"{server_address}{LABEL_SUFFIX}"


def encode_link(
    server_address: str,
    identity: IdentityMaterial,
    variant: ProtocolVariant = ProtocolVariant.NO_FLOW,
) -> str:
    """Encode the shareable ``vless://`` link for a server.

    Args:
        server_address: Public IP or domain of the server
        identity: Identity used for both configuration documents
        variant: Protocol variant; ``VISION`` adds the ``flow`` parameter

    Returns:
        Single-line connection link

    Raises:
        ValueError: If ``server_address`` is empty or not a bare host
    """
    server_address = validate_server_address(server_address)

    params: list[tuple[str, str]] = [("encryption", "none")]
    if variant.flow is not None:
        params.append(("flow", variant.flow))
    params.extend(
        [
            ("security", "reality"),
            ("sni", identity.server_name),
            ("fp", DEFAULT_FINGERPRINT),
            ("pbk", identity.key_pair.public_key),
            ("sid", identity.short_id),
            ("type", "tcp"),
        ]
    )
    query = "&".join(f"{key}={quote_component(value)}" for key, value in params)

    link = (
        f"{SCHEME}://{quote_component(identity.client_id)}@{format_host(server_address)}"
        f":{REALITY_PORT}?{query}#{quote_component(link_label(server_address))}"
    )
    logger.debug("Connection link encoded", server_address=server_address, variant=variant.value)
    return link


class VlessLink(BaseModel):
    """A decoded ``vless://`` link."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    address: str
    port: int = Field(..., ge=1, le=65535)
    params: dict[str, str] = Field(default_factory=dict, description="Query parameters in link order")
    label: str = ""

    @property
    def server_name(self) -> str | None:
        return self.params.get("sni")

    @property
    def public_key(self) -> str | None:
        return self.params.get("pbk")

    @property
    def short_id(self) -> str | None:
        return self.params.get("sid")

    @property
    def variant(self) -> ProtocolVariant:
        """Protocol variant implied by the presence of ``flow``."""
        if "flow" in self.params:
            return ProtocolVariant.VISION
        return ProtocolVariant.NO_FLOW


def _split_host_port(hostport: str, link: str) -> tuple[str, int]:
    if hostport.startswith("["):
        host, bracket, rest = hostport[1:].partition("]")
        if not bracket or not rest.startswith(":"):
            raise LinkFormatError(f"Malformed IPv6 address in link: {link}")
        port_text = rest[1:]
    else:
        host, colon, port_text = hostport.rpartition(":")
        if not colon:
            raise LinkFormatError(f"Link has no port: {link}")

    if not host:
        raise LinkFormatError(f"Link has no address: {link}")
    if not port_text.isdigit() or not 1 <= int(port_text) <= 65535:
        raise LinkFormatError(f"Invalid port in link: {port_text!r}")
    return host, int(port_text)


def decode_link(link: str) -> VlessLink:
    """Parse a ``vless://`` link.

    Raises:
        LinkFormatError: If the link is not a well-formed VLESS link
    """
    link = link.strip()
    try:
        parts = urlsplit(link)
    except ValueError as e:
        raise LinkFormatError(f"Malformed link: {e}") from e
    if parts.scheme != SCHEME:
        raise LinkFormatError(f"Not a {SCHEME}:// link: {link}")

    userinfo, at, hostport = parts.netloc.rpartition("@")
    if not at or not userinfo:
        raise LinkFormatError(f"Link has no client id: {link}")

    host, port = _split_host_port(hostport, link)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    if not params:
        raise LinkFormatError(f"Link has no query parameters: {link}")

    return VlessLink(
        client_id=unquote(userinfo),
        address=host,
        port=port,
        params=params,
        label=unquote(parts.fragment),
    )
