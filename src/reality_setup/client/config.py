"""Client-side configuration synthesis."""

from typing import Any

from ..common.logging import get_logger
from ..common.query import Match, Path, find_node_by_field, remove_key, set_value
from ..common.utils import validate_server_address
from ..identity.models import IdentityMaterial, ProxyCredential
from ..protocol import ProtocolVariant
from ..settings import NodeSelectors
from ..templates.document import ClientConfig, ConfigDocument

logger = get_logger(__name__)

SERVER_ENTRY: Path = ("settings", "vnext", 0)
USER_ENTRY: Path = SERVER_ENTRY + ("users", 0)
REALITY_SETTINGS: Path = ("streamSettings", "realitySettings")
PASSWORD_AUTH = "password"


def outbound_path(selectors: NodeSelectors) -> Path:
    """Path of the proxy outbound in a client document."""
    return ("outbounds", Match(selectors.tag_field, selectors.client_outbound))


def listener_path(selectors: NodeSelectors, tag: str) -> Path:
    """Path of a local inbound listener in a client document."""
    return ("inbounds", Match(selectors.tag_field, tag))


def synthesize_client(
    template: ConfigDocument,
    identity: IdentityMaterial,
    server_address: str,
    variant: ProtocolVariant = ProtocolVariant.NO_FLOW,
    selectors: NodeSelectors | None = None,
) -> ClientConfig:
    """Build the client document from ``template`` and ``identity``.

    The proxy outbound (located by tag) gets the server address, client id,
    SNI, public key and short id. With a proxy credential, the local SOCKS
    and HTTP inbounds switch to password auth with a single account;
    without one they are left as the template has them.

    Args:
        template: Client template document
        identity: Resolved identity material
        server_address: Public address of the server
        variant: Protocol variant deciding the flow directive
        selectors: Tags locating the outbound and local inbounds

    Returns:
        New client document

    Raises:
        ValueError: If ``server_address`` is empty or not a bare host
        TemplatePathNotFoundError: If a located node or rewritten path is missing
    """
    server_address = validate_server_address(server_address)

    selectors = selectors or NodeSelectors()
    data = template.clone_data()
    outbound = find_node_by_field(
        data, ("outbounds",), selectors.tag_field, selectors.client_outbound
    )
    at = outbound_path(selectors)

    set_value(outbound, SERVER_ENTRY + ("address",), server_address, base=at)
    set_value(outbound, USER_ENTRY + ("id",), identity.client_id, base=at)
    if variant.flow is None:
        remove_key(outbound, USER_ENTRY + ("flow",), base=at)
    else:
        set_value(outbound, USER_ENTRY + ("flow",), variant.flow, base=at)

    set_value(outbound, REALITY_SETTINGS + ("serverName",), identity.server_name, base=at)
    set_value(outbound, REALITY_SETTINGS + ("publicKey",), identity.key_pair.public_key, base=at)
    set_value(outbound, REALITY_SETTINGS + ("shortId",), identity.short_id, base=at)
    remove_key(outbound, REALITY_SETTINGS + ("privateKey",), base=at)

    if identity.proxy_credential is not None:
        for tag in (selectors.socks_inbound, selectors.http_inbound):
            listener = find_node_by_field(data, ("inbounds",), selectors.tag_field, tag)
            _install_credential(
                listener, listener_path(selectors, tag), identity.proxy_credential
            )

    logger.debug(
        "Client document synthesized",
        server_address=server_address,
        variant=variant.value,
        proxy_auth=identity.proxy_credential is not None,
    )
    return ClientConfig(data=data, source=template.source)


def _install_credential(
    listener: dict[str, Any], at: Path, credential: ProxyCredential
) -> None:
    set_value(listener, ("settings", "auth"), PASSWORD_AUTH, base=at)
    set_value(listener, ("settings", "accounts"), [credential.to_account()], base=at)
