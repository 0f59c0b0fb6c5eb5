"""Server-side configuration synthesis."""

from ..common.logging import get_logger
from ..common.query import Match, Path, find_node_by_field, remove_key, set_value
from ..identity.models import IdentityMaterial
from ..protocol import ProtocolVariant
from ..settings import NodeSelectors
from ..templates.document import ConfigDocument, ServerConfig

logger = get_logger(__name__)

CLIENT_ENTRY: Path = ("settings", "clients", 0)
REALITY_SETTINGS: Path = ("streamSettings", "realitySettings")


def inbound_path(selectors: NodeSelectors) -> Path:
    """Path of the REALITY inbound in a server document."""
    return ("inbounds", Match(selectors.tag_field, selectors.server_inbound))


def synthesize_server(
    template: ConfigDocument,
    identity: IdentityMaterial,
    variant: ProtocolVariant = ProtocolVariant.NO_FLOW,
    selectors: NodeSelectors | None = None,
) -> ServerConfig:
    """Build the server document from ``template`` and ``identity``.

    The template is never modified. The REALITY inbound is located by tag;
    the client entry gets the client id, the REALITY settings get the
    camouflage destination, SNI list, private key and short ids. Any public
    key left in the template is dropped.

    Args:
        template: Server template document
        identity: Resolved identity material
        variant: Protocol variant deciding the flow directive
        selectors: Tags locating the inbound (defaults to ``vless-in``)

    Returns:
        New server document

    Raises:
        TemplatePathNotFoundError: If the inbound or a rewritten path is missing
    """
    selectors = selectors or NodeSelectors()
    data = template.clone_data()
    inbound = find_node_by_field(
        data, ("inbounds",), selectors.tag_field, selectors.server_inbound
    )
    at = inbound_path(selectors)

    set_value(inbound, CLIENT_ENTRY + ("id",), identity.client_id, base=at)
    if variant.flow is None:
        remove_key(inbound, CLIENT_ENTRY + ("flow",), base=at)
    else:
        set_value(inbound, CLIENT_ENTRY + ("flow",), variant.flow, base=at)

    set_value(inbound, REALITY_SETTINGS + ("dest",), identity.dest, base=at)
    set_value(inbound, REALITY_SETTINGS + ("serverNames",), [identity.server_name], base=at)
    set_value(inbound, REALITY_SETTINGS + ("privateKey",), identity.key_pair.private_key, base=at)
    # the empty entry is part of the accepted short id list
    set_value(inbound, REALITY_SETTINGS + ("shortIds",), [identity.short_id, ""], base=at)
    remove_key(inbound, REALITY_SETTINGS + ("publicKey",), base=at)

    logger.debug(
        "Server document synthesized",
        inbound=selectors.server_inbound,
        variant=variant.value,
        server_name=identity.server_name,
    )
    return ServerConfig(data=data, source=template.source)
