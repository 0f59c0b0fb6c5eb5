"""High-level API for provisioning a VLESS + REALITY endpoint.

This module ties identity resolution, template synthesis, link encoding,
output and service restart together into a single run.
"""

import random
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .client.config import synthesize_client
from .common.logging import get_logger
from .identity.generators import X25519KeyPairSource, XrayKeyPairSource
from .identity.interfaces import KeyPairSource
from .identity.models import IdentityMaterial
from .identity.provider import IdentityProvider
from .link import encode_link
from .output import write_documents
from .server.config import synthesize_server
from .server.service import RestartReport, ServiceManager
from .settings import KeyGenerator, OutputMode, ProvisionRequest, ProvisionSettings
from .templates.document import ClientConfig, ServerConfig
from .templates.store import TemplateStore

logger = get_logger(__name__)


class ProvisionResult(BaseModel):
    """Everything a provisioning run produced."""

    model_config = ConfigDict(frozen=True)

    identity: IdentityMaterial
    server_config: ServerConfig
    client_config: ClientConfig
    server_config_path: Path
    client_config_path: Path
    link: str
    restart: RestartReport | None = None


def build_provider(
    settings: ProvisionSettings, seed: int | None = None
) -> IdentityProvider:
    """Create the identity provider described by ``settings``.

    Args:
        settings: Provisioning settings
        seed: Optional seed pinning the SNI choice

    Returns:
        Identity provider using the configured key generator
    """
    key_pair_source: KeyPairSource
    if settings.key_generator is KeyGenerator.XRAY:
        key_pair_source = XrayKeyPairSource(binary=settings.xray_binary)
    else:
        key_pair_source = X25519KeyPairSource()

    return IdentityProvider(
        key_pair_source=key_pair_source,
        sni_candidates=settings.sni_candidates,
        rng=random.Random(seed),
    )


def provision(
    request: ProvisionRequest,
    settings: ProvisionSettings | None = None,
    *,
    provider: IdentityProvider | None = None,
    store: TemplateStore | None = None,
    service: ServiceManager | None = None,
) -> ProvisionResult:
    """Run one provisioning request.

    Both documents and the link are fully derived before anything is
    written. In live mode the service is restarted afterwards; a restart
    failure is reported in the result, not raised.

    Args:
        request: Parsed request
        settings: Paths and knobs (defaults if None)
        provider: Identity provider (built from settings if None)
        store: Template store (a fresh one if None)
        service: Service manager used in live mode

    Returns:
        ProvisionResult with identity, documents, paths, link and restart report

    Raises:
        RealitySetupError: Any resolution, template or write failure
    """
    settings = settings or ProvisionSettings()
    provider = provider or build_provider(settings)
    store = store or TemplateStore()

    logger.info(
        "Provisioning started",
        server_address=request.server_address,
        mode=request.output_mode.value,
        variant=request.variant.value,
    )

    identity = provider.resolve(request.overrides, proxy_auth=request.proxy_auth)

    server_template = store.load_server(settings.server_template)
    client_template = store.load_client(settings.client_template)

    server_config = synthesize_server(
        server_template, identity, request.variant, settings.selectors
    )
    client_config = synthesize_client(
        client_template,
        identity,
        request.server_address,
        request.variant,
        settings.selectors,
    )
    link = encode_link(request.server_address, identity, request.variant)

    server_path = settings.server_output_path(request.output_mode)
    client_path = settings.client_output_path
    write_documents([(server_config, server_path), (client_config, client_path)])

    restart: RestartReport | None = None
    if request.output_mode is OutputMode.LIVE:
        service = service or ServiceManager(settings.service_name)
        restart = service.restart()

    logger.info("Provisioning finished", link=link)

    return ProvisionResult(
        identity=identity,
        server_config=server_config,
        client_config=client_config,
        server_config_path=server_path,
        client_config_path=client_path,
        link=link,
        restart=restart,
    )
