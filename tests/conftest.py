"""Shared pytest fixtures for reality-setup tests."""

import logging
import random
from itertools import count

import pytest
import structlog

from reality_setup.identity.models import IdentityMaterial, KeyPair, ProxyCredential
from reality_setup.identity.provider import IdentityProvider
from reality_setup.templates.document import ClientConfig, ServerConfig
from reality_setup.templates.store import TemplateStore

CLIENT_ID = "11111111-1111-1111-1111-111111111111"
PRIVATE_KEY = "SERVER-PRIVATE-KEY-abcdefghijklmnopqrstuvwx"
PUBLIC_KEY = "CLIENT-PUBLIC-KEY-abcdefghijklmnopqrstuvwxy"
SHORT_ID = "0123456789abcdef"
SERVER_NAME = "www.apple.com"


class StaticKeyPairSource:
    """Key pair source returning a fixed pair."""

    def __init__(self, key_pair: KeyPair | None = None) -> None:
        self.key_pair = key_pair or KeyPair(private_key=PRIVATE_KEY, public_key=PUBLIC_KEY)
        self.calls = 0

    def generate(self) -> KeyPair:
        self.calls += 1
        return self.key_pair


@pytest.fixture
def identity():
    """Identity material with a proxy credential.

    Returns:
        IdentityMaterial: Fixed identity
    """
    return IdentityMaterial(
        client_id=CLIENT_ID,
        key_pair=KeyPair(private_key=PRIVATE_KEY, public_key=PUBLIC_KEY),
        short_id=SHORT_ID,
        server_name=SERVER_NAME,
        proxy_credential=ProxyCredential(user="abc", password="xyz"),
    )


@pytest.fixture
def identity_without_credential(identity):
    """Identity material for listeners without auth."""
    return identity.model_copy(update={"proxy_credential": None})


@pytest.fixture
def template_store():
    """Fresh template store."""
    return TemplateStore()


@pytest.fixture
def server_template(template_store) -> ServerConfig:
    """Bundled server template."""
    return template_store.load_server()


@pytest.fixture
def client_template(template_store) -> ClientConfig:
    """Bundled client template."""
    return template_store.load_client()


@pytest.fixture
def static_key_source():
    """Key pair source returning the fixed test pair."""
    return StaticKeyPairSource()


@pytest.fixture
def deterministic_provider(static_key_source):
    """Identity provider with stubbed generators and a seeded RNG.

    Returns:
        IdentityProvider: Provider whose generated values are predictable
    """
    secrets = count(1)
    return IdentityProvider(
        uuid_source=lambda: "22222222-2222-4222-8222-222222222222",
        key_pair_source=static_key_source,
        short_id_source=lambda: "a1b2c3d4",
        secret_source=lambda: f"secret{next(secrets):06d}",
        sni_candidates=("www.microsoft.com", "www.bing.com"),
        rng=random.Random(1234),
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    Handlers installed by setup_logging may point at streams that are
    closed once a test (e.g. a CliRunner invocation) finishes.
    """
    yield
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()
