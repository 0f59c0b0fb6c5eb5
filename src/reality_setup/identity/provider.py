"""Resolve identity material from overrides and generators."""

import random
from collections.abc import Callable, Sequence

from pydantic import ValidationError

from ..common.exceptions import GenerationFailedError, InvalidOverrideError
from ..common.logging import get_logger
from ..common.utils import (
    sanitize_log_data,
    validate_short_id,
    validate_uuid_string,
)
from .generators import (
    DEFAULT_SNI_CANDIDATES,
    X25519KeyPairSource,
    generate_proxy_secret,
    generate_short_id,
    generate_uuid,
)
from .interfaces import DerivingKeyPairSource, KeyPairSource
from .models import IdentityMaterial, IdentityOverrides, KeyPair, ProxyCredential

logger = get_logger(__name__)


class IdentityProvider:
    """Build :class:`IdentityMaterial` from overrides, generating whatever is missing.

    Every generator is injectable. Pass a seeded ``random.Random`` as
    ``rng`` to pin the SNI choice. Overridden key pairs are always checked
    with ``key_deriver``, whichever source generates keys.
    """

    def __init__(
        self,
        *,
        uuid_source: Callable[[], str] = generate_uuid,
        key_pair_source: KeyPairSource | None = None,
        key_deriver: DerivingKeyPairSource | None = None,
        short_id_source: Callable[[], str] = generate_short_id,
        secret_source: Callable[[], str] = generate_proxy_secret,
        sni_candidates: Sequence[str] = DEFAULT_SNI_CANDIDATES,
        rng: random.Random | None = None,
    ) -> None:
        if not sni_candidates:
            raise ValueError("SNI candidate list cannot be empty")

        self.uuid_source = uuid_source
        self.key_pair_source = key_pair_source or X25519KeyPairSource()
        self.key_deriver = key_deriver or X25519KeyPairSource()
        self.short_id_source = short_id_source
        self.secret_source = secret_source
        self.sni_candidates = tuple(sni_candidates)
        self.rng = rng or random.Random()

    def resolve(
        self, overrides: IdentityOverrides | None = None, *, proxy_auth: bool = True
    ) -> IdentityMaterial:
        """Resolve the identity for one provisioning run.

        Args:
            overrides: User-supplied values; absent fields are generated
            proxy_auth: Generate or accept a local proxy credential

        Returns:
            Immutable identity material

        Raises:
            InvalidOverrideError: If an override is malformed or half of a pair
            GenerationFailedError: If a generator returns unusable output
        """
        overrides = overrides or IdentityOverrides()
        self._check_pairs(overrides, proxy_auth)

        client_id = self._resolve_client_id(overrides.client_id)
        key_pair = self._resolve_key_pair(overrides.private_key, overrides.public_key)
        short_id = self._resolve_short_id(overrides.short_id)
        server_name = self._resolve_server_name(overrides.server_name)
        credential = (
            self._resolve_credential(overrides.proxy_user, overrides.proxy_password)
            if proxy_auth
            else None
        )

        identity = IdentityMaterial(
            client_id=client_id,
            key_pair=key_pair,
            short_id=short_id,
            server_name=server_name,
            proxy_credential=credential,
        )

        logger.info(
            "Identity resolved",
            **sanitize_log_data(
                {
                    "client_id": identity.client_id,
                    "public_key": identity.key_pair.public_key,
                    "private_key": identity.key_pair.private_key,
                    "short_id": identity.short_id,
                    "server_name": identity.server_name,
                    "proxy_auth": credential is not None,
                }
            ),
        )
        return identity

    def _check_pairs(self, overrides: IdentityOverrides, proxy_auth: bool) -> None:
        if (overrides.private_key is None) != (overrides.public_key is None):
            raise InvalidOverrideError(
                "Private and public key must be supplied together"
            )
        if (overrides.proxy_user is None) != (overrides.proxy_password is None):
            raise InvalidOverrideError(
                "Proxy user and password must be supplied together"
            )
        if not proxy_auth and overrides.proxy_user is not None:
            raise InvalidOverrideError(
                "Proxy credentials cannot be supplied when proxy auth is disabled"
            )

    def _resolve_client_id(self, override: str | None) -> str:
        if override is not None:
            try:
                return validate_uuid_string(override)
            except ValueError as e:
                raise InvalidOverrideError(str(e)) from e

        generated = self.uuid_source()
        try:
            return validate_uuid_string((generated or "").strip())
        except ValueError as e:
            raise GenerationFailedError(f"UUID generator returned {generated!r}") from e

    def _resolve_key_pair(self, private_key: str | None, public_key: str | None) -> KeyPair:
        if private_key is not None and public_key is not None:
            self._check_key_pair_matches(private_key, public_key)
            return KeyPair(private_key=private_key, public_key=public_key)

        try:
            key_pair = self.key_pair_source.generate()
        except (ValidationError, ValueError) as e:
            raise GenerationFailedError(f"Key pair generator failed: {e}") from e
        if not key_pair.private_key or not key_pair.public_key:
            raise GenerationFailedError("Key pair generator returned an empty key")
        return key_pair

    def _check_key_pair_matches(self, private_key: str, public_key: str) -> None:
        try:
            derived = self.key_deriver.derive_public_key(private_key)
        except ValueError as e:
            raise InvalidOverrideError(f"Invalid private key: {e}") from e
        if derived != public_key:
            raise InvalidOverrideError("Public key does not match private key")

    def _resolve_short_id(self, override: str | None) -> str:
        if override is not None:
            try:
                return validate_short_id(override)
            except ValueError as e:
                raise InvalidOverrideError(str(e)) from e

        generated = self.short_id_source()
        try:
            return validate_short_id((generated or "").strip())
        except ValueError as e:
            raise GenerationFailedError(
                f"Short id generator returned {generated!r}"
            ) from e

    def _resolve_server_name(self, override: str | None) -> str:
        if override is not None:
            return override
        return self.rng.choice(self.sni_candidates)

    def _resolve_credential(
        self, user: str | None, password: str | None
    ) -> ProxyCredential:
        if user is not None and password is not None:
            return ProxyCredential(user=user, password=password)

        generated_user = (self.secret_source() or "").strip()
        generated_password = (self.secret_source() or "").strip()
        if not generated_user or not generated_password:
            raise GenerationFailedError("Credential generator returned an empty value")
        return ProxyCredential(user=generated_user, password=generated_password)
