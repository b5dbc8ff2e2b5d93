"""Cache-aside store for short-lived provider credentials."""

import hashlib
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace

from ..cache.storage import CacheStore
from ..errors import CacheServiceError, CredentialError
from .models import FetchedCredential, ProviderCredential, deserialize_credential

NAMESPACE = "creds"

Fetcher = Callable[[], Awaitable[FetchedCredential]]


def make_scope_key(provider: str, secret_material: Sequence[str]) -> str:
    """Derive the cache key for a credential scope.

    The secret material is digested so the raw secret is never part of a
    key.

    Args:
        provider: Provider the credential belongs to
        secret_material: Values identifying the scope (key ids, secrets,
            OAuth scope)

    Returns:
        Key of the form ``creds:<provider>:<hex>``
    """
    payload = json.dumps(list(secret_material), separators=(",", ":"))
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    return f"{NAMESPACE}:{provider}:{digest}"


class CredentialCache:
    """Cache-aside store for ephemeral provider credentials.

    Mirrors the result cache: look up the scope key, fetch on miss, and
    persist with a TTL derived from the provider-declared expiry minus a
    safety margin. A credential whose TTL comes out non-positive is handed
    to the caller but not stored, so the next call fetches again.

    Example:
        creds = CredentialCache(store)
        token = await creds.get_or_fetch(
            "ibm", [api_key], lambda: fetch_ibm_token(http, api_key)
        )
    """

    def __init__(self, store: CacheStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    async def get_or_fetch(
        self, provider: str, secret_material: Sequence[str], fetch: Fetcher
    ) -> ProviderCredential:
        """Return a cached credential for the scope or fetch a new one.

        Args:
            provider: Provider the credential belongs to
            secret_material: Values identifying the scope
            fetch: Coroutine factory that obtains a fresh credential

        Returns:
            Credential with ``served_from_cache`` set accordingly

        Raises:
            CredentialError: If the credential cannot be fetched
        """
        key = make_scope_key(provider, secret_material)

        try:
            cached = await self.store.get(key)
        except CacheServiceError as e:
            self.logger.warning(f"Credential cache read failed for {provider}: {e}")
            cached = None

        if cached:
            try:
                credential = deserialize_credential(cached, served_from_cache=True)
                self.logger.debug(f"Credential cache hit for {provider}")
                return credential
            except ValueError as e:
                self.logger.warning(f"Discarding unreadable credential for {provider}: {e}")

        try:
            fetched = await fetch()
        except CredentialError:
            raise
        except Exception as e:
            raise CredentialError(
                f"Failed to obtain {provider} credentials: {e}", provider, None, e
            ) from e

        ttl = fetched.cache_ttl
        if ttl > 0:
            try:
                await self.store.set(key, fetched.credential.serialize(), ttl)
                self.logger.debug(f"Cached {provider} credential for {ttl}s")
            except CacheServiceError as e:
                self.logger.error(f"Failed to cache {provider} credential: {e}")
        else:
            self.logger.info(
                f"Not caching {provider} credential: remaining validity {ttl}s"
            )

        return replace(fetched.credential, served_from_cache=False)

    async def purge(self) -> int:
        """Remove every cached credential.

        Returns:
            Number of credentials removed
        """
        keys = await self.store.keys(f"{NAMESPACE}:*")
        return await self.store.delete(*keys)
