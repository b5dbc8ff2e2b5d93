"""High-level API for synthcache library usage."""

from collections.abc import Mapping
from typing import Any

from .cache.admin import CacheAdmin
from .cache.manager import SynthesisCacheManager
from .cache.storage import CacheStore, RedisCacheStore
from .config import SynthCacheConfig, load_config
from .models import PurgeResult, SynthesisRequest, SynthesisResult


async def synthesize(
    text: str,
    provider: str,
    voice: str | None = None,
    language: str | None = None,
    credentials: Mapping[str, Any] | None = None,
    tenant: str | None = None,
    config: SynthCacheConfig | None = None,
    store: CacheStore | None = None,
    **options: Any,
) -> SynthesisResult:
    """Synthesize speech from text, served from cache when possible.

    Args:
        text: Text or SSML to synthesize
        provider: Provider name (e.g., "google", "polly", "custom:acme")
        voice: Voice identifier (provider-specific)
        language: Language code
        credentials: Provider credentials; taken from the config file's
            ``[credentials.<provider>]`` table when omitted
        tenant: Optional tenant scoping the cache entry
        config: Configuration (loaded from file and env when omitted)
        store: Cache store (Redis from config when omitted)
        **options: Other SynthesisRequest fields (engine, model,
            instructions, render_for_caching, disable_cache, ...)

    Returns:
        SynthesisResult with an artifact path or a streaming directive

    Raises:
        ValidationError: If the request is incomplete for its provider
        ProviderError: If the provider call fails
        CredentialError: If provider session credentials cannot be obtained
    """
    config = config or load_config()
    if credentials is None:
        credentials = config.credentials_for(provider)

    request = SynthesisRequest(
        provider=provider,
        text=text,
        voice=voice,
        language=language,
        tenant=tenant,
        credentials=credentials,
        **options,
    )

    owns_store = store is None
    store = store or RedisCacheStore.from_url(config.redis.url)
    try:
        async with SynthesisCacheManager(store, config) as manager:
            return await manager.get_or_synthesize(request)
    finally:
        if owns_store:
            await store.close()


async def purge(
    tenant: str | None = None,
    config: SynthCacheConfig | None = None,
    store: CacheStore | None = None,
) -> PurgeResult:
    """Purge every cached result, or every result of one tenant."""
    config = config or load_config()
    owns_store = store is None
    store = store or RedisCacheStore.from_url(config.redis.url)
    try:
        admin = CacheAdmin(store)
        if tenant:
            return await admin.purge_by_tenant(tenant)
        return await admin.purge_all()
    finally:
        if owns_store:
            await store.close()
