"""Cache-aside synthesis orchestrator.

Looks a request up in the result cache by fingerprint, and on a miss either
hands it off to a downstream streaming engine or synthesizes it through the
provider registry, persists the result and writes the audio artifact.
"""

import asyncio
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx

from ..config import SynthCacheConfig
from ..credentials import CredentialCache
from ..directive import StreamingDirective
from ..errors import CacheServiceError, ProviderError
from ..formats import format_for_extension, resolve_format
from ..metrics import NullMetrics, SynthesisMetrics
from ..models import SynthesisRequest, SynthesisResult, VoiceInfo
from ..providers import ProviderContext, ProviderRegistry
from ..providers.base import TTSProvider
from . import get_artifact_dir
from .fingerprint import artifact_path, fingerprint_for
from .models import CacheEntry
from .storage import CacheStore, RedisCacheStore


class SynthesisCacheManager:
    """High-level cache manager for synthesized speech.

    Coordinates the result cache, the provider registry, the credential
    cache and the artifact directory. Holds no per-request state; the only
    thing shared between concurrent calls is the cache store and HTTP
    client, both of which are safe for concurrent use.

    Concurrent identical requests are not coalesced: both may miss, both
    call the provider and both write the same entry.

    Example:
        async with SynthesisCacheManager.from_config(config) as manager:
            result = await manager.get_or_synthesize(
                SynthesisRequest(provider="google", language="en-US",
                                 voice="en-US-Wavenet-C", text="Hello world",
                                 credentials={"api_key": key})
            )
            print(result.artifact_path, result.served_from_cache)
    """

    def __init__(
        self,
        store: CacheStore,
        config: SynthCacheConfig | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        registry: type[ProviderRegistry] = ProviderRegistry,
        metrics: SynthesisMetrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Key-value cache service
            config: Configuration (defaults apply when omitted)
            http: HTTP client for providers; one is created (and owned) from
                the HTTP configuration when omitted
            registry: Provider registry to dispatch through
            metrics: Observability sink (silent by default)
            logger: Logger (module logger by default)
        """
        self.store = store
        self.config = config or SynthCacheConfig()
        self.registry = registry
        self.metrics = metrics or NullMetrics()
        self.logger = logger or logging.getLogger(__name__)
        self.credentials = CredentialCache(store, self.logger)

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            timeout=self.config.http.timeout, proxy=self.config.http.proxy
        )
        self._background: set[asyncio.Task] = set()

    @classmethod
    def from_config(
        cls, config: SynthCacheConfig, **kwargs: Any
    ) -> "SynthesisCacheManager":
        """Create a manager backed by the Redis server named in config."""
        return cls(RedisCacheStore.from_url(config.redis.url), config, **kwargs)

    async def __aenter__(self) -> "SynthesisCacheManager":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def artifact_dir(self) -> Path:
        return self.config.cache.artifact_dir

    def _lookup_enabled(self, request: SynthesisRequest) -> bool:
        return not request.disable_cache and not self.config.cache.disabled

    def _streaming_disabled(self, request: SynthesisRequest) -> bool:
        return request.disable_streaming or self.config.streaming.disabled

    def _resolve(
        self, request: SynthesisRequest
    ) -> tuple[TTSProvider, str, SynthesisRequest]:
        provider = self.registry.get_instance(request.provider)
        canonical = self.registry.resolve(request.provider)
        return provider, canonical, provider.normalize(request)

    async def get_or_synthesize(self, request: SynthesisRequest) -> SynthesisResult:
        """Return audio for a request from cache, a streaming handoff, or the provider.

        Args:
            request: The synthesis request

        Returns:
            SynthesisResult carrying either audio and an artifact path, or a
            streaming directive

        Raises:
            ValidationError: If the request is incomplete for its provider
            ProviderError: If the provider call fails
            CredentialError: If provider session credentials cannot be obtained
            OSError: If the artifact cannot be written
        """
        provider, canonical, request = self._resolve(request)
        provider.validate(request)

        key = fingerprint_for(request, canonical)
        self.logger.debug(f"Synthesis key is {key}")

        lookup = self._lookup_enabled(request)
        if lookup:
            entry = await self._lookup(key)
            self.metrics.record_cache(entry is not None)
            if entry is not None:
                self.logger.debug(f"Result found in cache for {key}")
                self._refresh(key)
                path = artifact_path(
                    self.artifact_dir, key, entry.extension, request.salt
                )
                await self._write_artifact(path, entry.audio)
                return SynthesisResult(
                    served_from_cache=True,
                    artifact_path=path,
                    audio=entry.audio,
                    extension=entry.extension,
                    sample_rate=entry.sample_rate,
                )
            self.logger.debug(f"Result not found in cache for {key}")

        streaming_disabled = self._streaming_disabled(request)
        if (
            provider.supports_streaming
            and not request.render_for_caching
            and not streaming_disabled
        ):
            directive = self._directive(provider, canonical, request, key, lookup)
            self.logger.debug(f"Handing {canonical} request off to streaming engine")
            return SynthesisResult(served_from_cache=False, directive=directive.encode())

        audio_format = resolve_format(
            provider.name,
            render_for_caching=request.render_for_caching,
            disable_streaming=streaming_disabled,
            trim_silence=self.config.audio.trim_silence,
        )
        context = ProviderContext(
            http=self.http,
            credential_cache=self.credentials,
            config=self.config,
            audio_format=audio_format,
        )

        start = time.perf_counter()
        try:
            audio = await provider.synthesize(request, context)
        except ProviderError as e:
            self.metrics.record_provider_result(canonical, False)
            self.logger.warning(f"Error synthesizing speech using {canonical}: {e}")
            raise
        elapsed = time.perf_counter() - start
        elapsed_ms = round(elapsed * 1000, 1)

        self.metrics.record_provider_result(canonical, True)
        self.metrics.record_response_time(canonical, elapsed)
        self.logger.info(
            f"tts rtt time for {len(request.text)} chars on {canonical}: {elapsed_ms:.0f}ms"
        )

        entry = CacheEntry(audio.audio, audio.extension, audio.sample_rate)
        await self._persist(key, entry)

        path = artifact_path(self.artifact_dir, key, audio.extension, request.salt)
        await self._write_artifact(path, audio.audio)

        return SynthesisResult(
            served_from_cache=False,
            elapsed_ms=elapsed_ms,
            artifact_path=path,
            audio=audio.audio,
            extension=audio.extension,
            sample_rate=audio.sample_rate,
        )

    async def add_file_to_cache(self, path: str | Path, request: SynthesisRequest) -> bool:
        """Pre-warm the cache with an existing audio file.

        The entry is stored under the fingerprint the request would produce,
        so a later get_or_synthesize for the same request is a hit.

        Args:
            path: Audio file; its extension names the container
            request: Request the audio answers

        Returns:
            True if the entry was stored, False if the file could not be
            read or the cache write failed

        Raises:
            ValidationError: If the provider is unknown
        """
        provider, canonical, request = self._resolve(request)
        path = Path(path)
        try:
            audio = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            self.logger.error(f"Failed to read {path} for caching: {e}")
            return False

        audio_format = format_for_extension(
            path.suffix,
            resolve_format(
                provider.name,
                render_for_caching=True,
                disable_streaming=self._streaming_disabled(request),
                trim_silence=self.config.audio.trim_silence,
            ),
        )
        key = fingerprint_for(request, canonical)
        try:
            await self.store.set(
                key,
                CacheEntry(audio, audio_format.extension, audio_format.sample_rate).serialize(),
                self.config.cache.ttl_seconds,
            )
        except CacheServiceError as e:
            self.logger.error(f"Failed to add {path} to cache under {key}: {e}")
            return False
        self.logger.debug(f"Added {path} to cache under {key}")
        return True

    async def list_voices(
        self, provider: str, credentials: Mapping[str, Any] | None = None
    ) -> list[VoiceInfo]:
        """List voices offered by a provider.

        Raises:
            ValidationError: If the provider is unknown or cannot list voices
            ProviderError: If the provider call fails
        """
        instance = self.registry.get_instance(provider)
        context = ProviderContext(
            http=self.http,
            credential_cache=self.credentials,
            config=self.config,
            audio_format=resolve_format(instance.name, render_for_caching=True),
        )
        return await instance.list_voices(credentials or {}, context)

    async def drain(self) -> None:
        """Wait for outstanding background TTL refreshes."""
        while self._background:
            await asyncio.gather(*list(self._background))

    async def close(self) -> None:
        """Drain background work and release owned resources."""
        await self.drain()
        if self._owns_http:
            await self.http.aclose()

    def _directive(
        self,
        provider: TTSProvider,
        canonical: str,
        request: SynthesisRequest,
        key: str,
        write_cache: bool,
    ) -> StreamingDirective:
        directive = StreamingDirective(text=request.text)
        directive.add("vendor", canonical)
        directive.add("language", request.language)
        directive.add("voice", request.voice_or_deployment or None)
        directive.add("engine", request.engine)
        directive.add("model", request.model)
        for name, value in provider.streaming_params(request).items():
            directive.add(name, value)
        directive.add("write_cache_file", write_cache)
        directive.add("key", key)
        return directive

    async def _lookup(self, key: str) -> CacheEntry | None:
        try:
            cached = await self.store.get(key)
        except CacheServiceError as e:
            self.logger.warning(f"Cache read failed for {key}, treating as miss: {e}")
            return None
        if not cached:
            return None
        try:
            return CacheEntry.deserialize(cached)
        except ValueError as e:
            self.logger.warning(f"Ignoring unreadable cache entry {key}: {e}")
            return None

    def _refresh(self, key: str) -> None:
        task = asyncio.create_task(self._extend_ttl(key))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _extend_ttl(self, key: str) -> None:
        try:
            await self.store.expire(key, self.config.cache.ttl_seconds)
        except CacheServiceError as e:
            self.logger.info(f"Error setting expiry on {key}: {e}")

    async def _persist(self, key: str, entry: CacheEntry) -> None:
        try:
            await self.store.set(key, entry.serialize(), self.config.cache.ttl_seconds)
            self.logger.debug(f"Cached {len(entry.audio)} bytes under {key}")
        except CacheServiceError as e:
            self.logger.error(f"Error writing cache entry {key}: {e}")

    async def _write_artifact(self, path: Path, audio: bytes) -> None:
        get_artifact_dir(path.parent)
        await asyncio.to_thread(path.write_bytes, audio)
        self.logger.debug(f"Wrote {len(audio)} bytes to {path}")
