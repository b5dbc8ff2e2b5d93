"""Administrative operations over the result cache namespace."""

import logging

from ..credentials import CredentialCache
from ..errors import CacheServiceError, ValidationError
from ..models import PurgeResult, PurgeScope, SynthesisRequest, check_segment
from ..providers import ProviderRegistry
from .fingerprint import fingerprint_for, make_fingerprint, namespace_pattern
from .storage import CacheStore

NOT_FOUND = "Specified item not found"


class CacheAdmin:
    """Purge and size operations for the ``tts:`` namespace.

    Purges never raise: a cache service failure is reported in the returned
    PurgeResult together with the number of entries removed so far.

    Example:
        admin = CacheAdmin(store)
        result = await admin.purge_by_tenant("acme")
        print(f"Purged {result.purged_count} entries")
    """

    def __init__(self, store: CacheStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger(__name__)

    async def purge(self, scope: PurgeScope, **fields: str | None) -> PurgeResult:
        """Purge by scope; ONE takes the request fields as keyword arguments."""
        if scope is PurgeScope.ALL:
            return await self.purge_all()
        if scope is PurgeScope.TENANT:
            tenant = fields.get("tenant")
            if not tenant:
                return PurgeResult(0, "tenant is required for a tenant purge")
            return await self.purge_by_tenant(tenant)
        return await self.purge_one(**fields)

    async def purge_all(self) -> PurgeResult:
        """Remove every cached synthesis result (credentials are kept)."""
        return await self._purge_pattern(namespace_pattern())

    async def purge_by_tenant(self, tenant: str) -> PurgeResult:
        """Remove every cached result belonging to one tenant."""
        try:
            check_segment("tenant", tenant)
        except ValidationError as e:
            return PurgeResult(0, str(e))
        return await self._purge_pattern(namespace_pattern(tenant))

    async def purge_one(
        self,
        *,
        tenant: str | None = None,
        provider: str | None = None,
        language: str | None = None,
        voice: str | None = None,
        deployment_id: str | None = None,
        engine: str | None = None,
        model: str | None = None,
        text: str | None = None,
        instructions: str | None = None,
    ) -> PurgeResult:
        """Remove the single entry a request with these fields would produce.

        Returns:
            PurgeResult with count 1, or 0 and "Specified item not found"
        """
        fields = {
            "language": language,
            "voice": voice,
            "deployment_id": deployment_id,
            "engine": engine,
            "model": model,
            "instructions": instructions,
            "tenant": tenant,
        }
        try:
            key = self._key_for(provider, text, fields)
        except ValidationError as e:
            return PurgeResult(0, str(e))

        try:
            count = await self.store.delete(key)
        except CacheServiceError as e:
            self.logger.error(f"Error purging {key}: {e}")
            return PurgeResult(0, str(e))

        self.logger.info(f"Purged {count} records")
        if count == 0:
            return PurgeResult(0, NOT_FOUND)
        return PurgeResult(count)

    @staticmethod
    def _key_for(provider: str | None, text: str | None, fields: dict) -> str:
        """Fingerprint the fields exactly as the cache manager would.

        Known providers are resolved and their request normalization is
        applied; unknown names are fingerprinted as given.
        """
        check_segment("tenant", fields["tenant"])
        try:
            canonical = ProviderRegistry.resolve(provider) if provider else None
        except ValidationError:
            canonical = None

        if canonical is None or not text or not text.strip():
            return make_fingerprint(
                provider=canonical or provider,
                language=fields["language"],
                voice=fields["voice"] or fields["deployment_id"],
                engine=fields["engine"],
                model=fields["model"],
                text=text,
                instructions=fields["instructions"],
                tenant=fields["tenant"],
            )

        request = SynthesisRequest(provider=provider, text=text, **fields)
        request = ProviderRegistry.get_instance(provider).normalize(request)
        return fingerprint_for(request, canonical)

    async def size_of(self, pattern: str | None = None) -> int:
        """Count cached entries matching pattern (all results by default).

        Raises:
            CacheServiceError: If the cache service cannot be reached
        """
        keys = await self.store.keys(pattern or namespace_pattern())
        return len(keys)

    async def purge_credentials(self) -> PurgeResult:
        """Remove every cached provider credential."""
        try:
            count = await CredentialCache(self.store, self.logger).purge()
        except CacheServiceError as e:
            self.logger.error(f"Error purging credentials: {e}")
            return PurgeResult(0, str(e))
        self.logger.info(f"Purged {count} credentials")
        return PurgeResult(count)

    async def _purge_pattern(self, pattern: str) -> PurgeResult:
        purged = 0
        try:
            keys = await self.store.keys(pattern)
            purged = await self.store.delete(*keys)
        except CacheServiceError as e:
            self.logger.error(f"Error purging {pattern}: {e}")
            return PurgeResult(purged, str(e))
        self.logger.info(f"Purged {purged} records matching {pattern}")
        return PurgeResult(purged)
