"""Unit tests for CacheAdmin purge and size operations."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.cache.admin import NOT_FOUND, CacheAdmin
from synthcache.cache.fingerprint import make_fingerprint
from synthcache.models import PurgeResult, PurgeScope

PLAIN_1 = make_fingerprint(provider="google", text="one")
PLAIN_2 = make_fingerprint(provider="google", text="two")
ACME_1 = make_fingerprint(provider="google", text="one", tenant="acme")
ACME_2 = make_fingerprint(provider="google", text="two", tenant="acme")
OTHER_1 = make_fingerprint(provider="google", text="one", tenant="other")


@pytest.fixture
def seeded(store):
    store.data.update(
        {
            PLAIN_1: "1",
            PLAIN_2: "2",
            ACME_1: "3",
            ACME_2: "4",
            OTHER_1: "5",
            "creds:aws:fff": "6",
        }
    )
    return store


class TestPurgeAll:
    """Test purging the whole result namespace."""

    @pytest.mark.asyncio
    async def test_removes_results_keeps_credentials(self, seeded) -> None:
        result = await CacheAdmin(seeded).purge_all()
        assert result == PurgeResult(5)
        assert list(seeded.data) == ["creds:aws:fff"]

    @pytest.mark.asyncio
    async def test_empty_cache(self, store) -> None:
        assert await CacheAdmin(store).purge_all() == PurgeResult(0)

    @pytest.mark.asyncio
    async def test_failure_reported_not_raised(self, seeded) -> None:
        seeded.fail_keys = True
        result = await CacheAdmin(seeded).purge_all()
        assert result.purged_count == 0
        assert result.error == "keys failed"
        assert len(seeded.data) == 6


class TestPurgeByTenant:
    """Test tenant-scoped purges."""

    @pytest.mark.asyncio
    async def test_only_tenant_entries_removed(self, seeded) -> None:
        result = await CacheAdmin(seeded).purge_by_tenant("acme")
        assert result == PurgeResult(2)
        assert ACME_1 not in seeded.data
        assert OTHER_1 in seeded.data
        assert PLAIN_1 in seeded.data

    @pytest.mark.asyncio
    async def test_longer_tenant_name_not_matched(self, seeded) -> None:
        """Keys of a longer tenant name such as "acme:eu" are not matched."""
        legacy = f"tts:acme:eu:{'0' * 64}"
        seeded.data[legacy] = "x"
        result = await CacheAdmin(seeded).purge_by_tenant("acme")
        assert result == PurgeResult(2)
        assert legacy in seeded.data

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tenant", ["ac?e", "a*", "[ab]cme", "acme:eu"])
    async def test_unsafe_tenant_purges_nothing(self, seeded, tenant: str) -> None:
        acne = make_fingerprint(provider="google", text="one", tenant="acne")
        seeded.data[acne] = "x"
        result = await CacheAdmin(seeded).purge_by_tenant(tenant)
        assert result.purged_count == 0
        assert "tenant may only contain" in result.error
        assert len(seeded.data) == 7

    @pytest.mark.asyncio
    async def test_scope_requires_tenant(self, seeded) -> None:
        result = await CacheAdmin(seeded).purge(PurgeScope.TENANT)
        assert result.purged_count == 0
        assert "tenant is required" in result.error

    @pytest.mark.asyncio
    async def test_scope_dispatch(self, seeded) -> None:
        result = await CacheAdmin(seeded).purge(PurgeScope.TENANT, tenant="other")
        assert result == PurgeResult(1)


class TestPurgeOne:
    """Test single-entry purges."""

    @pytest.mark.asyncio
    async def test_removes_matching_entry(self, store) -> None:
        key = make_fingerprint(provider="aws", language="en-US", voice="Joanna", text="Hi")
        store.data[key] = "x"
        result = await CacheAdmin(store).purge_one(
            provider="polly", language="en-US", voice="Joanna", text="Hi"
        )
        assert result == PurgeResult(1)
        assert store.data == {}

    @pytest.mark.asyncio
    async def test_not_found(self, store) -> None:
        result = await CacheAdmin(store).purge_one(provider="google", text="Hi")
        assert result == PurgeResult(0, NOT_FOUND)

    @pytest.mark.asyncio
    async def test_deployment_stands_in_for_voice(self, store) -> None:
        key = make_fingerprint(provider="microsoft", voice="dep-1", text="Hi", tenant="t")
        store.data[key] = "x"
        result = await CacheAdmin(store).purge(
            PurgeScope.ONE, provider="azure", deployment_id="dep-1", text="Hi", tenant="t"
        )
        assert result.purged_count == 1

    @pytest.mark.asyncio
    async def test_unknown_provider_fingerprinted_as_given(self, store) -> None:
        key = make_fingerprint(provider="legacy", text="Hi")
        store.data[key] = "x"
        result = await CacheAdmin(store).purge_one(provider="legacy", text="Hi")
        assert result.purged_count == 1

    @pytest.mark.asyncio
    async def test_provider_normalization_applied(self, store) -> None:
        """WellSaid entries are always keyed under en-US."""
        key = make_fingerprint(provider="wellsaid", language="en-US", voice="3", text="Hi")
        store.data[key] = "x"
        result = await CacheAdmin(store).purge_one(
            provider="wellsaid", language="en-GB", voice="3", text="Hi"
        )
        assert result == PurgeResult(1)

    @pytest.mark.asyncio
    async def test_unsafe_tenant_reported(self, store) -> None:
        result = await CacheAdmin(store).purge_one(
            provider="google", text="Hi", tenant="a:b"
        )
        assert result.purged_count == 0
        assert "tenant may only contain" in result.error

    @pytest.mark.asyncio
    async def test_failure_reported(self, store) -> None:
        store.fail_writes = True
        result = await CacheAdmin(store).purge_one(provider="google", text="Hi")
        assert result == PurgeResult(0, "delete failed")


class TestSizeAndCredentials:
    """Test size counting and credential purges."""

    @pytest.mark.asyncio
    async def test_size_counts_results(self, seeded) -> None:
        admin = CacheAdmin(seeded)
        assert await admin.size_of() == 5
        assert await admin.size_of("tts:acme:*") == 2

    @pytest.mark.asyncio
    async def test_purge_credentials(self, seeded) -> None:
        result = await CacheAdmin(seeded).purge_credentials()
        assert result == PurgeResult(1)
        assert len(seeded.data) == 5
