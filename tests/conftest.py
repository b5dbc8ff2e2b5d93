"""Pytest configuration and fixtures for synthcache tests."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src and tests to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from synthcache.config import CacheConfig, SynthCacheConfig
from synthcache.providers import ProviderRegistry
from test_helpers import InMemoryCacheStore


@pytest.fixture
def store() -> InMemoryCacheStore:
    """Empty in-memory cache store."""
    return InMemoryCacheStore()


@pytest.fixture
def config(tmp_path: Path) -> SynthCacheConfig:
    """Default configuration writing artifacts under a temp directory."""
    return SynthCacheConfig(cache=CacheConfig(artifact_dir=tmp_path / "artifacts"))


@pytest.fixture
def registry() -> Generator[type[ProviderRegistry]]:
    """Provider registry restored to its original state after the test."""
    providers = dict(ProviderRegistry._providers)
    aliases = dict(ProviderRegistry._aliases)
    instances = dict(ProviderRegistry._instances)
    yield ProviderRegistry
    ProviderRegistry._providers.clear()
    ProviderRegistry._providers.update(providers)
    ProviderRegistry._aliases.clear()
    ProviderRegistry._aliases.update(aliases)
    ProviderRegistry._instances.clear()
    ProviderRegistry._instances.update(instances)
