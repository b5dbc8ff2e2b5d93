"""Result cache for synthesized speech."""

from pathlib import Path

from .fingerprint import artifact_path, make_fingerprint, namespace_pattern
from .models import CacheEntry
from .storage import CacheStore, RedisCacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "RedisCacheStore",
    "artifact_path",
    "get_artifact_dir",
    "make_fingerprint",
    "namespace_pattern",
]


def get_artifact_dir(directory: Path) -> Path:
    """Get or create the directory synthesized artifacts are written to.

    Args:
        directory: Configured artifact directory

    Returns:
        Path to the artifact directory
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory
