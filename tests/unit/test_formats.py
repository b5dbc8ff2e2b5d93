"""Unit tests for per-provider output format policy."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.formats import format_for_extension, resolve_format
from synthcache.models import AudioFormat


class TestResolveFormat:
    """Test resolve_format policy table."""

    @pytest.mark.parametrize("provider", ["nuance", "nvidia", "verbio"])
    def test_fixed_pcm_providers_always_r8(self, provider: str) -> None:
        """Fixed-rate PCM providers ignore every flag."""
        for render in (True, False):
            fmt = resolve_format(provider, render_for_caching=render)
            assert fmt == AudioFormat("r8", 8000)

    def test_microsoft_live_is_pcm(self) -> None:
        assert resolve_format("microsoft") == AudioFormat("r8", 8000)

    def test_microsoft_rendered_is_mp3(self) -> None:
        fmt = resolve_format("microsoft", render_for_caching=True)
        assert fmt == AudioFormat("mp3", 16000)

    def test_microsoft_trim_silence_forces_pcm(self) -> None:
        fmt = resolve_format("microsoft", render_for_caching=True, trim_silence=True)
        assert fmt == AudioFormat("r8", 8000)

    @pytest.mark.parametrize("provider", ["deepgram", "rimelabs"])
    def test_live_pcm_providers(self, provider: str) -> None:
        """PCM only when audio goes to a live engine."""
        assert resolve_format(provider) == AudioFormat("r8", 8000)
        assert resolve_format(provider, disable_streaming=True) == AudioFormat("mp3", 24000)
        assert resolve_format(provider, render_for_caching=True) == AudioFormat("mp3", 24000)

    def test_speechmatics_is_wav(self) -> None:
        assert resolve_format("speechmatics") == AudioFormat("wav", 16000)

    @pytest.mark.parametrize("provider", ["google", "aws", "elevenlabs", "custom"])
    def test_default_is_nominal_mp3(self, provider: str) -> None:
        assert resolve_format(provider) == AudioFormat("mp3", 24000)


class TestFormatForExtension:
    """Test format inference for files added to the cache."""

    def test_matching_extension_keeps_preferred(self) -> None:
        preferred = AudioFormat("mp3", 16000)
        assert format_for_extension(".mp3", preferred) is preferred

    def test_empty_extension_keeps_preferred(self) -> None:
        preferred = AudioFormat("mp3", 24000)
        assert format_for_extension("", preferred) is preferred

    def test_other_extension_uses_default_rate(self) -> None:
        fmt = format_for_extension(".R8", AudioFormat("mp3", 24000))
        assert fmt == AudioFormat("r8", 8000)
