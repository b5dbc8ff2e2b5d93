"""Unit tests for cache and request data models."""

import json
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.cache.models import CacheEntry
from synthcache.errors import ValidationError
from synthcache.models import SynthesisRequest, SynthesisResult, VoiceInfo, VoiceSettings


class TestCacheEntry:
    """Test CacheEntry serialization."""

    def test_serialized_form_is_json_with_base64_audio(self) -> None:
        entry = CacheEntry(b"\x00\x01binary\xff", "r8", 8000)
        data = json.loads(entry.serialize())
        assert data == {"audio": "AAFiaW5hcnn/", "extension": "r8", "sample_rate": 8000}

    def test_deserialize_restores_entry(self) -> None:
        entry = CacheEntry(b"\x00\x01binary\xff", "mp3", 24000)
        assert CacheEntry.deserialize(entry.serialize()) == entry

    @pytest.mark.parametrize(
        "value",
        [
            "not json",
            json.dumps({"extension": "mp3", "sample_rate": 1}),
            json.dumps({"audio": "!!!", "extension": "mp3", "sample_rate": 1}),
            json.dumps(["audio"]),
        ],
    )
    def test_deserialize_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError, match="Malformed cache entry"):
            CacheEntry.deserialize(value)


class TestSynthesisRequest:
    """Test SynthesisRequest validation."""

    def test_empty_text_rejected(self) -> None:
        with pytest.raises(ValidationError, match="text cannot be empty"):
            SynthesisRequest(provider="google", text="   ")

    def test_empty_provider_rejected(self) -> None:
        with pytest.raises(ValidationError, match="provider cannot be empty"):
            SynthesisRequest(provider="", text="hi")

    def test_validation_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            SynthesisRequest(provider="google", text="")

    def test_voice_falls_back_to_deployment(self) -> None:
        request = SynthesisRequest(provider="microsoft", text="hi", deployment_id="d1")
        assert request.voice_or_deployment == "d1"
        assert SynthesisRequest(provider="x", text="hi").voice_or_deployment == ""

    @pytest.mark.parametrize(
        "tenant", ["acme:eu", "ac?e", "a*", "[ab]", "a\\b", "../up", "a/b", "a b"]
    )
    def test_unsafe_tenant_rejected(self, tenant: str) -> None:
        with pytest.raises(ValidationError, match="tenant may only contain"):
            SynthesisRequest(provider="google", text="hi", tenant=tenant)

    @pytest.mark.parametrize("salt", ["x/../../escaped", "..", "a/b", "call:1"])
    def test_unsafe_salt_rejected(self, salt: str) -> None:
        with pytest.raises(ValidationError, match="salt may only contain"):
            SynthesisRequest(provider="google", text="hi", salt=salt)

    def test_safe_tenant_and_salt_accepted(self) -> None:
        request = SynthesisRequest(
            provider="google", text="hi", tenant="acme-eu_1.prod", salt="call-1.a"
        )
        assert request.tenant == "acme-eu_1.prod"


class TestResultAndVoices:
    """Test result and voice models."""

    def test_streaming_result(self) -> None:
        assert SynthesisResult(served_from_cache=False, directive="say:{}hi").is_streaming
        assert not SynthesisResult(served_from_cache=True).is_streaming

    def test_voice_info_requires_id_and_name(self) -> None:
        with pytest.raises(ValueError, match="voice_id cannot be empty"):
            VoiceInfo(voice_id="", name="x", provider="p")
        with pytest.raises(ValueError, match="name cannot be empty"):
            VoiceInfo(voice_id="x", name=" ", provider="p")

    def test_voice_settings_range(self) -> None:
        with pytest.raises(ValueError, match="stability"):
            VoiceSettings(stability=1.5)
        assert VoiceSettings().to_dict()["use_speaker_boost"] is True
