"""Unit tests for streaming directive encoding."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.directive import StreamingDirective


class TestStreamingDirective:
    """Test the say:{...}text wire format."""

    def test_encode_preserves_order(self) -> None:
        directive = StreamingDirective("Hello")
        directive.add("vendor", "deepgram").add("voice", "aura").add("write_cache_file", True)
        assert directive.encode() == "say:{vendor=deepgram,voice=aura,write_cache_file=1}Hello"

    def test_none_values_are_skipped(self) -> None:
        directive = StreamingDirective("Hi").add("model", None).add("voice", "v")
        assert directive.params == [("voice", "v")]

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid directive parameter name"):
            StreamingDirective("Hi").add("bad name", "x")

    def test_special_characters_are_escaped(self) -> None:
        directive = StreamingDirective("t").add("key", "a,b=c{d}e\\f")
        assert directive.encode() == "say:{key=a\\,b\\=c\\{d\\}e\\\\f}t"

    def test_decode_recovers_escaped_values(self) -> None:
        original = StreamingDirective("Hello, {world}")
        original.add("key", "tts:acme:ab=12").add("api_key", "x,y}z")
        decoded = StreamingDirective.decode(original.encode())
        assert decoded.params == original.params
        assert decoded.text == "Hello, {world}"
        assert decoded.get("api_key") == "x,y}z"

    def test_decode_empty_params(self) -> None:
        decoded = StreamingDirective.decode("say:{}just text")
        assert decoded.params == []
        assert decoded.text == "just text"

    @pytest.mark.parametrize(
        "encoded",
        ["hello", "say:{a=1", "say:{novalue}x", "say:{a=1\\"],
    )
    def test_decode_rejects_malformed(self, encoded: str) -> None:
        with pytest.raises(ValueError):
            StreamingDirective.decode(encoded)
