"""Unit tests for SSML helpers."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from synthcache.markup import inner_markup, is_markup, strip_markup, wrap_for_voice


class TestMarkup:
    """Test markup detection and shaping."""

    def test_detects_speak_documents(self) -> None:
        assert is_markup("<speak>Hi</speak>")
        assert is_markup('  <speak version="1.0">Hi</speak>')
        assert not is_markup("Hello <b>there</b>")

    def test_strip_leaves_spoken_words(self) -> None:
        text = '<speak>Hello <break time="1s"/> world &amp; all</speak>'
        assert strip_markup(text) == "Hello world & all"

    def test_strip_passes_plain_text_through(self) -> None:
        assert strip_markup("a < b") == "a < b"

    def test_inner_markup_flattens_newlines(self) -> None:
        assert inner_markup("<speak>\n  Hi\n <break/> there\n</speak>") == "Hi <break/> there"

    def test_wrap_plain_text_escapes(self) -> None:
        ssml = wrap_for_voice("Tom & Jerry", "en-US", "en-US-JennyNeural")
        assert ssml.startswith('<speak version="1.0"')
        assert 'xml:lang="en-US"' in ssml
        assert '<voice name="en-US-JennyNeural">Tom &amp; Jerry</voice>' in ssml

    def test_wrap_existing_markup_keeps_elements(self) -> None:
        ssml = wrap_for_voice("<speak>Hi <break/></speak>", "de-DE", "de-DE-KatjaNeural")
        assert '<voice name="de-DE-KatjaNeural">Hi <break/></voice>' in ssml
        assert ssml.count("<speak") == 1
