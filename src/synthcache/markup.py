"""SSML detection and shaping for providers with partial markup support."""

import html
import re
from xml.sax.saxutils import quoteattr

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")
_SPEAK_RE = re.compile(r"^\s*<speak\b[^>]*>(.*)</speak>\s*$", re.DOTALL)


def is_markup(text: str) -> bool:
    """Check whether text is an SSML document."""
    return text.lstrip().startswith("<speak")


def strip_markup(text: str) -> str:
    """Remove SSML tags, leaving the spoken words.

    Plain text passes through unchanged.
    """
    if not is_markup(text):
        return text
    words = _TAG_RE.sub(" ", text)
    return _WS_RE.sub(" ", html.unescape(words)).strip()


def inner_markup(text: str) -> str:
    """Contents of the outer <speak> element, newlines flattened."""
    match = _SPEAK_RE.match(text)
    body = match.group(1) if match else text
    return _WS_RE.sub(" ", body.replace("\r", " ").replace("\n", " ")).strip()


def wrap_for_voice(text: str, language: str, voice: str) -> str:
    """Build a Microsoft-style SSML document addressing a specific voice.

    Plain text is escaped; existing markup keeps its inner elements but
    gets the mandatory version, namespace, language and voice wrapper.
    """
    if is_markup(text):
        body = inner_markup(text)
    else:
        body = html.escape(text, quote=False)
    return (
        '<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" '
        'xmlns:mstts="https://www.w3.org/2001/mstts" '
        f"xml:lang={quoteattr(language)}>"
        f"<voice name={quoteattr(voice)}>{body}</voice></speak>"
    )
