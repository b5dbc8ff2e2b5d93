"""Deterministic cache keys for synthesis requests."""

import hashlib
import json
from pathlib import Path

from ..errors import ValidationError
from ..models import SynthesisRequest

NAMESPACE = "tts"

# Hex length of a sha256 digest
DIGEST_LENGTH = 64


def make_fingerprint(
    *,
    provider: str | None = None,
    language: str | None = None,
    voice: str | None = None,
    engine: str | None = None,
    model: str | None = None,
    text: str | None = None,
    instructions: str | None = None,
    tenant: str | None = None,
) -> str:
    """Generate the cache key for a synthesis request.

    Creates a deterministic SHA-256 digest from the fields that identify a
    synthesized result. Missing fields count as empty strings. The fields
    are JSON-encoded as a fixed-order list so that no value can bleed into
    its neighbour ("a:b" + "c" never equals "a" + "b:c").

    Args:
        provider: Provider discriminator
        language: Language code
        voice: Voice or deployment identifier
        engine: Provider engine
        model: Provider model
        text: Text or SSML payload
        instructions: Optional delivery prompt
        tenant: Optional tenant; adds a ``tts:<tenant>:`` segment so a
            tenant's entries can be purged by prefix scan

    Returns:
        Key of the form ``tts:<hex>`` or ``tts:<tenant>:<hex>``
    """
    fields = [
        language or "",
        provider or "",
        voice or "",
        engine or "",
        model or "",
        text or "",
        instructions or "",
    ]
    payload = json.dumps(fields, ensure_ascii=False, separators=(",", ":"))
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()

    if tenant:
        return f"{NAMESPACE}:{tenant}:{digest}"
    return f"{NAMESPACE}:{digest}"


def fingerprint_for(request: SynthesisRequest, provider: str | None = None) -> str:
    """Generate the cache key for a request.

    Args:
        request: The synthesis request
        provider: Canonical provider name, when the request uses an alias

    Returns:
        Cache key string
    """
    return make_fingerprint(
        provider=provider or request.provider,
        language=request.language,
        voice=request.voice_or_deployment,
        engine=request.engine,
        model=request.model,
        text=request.text,
        instructions=request.instructions,
        tenant=request.tenant,
    )


_GLOB_SPECIAL = frozenset("*?[]\\")


def _escape_glob(value: str) -> str:
    return "".join(f"\\{ch}" if ch in _GLOB_SPECIAL else ch for ch in value)


def namespace_pattern(tenant: str | None = None) -> str:
    """Key pattern matching every entry, or every entry of one tenant.

    A tenant pattern matches exactly one digest after the tenant segment,
    so tenant "acme" never matches keys written under "acme:eu".
    """
    if tenant:
        return f"{NAMESPACE}:{_escape_glob(tenant)}:" + "?" * DIGEST_LENGTH
    return f"{NAMESPACE}:*"


def artifact_path(
    directory: Path, fingerprint: str, extension: str, salt: str | None = None
) -> Path:
    """Derive the artifact location for a fingerprint.

    The salt keeps concurrent calls for identical text from writing the
    same file.

    Example:
        >>> artifact_path(Path("/tmp"), "tts:acme:ab12", "mp3", "call-1")
        PosixPath('/tmp/tts-call-1-acme-ab12.mp3')

    Raises:
        ValidationError: If the resulting file would fall outside directory
    """
    stem = fingerprint.split(":", 1)[1].replace(":", "-")
    prefix = f"{NAMESPACE}-{salt}-" if salt else f"{NAMESPACE}-"
    path = Path(directory) / f"{prefix}{stem}.{extension}"
    if path.resolve().parent != Path(directory).resolve():
        raise ValidationError(f"Artifact name escapes {directory}: {path.name!r}")
    return path
