"""Short-lived provider credentials.

Credential shapes differ per provider, so each is a tagged variant that
flattens to a plain dict for storage and back.
"""

import json
from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class ProviderCredential:
    """Base class for cached provider credentials.

    Attributes:
        provider: Provider the credential authenticates against
        served_from_cache: Whether this instance came from the cache
            (never persisted)
    """

    provider: str
    served_from_cache: bool = False

    kind = "base"

    def to_dict(self) -> dict[str, str]:
        data = {k: v for k, v in asdict(self).items() if k != "served_from_cache"}
        data["kind"] = self.kind
        return data

    def serialize(self) -> str:
        return json.dumps(self.to_dict())


@dataclass(frozen=True)
class SessionCredential(ProviderCredential):
    """Key / secret / session token triple (AWS STS)."""

    access_key_id: str = ""
    secret_access_key: str = ""
    session_token: str = ""

    kind = "session"


@dataclass(frozen=True)
class BearerTokenCredential(ProviderCredential):
    """Opaque bearer access token (IBM IAM, Nuance, Verbio)."""

    access_token: str = ""

    kind = "bearer"


_KINDS: dict[str, type[ProviderCredential]] = {
    SessionCredential.kind: SessionCredential,
    BearerTokenCredential.kind: BearerTokenCredential,
}


def credential_from_dict(
    data: dict[str, str], served_from_cache: bool = False
) -> ProviderCredential:
    """Rebuild a credential from its flattened form.

    Raises:
        ValueError: If the kind is unknown or fields are missing
    """
    kind = data.get("kind")
    cls = _KINDS.get(kind or "")
    if cls is None:
        raise ValueError(f"Unknown credential kind: {kind!r}")

    names = {f.name for f in fields(cls)} - {"served_from_cache"}
    missing = names - data.keys()
    if missing:
        raise ValueError(f"Credential missing fields: {', '.join(sorted(missing))}")
    return cls(served_from_cache=served_from_cache, **{n: data[n] for n in names})


def deserialize_credential(
    value: str, served_from_cache: bool = False
) -> ProviderCredential:
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed credential: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Malformed credential: not an object")
    return credential_from_dict(data, served_from_cache)


@dataclass(frozen=True)
class FetchedCredential:
    """A freshly issued credential and its provider-declared validity.

    Attributes:
        credential: The issued credential
        expires_in: Seconds until the provider considers it expired
        safety_margin: Seconds to drop it from the cache before expiry
    """

    credential: ProviderCredential
    expires_in: float
    safety_margin: float = 30.0

    @property
    def cache_ttl(self) -> int:
        """Seconds the credential may stay cached (may be non-positive)."""
        return int(self.expires_in - self.safety_margin)
