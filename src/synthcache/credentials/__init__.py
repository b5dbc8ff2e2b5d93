"""Short-lived provider credentials and their cache."""

from .cache import CredentialCache, make_scope_key
from .models import (
    BearerTokenCredential,
    FetchedCredential,
    ProviderCredential,
    SessionCredential,
)

__all__ = [
    "BearerTokenCredential",
    "CredentialCache",
    "FetchedCredential",
    "ProviderCredential",
    "SessionCredential",
    "make_scope_key",
]
