"""Custom synthcache exceptions."""


class SynthCacheError(Exception):
    """Base exception for synthcache errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class ValidationError(SynthCacheError, ValueError):
    """Exception raised when a request cannot be sent to a provider.

    This typically occurs when:
    - A field required by the chosen provider is missing
    - The text exceeds the provider's length ceiling
    - The provider name is not registered

    Always raised before any cache or network I/O.
    """

    pass


class ProviderError(SynthCacheError):
    """Exception raised when a speech provider fails to synthesize.

    This typically occurs when:
    - The provider answers with a non-success status (4xx, 5xx)
    - The connection fails or times out
    - The provider returns an empty or malformed payload
    """

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.provider = provider
        self.status_code = status_code


class CacheServiceError(SynthCacheError):
    """Exception raised by the key-value cache service.

    Never surfaces from synthesis: read failures degrade to a cache miss
    and write failures are logged.
    """

    pass


class CredentialError(SynthCacheError):
    """Exception raised when short-lived provider credentials cannot be obtained."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.provider = provider
        self.status_code = status_code
